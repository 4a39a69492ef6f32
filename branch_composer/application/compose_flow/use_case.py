from branch_composer.application.compose_flow.contracts import (
    ComposeConfig,
    ComposeDependencies,
    ComposeResult,
)
from branch_composer.application.compose_flow.steps import (
    apply_extra_branches,
    attributed_to,
    build_dry_run_result,
    build_failure_result,
    build_success_result,
    integrate_change_set,
    plan_change_sets,
    reset_base_branch,
    sync_remote,
)
from branch_composer.domain.models import ComposeStage, IntegratedChangeSet


def run_compose(
    config: ComposeConfig,
    dependencies: ComposeDependencies,
    *,
    raise_on_error: bool = True,
) -> ComposeResult:
    """Rebuild ``config.base_branch`` as upstream plus one commit per change-set.

    Stops at the first failure and leaves the repository exactly as the
    failing backend call left it.
    """
    backend = dependencies.backend
    total = len(config.change_sets)
    integrated: list[IntegratedChangeSet] = []
    stage = ComposeStage.START
    try:
        dependencies.observe_step("sync", "start", f"remote={config.upstream_remote}")
        sync_remote(config, backend)
        stage = ComposeStage.SYNCED
        dependencies.observe_step("sync", "success", f"change_sets={total}")

        if config.dry_run:
            with attributed_to("resolve_upstream"):
                upstream_head = backend.resolve_ref(config.upstream_ref)
            planned = plan_change_sets(config, backend)
            dependencies.observe_step("finalize", "success", "dry_run completed")
            return build_dry_run_result(config, upstream_head=upstream_head, planned=planned)

        dependencies.observe_step("reset", "start", f"{config.base_branch} -> {config.upstream_ref}")
        reset_base_branch(config, backend)
        stage = ComposeStage.RESET
        dependencies.observe_step("reset", "success", config.base_branch)

        stage = ComposeStage.INTEGRATING
        for position, change_set in enumerate(config.change_sets, start=1):
            dependencies.observe_step("integrate", "start", f"change_set={change_set} position={position}/{total}")
            entry = integrate_change_set(config, backend, change_set)
            integrated.append(entry)
            dependencies.observe_integration(change_set, position, total, entry.commit)
            dependencies.observe_step("integrate", "success", f"change_set={change_set} commit={entry.commit}")

        if config.extra_branches:
            stage = ComposeStage.EXTRAS
            dependencies.observe_step("extras", "start", ",".join(config.extra_branches))
            apply_extra_branches(config, backend)
            dependencies.observe_step("extras", "success")

        with attributed_to("finalize"):
            head = backend.resolve_ref(f"refs/heads/{config.base_branch}")
        result = build_success_result(config, head=head, integrated=integrated)
        dependencies.observe_step("finalize", "success", result.message)
        return result
    except Exception as error:
        dependencies.observe_step("finalize", "error", str(error))
        if raise_on_error:
            raise
        return build_failure_result(config, error=error, stage=stage, integrated=integrated)
