from contextlib import contextmanager
from typing import Iterator

from branch_composer.application.compose_flow.contracts import ComposeConfig, ComposeResult
from branch_composer.application.ports import VersionControlBackend
from branch_composer.domain.errors import (
    CommitError,
    ComposeError,
    ConflictError,
    RefNotFoundError,
)
from branch_composer.domain.models import ChangeSetRef, ComposeStage, IntegratedChangeSet


@contextmanager
def attributed_to(step: str, change_set: ChangeSetRef | None = None) -> Iterator[None]:
    # Tags backend errors with the innermost step that raised them.
    try:
        yield
    except ComposeError as error:
        if error.step is None:
            error.step = step
        if error.change_set is None and change_set is not None:
            error.change_set = change_set.identifier
        raise


def sync_remote(config: ComposeConfig, backend: VersionControlBackend) -> None:
    # Only network access of the run: the remote's branches plus every listed head.
    with attributed_to("fetch"):
        backend.fetch_all(config.upstream_remote)
    for change_set in config.change_sets:
        with attributed_to("fetch_change_set", change_set):
            backend.fetch_ref(
                config.upstream_remote,
                change_set.head_ref(config.head_ref_pattern),
                change_set.tracking_ref(config.upstream_remote),
            )


def plan_change_sets(
    config: ComposeConfig,
    backend: VersionControlBackend,
) -> tuple[tuple[ChangeSetRef, str], ...]:
    planned = []
    for change_set in config.change_sets:
        with attributed_to("resolve_change_set", change_set):
            head = backend.resolve_ref(change_set.tracking_ref(config.upstream_remote))
        planned.append((change_set, head))
    return tuple(planned)


def _branch_exists(backend: VersionControlBackend, branch: str) -> bool:
    try:
        backend.resolve_ref(f"refs/heads/{branch}")
    except RefNotFoundError:
        return False
    return True


def reset_base_branch(config: ComposeConfig, backend: VersionControlBackend) -> None:
    # Discards whatever was composed before; every run rebuilds from upstream.
    with attributed_to("reset_base"):
        backend.resolve_ref(config.upstream_ref)
        if not _branch_exists(backend, config.base_branch):
            backend.create_or_reset_branch(config.base_branch, config.upstream_ref)
        backend.checkout(config.base_branch)
        backend.reset_hard(config.upstream_ref)


def ensure_clean_rebase(backend: VersionControlBackend, change_set: ChangeSetRef) -> None:
    # A rebase that exits zero must still leave nothing half-applied behind.
    if backend.rebase_in_progress():
        raise ConflictError(
            f"rebase of change-set {change_set} is still in progress",
            step="verify_rebase",
            change_set=change_set.identifier,
        )
    unmerged = backend.unmerged_paths()
    if unmerged:
        raise ConflictError(
            f"rebase of change-set {change_set} left unmerged paths: {', '.join(unmerged)}",
            step="verify_rebase",
            change_set=change_set.identifier,
        )


def integrate_change_set(
    config: ComposeConfig,
    backend: VersionControlBackend,
    change_set: ChangeSetRef,
) -> IntegratedChangeSet:
    base = config.base_branch
    working = config.working_branch

    with attributed_to("prepare_working_branch", change_set):
        backend.delete_branch(working)
        backend.create_or_reset_branch(working, change_set.tracking_ref(config.upstream_remote))
        backend.checkout(working)

    with attributed_to("rebase", change_set):
        backend.rebase(base)
    ensure_clean_rebase(backend, change_set)

    # Flatten: index and branch back to base, working tree keeps the rebased files.
    with attributed_to("flatten", change_set):
        backend.reset_index_to(base)
        backend.stage_all()
        if not backend.has_staged_changes():
            raise CommitError(f"change-set {change_set} is empty relative to {base}")

    with attributed_to("commit", change_set):
        commit = backend.commit(change_set.commit_message(config.message_template))

    with attributed_to("fast_forward", change_set):
        backend.checkout(base)
        backend.reset_hard(working)

    with attributed_to("cleanup", change_set):
        backend.delete_branch(working)

    return IntegratedChangeSet(change_set=change_set, commit=commit)


def apply_extra_branches(config: ComposeConfig, backend: VersionControlBackend) -> None:
    for branch in config.extra_branches:
        with attributed_to(f"extra_branch:{branch}"):
            backend.cherry_pick(f"HEAD..{branch}")


def build_success_result(
    config: ComposeConfig,
    *,
    head: str,
    integrated: list[IntegratedChangeSet],
) -> ComposeResult:
    return ComposeResult(
        status="success",
        message=f"{config.base_branch} composed from {config.upstream_ref} with {len(integrated)} change-set(s)",
        base_branch=config.base_branch,
        head=head,
        integrated=tuple(integrated),
        stage=ComposeStage.DONE,
    )


def build_dry_run_result(
    config: ComposeConfig,
    *,
    upstream_head: str,
    planned: tuple[tuple[ChangeSetRef, str], ...],
) -> ComposeResult:
    return ComposeResult(
        status="dry_run",
        message=f"Dry run resolved {len(planned)} change-set(s); no branch was modified",
        base_branch=config.base_branch,
        head=upstream_head,
        planned=planned,
        stage=ComposeStage.SYNCED,
    )


def build_failure_result(
    config: ComposeConfig,
    *,
    error: Exception,
    stage: ComposeStage,
    integrated: list[IntegratedChangeSet],
) -> ComposeResult:
    return ComposeResult(
        status="error",
        message=f"Composition of {config.base_branch} failed while {stage.value}",
        base_branch=config.base_branch,
        integrated=tuple(integrated),
        stage=ComposeStage.FAILED,
        failed_step=getattr(error, "step", None) or stage.value,
        failed_change_set=getattr(error, "change_set", None),
        error=str(error),
    )
