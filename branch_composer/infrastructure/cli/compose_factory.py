from branch_composer.application.compose_flow import ComposeDependencies
from branch_composer.application.ports import VersionControlBackend
from branch_composer.infrastructure.cli.schemas import ComposeRequest
from branch_composer.infrastructure.git import GitBackend
from branch_composer.infrastructure.observability.workflow_observer import (
    observe_compose_step,
    observe_integrated_change_set,
)


def build_backend(request: ComposeRequest) -> VersionControlBackend:
    return GitBackend(request.repository_directory, sign_commits=request.sign_commits)


def build_compose_dependencies(
    request: ComposeRequest,
    *,
    backend: VersionControlBackend | None = None,
) -> ComposeDependencies:
    return ComposeDependencies(
        backend=backend if backend is not None else build_backend(request),
        observe_step=observe_compose_step,
        observe_integration=observe_integrated_change_set,
    )
