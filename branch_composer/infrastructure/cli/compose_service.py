import logging
import uuid

from branch_composer.application.compose_flow import ComposeResult, run_compose
from branch_composer.application.ports import VersionControlBackend
from branch_composer.domain.errors import ComposeError
from branch_composer.infrastructure.cli.compose_factory import build_compose_dependencies
from branch_composer.infrastructure.cli.mappers import to_compose_config
from branch_composer.infrastructure.cli.schemas import ComposeRequest
from branch_composer.infrastructure.observability.context import reset_run_id, set_run_id
from branch_composer.infrastructure.observability.logging_utils import log_event
from branch_composer.infrastructure.observability.workflow_observer import log_compose_failure


logger = logging.getLogger(__name__)


def execute_compose(
    request: ComposeRequest,
    *,
    backend: VersionControlBackend | None = None,
    run_id: str | None = None,
) -> ComposeResult:
    token = set_run_id(run_id or uuid.uuid4().hex[:12])
    try:
        config = to_compose_config(request)
        log_event(
            logger,
            logging.INFO,
            "compose.run.start",
            base_branch=config.base_branch,
            upstream=config.upstream_ref,
            change_sets=[str(change_set) for change_set in config.change_sets],
            repository=str(request.repository_directory),
            dry_run=config.dry_run,
        )
        dependencies = build_compose_dependencies(request, backend=backend)
        try:
            result = run_compose(config, dependencies)
        except ComposeError as error:
            log_compose_failure(error)
            raise
        log_event(
            logger,
            logging.INFO,
            "compose.run.end",
            status=result.status,
            head=result.head,
            message=result.message,
        )
        return result
    finally:
        reset_run_id(token)
