import logging

from branch_composer.domain.errors import ComposeError
from branch_composer.domain.models import ChangeSetRef
from branch_composer.infrastructure.observability.logging_utils import log_event


logger = logging.getLogger(__name__)


def observe_compose_step(step: str, status: str, detail: str | None = None) -> None:
    level = logging.ERROR if status == "error" else logging.INFO
    log_event(
        logger,
        level,
        "compose.step",
        step=step,
        status=status,
        detail=detail,
    )


def observe_integrated_change_set(
    change_set: ChangeSetRef,
    position: int,
    total: int,
    commit: str,
) -> None:
    log_event(
        logger,
        logging.INFO,
        "compose.change_set.integrated",
        change_set=change_set.identifier,
        position=position,
        total=total,
        commit=commit,
    )


def log_compose_failure(error: Exception) -> None:
    if isinstance(error, ComposeError):
        log_event(
            logger,
            logging.ERROR,
            "compose.failed",
            error_type=type(error).__name__,
            step=error.step,
            change_set=error.change_set,
            error=str(error),
        )
        return
    log_event(logger, logging.ERROR, "compose.failed", error_type=type(error).__name__, error=str(error))
