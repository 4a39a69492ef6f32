from branch_composer.infrastructure.observability.logging_utils import configure_logging, log_event
from branch_composer.infrastructure.observability.workflow_observer import (
    log_compose_failure,
    observe_compose_step,
    observe_integrated_change_set,
)

__all__ = [
    "configure_logging",
    "log_event",
    "log_compose_failure",
    "observe_compose_step",
    "observe_integrated_change_set",
]
