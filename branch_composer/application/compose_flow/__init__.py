from branch_composer.application.compose_flow.contracts import (
    ComposeConfig,
    ComposeDependencies,
    ComposeResult,
)
from branch_composer.application.compose_flow.use_case import run_compose

__all__ = [
    "ComposeConfig",
    "ComposeDependencies",
    "ComposeResult",
    "run_compose",
]
