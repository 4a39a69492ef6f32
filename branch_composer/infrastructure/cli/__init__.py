"""Command-line adapter package"""

from branch_composer.infrastructure.cli.compose_service import execute_compose
from branch_composer.infrastructure.cli.mappers import (
    build_compose_request,
    build_status_request,
    to_compose_config,
)
from branch_composer.infrastructure.cli.schemas import ComposeRequest, StatusRequest

__all__ = [
    "ComposeRequest",
    "StatusRequest",
    "build_compose_request",
    "build_status_request",
    "execute_compose",
    "to_compose_config",
]
