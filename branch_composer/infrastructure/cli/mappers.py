from pydantic import ValidationError

from branch_composer.application.compose_flow import ComposeConfig
from branch_composer.domain.change_sets import parse_change_sets
from branch_composer.domain.errors import ConfigurationError
from branch_composer.infrastructure.cli.schemas import ComposeRequest, StatusRequest


def _validation_message(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "settings"
        problems.append(f"{location}: {detail.get('msg')}")
    return "; ".join(problems)


def build_compose_request(**settings: object) -> ComposeRequest:
    provided = {key: value for key, value in settings.items() if value is not None}
    try:
        return ComposeRequest(**provided)
    except ValidationError as error:
        raise ConfigurationError(f"invalid compose settings: {_validation_message(error)}") from error


def build_status_request(**settings: object) -> StatusRequest:
    provided = {key: value for key, value in settings.items() if value is not None}
    try:
        return StatusRequest(**provided)
    except ValidationError as error:
        raise ConfigurationError(f"invalid status settings: {_validation_message(error)}") from error


def to_compose_config(request: ComposeRequest) -> ComposeConfig:
    return ComposeConfig(
        base_branch=request.base_branch,
        upstream_remote=request.upstream_remote,
        upstream_branch=request.upstream_branch,
        change_sets=tuple(parse_change_sets(request.change_sets)),
        working_branch=request.working_branch,
        extra_branches=tuple(request.extra_branches),
        message_template=request.message_template,
        head_ref_pattern=request.head_ref_pattern,
        dry_run=request.dry_run,
    )
