from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from branch_composer.domain.change_sets import split_change_set_tokens
from branch_composer.domain.models import DEFAULT_HEAD_REF_PATTERN, DEFAULT_MESSAGE_TEMPLATE


_PLACEHOLDER = "{change_set}"


def _split_list(value: object) -> object:
    if value is None:
        return []
    if isinstance(value, str):
        return split_change_set_tokens(value)
    return value


class ComposeRequest(BaseModel):
    base_branch: str = Field(default="batteries", min_length=1)
    upstream_remote: str = Field(default="upstream", min_length=1)
    upstream_branch: str = Field(default="master", min_length=1)
    change_sets: list[str] = Field(default_factory=list)
    working_branch: str = Field(default="temp", min_length=1)
    extra_branches: list[str] = Field(default_factory=list)
    message_template: str = Field(default=DEFAULT_MESSAGE_TEMPLATE, min_length=1)
    head_ref_pattern: str = Field(default=DEFAULT_HEAD_REF_PATTERN, min_length=1)
    repository_directory: Path = Field(default_factory=Path.cwd)
    sign_commits: bool = False
    dry_run: bool = False

    @field_validator("change_sets", "extra_branches", mode="before")
    @classmethod
    def _split_lists(cls, value: object) -> object:
        return _split_list(value)

    @field_validator("base_branch", "upstream_remote", "upstream_branch", "working_branch")
    @classmethod
    def _reject_option_like_names(cls, value: str) -> str:
        value = value.strip()
        if value.startswith("-") or any(character.isspace() for character in value):
            raise ValueError(f"'{value}' is not a usable git name")
        return value

    @field_validator("message_template", "head_ref_pattern")
    @classmethod
    def _require_placeholder(cls, value: str) -> str:
        if _PLACEHOLDER not in value:
            raise ValueError(f"must contain the {_PLACEHOLDER} placeholder")
        try:
            value.format(change_set="0")
        except (KeyError, IndexError, AttributeError, ValueError) as error:
            raise ValueError(f"only the {_PLACEHOLDER} placeholder may be used ({error!r})") from error
        return value

    @model_validator(mode="after")
    def _working_branch_is_scratch(self) -> "ComposeRequest":
        if self.working_branch == self.base_branch:
            raise ValueError("working branch must differ from the base branch")
        return self


class StatusRequest(BaseModel):
    change_sets: list[str] = Field(default_factory=list)
    github_repository: str = Field(..., pattern=r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
    github_token: str | None = Field(default=None, repr=False)

    @field_validator("change_sets", mode="before")
    @classmethod
    def _split_change_sets(cls, value: object) -> object:
        return _split_list(value)

    @property
    def owner(self) -> str:
        return self.github_repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.github_repository.split("/", 1)[1]
