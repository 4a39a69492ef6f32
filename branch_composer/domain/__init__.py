from branch_composer.domain.change_sets import parse_change_sets
from branch_composer.domain.errors import (
    CommitError,
    ComposeError,
    ConfigurationError,
    ConflictError,
    FetchError,
    GitCommandError,
    RefNotFoundError,
)
from branch_composer.domain.models import (
    DEFAULT_HEAD_REF_PATTERN,
    DEFAULT_MESSAGE_TEMPLATE,
    ChangeSetRef,
    ComposeStage,
    IntegratedChangeSet,
)

__all__ = [
    "DEFAULT_HEAD_REF_PATTERN",
    "DEFAULT_MESSAGE_TEMPLATE",
    "ChangeSetRef",
    "CommitError",
    "ComposeError",
    "ComposeStage",
    "ConfigurationError",
    "ConflictError",
    "FetchError",
    "GitCommandError",
    "IntegratedChangeSet",
    "RefNotFoundError",
    "parse_change_sets",
]
