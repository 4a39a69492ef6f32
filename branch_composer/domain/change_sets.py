import re
from typing import Iterable

from branch_composer.domain.errors import ConfigurationError
from branch_composer.domain.models import ChangeSetRef


# Identifiers end up inside refspecs and commit messages, so keep them ref-safe.
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_SEPARATOR_PATTERN = re.compile(r"[\s,]+")


def split_change_set_tokens(raw: str) -> list[str]:
    return [token for token in _SEPARATOR_PATTERN.split(raw.strip()) if token]


def validate_change_set_identifier(identifier: str) -> str:
    if not identifier:
        raise ConfigurationError("change-set identifier must be a non-empty string")
    if not _IDENTIFIER_PATTERN.match(identifier):
        raise ConfigurationError(
            f"change-set identifier '{identifier}' may only contain letters, digits, '.', '_' and '-'"
        )
    if identifier.endswith((".", ".lock")) or ".." in identifier:
        raise ConfigurationError(f"change-set identifier '{identifier}' is not a valid ref component")
    return identifier


def parse_change_sets(raw: str | Iterable[str | int] | None) -> list[ChangeSetRef]:
    """Turn operator input into an ordered list of change-set references.

    Accepts ``"5340, 7242 6447"`` as well as an already split sequence.
    Order is preserved; duplicates are rejected because the second copy
    would always flatten to an empty commit.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        tokens = split_change_set_tokens(raw)
    else:
        tokens = []
        for item in raw:
            tokens.extend(split_change_set_tokens(str(item)))

    change_sets: list[ChangeSetRef] = []
    seen: set[str] = set()
    for token in tokens:
        identifier = validate_change_set_identifier(token)
        if identifier in seen:
            raise ConfigurationError(f"change-set '{identifier}' is listed more than once")
        seen.add(identifier)
        change_sets.append(ChangeSetRef(identifier))
    return change_sets
