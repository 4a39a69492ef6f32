from dataclasses import dataclass, field
from typing import Callable

from branch_composer.application.ports import VersionControlBackend
from branch_composer.domain.models import (
    DEFAULT_HEAD_REF_PATTERN,
    DEFAULT_MESSAGE_TEMPLATE,
    ChangeSetRef,
    ComposeStage,
    IntegratedChangeSet,
)


def _noop_observe_step(_: str, __: str, ___: str | None = None) -> None:
    return None


def _noop_observe_integration(_: ChangeSetRef, __: int, ___: int, ____: str) -> None:
    return None


@dataclass(frozen=True)
class ComposeConfig:
    base_branch: str
    upstream_remote: str
    change_sets: tuple[ChangeSetRef, ...]
    upstream_branch: str = "master"
    working_branch: str = "temp"
    extra_branches: tuple[str, ...] = ()
    message_template: str = DEFAULT_MESSAGE_TEMPLATE
    head_ref_pattern: str = DEFAULT_HEAD_REF_PATTERN
    dry_run: bool = False

    @property
    def upstream_ref(self) -> str:
        return f"{self.upstream_remote}/{self.upstream_branch}"


@dataclass(frozen=True)
class ComposeDependencies:
    backend: VersionControlBackend
    observe_step: Callable[[str, str, str | None], None] = _noop_observe_step
    observe_integration: Callable[[ChangeSetRef, int, int, str], None] = _noop_observe_integration


@dataclass(frozen=True)
class ComposeResult:
    status: str
    message: str
    base_branch: str
    head: str | None = None
    integrated: tuple[IntegratedChangeSet, ...] = field(default_factory=tuple)
    planned: tuple[tuple[ChangeSetRef, str], ...] = field(default_factory=tuple)
    stage: ComposeStage = ComposeStage.DONE
    failed_step: str | None = None
    failed_change_set: str | None = None
    error: str | None = None
