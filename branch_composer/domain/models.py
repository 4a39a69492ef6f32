from dataclasses import dataclass
from enum import Enum


DEFAULT_HEAD_REF_PATTERN = "refs/pull/{change_set}/head"
DEFAULT_MESSAGE_TEMPLATE = "PR {change_set}"


class ComposeStage(str, Enum):
    START = "start"
    SYNCED = "synced"
    RESET = "reset"
    INTEGRATING = "integrating"
    EXTRAS = "extras"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ChangeSetRef:
    identifier: str

    def __str__(self) -> str:
        return self.identifier

    def head_ref(self, pattern: str = DEFAULT_HEAD_REF_PATTERN) -> str:
        return pattern.format(change_set=self.identifier)

    def tracking_ref(self, remote: str) -> str:
        # Kept under the remote namespace so local branches are never clobbered.
        return f"refs/remotes/{remote}/pull/{self.identifier}"

    def commit_message(self, template: str = DEFAULT_MESSAGE_TEMPLATE) -> str:
        return template.format(change_set=self.identifier)


@dataclass(frozen=True)
class IntegratedChangeSet:
    change_set: ChangeSetRef
    commit: str
