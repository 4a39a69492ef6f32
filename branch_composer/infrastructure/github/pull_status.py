from dataclasses import dataclass
from typing import Callable, Iterable

import requests

from branch_composer.domain.models import ChangeSetRef


@dataclass(frozen=True)
class PullStatus:
    change_set: ChangeSetRef
    state: str
    title: str = ""
    error: str | None = None

    @property
    def droppable(self) -> bool:
        # Merged or closed PRs no longer need to be carried on the composed branch.
        return self.state in {"merged", "closed"}


def describe_pull(change_set: ChangeSetRef, payload: dict[str, object]) -> PullStatus:
    state = str(payload.get("state") or "unknown")
    if payload.get("merged") or payload.get("merged_at"):
        state = "merged"
    return PullStatus(change_set=change_set, state=state, title=str(payload.get("title") or ""))


def collect_pull_statuses(
    change_sets: Iterable[ChangeSetRef],
    get_pull: Callable[[int], dict[str, object]],
) -> list[PullStatus]:
    statuses = []
    for change_set in change_sets:
        if not change_set.identifier.isdigit():
            statuses.append(PullStatus(change_set=change_set, state="skipped", error="not a pull request number"))
            continue
        try:
            payload = get_pull(int(change_set.identifier))
        except (RuntimeError, ValueError, requests.RequestException) as error:
            statuses.append(PullStatus(change_set=change_set, state="unknown", error=str(error)))
            continue
        statuses.append(describe_pull(change_set, payload))
    return statuses
