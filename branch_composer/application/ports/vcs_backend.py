from typing import Protocol


class VersionControlBackend(Protocol):
    """Synchronous primitives the composer needs from the repository.

    Every method either completes or raises a ``ComposeError`` subclass;
    there is no silent partial success.
    """

    def fetch_all(self, remote: str) -> None: ...

    def fetch_ref(self, remote: str, source: str, destination: str) -> None:
        """Force-update ``destination`` locally from ``source`` on ``remote``."""

    def create_or_reset_branch(self, name: str, from_ref: str) -> None: ...

    def delete_branch(self, name: str) -> None:
        """Delete ``name``; a missing branch is not an error."""

    def checkout(self, branch: str) -> None: ...

    def reset_hard(self, ref: str) -> None: ...

    def rebase(self, onto: str) -> None:
        """Rebase the checked out branch onto ``onto``; raises ``ConflictError``."""

    def reset_index_to(self, ref: str) -> None:
        """Move the current branch and index to ``ref``, keeping the working tree."""

    def stage_all(self) -> None: ...

    def has_staged_changes(self) -> bool: ...

    def commit(self, message: str) -> str:
        """Create a commit from the index and return its id."""

    def resolve_ref(self, spec: str) -> str: ...

    def rebase_in_progress(self) -> bool: ...

    def unmerged_paths(self) -> list[str]: ...

    def cherry_pick(self, revision_range: str) -> None: ...
