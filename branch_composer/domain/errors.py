class ComposeError(RuntimeError):
    """Base class for every failure that aborts a composition run."""

    def __init__(
        self,
        message: str,
        *,
        step: str | None = None,
        change_set: str | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.change_set = change_set

    def describe(self) -> str:
        location = []
        if self.step:
            location.append(f"step={self.step}")
        if self.change_set:
            location.append(f"change_set={self.change_set}")
        if not location:
            return str(self)
        return f"{str(self)} ({', '.join(location)})"


class ConfigurationError(ComposeError):
    """Raised when the operator configuration cannot produce a valid run."""


class GitCommandError(ComposeError):
    """Raised when a backend command fails for a reason outside the taxonomy below."""


class FetchError(ComposeError):
    """Raised when the remote is unreachable or rejects the fetch."""


class RefNotFoundError(ComposeError):
    """Raised when a change-set has no resolvable remote head."""


class ConflictError(ComposeError):
    """Raised when a change-set does not apply cleanly onto the current base."""


class CommitError(ComposeError):
    """Raised when the flattened change-set is empty or the commit is rejected."""
