import logging
from pathlib import Path

from branch_composer.domain.errors import (
    CommitError,
    ConflictError,
    FetchError,
    GitCommandError,
    RefNotFoundError,
)
from branch_composer.infrastructure.git.operations import (
    command_output,
    describe_failure,
    log_command_failure,
    run,
    run_capture,
)
from branch_composer.infrastructure.observability.logging_utils import log_event


logger = logging.getLogger(__name__)

_MISSING_REF_MARKERS = ("couldn't find remote ref", "could not find remote ref")
_CONFLICT_MARKERS = ("CONFLICT", "could not apply", "Resolve all conflicts manually")
_NOTHING_TO_COMMIT_MARKERS = ("nothing to commit", "nothing added to commit")


class GitBackend:
    """Runs each composer primitive as one or two ``git`` subprocesses."""

    def __init__(self, repo_dir: Path, *, sign_commits: bool = False) -> None:
        self.repo_dir = repo_dir
        self.sign_commits = sign_commits

    def _command(self, *args: str) -> list[str]:
        return ["git", *args]

    def _git(self, *args: str) -> str:
        return run(self._command(*args), cwd=self.repo_dir)

    def _signing_flags(self) -> list[str]:
        return [] if self.sign_commits else ["--no-gpg-sign"]

    def fetch_all(self, remote: str) -> None:
        command = self._command("fetch", remote)
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode != 0:
            log_command_failure(command, result)
            raise FetchError(describe_failure(command, result))

    def fetch_ref(self, remote: str, source: str, destination: str) -> None:
        command = self._command("fetch", remote, f"+{source}:{destination}")
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode == 0:
            return
        log_command_failure(command, result)
        output = command_output(result)
        if any(marker in output for marker in _MISSING_REF_MARKERS):
            raise RefNotFoundError(f"{remote} has no ref {source}")
        raise FetchError(describe_failure(command, result))

    def create_or_reset_branch(self, name: str, from_ref: str) -> None:
        self._git("branch", "--no-track", "-f", name, from_ref)

    def branch_exists(self, name: str) -> bool:
        result = run_capture(
            self._command("show-ref", "--verify", "--quiet", f"refs/heads/{name}"),
            cwd=self.repo_dir,
        )
        return result.returncode == 0

    def delete_branch(self, name: str) -> None:
        if not self.branch_exists(name):
            log_event(logger, logging.INFO, "repo.branch.absent", branch=name)
            return
        self._git("branch", "-D", name)

    def checkout(self, branch: str) -> None:
        self._git("checkout", "-q", branch, "--")

    def reset_hard(self, ref: str) -> None:
        self._git("reset", "-q", "--hard", ref)

    def rebase(self, onto: str) -> None:
        command = self._command("rebase", *self._signing_flags(), onto)
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode == 0:
            return
        log_command_failure(command, result)
        output = command_output(result)
        if any(marker in output for marker in _CONFLICT_MARKERS) or self.rebase_in_progress():
            raise ConflictError(f"rebase onto {onto} stopped on a conflict: {describe_failure(command, result)}")
        raise GitCommandError(describe_failure(command, result))

    def reset_index_to(self, ref: str) -> None:
        self._git("reset", "-q", "--mixed", ref)

    def stage_all(self) -> None:
        self._git("add", "-A")

    def has_staged_changes(self) -> bool:
        command = self._command("diff", "--cached", "--quiet")
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        log_command_failure(command, result)
        raise GitCommandError(describe_failure(command, result))

    def commit(self, message: str) -> str:
        command = self._command("commit", "-q", *self._signing_flags(), "-m", message)
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode != 0:
            log_command_failure(command, result)
            output = command_output(result)
            if any(marker in output for marker in _NOTHING_TO_COMMIT_MARKERS):
                raise CommitError(f"nothing to commit for '{message}'")
            raise CommitError(describe_failure(command, result))
        return self.resolve_ref("HEAD")

    def resolve_ref(self, spec: str) -> str:
        result = run_capture(
            self._command("rev-parse", "--verify", "--quiet", f"{spec}^{{commit}}"),
            cwd=self.repo_dir,
        )
        if result.returncode != 0:
            raise RefNotFoundError(f"cannot resolve {spec} to a commit")
        return result.stdout.strip()

    def rebase_in_progress(self) -> bool:
        for state_directory in ("rebase-merge", "rebase-apply"):
            state_path = Path(self._git("rev-parse", "--git-path", state_directory))
            if not state_path.is_absolute():
                state_path = self.repo_dir / state_path
            if state_path.exists():
                return True
        return False

    def unmerged_paths(self) -> list[str]:
        output = self._git("diff", "--name-only", "--diff-filter=U")
        return [line for line in output.splitlines() if line.strip()]

    def cherry_pick(self, revision_range: str) -> None:
        pending = int(self._git("rev-list", "--count", revision_range) or "0")
        if pending == 0:
            log_event(logger, logging.INFO, "repo.cherry_pick.skipped", revision_range=revision_range)
            return
        command = self._command("cherry-pick", *self._signing_flags(), revision_range)
        result = run_capture(command, cwd=self.repo_dir)
        if result.returncode == 0:
            return
        log_command_failure(command, result)
        output = command_output(result)
        if any(marker in output for marker in _CONFLICT_MARKERS):
            raise ConflictError(f"cherry-pick of {revision_range} stopped on a conflict")
        raise GitCommandError(describe_failure(command, result))
