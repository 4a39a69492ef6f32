import logging
import os
import subprocess
from pathlib import Path
from typing import Sequence

from branch_composer.domain.errors import GitCommandError
from branch_composer.infrastructure.observability.logging_utils import log_event, redact_secrets


logger = logging.getLogger(__name__)

# Stable, non-interactive output: stderr is parsed and prompts would hang the run.
_COMMAND_ENV_OVERRIDES = {
    "LC_ALL": "C",
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_EDITOR": "true",
}


def _execute_command(command: Sequence[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    env = {**os.environ, **_COMMAND_ENV_OVERRIDES}
    return subprocess.run(command, cwd=cwd, capture_output=True, text=True, env=env)


def command_output(result: subprocess.CompletedProcess[str]) -> str:
    return "\n".join(part.strip() for part in (result.stdout, result.stderr) if part and part.strip())


def log_command_failure(command: Sequence[str], result: subprocess.CompletedProcess[str]) -> None:
    stdout = redact_secrets(result.stdout.strip()) if result.stdout else ""
    stderr = redact_secrets(result.stderr.strip()) if result.stderr else ""
    if stdout:
        log_event(logger, logging.ERROR, "repo.command.stdout", output=stdout)
    if stderr:
        log_event(logger, logging.ERROR, "repo.command.stderr", output=stderr)


def describe_failure(command: Sequence[str], result: subprocess.CompletedProcess[str]) -> str:
    message = f"Command failed (exit_code={result.returncode}): {' '.join(command)}"
    last_line = next(
        (line for line in reversed(command_output(result).splitlines()) if line.strip()),
        "",
    )
    if last_line:
        message = f"{message}: {last_line.strip()}"
    return redact_secrets(message)


def run_capture(
    command: Sequence[str],
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    log_event(
        logger,
        logging.INFO,
        "repo.command.run",
        command=list(command),
        cwd=str(cwd) if cwd else None,
    )
    return _execute_command(command, cwd=cwd)


def run(command: Sequence[str], cwd: Path | None = None) -> str:
    result = run_capture(command, cwd=cwd)
    if result.returncode != 0:
        log_command_failure(command, result)
        raise GitCommandError(describe_failure(command, result))
    return result.stdout.strip()
