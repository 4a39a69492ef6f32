import logging

import requests

from branch_composer.infrastructure.observability.logging_utils import log_event, redact_secrets


logger = logging.getLogger(__name__)


class GitHubClient:
    def __init__(self, *, owner: str, repo: str, token: str | None = None, timeout: float = 15.0) -> None:
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.base = f"https://api.github.com/repos/{self.owner}/{self.repo}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def get_pull(self, number: int) -> dict[str, object]:
        log_event(logger, logging.INFO, "github.pull.get", pull_number=number)
        response = self.session.get(f"{self.base}/pulls/{number}", timeout=self.timeout)
        if response.status_code >= 400:
            error_details = response.text
            try:
                error_details = response.json().get("message", error_details)
            except ValueError:
                pass
            safe_error_details = redact_secrets(str(error_details))
            log_event(
                logger,
                logging.ERROR,
                "github.pull.get_failed",
                pull_number=number,
                status_code=response.status_code,
                details=safe_error_details,
            )
            raise RuntimeError(
                redact_secrets(f"GitHub pull request lookup failed ({response.status_code}): {safe_error_details}")
            )
        return response.json()
