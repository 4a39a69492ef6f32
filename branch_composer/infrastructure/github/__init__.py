from branch_composer.infrastructure.github.github_client import GitHubClient
from branch_composer.infrastructure.github.pull_status import PullStatus, collect_pull_statuses

__all__ = ["GitHubClient", "PullStatus", "collect_pull_statuses"]
