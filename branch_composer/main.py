import logging
from pathlib import Path
from typing import NoReturn

import click
from dotenv import find_dotenv, load_dotenv

from branch_composer import __version__
from branch_composer.application.compose_flow import ComposeResult
from branch_composer.domain.change_sets import parse_change_sets
from branch_composer.domain.errors import ComposeError, ConfigurationError
from branch_composer.infrastructure.cli import (
    build_compose_request,
    build_status_request,
    execute_compose,
)
from branch_composer.infrastructure.github import GitHubClient, collect_pull_statuses
from branch_composer.infrastructure.observability.logging_utils import (
    configure_logging,
    log_event,
    register_sensitive_values,
)


logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_USAGE = 2


def _load_environment(env_file: Path | None) -> None:
    dotenv_path = str(env_file) if env_file else find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)


def _fail(ctx: click.Context, error: ComposeError) -> NoReturn:
    click.echo(f"error: {error.describe()}", err=True)
    ctx.exit(EXIT_USAGE if isinstance(error, ConfigurationError) else EXIT_FAILURE)


def _echo_result(result: ComposeResult) -> None:
    if result.status == "dry_run":
        click.echo(f"{result.message}")
        click.echo(f"upstream at {result.head}")
        for change_set, head in result.planned:
            click.echo(f"  {change_set}: {head}")
        return

    click.echo(result.message)
    for entry in result.integrated:
        click.echo(f"  {entry.change_set}: {entry.commit}")
    click.echo(f"{result.base_branch} is at {result.head}")


@click.group()
@click.version_option(version=__version__, prog_name="branch-composer")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this file instead of the nearest .env.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
def cli(env_file: Path | None, verbose: bool) -> None:
    """Rebuild a branch as upstream plus a curated list of squashed pull requests."""
    _load_environment(env_file)
    configure_logging(logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.option("--base", "base_branch", envvar="COMPOSER_BASE_BRANCH", help="Branch to rebuild (default: batteries).")
@click.option(
    "--upstream-remote",
    envvar="COMPOSER_UPSTREAM_REMOTE",
    help="Remote providing the upstream branch and pull heads (default: upstream).",
)
@click.option(
    "--upstream-branch",
    envvar="COMPOSER_UPSTREAM_BRANCH",
    help="Branch on the remote the base is reset to (default: master).",
)
@click.option(
    "--changesets",
    "change_sets",
    envvar="COMPOSER_CHANGESETS",
    help="Ordered, comma separated change-set identifiers, e.g. 5340,7242,6447.",
)
@click.option(
    "--working-branch",
    envvar="COMPOSER_WORKING_BRANCH",
    help="Scratch branch used while squashing (default: temp).",
)
@click.option(
    "--repo",
    "repository_directory",
    envvar="COMPOSER_REPO_DIR",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository to operate on (default: current directory).",
)
@click.option(
    "--extra-branch",
    "extra_branches",
    multiple=True,
    envvar="COMPOSER_EXTRA_BRANCHES",
    help="Local branch whose commits are cherry-picked after the change-sets. Repeatable.",
)
@click.option(
    "--message-template",
    envvar="COMPOSER_MESSAGE_TEMPLATE",
    help="Squash commit message, with a {change_set} placeholder (default: 'PR {change_set}').",
)
@click.option(
    "--head-ref-pattern",
    envvar="COMPOSER_HEAD_REF_PATTERN",
    help="Remote ref holding a change-set head (default: refs/pull/{change_set}/head).",
)
@click.option(
    "--sign/--no-sign",
    "sign_commits",
    default=False,
    envvar="COMPOSER_SIGN_COMMITS",
    help="GPG-sign the squash commits.",
)
@click.option("--dry-run", is_flag=True, default=False, help="Fetch and resolve every head without touching branches.")
@click.pass_context
def compose(ctx: click.Context, **settings: object) -> None:
    """Reset the base branch to upstream and squash each change-set on top, in order."""
    if not settings.get("extra_branches"):
        settings["extra_branches"] = None
    try:
        request = build_compose_request(**settings)
        result = execute_compose(request)
    except ComposeError as error:
        log_event(logger, logging.ERROR, "cli.compose.failed", error=error.describe())
        _fail(ctx, error)
    _echo_result(result)


@cli.command()
@click.option(
    "--changesets",
    "change_sets",
    envvar="COMPOSER_CHANGESETS",
    help="Change-set identifiers to look up.",
)
@click.option(
    "--github-repo",
    "github_repository",
    envvar="COMPOSER_GITHUB_REPO",
    help="Upstream repository as owner/name.",
)
@click.option("--github-token", envvar="GITHUB_TOKEN", help="Token for the GitHub API (optional for public repos).")
@click.pass_context
def status(ctx: click.Context, **settings: object) -> None:
    """Report which listed pull requests are still open upstream."""
    try:
        request = build_status_request(**settings)
        change_sets = parse_change_sets(request.change_sets)
    except ComposeError as error:
        _fail(ctx, error)

    register_sensitive_values(request.github_token)
    client = GitHubClient(owner=request.owner, repo=request.repo, token=request.github_token)
    for pull_status in collect_pull_statuses(change_sets, client.get_pull):
        line = f"{pull_status.change_set}\t{pull_status.state}"
        if pull_status.title:
            line = f"{line}\t{pull_status.title}"
        if pull_status.error:
            line = f"{line}\t({pull_status.error})"
        if pull_status.droppable:
            line = f"{line}\t[can be dropped]"
        click.echo(line)


def main() -> None:
    cli(prog_name="branch-composer")


if __name__ == "__main__":
    main()
