import tempfile
import unittest
from pathlib import Path

from branch_composer.application.compose_flow import (
    ComposeConfig,
    ComposeDependencies,
    run_compose,
)
from branch_composer.domain.change_sets import parse_change_sets
from branch_composer.domain.errors import (
    CommitError,
    ConflictError,
    FetchError,
    GitCommandError,
    RefNotFoundError,
)
from branch_composer.infrastructure.git import GitBackend
from tests.git_fixtures import GIT_AVAILABLE, UpstreamWithPulls, git


@unittest.skipUnless(GIT_AVAILABLE, "git executable not available")
class GitBackendTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.fixture = UpstreamWithPulls(Path(self._tmp.name))

    def _backend(self) -> GitBackend:
        return GitBackend(self.fixture.clone())

    def test_delete_branch_is_silent_when_branch_is_absent(self) -> None:
        backend = self._backend()

        backend.delete_branch("temp")
        backend.create_or_reset_branch("temp", "master")
        backend.delete_branch("temp")

        self.assertEqual(git(self.fixture.local, "branch", "--list", "temp"), "")

    def test_resolve_ref_raises_for_unknown_refs(self) -> None:
        backend = self._backend()

        self.assertEqual(backend.resolve_ref("master"), git(self.fixture.upstream, "rev-parse", "master"))
        with self.assertRaises(RefNotFoundError):
            backend.resolve_ref("refs/heads/does-not-exist")

    def test_fetch_ref_classifies_missing_pull_heads(self) -> None:
        self.fixture.add_pull(1, {"a.txt": "a\n"})
        backend = self._backend()

        backend.fetch_ref("upstream", "refs/pull/1/head", "refs/remotes/upstream/pull/1")
        with self.assertRaises(RefNotFoundError):
            backend.fetch_ref("upstream", "refs/pull/404/head", "refs/remotes/upstream/pull/404")

    def test_fetch_all_from_unknown_remote_is_a_fetch_error(self) -> None:
        backend = self._backend()

        with self.assertRaises(FetchError):
            backend.fetch_all("nowhere")

    def test_commit_without_staged_changes_is_a_commit_error(self) -> None:
        backend = self._backend()

        backend.stage_all()
        self.assertFalse(backend.has_staged_changes())
        with self.assertRaises(CommitError):
            backend.commit("PR 1")

    def test_checkout_of_unknown_branch_is_a_git_command_error(self) -> None:
        backend = self._backend()

        with self.assertRaises(GitCommandError):
            backend.checkout("no-such-branch")

    def test_rebase_conflict_leaves_rebase_in_progress(self) -> None:
        self.fixture.add_pull(1, {"shared.txt": "one\n"})
        self.fixture.add_pull(2, {"shared.txt": "two\n"})
        backend = self._backend()
        backend.fetch_ref("upstream", "refs/pull/1/head", "refs/remotes/upstream/pull/1")
        backend.fetch_ref("upstream", "refs/pull/2/head", "refs/remotes/upstream/pull/2")
        backend.reset_hard("refs/remotes/upstream/pull/1")
        backend.create_or_reset_branch("temp", "refs/remotes/upstream/pull/2")
        backend.checkout("temp")

        with self.assertRaises(ConflictError):
            backend.rebase("batteries")

        self.assertTrue(backend.rebase_in_progress())
        self.assertEqual(backend.unmerged_paths(), ["shared.txt"])


@unittest.skipUnless(GIT_AVAILABLE, "git executable not available")
class GitComposeIntegrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.fixture = UpstreamWithPulls(Path(self._tmp.name))

    def _compose(self, change_sets: str, **overrides: object):
        config = ComposeConfig(
            base_branch="batteries",
            upstream_remote="upstream",
            change_sets=tuple(parse_change_sets(change_sets)),
            **overrides,
        )
        return run_compose(config, ComposeDependencies(backend=GitBackend(self.fixture.local)))

    def test_composes_upstream_plus_one_commit_per_pull(self) -> None:
        self.fixture.add_pull(5340, {"jump.txt": "jump\n"}, {"jump.txt": "jump v2\n"})
        self.fixture.add_pull(7242, {"brackets.txt": "brackets\n"})
        self.fixture.clone()

        result = self._compose("5340,7242")

        self.assertEqual(self.fixture.log_subjects("batteries"), ["PR 7242", "PR 5340", "initial"])
        self.assertEqual(
            self.fixture.tracked_files("batteries"),
            {"README": "upstream", "shared.txt": "base", "jump.txt": "jump v2", "brackets.txt": "brackets"},
        )
        self.assertEqual(result.head, git(self.fixture.local, "rev-parse", "batteries"))
        self.assertEqual(git(self.fixture.local, "rev-parse", "--abbrev-ref", "HEAD"), "batteries")
        self.assertEqual(git(self.fixture.local, "branch", "--list", "temp"), "")
        self.assertEqual(
            git(self.fixture.local, "diff", "--name-only", "batteries~1", "batteries"),
            "brackets.txt",
        )

    def test_picks_up_upstream_changes_and_drops_previous_composition(self) -> None:
        self.fixture.add_pull(1, {"a.txt": "a\n"})
        self.fixture.clone()
        self._compose("1")
        self.fixture.advance_upstream({"README": "upstream v2\n"})

        self._compose("1")

        self.assertEqual(self.fixture.log_subjects("batteries"), ["PR 1", "upstream change", "initial"])

    def test_empty_list_resets_base_to_upstream(self) -> None:
        self.fixture.clone()
        self.fixture.commit(self.fixture.local, {"local.txt": "local\n"}, "local work")

        result = self._compose("")

        self.assertEqual(result.integrated, ())
        self.assertEqual(
            git(self.fixture.local, "rev-parse", "batteries"),
            git(self.fixture.local, "rev-parse", "upstream/master"),
        )

    def test_second_run_produces_identical_tree(self) -> None:
        self.fixture.add_pull(1, {"a.txt": "a\n"})
        self.fixture.add_pull(2, {"shared.txt": "two\n"})
        self.fixture.clone()

        self._compose("1,2")
        first_tree = git(self.fixture.local, "rev-parse", "batteries^{tree}")
        self._compose("1,2")

        self.assertEqual(git(self.fixture.local, "rev-parse", "batteries^{tree}"), first_tree)

    def test_conflicting_pull_stops_the_run_with_previous_pulls_applied(self) -> None:
        self.fixture.add_pull(1, {"a.txt": "a\n"})
        self.fixture.add_pull(2, {"shared.txt": "two\n"})
        self.fixture.add_pull(3, {"shared.txt": "three\n"})
        self.fixture.clone()

        with self.assertRaises(ConflictError) as raised_error:
            self._compose("1,2,3")

        self.assertEqual(raised_error.exception.change_set, "3")
        self.assertEqual(git(self.fixture.local, "rev-list", "--count", "upstream/master..batteries"), "2")

    def test_missing_pull_head_is_reported_before_any_reset(self) -> None:
        self.fixture.clone()
        self.fixture.commit(self.fixture.local, {"local.txt": "local\n"}, "local work")
        before = git(self.fixture.local, "rev-parse", "batteries")

        with self.assertRaises(RefNotFoundError) as raised_error:
            self._compose("77")

        self.assertEqual(raised_error.exception.change_set, "77")
        self.assertEqual(git(self.fixture.local, "rev-parse", "batteries"), before)

    def test_extra_branch_commits_are_cherry_picked_on_top(self) -> None:
        self.fixture.add_pull(1, {"a.txt": "a\n"})
        self.fixture.clone()
        git(self.fixture.local, "checkout", "-q", "-b", "dev/abc", "upstream/master")
        self.fixture.commit(self.fixture.local, {"local.txt": "local\n"}, "local tweak")
        git(self.fixture.local, "checkout", "-q", "batteries")

        self._compose("1", extra_branches=("dev/abc",))

        self.assertEqual(self.fixture.log_subjects("batteries"), ["local tweak", "PR 1", "initial"])


if __name__ == "__main__":
    unittest.main()
