"""Tests for lint/scheduler.py - breadth-first, memory-aware lint runs."""

import pytest

from goality.config import LintOptions
from goality.exceptions import InvocationRuntimeError, ResourceExhaustedError
from goality.lint.scheduler import InvocationRecord, LintScheduler
from goality.lint.supervisor import InvocationResult
from goality.tree import Project, TreeScanner


class FakeLinter:
    """Supervisor factory answering each scope from a fixed script.

    ``reports`` maps a scope to the raw JSON it outputs; scopes listed in
    ``interrupted`` are interrupted instead, as many times as given.
    """

    def __init__(self, reports, interrupted=None):
        self.reports = reports
        self.interrupted = dict(interrupted or {})
        self.commands = []

    def __call__(self, command, cwd, scope):
        self.commands.append((command, cwd, scope))
        return self

    def run(self):
        command, _, scope = self.commands[-1]
        assert command[-1] == scope
        if self.interrupted.get(scope, 0) > 0:
            self.interrupted[scope] -= 1
            return InvocationResult(stdout=b"", stderr="", interrupted=True)
        return InvocationResult(stdout=self.reports[scope], stderr="", interrupted=False)

    @property
    def scopes(self):
        return [scope for _, _, scope in self.commands]


def _by_path(issues, *prefixes):
    return [i for i in issues if i.file_path.startswith(prefixes)]


def _all_issues(project):
    return sorted(
        (issue.sort_key(), issue.from_linter)
        for file in project.root.iter_files()
        for linter_issues in file.issues.values()
        for issue in linter_issues
    )


@pytest.fixture
def project(scanned_root, fixture_project):
    return Project(str(fixture_project), scanned_root)


class TestLintScheduler:
    def test_single_invocation_without_pressure(self, project, issues, make_report):
        linter = FakeLinter({"./...": make_report(issues)})
        scheduler = LintScheduler(project, LintOptions(), supervisor_factory=linter)

        scheduler.run()

        assert linter.scopes == ["./..."]
        assert scheduler.invocations == [InvocationRecord("./...", True, False)]
        assert project.linters == ["govet", "unused"]
        assert len(_all_issues(project)) == 4

    def test_commands_run_in_project_directory(self, project, issues, make_report):
        linter = FakeLinter({"./...": make_report(issues)})
        LintScheduler(project, LintOptions(linters=("govet",)), supervisor_factory=linter).run()

        command, cwd, _ = linter.commands[0]
        assert cwd == project.path
        assert command[0] == "golangci-lint"
        assert "--enable=govet" in command
        assert command[-1] == "./..."

    def test_interrupted_root_is_split(self, project, issues, make_report):
        """An interrupted root run falls back to own files plus child runs."""
        reference = Project(project.path, TreeScanner(project.path).scan())
        LintScheduler(
            reference, supervisor_factory=FakeLinter({"./...": make_report(issues)})
        ).run()

        linter = FakeLinter(
            {
                ".": make_report(_by_path(issues, "file.go")),
                "bar/...": make_report(_by_path(issues, "bar/")),
                "foo/...": make_report(_by_path(issues, "foo/")),
            },
            interrupted={"./...": 1},
        )
        scheduler = LintScheduler(project, supervisor_factory=linter)
        scheduler.run()

        assert linter.scopes == ["./...", ".", "bar/...", "foo/..."]
        assert scheduler.invocations[0] == InvocationRecord("./...", True, True)
        assert scheduler.invocations[1] == InvocationRecord(".", False, False)
        assert _all_issues(project) == _all_issues(reference)

    def test_directories_without_sources_are_skipped(self, project, issues, make_report):
        linter = FakeLinter(
            {
                ".": make_report(_by_path(issues, "file.go")),
                "bar/...": make_report(_by_path(issues, "bar/")),
                "foo/dir/...": make_report(_by_path(issues, "foo/")),
            },
            interrupted={"./...": 1, "foo/...": 1},
        )
        LintScheduler(project, supervisor_factory=linter).run()

        # foo has no own files and foo/non-go has no sources at all.
        assert linter.scopes == ["./...", ".", "bar/...", "foo/...", "foo/dir/..."]
        assert len(_all_issues(project)) == 4

    def test_own_files_run_is_retried(self, project, issues, make_report):
        linter = FakeLinter(
            {".": make_report(issues), "bar/...": make_report([]), "foo/...": make_report([])},
            interrupted={"./...": 1, ".": 2},
        )
        scheduler = LintScheduler(project, LintOptions(self_retries=2), supervisor_factory=linter)
        scheduler.run()

        assert linter.scopes[:4] == ["./...", ".", ".", "."]

    def test_exhausted_retries_raise(self, project, make_report):
        linter = FakeLinter({}, interrupted={"./...": 1, ".": 10})
        scheduler = LintScheduler(project, LintOptions(self_retries=1), supervisor_factory=linter)

        with pytest.raises(ResourceExhaustedError) as exc_info:
            scheduler.run()

        assert exc_info.value.scope == "."
        assert exc_info.value.attempts == 2

    def test_malformed_output_is_fatal(self, project):
        linter = FakeLinter({"./...": b"panic: out of memory"})

        with pytest.raises(InvocationRuntimeError):
            LintScheduler(project, supervisor_factory=linter).run()

    def test_empty_project_runs_nothing(self, tmp_path):
        project = Project(str(tmp_path), TreeScanner(str(tmp_path)).scan())
        linter = FakeLinter({})
        scheduler = LintScheduler(project, supervisor_factory=linter)
        scheduler.run()

        assert linter.scopes == []
        assert scheduler.invocations == []

    def test_default_watchdog_follows_options(self, project):
        scheduler = LintScheduler(project, LintOptions(memory_threshold=0.5, sample_interval=2.0))
        assert scheduler.watchdog.threshold == 0.5
        assert scheduler.watchdog.interval == 2.0
