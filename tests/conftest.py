"""Shared test fixtures for goality tests."""

import json
from pathlib import Path

import pytest

from goality.tree import Issue, Project, TreeScanner

FIXTURE_PROJECT = Path(__file__).parent / "fixtures" / "project"

SCENARIO_LINTERS = ["govet", "unused"]


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_issue(linter, text, filename, line, column, offset=0):
    return Issue(
        from_linter=linter,
        text=text,
        file_path=filename,
        line=line,
        column=column,
        offset=offset,
    )


def scenario_issues():
    """The issues golangci-lint reports on the fixture project."""
    return [
        make_issue("unused", "func `unusedFunc` is unused", "bar/file.go", 3, 6, 18),
        make_issue(
            "govet",
            'shadow: declaration of "myString" shadows declaration at line 6',
            "foo/dir/file.go",
            8,
            3,
            102,
        ),
        make_issue("unused", "func `unworthy` is unused", "foo/dir/file.go", 14, 6, 187),
        make_issue(
            "govet",
            'shadow: declaration of "err" shadows declaration at line 11',
            "file.go",
            19,
            3,
            206,
        ),
    ]


def lint_report(issues, linters=SCENARIO_LINTERS) -> bytes:
    """Serialise issues the way ``golangci-lint run --out-format=json`` does."""
    return json.dumps(
        {
            "Issues": [issue.to_dict() for issue in issues],
            "Report": {
                "Linters": [{"Name": name, "Enabled": True} for name in linters]
                + [{"Name": "gofmt", "Enabled": False}],
            },
        }
    ).encode("utf-8")


@pytest.fixture
def fixture_project():
    """Path to the on-disk Go fixture project."""
    return FIXTURE_PROJECT


@pytest.fixture
def scanned_root():
    """Directory tree of the fixture project, without issues."""
    return TreeScanner(str(FIXTURE_PROJECT)).scan()


@pytest.fixture
def issues():
    return scenario_issues()


@pytest.fixture
def linted_project(scanned_root, issues):
    """Fixture project with every scenario issue merged, not yet sealed."""
    project = Project(str(FIXTURE_PROJECT), scanned_root, linters=list(SCENARIO_LINTERS))
    for issue in issues:
        assert project.add_issue(issue)
    return project


@pytest.fixture
def sealed_project(linted_project):
    linted_project.seal()
    return linted_project


@pytest.fixture
def make_report():
    """Factory for raw linter JSON output."""
    return lint_report
