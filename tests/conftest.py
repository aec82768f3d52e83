"""Shared fixtures: throwaway Git repositories with a fixed HEAD commit."""

import pytest
from git import Actor, Repo

# 2024-01-15 10:20:30 UTC
COMMIT_EPOCH = 1705314030
COMMITTER = Actor("Jane Roe", "jane@example.com")
SUBJECT = "Add build scripts"

CHANGELOG = """\
Changelog
=========

1.2.3 - 2024-01-15
------------------

- First release
"""

README = """\
# My Project

Build identification for the rest of us.
"""

OVERRIDE_VARS = (
    "SOURCE_DATE_EPOCH",
    "SOURCE_X_GIT_COMMIT_ID",
    "SOURCE_X_VERSION_STR",
    "BUILD_NUMBER",
)


@pytest.fixture(autouse=True)
def clean_override_env(monkeypatch):
    """Keep the caller's reproducible-build variables out of the tests."""
    for name in OVERRIDE_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def quiet_console():
    from buildid_cli.utils.console import set_verbose
    set_verbose(False)
    yield
    set_verbose(False)


@pytest.fixture
def make_repo(tmp_path):
    """Factory creating a Git working tree under tmp_path.

    Args:
        name: Directory name of the working tree.
        files: Mapping of relative path to content, committed as HEAD.
        commit: Whether to create the commit at all.
        subject: Commit subject.
    """
    def _make(name="my-project", files=None, commit=True, subject=SUBJECT):
        root = tmp_path / name
        root.mkdir(parents=True)
        repo = Repo.init(root)
        with repo.config_writer() as writer:
            writer.set_value("user", "name", "Test User")
            writer.set_value("user", "email", "test@example.com")

        if files is None:
            files = {"CHANGELOG.md": CHANGELOG, "README.md": README}
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        if commit:
            if files:
                repo.index.add([str(root / rel_path) for rel_path in files])
            date = f"{COMMIT_EPOCH} +0000"
            repo.index.commit(subject, author=COMMITTER, committer=COMMITTER,
                              author_date=date, commit_date=date)
        return repo
    return _make


@pytest.fixture
def repo(make_repo):
    """A committed repository with a changelog, a readme and one remote."""
    repo = make_repo()
    repo.create_remote("origin", "https://example.com/org/my-project.git")
    return repo
