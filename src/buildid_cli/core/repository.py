"""Repository location and remote URL resolution."""

import re
from pathlib import Path
from typing import Union

from git import Repo
from git.exc import CommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import NotARepositoryError, NoRemoteConfiguredError, RemoteUrlUnavailableError
from ..utils.console import _rich_debug

_PREFIX_INVALID_CHARS = re.compile(r'[^A-Za-z0-9_]')
_REMOTE_URL_KEY = re.compile(r'^remote\.(?P<name>.+)\.url$')


def locate_repository(directory: Union[str, Path] = ".") -> Repo:
    """Open the Git working tree enclosing a directory.

    Args:
        directory: Any path inside the working tree.

    Returns:
        Repo: Repository whose working tree contains ``directory``.

    Raises:
        NotARepositoryError: If the path is not inside a working tree.
    """
    try:
        repo = Repo(str(directory), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise NotARepositoryError(
            f"Could not locate top level Git directory for {directory} (not inside work tree)"
        ) from e

    if repo.bare or not repo.working_tree_dir:
        raise NotARepositoryError(
            f"Could not locate top level Git directory for {directory} (bare repository)"
        )

    _rich_debug(f"Top level Git directory: {repo.working_tree_dir}")
    return repo


def repository_root(repo: Repo) -> Path:
    """Absolute, symlink-resolved top-level directory of a working tree."""
    return Path(repo.working_tree_dir).resolve()


def derive_project_prefix(project_name: str) -> str:
    """Turn a project name into a token usable as a variable prefix.

    >>> derive_project_prefix("my-project.v2")
    'MY_PROJECT_V2'
    """
    return _PREFIX_INVALID_CHARS.sub('_', project_name.upper())


def first_remote_name(repo: Repo) -> str:
    """Name of the first remote declared in the repository config.

    The first ``remote.<name>.url`` entry is the one the repository was most
    likely cloned from. It is usually "origin", but not always.
    """
    try:
        output = repo.git.config('--get-regexp', r'^remote\..+\.url$')
    except CommandError as e:
        # git config exits 1 when nothing matches
        raise NoRemoteConfiguredError("Could not determine remote name for origin repository") from e

    for line in output.splitlines():
        key = line.split(None, 1)[0] if line.strip() else ''
        match = _REMOTE_URL_KEY.match(key)
        if match:
            return match.group('name')

    raise NoRemoteConfiguredError("Could not determine remote name for origin repository")


def resolve_remote_url(repo: Repo) -> str:
    """URL of the first declared remote, after url.<base>.insteadOf rewriting.

    Raises:
        NoRemoteConfiguredError: If no remote is configured.
        RemoteUrlUnavailableError: If the remote's URL cannot be looked up.
    """
    name = first_remote_name(repo)
    _rich_debug(f"Using remote {name}")

    try:
        url = repo.git.remote('get-url', name).strip()
    except CommandError as e:
        raise RemoteUrlUnavailableError(f"Could not determine URL for remote {name}") from e

    if not url:
        raise RemoteUrlUnavailableError(f"Could not determine URL for remote {name}")
    return url.splitlines()[0]
