"""Git-backed data collection for build-id."""

from .repository import locate_repository, repository_root, derive_project_prefix, resolve_remote_url
from .commit import CommitMetadata, fetch_commit_metadata
from .dates import DateStrings, format_commit_dates

__all__ = [
    'locate_repository',
    'repository_root',
    'derive_project_prefix',
    'resolve_remote_url',
    'CommitMetadata',
    'fetch_commit_metadata',
    'DateStrings',
    'format_commit_dates',
]
