"""The BuildInfo record shared by all output items."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from git import Repo

from ..config import RepoConfig, load_repo_config
from ..core.commit import CommitMetadata, fetch_commit_metadata
from ..core.dates import DateStrings, format_commit_dates
from ..core.repository import derive_project_prefix, locate_repository, repository_root, resolve_remote_url
from ..documents.discovery import DocumentKind, find_document
from ..documents.headings import read_changelog_version, read_readme_title
from ..errors import DocumentNotFoundError

VERSION_OVERRIDE_VAR = 'SOURCE_X_VERSION_STR'
BUILD_NUMBER_VAR = 'BUILD_NUMBER'
BUILD_NUMBER_PLACEHOLDER = '0'


@dataclass
class BuildInfo:
    """Build metadata for one repository, filled in lazily.

    Each ``get_*`` method computes its field on first use and returns the
    cached value afterwards. A failing fetch leaves the field unset and
    raises, so a half-filled value is never rendered.
    """
    repo: Repo = field(repr=False)
    repo_root: Path
    project_name: str
    project_prefix: str
    environ: Mapping[str, str] = field(default_factory=dict, repr=False)
    config: RepoConfig = field(default_factory=RepoConfig)
    changelog_override: Optional[Path] = None
    readme_override: Optional[Path] = None

    commit: Optional[CommitMetadata] = None
    dates: Optional[DateStrings] = None
    repo_url: Optional[str] = None
    version_str: Optional[str] = None
    project_desc: Optional[str] = None

    @classmethod
    def from_directory(cls, directory: Union[str, Path] = ".",
                       project_name: Optional[str] = None,
                       changelog: Optional[Union[str, Path]] = None,
                       readme: Optional[Union[str, Path]] = None,
                       environ: Optional[Mapping[str, str]] = None) -> "BuildInfo":
        """Create a record for the working tree enclosing ``directory``.

        Raises:
            NotARepositoryError: If ``directory`` is not inside a working tree.
        """
        repo = locate_repository(directory)
        root = repository_root(repo)
        name = project_name or root.name
        return cls(
            repo=repo,
            repo_root=root,
            project_name=name,
            project_prefix=derive_project_prefix(name),
            environ=os.environ if environ is None else environ,
            config=load_repo_config(root),
            changelog_override=Path(changelog) if changelog else None,
            readme_override=Path(readme) if readme else None,
        )

    @property
    def build_number(self) -> str:
        return self.environ.get(BUILD_NUMBER_VAR) or BUILD_NUMBER_PLACEHOLDER

    def get_commit(self) -> CommitMetadata:
        if self.commit is None:
            self.commit = fetch_commit_metadata(self.repo, self.environ)
        return self.commit

    def get_dates(self) -> DateStrings:
        if self.dates is None:
            self.dates = format_commit_dates(self.get_commit().epoch)
        return self.dates

    def get_repo_url(self) -> str:
        if self.repo_url is None:
            self.repo_url = resolve_remote_url(self.repo)
        return self.repo_url

    def get_version_str(self) -> str:
        """Version from SOURCE_X_VERSION_STR or the changelog's latest heading."""
        if self.version_str is None:
            override = self.environ.get(VERSION_OVERRIDE_VAR)
            if override:
                self.version_str = override
            else:
                path = find_document(DocumentKind.CHANGELOG, self.repo_root,
                                     self.changelog_override, self.config)
                self.version_str = read_changelog_version(path)
        return self.version_str

    def get_optional_version_str(self) -> Optional[str]:
        """Like get_version_str, but None when the project has no changelog.

        Only a changelog missing from the root scan counts as absent. One named
        with an option or in the config file must exist.
        """
        try:
            return self.get_version_str()
        except DocumentNotFoundError:
            if self.changelog_override is not None or self.config.changelog_file:
                raise
            return None

    def get_project_desc(self) -> str:
        if self.project_desc is None:
            path = find_document(DocumentKind.README, self.repo_root,
                                 self.readme_override, self.config)
            self.project_desc = read_readme_title(path)
        return self.project_desc
