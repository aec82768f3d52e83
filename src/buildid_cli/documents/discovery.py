"""Locating the changelog and readme documents of a repository."""

import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from ..config import RepoConfig, resolve_config_path
from ..errors import DocumentEmptyError, DocumentNotFoundError, DocumentNotReadableError
from ..utils.console import _rich_debug


class DocumentKind(Enum):
    """Documents build-id knows how to read."""
    CHANGELOG = "changelog"
    README = "readme"

    @property
    def candidate_names(self) -> List[str]:
        """Lowercase file names accepted by the directory scan."""
        return [f"{self.value}.md", self.value]


def _config_value(kind: DocumentKind, config: Optional[RepoConfig]) -> Optional[str]:
    if config is None:
        return None
    if kind is DocumentKind.CHANGELOG:
        return config.changelog_file
    return config.readme_file


def scan_for_document(directory: Path, kind: DocumentKind) -> Optional[Path]:
    """Find a document in a directory by case-insensitive name.

    When several case variants exist (README.md and readme.md), the first
    one in plain sorted order wins so the choice is stable across runs.
    """
    try:
        entries = sorted(os.listdir(directory))
    except OSError:
        return None

    candidates = kind.candidate_names
    for name in entries:
        if name.lower() in candidates and (directory / name).is_file():
            return directory / name
    return None


def check_document(path: Path) -> Path:
    """Check that a document exists, is readable and is not empty.

    Raises:
        DocumentNotFoundError: If the path is missing or not a file.
        DocumentNotReadableError: If the file cannot be opened for reading.
        DocumentEmptyError: If the file has no content.
    """
    if not path.is_file():
        raise DocumentNotFoundError(f"File not found: {path}")
    if not os.access(path, os.R_OK):
        raise DocumentNotReadableError(f"File not readable: {path}")
    if path.stat().st_size == 0:
        raise DocumentEmptyError(f"File is empty: {path}")
    return path


def find_document(kind: DocumentKind, repo_root: Union[str, Path],
                  override: Optional[Union[str, Path]] = None,
                  config: Optional[RepoConfig] = None) -> Path:
    """Locate a changelog or readme.

    Lookup order: explicit override, config file setting, then a scan of the
    repository root.

    Args:
        kind: Which document to look for.
        repo_root: Top-level directory of the working tree.
        override: Path given on the command line, if any.
        config: Repository config, if loaded.

    Returns:
        Path: The document to read.

    Raises:
        DocumentNotFoundError: If no document can be located.
        DocumentNotReadableError: If the located document cannot be read.
        DocumentEmptyError: If the located document is empty.
    """
    repo_root = Path(repo_root)

    if override:
        _rich_debug(f"Using {kind.value} from command line: {override}")
        return check_document(Path(override))

    configured = _config_value(kind, config)
    if configured:
        path = resolve_config_path(repo_root, configured)
        _rich_debug(f"Using {kind.value} from config file: {path}")
        return check_document(path)

    path = scan_for_document(repo_root, kind)
    if path is None:
        raise DocumentNotFoundError(f"Could not find {kind.value} file in {repo_root}")
    _rich_debug(f"Found {kind.value}: {path}")
    return check_document(path)


def read_head_lines(path: Path, max_lines: int) -> List[str]:
    """Read at most ``max_lines`` lines from a document, without line endings."""
    lines = []
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            for line in f:
                lines.append(line.rstrip('\r\n'))
                if len(lines) >= max_lines:
                    break
    except OSError as e:
        raise DocumentNotReadableError(f"File not readable: {path}: {e}") from e
    return lines
