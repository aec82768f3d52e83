"""Changelog and readme handling for build-id."""

from .discovery import DocumentKind, find_document, read_head_lines
from .headings import (
    parse_changelog_version,
    parse_readme_title,
    read_changelog_version,
    read_readme_title,
)

__all__ = [
    'DocumentKind',
    'find_document',
    'read_head_lines',
    'parse_changelog_version',
    'parse_readme_title',
    'read_changelog_version',
    'read_readme_title',
]
