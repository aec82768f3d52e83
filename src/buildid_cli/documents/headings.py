"""Heading extraction from changelog and readme documents.

Only the top of each document is looked at. Two heading styles compete and
the first pass that finds anything wins:

1. Setext: a text line underlined by a run of ``-`` (changelog) or ``=``
   (readme) characters.
2. ATX: a line starting with ``#`` markers.
"""

import re
from pathlib import Path
from typing import Callable, List, Optional, Pattern

from ..errors import ChangelogParseError, ReadmeParseError
from .discovery import read_head_lines

CHANGELOG_MAX_LINES = 50
README_MAX_LINES = 15

CHANGELOG_UNDERLINE = re.compile(r'^-{12,}\s*$')
README_UNDERLINE = re.compile(r'^={10,}\s*$')

# "1.2.3 - 2024-01-15", "[1.2.3] - 2024-01-15 10:20" or "v2 - 2024-01-15 10:20:30"
CHANGELOG_HEADING = re.compile(
    r'^\S+\s+-\s+\d{4}-\d{2}-\d{2}(?:\s+\d{2}:\d{2}(?::\d{2})?)?\s*$'
)
CHANGELOG_ATX = re.compile(r'^#{1,6}\s+(?P<text>.*)$')
README_ATX = re.compile(r'^#\s+(?P<text>.*)$')


def normalize_heading(text: str) -> str:
    """Collapse runs of whitespace and trim the ends."""
    return ' '.join(text.split())


def find_setext_heading(lines: List[str], underline: Pattern,
                        accept: Callable[[str], bool]) -> Optional[str]:
    """Return the first accepted line that is directly followed by an underline."""
    for text, next_line in zip(lines, lines[1:]):
        if not text.strip():
            continue
        if underline.match(next_line) and accept(text.strip()):
            return text
    return None


def find_atx_heading(lines: List[str], marker: Pattern,
                     accept: Callable[[str], bool]) -> Optional[str]:
    """Return the text of the first accepted ATX heading, marker stripped."""
    for line in lines:
        match = marker.match(line)
        if match and accept(match.group('text').strip()):
            return match.group('text')
    return None


def _is_changelog_heading(text: str) -> bool:
    return bool(CHANGELOG_HEADING.match(text))


def _is_non_blank(text: str) -> bool:
    return bool(text)


def strip_brackets(token: str) -> str:
    """Strip one layer of enclosing square brackets: ``[1.2.3]`` -> ``1.2.3``."""
    if len(token) >= 2 and token.startswith('[') and token.endswith(']'):
        return token[1:-1]
    return token


def parse_changelog_version(lines: List[str]) -> str:
    """Extract the latest version from the first lines of a changelog.

    Raises:
        ChangelogParseError: If no ``VERSION - DATE`` heading is found.
    """
    lines = lines[:CHANGELOG_MAX_LINES]
    heading = find_setext_heading(lines, CHANGELOG_UNDERLINE, _is_changelog_heading)
    if heading is None:
        heading = find_atx_heading(lines, CHANGELOG_ATX, _is_changelog_heading)
    if heading is None:
        raise ChangelogParseError("Could not find version heading in changelog")

    heading = normalize_heading(heading).replace('"', "'")
    version = strip_brackets(heading.split(' ', 1)[0])
    if not version:
        raise ChangelogParseError(f"Could not parse version from changelog heading {heading!r}")
    return version


def parse_readme_title(lines: List[str]) -> str:
    """Extract the project description (title) from the first lines of a readme.

    Raises:
        ReadmeParseError: If no title heading is found.
    """
    lines = lines[:README_MAX_LINES]
    heading = find_setext_heading(lines, README_UNDERLINE, _is_non_blank)
    if heading is None:
        heading = find_atx_heading(lines, README_ATX, _is_non_blank)
    if heading is None:
        raise ReadmeParseError("Could not find title heading in readme")
    return normalize_heading(heading)


def read_changelog_version(path: Path) -> str:
    """Read a changelog file and return its latest version."""
    try:
        return parse_changelog_version(read_head_lines(path, CHANGELOG_MAX_LINES))
    except ChangelogParseError as e:
        raise ChangelogParseError(f"{e}: {path}") from e


def read_readme_title(path: Path) -> str:
    """Read a readme file and return its title."""
    try:
        return parse_readme_title(read_head_lines(path, README_MAX_LINES))
    except ReadmeParseError as e:
        raise ReadmeParseError(f"{e}: {path}") from e
