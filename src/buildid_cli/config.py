"""Per-repository configuration for build-id.

An optional ``.build-id.conf`` file at the repository root can point the tool
at a changelog or readme that does not follow the usual naming::

    # comment
    CHANGELOG_FILE=doc/NEWS.md
    README_FILE="doc/Overview.md"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .utils.console import _rich_debug, _rich_warning

CONFIG_FILE = ".build-id.conf"

CHANGELOG_FILE_KEY = "CHANGELOG_FILE"
README_FILE_KEY = "README_FILE"
KNOWN_KEYS = (CHANGELOG_FILE_KEY, README_FILE_KEY)


@dataclass
class RepoConfig:
    """Settings read from the repository's config file."""
    changelog_file: Optional[str] = None
    readme_file: Optional[str] = None


def _unquote(value):
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_config_text(text, source=CONFIG_FILE):
    """Parse KEY=VALUE lines.

    Args:
        text (str): Config file content.
        source (str): Name used in warnings.

    Returns:
        dict: Mapping of keys to unquoted values, later lines winning.
    """
    values: Dict[str, str] = {}
    for line_num, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue
        if '=' not in line:
            _rich_warning(f"Ignoring malformed line {line_num} in {source}: {raw_line!r}")
            continue
        key, value = line.split('=', 1)
        key = key.strip()
        if key.startswith('export '):
            key = key[len('export '):].strip()
        if not key:
            _rich_warning(f"Ignoring malformed line {line_num} in {source}: {raw_line!r}")
            continue
        values[key] = _unquote(value.strip())
    return values


def load_repo_config(repo_root):
    """Load the config file from a repository root.

    A missing or unreadable file yields the defaults.

    Args:
        repo_root (Path): Top-level directory of the working tree.

    Returns:
        RepoConfig: Settings from the config file.
    """
    config_path = Path(repo_root) / CONFIG_FILE
    if not config_path.is_file():
        return RepoConfig()

    _rich_debug(f"Reading {config_path}")
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        _rich_warning(f"Ignoring unreadable {config_path}: {e}")
        return RepoConfig()

    values = parse_config_text(text, source=str(config_path))
    for key in values:
        if key not in KNOWN_KEYS:
            _rich_debug(f"Unknown key {key} in {config_path}")

    return RepoConfig(
        changelog_file=values.get(CHANGELOG_FILE_KEY) or None,
        readme_file=values.get(README_FILE_KEY) or None,
    )


def resolve_config_path(repo_root, value):
    """Resolve a config file path value relative to the repository root."""
    return Path(repo_root) / os.path.expanduser(value)
