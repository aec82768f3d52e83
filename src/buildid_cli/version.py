"""Version management for build-id."""

import re
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "build-id"


def get_version() -> str:
    """
    Get the current version.

    First asks the installed distribution metadata, then falls back to
    parsing pyproject.toml for source checkouts.

    Returns:
        str: Version string
    """
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        # Simple regex parsing instead of full TOML library
        with open(pyproject_path, 'r', encoding='utf-8') as f:
            content = f.read()
        match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
        if match:
            return match.group(1)

    return "unknown"
