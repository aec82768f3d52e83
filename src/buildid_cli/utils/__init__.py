"""Utility modules for build-id."""

from .console import (
    _rich_error,
    _rich_warning,
    _rich_debug,
    set_verbose,
)

__all__ = [
    '_rich_error',
    '_rich_warning',
    '_rich_debug',
    'set_verbose',
]
