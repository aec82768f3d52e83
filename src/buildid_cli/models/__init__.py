"""Models for build-id data structures."""

from .build_info import BuildInfo

__all__ = [
    "BuildInfo",
]
