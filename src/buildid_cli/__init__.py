"""build-id: print build information for a project under Git."""

from .errors import BuildIdError
from .models import BuildInfo
from .output import Item, emit_item, write_if_changed

__all__ = [
    "BuildIdError",
    "BuildInfo",
    "Item",
    "emit_item",
    "write_if_changed",
]
