"""Output rendering and file writing for build-id."""

from .models import Item
from .formatters import ITEM_RENDERERS, emit_item, print_all
from .writer import write_if_changed

__all__ = [
    'Item',
    'ITEM_RENDERERS',
    'emit_item',
    'print_all',
    'write_if_changed',
]
