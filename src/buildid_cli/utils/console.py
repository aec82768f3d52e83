"""Console utility functions for diagnostics.

Standard output is reserved for rendered items, so every helper here writes
to standard error.
"""

import click
from typing import Optional, Any

from colorama import Fore, Style, init
from rich.console import Console
from rich.theme import Theme

init(autoreset=True)


_console = None
_verbose = False


def set_verbose(enabled: bool) -> None:
    """Enable or disable debug output."""
    global _verbose
    _verbose = enabled


def _get_console() -> Optional[Any]:
    """Get the stderr Rich console instance with lazy loading."""
    global _console
    if _console is None:
        try:
            custom_theme = Theme({"muted": "dim white"})
            _console = Console(stderr=True, theme=custom_theme, highlight=False)
        except Exception:
            return None
    return _console


def _rich_echo(message: str, color: str = "white", bold: bool = False):
    """Echo message to stderr with Rich formatting or colorama fallback."""
    console = _get_console()
    if console:
        try:
            style_str = f"bold {color}" if bold else color
            console.print(message, style=style_str, markup=False, soft_wrap=True)
            return
        except Exception:
            pass

    # Colorama fallback
    color_map = {
        'red': Fore.RED,
        'green': Fore.GREEN,
        'yellow': Fore.YELLOW,
        'blue': Fore.BLUE,
        'cyan': Fore.CYAN,
        'white': Fore.WHITE,
        'muted': Fore.WHITE,
    }
    color_code = color_map.get(color, Fore.WHITE)
    style_code = Style.BRIGHT if bold else ""
    click.echo(f"{color_code}{style_code}{message}{Style.RESET_ALL}", err=True)


def _rich_error(message: str):
    """Display error message with red color."""
    _rich_echo(message, color="red", bold=True)


def _rich_warning(message: str):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow")


def _rich_debug(message: str):
    """Display a dimmed diagnostic message, only in verbose mode."""
    if _verbose:
        _rich_echo(f"DEBUG: {message}", color="muted")
