"""Write-if-changed output files.

Build systems rebuild whatever depends on a file whose mtime moved, so the
target is only replaced when the rendered bytes actually differ.
"""

import filecmp
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, TextIO, Union

from ..errors import EmptyOutputError, WriteError
from ..utils.console import _rich_debug, _rich_error

NEW_SUFFIX = ".new.tmp"
BACKUP_SUFFIX = ".bak.tmp"


def _remove_quietly(path: Union[str, Path]) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _apply_target_mode(tmp_path: str, target: Path) -> None:
    """Give the temp file the permissions the target has, or would get."""
    if target.exists():
        shutil.copymode(target, tmp_path)
    else:
        os.chmod(tmp_path, 0o666 & ~_current_umask())


def _replace_with_backup(tmp_path: str, target: Path) -> None:
    """Swap a file in through a backup, restoring the backup on failure.

    The backup is only removed once the target is in place again. If the
    restore fails too, the backup stays and its path is reported.
    """
    fd, backup_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=BACKUP_SUFFIX,
                                       dir=str(target.parent))
    os.close(fd)
    try:
        shutil.move(str(target), backup_path)
    except OSError:
        _remove_quietly(backup_path)
        raise

    try:
        shutil.move(tmp_path, str(target))
    except OSError:
        try:
            shutil.move(backup_path, str(target))
        except OSError:
            _rich_error(f"Could not restore {target}, previous content kept in {backup_path}")
            raise
        raise
    _remove_quietly(backup_path)


def replace_if_changed(tmp_path: str, target: Path) -> bool:
    """Move ``tmp_path`` over ``target`` unless both hold the same bytes.

    Returns:
        bool: True if the target was created or replaced.

    Raises:
        WriteError: If the files cannot be compared or the target replaced.
    """
    try:
        if not target.exists():
            os.replace(tmp_path, target)
            _rich_debug(f"Created {target}")
            return True

        if filecmp.cmp(str(target), tmp_path, shallow=False):
            _remove_quietly(tmp_path)
            _rich_debug(f"{target} is up to date")
            return False

        try:
            os.replace(tmp_path, target)
        except OSError as e:
            _rich_debug(f"Atomic rename failed ({e}), replacing {target} through a backup")
            _replace_with_backup(tmp_path, target)
        _rich_debug(f"Updated {target}")
        return True
    except OSError as e:
        _remove_quietly(tmp_path)
        raise WriteError(f"Error when comparing \"{target}\" and \"{tmp_path}\": {e}") from e


def write_if_changed(target: Union[str, Path], render: Callable[[TextIO], int]) -> int:
    """Render into a temp file next to ``target`` and install it if it changed.

    Args:
        target: Output file path.
        render: Callable writing the content to the given text stream and
            returning an exit status.

    Returns:
        int: The status returned by ``render``.

    Raises:
        EmptyOutputError: If nothing was rendered. The target is left alone.
        WriteError: If the target cannot be compared or replaced.
    """
    target = Path(target)
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=NEW_SUFFIX,
                                        dir=str(target.parent))
    except OSError as e:
        raise WriteError(f"Could not create temporary file for {target}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            status = render(fh)

        if os.path.getsize(tmp_path) == 0:
            raise EmptyOutputError(f"Generated empty file for {target}")

        _apply_target_mode(tmp_path, target)
    except OSError as e:
        _remove_quietly(tmp_path)
        raise WriteError(f"Could not write {target}: {e}") from e
    except BaseException:
        _remove_quietly(tmp_path)
        raise

    replace_if_changed(tmp_path, target)
    return status
