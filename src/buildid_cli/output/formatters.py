"""Renderers for each output item.

Every renderer takes a ``BuildInfo`` and returns the item's text. Renderers
only ask the record for the fields they print, so e.g. ``repo-url`` never
runs git log and ``c-header-u-boot-1-2-timestamp`` never opens the changelog.
"""

from typing import Callable, Dict, List, TextIO, Tuple

from ..errors import BuildIdError, EXIT_OK
from ..models.build_info import BuildInfo
from ..utils.console import _rich_error
from .models import Item, PRINT_ALL_BANNER

ItemRenderer = Callable[[BuildInfo], str]

GENERATED_NOTICE = "/* Generated file, do not edit */"


def _quote(value: str) -> str:
    """Double-quote a value for a shell-style KEY="VALUE" line.

    Double quotes become apostrophes. Backslash, ``$`` and backtick are
    escaped so sourcing the block never expands anything.
    """
    value = value.replace('"', "'")
    for char in ('\\', '$', '`'):
        value = value.replace(char, '\\' + char)
    return '"' + value + '"'


def _c_string(value: str) -> str:
    """Render a value as a C string literal."""
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _c_header_preamble(item: Item) -> List[str]:
    return [
        GENERATED_NOTICE,
        f"/* Generated with build-id {item.value} */",
        "",
    ]


def _build_info_lines(info: BuildInfo) -> List[Tuple[str, str]]:
    commit = info.get_commit()
    dates = info.get_dates()
    return [
        ("PROJECT_NAME", _quote(info.project_name)),
        ("VERSION_STR", _quote(info.get_version_str())),
        ("COMMIT_ID", _quote(commit.commit_full)),
        ("COMMIT_ID_ABBREV", _quote(commit.commit_abbrev)),
        ("DATE_EPOCH", str(commit.epoch)),
        ("DATE_STR", _quote(dates.date_str)),
        ("DATE_SAFE_STR", _quote(dates.date_safe_str)),
        ("BUILD_NUMBER", _quote(info.build_number)),
    ]


def _format_key_values(prefix: str, pairs: List[Tuple[str, str]]) -> str:
    return "".join(f"{prefix}_{key}={value}\n" for key, value in pairs)


def render_build_info(info: BuildInfo) -> str:
    """Full KEY=VALUE block, including remote URL, committer and subject."""
    pairs = _build_info_lines(info)
    commit = info.get_commit()
    pairs += [
        ("REPO_URL", _quote(info.get_repo_url())),
        ("COMMITTER_NAME", _quote(commit.committer_name)),
        ("COMMIT_SUBJECT", _quote(commit.subject)),
    ]
    return _format_key_values(info.project_prefix, pairs)


def render_build_info_brief(info: BuildInfo) -> str:
    """KEY=VALUE block without remote URL, committer and subject."""
    return _format_key_values(info.project_prefix, _build_info_lines(info))


def render_c_header(info: BuildInfo) -> str:
    commit = info.get_commit()
    dates = info.get_dates()
    version = info.get_optional_version_str()

    lines = _c_header_preamble(Item.C_HEADER)
    lines += [
        f"#define _BUILD_DATE_NUM_\t\t{commit.epoch}",
        f"#define _BUILD_DATE_STR_\t\t{_c_string(dates.date_str)}",
        f"#define _BUILD_DATE_SAFE_STR_\t\t{_c_string(dates.date_safe_str)}",
        f"#define _BUILD_DATE_C_DATE_STR_\t\t{_c_string(dates.date_c_date_str)}",
        f"#define _BUILD_COMMIT_ID_\t\t{_c_string(commit.commit_abbrev)}",
    ]
    if version is not None:
        lines.append(f"#define _BUILD_VERSION_STR_\t\t{_c_string(version)}")
    return "\n".join(lines) + "\n"


def render_c_header_u_boot(info: BuildInfo) -> str:
    """U-Boot 1.2 style timestamp header (U_BOOT_DATE / U_BOOT_TIME)."""
    dates = info.get_dates()
    lines = _c_header_preamble(Item.C_HEADER_U_BOOT_1_2_TIMESTAMP)
    lines += [
        f"#define U_BOOT_DATE\t\t\t{_c_string(dates.date_c_date_str)}",
        f"#define U_BOOT_TIME\t\t\t{_c_string(dates.date_c_time_str)}",
    ]
    return "\n".join(lines) + "\n"


def render_commit_id(info: BuildInfo) -> str:
    return info.get_commit().commit_full + "\n"


def render_commit_id_abbrev(info: BuildInfo) -> str:
    return info.get_commit().commit_abbrev + "\n"


def render_date_epoch(info: BuildInfo) -> str:
    return f"{info.get_commit().epoch}\n"


def render_date_safe_str(info: BuildInfo) -> str:
    return info.get_dates().date_safe_str + "\n"


def render_date_str(info: BuildInfo) -> str:
    return info.get_dates().date_str + "\n"


def render_project_desc(info: BuildInfo) -> str:
    return info.get_project_desc() + "\n"


def render_repo_url(info: BuildInfo) -> str:
    return info.get_repo_url() + "\n"


def render_version_str(info: BuildInfo) -> str:
    return info.get_version_str() + "\n"


ITEM_RENDERERS: Dict[Item, ItemRenderer] = {
    Item.BUILD_INFO: render_build_info,
    Item.BUILD_INFO_BRIEF: render_build_info_brief,
    Item.C_HEADER: render_c_header,
    Item.C_HEADER_U_BOOT_1_2_TIMESTAMP: render_c_header_u_boot,
    Item.COMMIT_ID: render_commit_id,
    Item.COMMIT_ID_ABBREV: render_commit_id_abbrev,
    Item.DATE_EPOCH: render_date_epoch,
    Item.DATE_SAFE_STR: render_date_safe_str,
    Item.DATE_STR: render_date_str,
    Item.PROJECT_DESC: render_project_desc,
    Item.REPO_URL: render_repo_url,
    Item.VERSION_STR: render_version_str,
}


def print_all(info: BuildInfo, out: TextIO) -> int:
    """Print every item in sorted order, each followed by its status.

    A failing item is reported on stderr and the run goes on with the next
    one. The returned status is that of the last item that failed, or 0.
    """
    status = EXIT_OK
    for name in Item.names():
        item = Item(name)
        if item is Item.PRINT_ALL:
            continue

        out.write(PRINT_ALL_BANNER.format(item=name) + "\n")
        try:
            out.write(ITEM_RENDERERS[item](info))
            item_status = EXIT_OK
        except BuildIdError as e:
            _rich_error(f"Error: {e}")
            item_status = e.exit_code
        out.write(f"[{item_status}]\n")

        if item_status != EXIT_OK:
            status = item_status
    return status


def emit_item(item: Item, info: BuildInfo, out: TextIO) -> int:
    """Write one item to ``out``.

    Returns:
        int: Exit status; only print-all reports failures this way, every
        other item raises its BuildIdError.
    """
    if item is Item.PRINT_ALL:
        return print_all(info, out)
    out.write(ITEM_RENDERERS[item](info))
    return EXIT_OK
