"""Formatting of the commit date in the fixed build-date representations."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..errors import DateFormatError

# Locale-independent, as in the C library's "C" locale
_MONTH_ABBREVIATIONS = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

DATE_STR_FORMAT = '%Y-%m-%d %H:%M:%S %z'
DATE_SAFE_STR_FORMAT = '%Y%m%d-%H%M%S'
DATE_C_TIME_STR_FORMAT = '%H:%M:%S'


@dataclass(frozen=True)
class DateStrings:
    """The commit date rendered four ways, all in UTC."""
    date_str: str          # 2024-01-15 10:20:30 +0000
    date_safe_str: str     # 20240115-102030
    date_c_date_str: str   # Jan 15 2024
    date_c_time_str: str   # 10:20:30


def format_commit_dates(epoch: Optional[int]) -> DateStrings:
    """Format a Unix epoch into the four build-date strings.

    Raises:
        DateFormatError: If there is no epoch or it is out of range.
    """
    if epoch is None:
        raise DateFormatError("Could not format date - no date to format")

    try:
        moment = datetime.fromtimestamp(int(epoch), tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError) as e:
        raise DateFormatError(f"Could not format date {epoch!r}: {e}") from e

    month = _MONTH_ABBREVIATIONS[moment.month - 1]
    return DateStrings(
        date_str=moment.strftime(DATE_STR_FORMAT),
        date_safe_str=moment.strftime(DATE_SAFE_STR_FORMAT),
        date_c_date_str=f"{month} {moment.day:02d} {moment.year:04d}",
        date_c_time_str=moment.strftime(DATE_C_TIME_STR_FORMAT),
    )
