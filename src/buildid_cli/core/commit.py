"""Commit metadata for HEAD, with overrides for reproducible builds."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

from git import Repo
from git.exc import CommandError

from ..errors import CommitParseError, HistoryUnavailableError, InvalidOverrideError
from ..utils.console import _rich_debug

SOURCE_DATE_EPOCH_VAR = 'SOURCE_DATE_EPOCH'
SOURCE_COMMIT_ID_VAR = 'SOURCE_X_GIT_COMMIT_ID'

# Used instead of the real committer and subject when the commit ID is overridden
PLACEHOLDER_COMMITTER_NAME = 'John Doe'
PLACEHOLDER_COMMIT_SUBJECT = 'Initial commit'

ABBREV_LENGTH = 12

_FIELD_SEPARATOR = '\x1f'
_LOG_FORMAT = 'tformat:%H%x1f%ct%x1f%cn%x1f%s'
_FULL_COMMIT_ID = re.compile(r'^[0-9a-fA-F]{40}$')
_ABBREV_COMMIT_ID = re.compile(r'^[0-9a-fA-F]{%d}' % ABBREV_LENGTH)
_EPOCH = re.compile(r'^\s*[+-]?\d+\s*$')


@dataclass(frozen=True)
class CommitMetadata:
    """Identity and date of the commit a build is made from."""
    commit_full: str
    commit_abbrev: str
    epoch: int
    committer_name: str
    subject: str


def sanitize_quotes(value: str) -> str:
    """Replace double quotes so the value can sit inside a quoted string."""
    return value.replace('"', "'")


def abbreviate_commit_id(commit_full: str) -> str:
    """First 12 hex characters of a commit ID.

    Raises:
        CommitParseError: If the ID has fewer than 12 leading hex characters.
    """
    match = _ABBREV_COMMIT_ID.match(commit_full)
    if not match:
        raise CommitParseError(f"Could not parse abbreviated commit ID from {commit_full!r}")
    return match.group(0)


def parse_epoch_override(value: str) -> int:
    """Validate a SOURCE_DATE_EPOCH value and return it in canonical form.

    The value is converted to a UTC datetime and back, so anything that does
    not survive a round trip is rejected.
    """
    if not _EPOCH.match(value):
        raise InvalidOverrideError(f"Invalid {SOURCE_DATE_EPOCH_VAR} value: {value!r}")
    try:
        moment = datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidOverrideError(f"Invalid {SOURCE_DATE_EPOCH_VAR} value: {value!r}") from e
    return int(moment.timestamp())


def parse_commit_id_override(value: str) -> str:
    """Validate a SOURCE_X_GIT_COMMIT_ID value (exactly 40 hex characters)."""
    if not _FULL_COMMIT_ID.match(value):
        raise InvalidOverrideError(f"Invalid {SOURCE_COMMIT_ID_VAR} value: {value!r}")
    return value


def parse_log_line(output: str) -> CommitMetadata:
    """Split the output of the git log query into commit metadata."""
    line = output.strip('\r\n')
    if not line.strip():
        raise HistoryUnavailableError("Could not run git log command (no output)")

    fields = line.split(_FIELD_SEPARATOR, 3)
    if len(fields) != 4:
        raise CommitParseError(f"Could not parse output of git log command: {line!r}")

    commit_full, epoch_str, committer_name, subject = fields
    commit_full = commit_full.strip()
    if not commit_full or not _EPOCH.match(epoch_str):
        raise CommitParseError(f"Could not parse output of git log command: {line!r}")

    return CommitMetadata(
        commit_full=commit_full,
        commit_abbrev=abbreviate_commit_id(commit_full),
        epoch=int(epoch_str),
        committer_name=sanitize_quotes(committer_name),
        subject=sanitize_quotes(subject),
    )


def query_head(repo: Repo) -> str:
    """Run the single git log query for HEAD and return its raw output."""
    try:
        return repo.git.log('-1', f'--format={_LOG_FORMAT}', 'HEAD')
    except CommandError as e:
        raise HistoryUnavailableError(
            f"Could not run git log command: {e.stderr.strip() if e.stderr else e}"
        ) from e


def fetch_commit_metadata(repo: Repo, environ: Mapping[str, str]) -> CommitMetadata:
    """Fetch HEAD's commit ID, committer date, committer name and subject.

    All four fields come from one git log call so they always describe the
    same commit. Overrides from ``environ`` are applied afterwards.

    Args:
        repo: Repository to query.
        environ: Environment holding the optional override variables.

    Returns:
        CommitMetadata: Metadata of HEAD after overrides.

    Raises:
        HistoryUnavailableError: If git log produces nothing.
        CommitParseError: If the output cannot be split.
        InvalidOverrideError: If an override variable is malformed.
    """
    metadata = parse_log_line(query_head(repo))
    _rich_debug(f"HEAD is {metadata.commit_full} at {metadata.epoch}")

    epoch = metadata.epoch
    date_override = environ.get(SOURCE_DATE_EPOCH_VAR)
    if date_override:
        epoch = parse_epoch_override(date_override)
        _rich_debug(f"{SOURCE_DATE_EPOCH_VAR} overrides commit date with {epoch}")

    commit_override = environ.get(SOURCE_COMMIT_ID_VAR)
    if commit_override:
        commit_full = parse_commit_id_override(commit_override)
        _rich_debug(f"{SOURCE_COMMIT_ID_VAR} overrides commit ID with {commit_full}")
        return CommitMetadata(
            commit_full=commit_full,
            commit_abbrev=abbreviate_commit_id(commit_full),
            epoch=epoch,
            committer_name=PLACEHOLDER_COMMITTER_NAME,
            subject=PLACEHOLDER_COMMIT_SUBJECT,
        )

    return CommitMetadata(
        commit_full=metadata.commit_full,
        commit_abbrev=metadata.commit_abbrev,
        epoch=epoch,
        committer_name=metadata.committer_name,
        subject=metadata.subject,
    )
