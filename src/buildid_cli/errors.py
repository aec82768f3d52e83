"""Error types and exit codes for build-id.

Every failure the tool can report is a ``BuildIdError`` subclass carrying the
process exit code scripts see. Codes are part of the command-line contract and
must not be renumbered.
"""

# Exit codes
EXIT_OK = 0
EXIT_ITEM_FAILED = 1
EXIT_WRITE_ERROR = 2
EXIT_BAD_DIRECTORY = 71
EXIT_BAD_OUTPUT_FILE = 72
EXIT_BAD_PROJECT_NAME = 73
EXIT_BAD_DOCUMENT_OPTION = 74
EXIT_UNRECOGNIZED_OPTION = 79
EXIT_MISSING_ITEM = 81
EXIT_UNRECOGNIZED_ITEM = 82
EXIT_NO_REPOSITORY = 85
EXIT_EMPTY_OUTPUT = 86


class BuildIdError(Exception):
    """Base class for all build-id failures."""

    exit_code = EXIT_ITEM_FAILED


# Environment errors

class NotARepositoryError(BuildIdError):
    """Raised when the directory is not inside a Git working tree."""

    exit_code = EXIT_NO_REPOSITORY


class NoRemoteConfiguredError(BuildIdError):
    """Raised when no remote.<name>.url entry exists."""


class RemoteUrlUnavailableError(BuildIdError):
    """Raised when the first remote's URL cannot be resolved."""


class DocumentNotFoundError(BuildIdError):
    """Raised when a changelog or readme document cannot be located."""


class DocumentNotReadableError(BuildIdError):
    """Raised when a located document cannot be read."""


class DocumentEmptyError(BuildIdError):
    """Raised when a located document has no content."""


# Data errors

class HistoryUnavailableError(BuildIdError):
    """Raised when git log returns nothing for HEAD."""


class CommitParseError(BuildIdError):
    """Raised when git log output cannot be split into its fields."""


class InvalidOverrideError(BuildIdError):
    """Raised when an override environment variable holds a malformed value."""


class DateFormatError(BuildIdError):
    """Raised when the commit epoch cannot be formatted."""


class ChangelogParseError(BuildIdError):
    """Raised when no version heading is found in the changelog."""


class ReadmeParseError(BuildIdError):
    """Raised when no title heading is found in the readme."""


class EmptyOutputError(BuildIdError):
    """Raised when rendering produced an empty output file."""

    exit_code = EXIT_EMPTY_OUTPUT


# I/O errors

class WriteError(BuildIdError):
    """Raised when the output file cannot be compared or replaced."""

    exit_code = EXIT_WRITE_ERROR
