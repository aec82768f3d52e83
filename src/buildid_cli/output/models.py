"""Output item definitions."""

from enum import Enum
from typing import List


class Item(Enum):
    """Items build-id can print. Values are the command-line names."""
    BUILD_INFO = "build-info"
    BUILD_INFO_BRIEF = "build-info-brief"
    C_HEADER = "c-header"
    C_HEADER_U_BOOT_1_2_TIMESTAMP = "c-header-u-boot-1-2-timestamp"
    COMMIT_ID = "commit-id"
    COMMIT_ID_ABBREV = "commit-id-abbrev"
    DATE_EPOCH = "date-epoch"
    DATE_SAFE_STR = "date-safe-str"
    DATE_STR = "date-str"
    PRINT_ALL = "print-all"
    PROJECT_DESC = "project-desc"
    REPO_URL = "repo-url"
    VERSION_STR = "version-str"

    @classmethod
    def names(cls) -> List[str]:
        """Command-line names in byte-wise sorted order."""
        return sorted(item.value for item in cls)


PRINT_ALL_BANNER = "######## {item} ################################"
