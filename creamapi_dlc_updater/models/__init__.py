"""Data models for the CreamAPI DLC updater."""

from .config import APP_DETAILS_URL, APP_LIST_URL, INI_FILE_NAME, LOG_FILE_NAME, UpdaterConfig
from .result import UpdateResult, UpdateStatus
from .steam import AppDetails, AppListEntry, DlcRecord

__all__ = [
    "APP_DETAILS_URL",
    "APP_LIST_URL",
    "AppDetails",
    "AppListEntry",
    "DlcRecord",
    "INI_FILE_NAME",
    "LOG_FILE_NAME",
    "UpdateResult",
    "UpdateStatus",
    "UpdaterConfig",
]
