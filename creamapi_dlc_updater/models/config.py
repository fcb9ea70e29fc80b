"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path

APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"
APP_LIST_URL = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"

INI_FILE_NAME = "cream_api.ini"
LOG_FILE_NAME = "creamapi-dlc-updater.log"


@dataclass(frozen=True)
class UpdaterConfig:
    """Settings for a single updater run."""
    ini_path: Path
    log_path: Path
    log_level: str = "INFO"
    timeout: float = 15.0
    app_details_url: str = APP_DETAILS_URL
    app_list_url: str = APP_LIST_URL
