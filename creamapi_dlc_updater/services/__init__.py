"""Service layer for business logic and external integrations."""

from .config import CreamApiConfigService, ValidationResult, validate_config
from .errors import (
    AppError,
    ConfigLoadError,
    DataError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FetchError,
    PersistError,
    UserFriendlyError,
    get_error_service,
)
from .http_client import HttpClientService
from .logging import LoggingService, setup_logging
from .matcher import match_dlc
from .steam_api import SteamApiService, parse_app_details, parse_app_list
from .updater import DlcUpdaterService

__all__ = [
    "AppError",
    "ConfigLoadError",
    "CreamApiConfigService",
    "DataError",
    "DlcUpdaterService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FetchError",
    "HttpClientService",
    "LoggingService",
    "PersistError",
    "SteamApiService",
    "UserFriendlyError",
    "ValidationResult",
    "get_error_service",
    "match_dlc",
    "parse_app_details",
    "parse_app_list",
    "setup_logging",
    "validate_config",
]
