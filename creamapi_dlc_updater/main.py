"""Main entry point for the CreamAPI DLC updater.

This module provides the application entry point with:
- Command-line argument parsing
- Resolution of the INI and log paths beside the executable
- Service wiring and process exit codes
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog

from creamapi_dlc_updater import __version__
from creamapi_dlc_updater.models import INI_FILE_NAME, LOG_FILE_NAME, UpdateResult, UpdaterConfig
from creamapi_dlc_updater.services.config import CreamApiConfigService, validate_config
from creamapi_dlc_updater.services.errors import ConfigLoadError, get_error_service
from creamapi_dlc_updater.services.http_client import HttpClientService
from creamapi_dlc_updater.services.logging import setup_logging
from creamapi_dlc_updater.services.steam_api import SteamApiService
from creamapi_dlc_updater.services.updater import DlcUpdaterService


log = structlog.stdlib.get_logger()


def get_executable_dir() -> Path:
    """Directory holding the running executable.

    For a frozen build this is the directory of the bundled executable,
    otherwise the directory of the launched script.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(sys.argv[0]).resolve().parent


class ApplicationContext:
    """Container for the run settings and the services built from them."""

    def __init__(self, config: UpdaterConfig) -> None:
        self.config = config
        self._config_service: CreamApiConfigService | None = None

    @property
    def config_service(self) -> CreamApiConfigService:
        """Get the INI config service (lazy initialization)."""
        if self._config_service is None:
            self._config_service = CreamApiConfigService(self.config.ini_path)
        return self._config_service

    def create_http_client(self) -> HttpClientService:
        """Create an HTTP client scoped to one run."""
        return HttpClientService(timeout=self.config.timeout)

    async def run_update(self) -> UpdateResult:
        """Run the updater with a client that is closed when the run ends."""
        async with self.create_http_client() as http_client:
            steam_api = SteamApiService(
                http_client,
                app_details_url=self.config.app_details_url,
                app_list_url=self.config.app_list_url,
            )
            updater = DlcUpdaterService(self.config_service, steam_api)
            return await updater.run()


def parse_arguments(argv: Sequence[str] | None = None) -> UpdaterConfig:
    """Parse command-line arguments into run settings.

    Args:
        argv: Argument list (defaults to ``sys.argv[1:]``)

    Returns:
        The resolved run settings
    """
    parser = argparse.ArgumentParser(
        prog="creamapi-dlc-updater",
        description="Fill the [dlc] section of cream_api.ini with the DLCs Steam lists for [steam] appid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  creamapi-dlc-updater                          Update cream_api.ini next to the executable
  creamapi-dlc-updater --config ./cream_api.ini Update a specific INI file
  creamapi-dlc-updater --log-level DEBUG        Log request details
        """
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the CreamAPI INI file (default: {INI_FILE_NAME} beside the executable)"
    )

    _ = parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help=f"Path to the log file, truncated each run (default: {LOG_FILE_NAME} beside the executable)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)"
    )

    _ = parser.add_argument(
        "--timeout",
        type=float,
        default=15.0,
        help="Timeout for each Steam request in seconds (default: 15)"
    )

    ns = parser.parse_args(argv)

    base_dir = get_executable_dir()
    ini_path: Path = ns.config if ns.config is not None else base_dir / INI_FILE_NAME
    log_path: Path = ns.log_file if ns.log_file is not None else base_dir / LOG_FILE_NAME

    return UpdaterConfig(
        ini_path=ini_path,
        log_path=log_path,
        log_level=ns.log_level,
        timeout=ns.timeout,
    )


def run(config: UpdaterConfig) -> int:
    """Run the updater and translate the outcome into an exit code.

    Returns:
        0 on success (including an app without DLC), 1 on any error, 130 on interrupt
    """
    error_service = get_error_service()

    try:
        validation = validate_config(config)
        if not validation.is_valid:
            raise ConfigLoadError(
                f"Invalid settings: {'; '.join(validation.errors)}",
                path=str(config.ini_path),
            )

        context = ApplicationContext(config)
        result = asyncio.run(context.run_update())

    except KeyboardInterrupt:
        log.warning("Interrupted by user")
        return 130

    except Exception as e:
        friendly = error_service.handle_error(
            e,
            operation="update_dlc",
            component="main",
            context={"path": str(config.ini_path)},
        )
        print(error_service.create_user_message(friendly), file=sys.stderr)
        return 1

    log.info(
        "Process finished successfully",
        status=result.status.value,
        appid=result.app_id,
        dlc_written=len(result.records),
    )
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the application."""
    config = parse_arguments(argv)

    try:
        logging_service = setup_logging(log_level=config.log_level, log_file=config.log_path)
    except OSError as e:
        print(f"Fatal error: failed to open log file {config.log_path}: {e}", file=sys.stderr)
        sys.exit(1)

    log.info("Starting CreamAPI DLC updater", version=__version__, ini_path=str(config.ini_path))

    try:
        exit_code = run(config)
    finally:
        logging_service.close()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
