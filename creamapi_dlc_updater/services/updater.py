"""DLC updater service: one pass from INI appid to a rebuilt [dlc] section."""

import structlog

from ..models import UpdateResult, UpdateStatus
from .config import CreamApiConfigService
from .matcher import match_dlc
from .steam_api import SteamApiService

log = structlog.stdlib.get_logger()


class DlcUpdaterService:
    """Runs the updater flow.

    Init -> FetchDetails -> (no DLC: done) | FetchAppList -> Match -> Write -> Done

    Nothing is retried. Any ``AppError`` raised along the way propagates to the
    caller, and the INI file on disk is only touched by the final save.
    """

    def __init__(
        self,
        config_service: CreamApiConfigService,
        steam_api: SteamApiService,
    ) -> None:
        self.config_service = config_service
        self.steam_api = steam_api

    async def run(self) -> UpdateResult:
        """Execute one update.

        Returns:
            The outcome, with the records written to the INI file

        Raises:
            ConfigLoadError: If the INI file or its appid cannot be read
            FetchError: If a Steam request fails
            DataError: If a Steam response is malformed or unsuccessful
            PersistError: If the INI file cannot be written
        """
        log.info("INI path", path=str(self.config_service.ini_path))
        self.config_service.load()
        app_id = self.config_service.get_app_id()
        log.info("Read appid", appid=app_id)

        dlc_ids = await self.steam_api.fetch_dlc_ids(app_id)
        if not dlc_ids:
            log.warning("No DLCs found for this appid", appid=app_id)
            return UpdateResult(status=UpdateStatus.NO_DLC, app_id=app_id)
        log.info("Found DLC appids", count=len(dlc_ids))

        apps = await self.steam_api.fetch_app_list()
        records = match_dlc(dlc_ids, apps)

        log.info("Writing DLC section to INI", records=len(records))
        self.config_service.replace_dlc_section(records)
        for record in records:
            log.info("DLC written", dlc_id=record.id, name=record.name)

        self.config_service.save()
        return UpdateResult(status=UpdateStatus.UPDATED, app_id=app_id, records=records)
