"""Steam Web API service for DLC ids and the global app catalog."""

from typing import Any

import structlog

from ..models import APP_DETAILS_URL, APP_LIST_URL, AppDetails, AppListEntry
from .errors import DataError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_app_details(payload: Any, app_id: str, url: str | None = None) -> AppDetails:
    """Decode an appdetails response for a single app id.

    The response maps the requested app id to ``{"success": bool, "data": {"dlc": [int]}}``.
    A successful entry without ``data`` or ``dlc`` is treated as an app with no DLC.

    Raises:
        DataError: If the id is missing, the request was unsuccessful, or the shape is wrong
    """
    if not isinstance(payload, dict):
        raise DataError(f"Expected a JSON object from appdetails, got {type(payload).__name__}", url=url)

    entry = payload.get(app_id)
    if not isinstance(entry, dict):
        raise DataError(f"Appdetails response has no entry for appid {app_id}", url=url)

    if entry.get("success") is not True:
        raise DataError(f"Appdetails request for appid {app_id} was not successful", url=url)

    data = entry.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DataError("Appdetails 'data' is not an object", url=url)

    dlc = data.get("dlc")
    if dlc is None:
        dlc = []
    if not isinstance(dlc, list) or not all(_is_int(dlc_id) for dlc_id in dlc):
        raise DataError("Appdetails 'dlc' is not a list of integers", url=url)

    return AppDetails(app_id=app_id, success=True, dlc=list(dlc))


def parse_app_list(payload: Any, url: str | None = None) -> list[AppListEntry]:
    """Decode a GetAppList v2 response into catalog entries.

    Raises:
        DataError: If ``applist.apps`` is missing or an entry is malformed
    """
    applist = payload.get("applist") if isinstance(payload, dict) else None
    apps = applist.get("apps") if isinstance(applist, dict) else None
    if not isinstance(apps, list):
        raise DataError("App list response has no 'applist.apps' list", url=url)

    entries: list[AppListEntry] = []
    for app in apps:
        if not isinstance(app, dict) or not _is_int(app.get("appid")):
            raise DataError(f"Malformed app list entry: {str(app)[:100]}", url=url)
        name = app.get("name", "")
        if not isinstance(name, str):
            raise DataError(f"App list entry {app['appid']} has a non-string name", url=url)
        entries.append(AppListEntry(appid=app["appid"], name=name))

    return entries


class SteamApiService:
    """Service for the two Steam endpoints the updater depends on."""

    def __init__(
        self,
        http_client: HttpClientService,
        app_details_url: str = APP_DETAILS_URL,
        app_list_url: str = APP_LIST_URL,
    ) -> None:
        self.http_client = http_client
        self.app_details_url = app_details_url
        self.app_list_url = app_list_url

    async def fetch_app_details(self, app_id: str) -> AppDetails:
        """Fetch store details for ``app_id``.

        Raises:
            FetchError: On transport failure or timeout
            DataError: On a malformed or unsuccessful response
        """
        log.info("Requesting appdetails", url=self.app_details_url, appid=app_id)
        payload = await self.http_client.get_json(self.app_details_url, params={"appids": app_id})
        return parse_app_details(payload, app_id, url=self.app_details_url)

    async def fetch_dlc_ids(self, app_id: str) -> list[int]:
        """Fetch the DLC ids of ``app_id``; an empty list means the app has no DLC."""
        details = await self.fetch_app_details(app_id)
        return details.dlc

    async def fetch_app_list(self) -> list[AppListEntry]:
        """Fetch the whole Steam catalog in a single response.

        Raises:
            FetchError: On transport failure or timeout
            DataError: On a malformed response
        """
        log.info("Requesting app list", url=self.app_list_url)
        payload = await self.http_client.get_json(self.app_list_url)
        entries = parse_app_list(payload, url=self.app_list_url)
        log.info("App list decoded", apps=len(entries))
        return entries
