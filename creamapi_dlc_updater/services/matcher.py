"""Cross-referencing of DLC ids against the Steam catalog."""

from collections.abc import Iterable

from ..models import AppListEntry, DlcRecord


def match_dlc(dlc_ids: Iterable[int], apps: Iterable[AppListEntry]) -> list[DlcRecord]:
    """Pair each DLC id with its catalog name.

    Ids absent from the catalog are dropped without notice. Duplicate ids
    collapse to one record, and when the catalog lists an id twice the last
    name wins. The result is sorted ascending by id.
    """
    wanted = set(dlc_ids)
    names: dict[int, str] = {}
    for app in apps:
        if app.appid in wanted:
            names[app.appid] = app.name

    return [DlcRecord(id=dlc_id, name=names[dlc_id]) for dlc_id in sorted(names)]
