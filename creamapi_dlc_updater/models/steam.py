"""Steam API data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AppDetails:
    """Store details for a single app, as returned by the appdetails endpoint."""
    app_id: str
    success: bool
    dlc: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class AppListEntry:
    """One entry of the global Steam catalog."""
    appid: int
    name: str


@dataclass(frozen=True)
class DlcRecord:
    """A DLC id paired with its display name, as written to the INI file."""
    id: int
    name: str
