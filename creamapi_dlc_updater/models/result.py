"""Run outcome models."""

from dataclasses import dataclass, field
from enum import Enum

from .steam import DlcRecord


class UpdateStatus(Enum):
    """How an updater run ended."""
    UPDATED = "updated"
    NO_DLC = "no_dlc"


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a successful updater run."""
    status: UpdateStatus
    app_id: str
    records: list[DlcRecord] = field(default_factory=list)
