from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class ComponentKind(Enum):
    TIMED_EVENT = "VEVENT"
    OTHER = "OTHER"


@dataclass(frozen=True)
class RawComponent:
    """
    One top-level component from a source feed.
    Only TIMED_EVENT components can become blocked ranges.
    """
    kind: ComponentKind
    name: str
    start: Optional[Union[date, datetime, str, int, float]] = None
    end: Optional[Union[date, datetime, str, int, float]] = None
    uid: Optional[str] = None
    datetype: Optional[str] = None


@dataclass(frozen=True)
class BlockedRange:
    """
    A reservation reduced to its boundaries.
    Carries no summary, description or location from the source.
    """
    start: datetime
    end: datetime
    all_day: bool
    identity: str
