import logging
from typing import Iterable, List, Optional

from calendars.dates import to_instant, to_iso
from calendars.models import BlockedRange, ComponentKind, RawComponent

logger = logging.getLogger(__name__)


def normalize_event(component: RawComponent, source: str) -> Optional[BlockedRange]:
    """
    Reduces one raw component to a BlockedRange tagged with its source.
    Returns None for anything that is not a timed event or has unusable dates.
    Summary, description and location are never read.
    """
    if component.kind is not ComponentKind.TIMED_EVENT:
        return None

    start = to_instant(component.start)
    end = to_instant(component.end)
    if start is None or end is None:
        return None

    # end before start is kept as-is
    key = component.uid or f"{to_iso(start)}-{to_iso(end)}"

    return BlockedRange(
        start=start,
        end=end,
        all_day=component.datetype == "date",
        identity=f"{source}:{key}",
    )


def normalize_feed(components: Iterable[RawComponent], source: str) -> List[BlockedRange]:
    """
    Normalizes a whole feed, keeping feed order and silently dropping rejects.
    """
    ranges = []
    dropped = 0

    for component in components:
        blocked = normalize_event(component, source)
        if blocked is None:
            dropped += 1
            logger.debug(f"[{source}] Dropped {component.name} component (uid={component.uid})")
            continue
        ranges.append(blocked)

    logger.info(f"[{source}] Kept {len(ranges)} blocked ranges, dropped {dropped} components")
    return ranges
