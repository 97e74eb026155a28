import asyncio
import logging
import os
from typing import Dict, List

import requests

from calendars.models import RawComponent
from calendars.parse_ical import parse_ical

logger = logging.getLogger(__name__)

USER_AGENT = "BlockedDatesCalendar/1.0"
DEFAULT_TIMEOUT = 20


class FeedError(RuntimeError):
    """A source feed could not be retrieved."""


def fetch_calendar(source: str, timeout: float = DEFAULT_TIMEOUT, user_agent: str = USER_AGENT) -> str:
    """
    Fetches iCal data.
    - If 'source' is a URL (http, https or webcal), download it.
    - Otherwise treat it as a file path and read it from disk.
    Returns raw ICS text.
    """

    if source.startswith("webcal://"):
        source = "https://" + source[len("webcal://"):]

    # Case 1: URL mode
    if source.startswith("http://") or source.startswith("https://"):
        try:
            response = requests.get(
                source,
                headers={"User-Agent": user_agent},
                timeout=timeout,
                allow_redirects=True,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FeedError(f"Could not fetch calendar from {source}: {e}") from e
        return response.text

    # Case 2: Local file mode
    if os.path.exists(source):
        with open(source, "r", encoding="utf-8") as f:
            return f.read()

    raise FileNotFoundError(f"Could not fetch calendar from: {source}")


def fetch_feed(source: str, timeout: float = DEFAULT_TIMEOUT, user_agent: str = USER_AGENT) -> List[RawComponent]:
    """Downloads and parses one feed."""
    components = parse_ical(fetch_calendar(source, timeout=timeout, user_agent=user_agent))
    logger.info(f"Fetched {len(components)} components from {source}")
    return components


async def fetch_feeds(sources: Dict[str, str], timeout: float = DEFAULT_TIMEOUT,
                      user_agent: str = USER_AGENT) -> Dict[str, List[RawComponent]]:
    """
    Fetches every source concurrently and waits for all of them.
    The first failure fails the whole call; there are no retries.
    """
    names = list(sources)
    results = await asyncio.gather(*(
        asyncio.to_thread(fetch_feed, sources[name], timeout, user_agent)
        for name in names
    ))
    return dict(zip(names, results))
