import asyncio
import logging
import os
import sys
from enum import Enum
from typing import List, Optional

from calendars.fetch_calendars import USER_AGENT, fetch_feeds
from calendars.models import BlockedRange
from calendars.normalize import normalize_feed
from config.utils import Config, load_config, setup_logging
from export.generate_ics import render_ics, save_blocked_ics, upload_to_gcs

logger = logging.getLogger(__name__)

# Output order follows this order
SOURCES = ("airbnb", "booking")


class RunState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    BUILT = "built"
    WRITTEN = "written"
    FAILED = "failed"


class Pipeline:
    """
    One run: fetch both feeds, normalize, build the blocked calendar, write it.
    Any failure aborts the run before the output file is touched.
    """

    def __init__(self, config: Config):
        self.config = config
        self.state = RunState.IDLE
        self.ranges: List[BlockedRange] = []

    def _set_state(self, state: RunState) -> None:
        logger.debug(f"Pipeline {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> int:
        try:
            return self._run()
        except Exception:
            self._set_state(RunState.FAILED)
            raise

    def _run(self) -> int:
        urls = {
            "airbnb": self.config.airbnb_url,
            "booking": self.config.booking_url,
        }

        self._set_state(RunState.FETCHING)
        feeds = asyncio.run(fetch_feeds(urls, timeout=self.config.timeout, user_agent=USER_AGENT))

        self.ranges = []
        for source in SOURCES:
            self.ranges.extend(normalize_feed(feeds[source], source))

        ics_text = render_ics(self.ranges)
        self._set_state(RunState.BUILT)

        path = save_blocked_ics(ics_text, self.config.output_path)
        if self.config.output_bucket:
            public_url = upload_to_gcs(path, self.config.output_bucket, os.path.basename(path))
            logger.info(f"Uploaded to: {public_url}")
        self._set_state(RunState.WRITTEN)

        return len(self.ranges)


def main(argv: Optional[List[str]] = None) -> int:
    config_path = argv[0] if argv else None

    try:
        config = load_config(config_path)
    except Exception:
        setup_logging()
        logger.exception("Invalid configuration")
        return 1

    setup_logging(config.log_level)
    logger.info("Building blocked dates calendar")

    pipeline = Pipeline(config)
    try:
        count = pipeline.run()
    except Exception:
        logger.exception("Run failed")
        return 1

    print(f"Wrote {os.path.basename(config.output_path)} with {count} events")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
