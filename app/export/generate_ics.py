import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, Optional

from google.cloud import storage
from icalendar import Calendar, Event

from calendars.models import BlockedRange

logger = logging.getLogger(__name__)

CALENDAR_NAME = "Reservations (Airbnb + Booking) — Blocked Dates"
PRODID = "-//Blocked Dates Calendar//EN"


def upload_to_gcs(local_path, bucket_name, object_name):
    client = storage.Client()
    bucket = client.bucket(bucket_name)
    blob = bucket.blob(object_name)
    blob.upload_from_filename(local_path, content_type="text/calendar")
    return f"https://storage.googleapis.com/{bucket_name}/{object_name}"


def build_blocked_calendar(ranges: Iterable[BlockedRange], name: str = CALENDAR_NAME,
                           stamp: Optional[datetime] = None) -> Calendar:
    """
    Builds the combined calendar. Every range becomes an all-day "Blocked"
    event, whatever its own all_day flag says.
    """
    stamp = stamp or datetime.now(timezone.utc)

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")

    # Calendar name and zone shown in Google/Apple Calendar
    cal.add("X-WR-CALNAME", name)
    cal.add("X-WR-TIMEZONE", "UTC")

    for blocked in ranges:
        event = Event()
        event.add("uid", blocked.identity)
        event.add("dtstamp", stamp)

        # all-day: only the UTC date of each boundary is kept
        event.add("dtstart", blocked.start.astimezone(timezone.utc).date())
        event.add("dtend", blocked.end.astimezone(timezone.utc).date())
        event.add("X-MICROSOFT-CDO-ALLDAYEVENT", "TRUE")

        event.add("summary", "Blocked")
        event.add("description", "")
        event.add("location", "")

        cal.add_component(event)

    return cal


def render_ics(ranges: Iterable[BlockedRange], name: str = CALENDAR_NAME,
               stamp: Optional[datetime] = None) -> str:
    return build_blocked_calendar(ranges, name=name, stamp=stamp).to_ical().decode("utf-8")


def save_blocked_ics(ics_text: str, path: str) -> str:
    """
    Writes the calendar next to a temporary file and renames it into place,
    so an existing calendar is never left half-written.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=".calendar-", suffix=".ics", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(ics_text.encode("utf-8"))
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise

    logger.info(f"Saved ICS: {path}")
    return path
