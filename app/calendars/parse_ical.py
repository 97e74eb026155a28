from icalendar import Calendar
from datetime import date, datetime, timedelta
from typing import List

from calendars.models import ComponentKind, RawComponent


def _value(component, key):
    prop = component.get(key)
    if prop is None:
        # Some icalendar releases drop unparseable values and only list them in errors
        if any(name == key for name, _ in getattr(component, "errors", ())):
            return ""
        return None
    try:
        return prop.dt
    except (AttributeError, ValueError):
        # Broken values raise on .dt; the raw text is left for the validator to reject
        return str(prop)


def _end_of(component, start):
    """
    DTEND if present, else DTSTART + DURATION.
    Without either, a date start lasts one day and a date-time start has no length.
    """
    end = _value(component, "DTEND")
    if end is not None:
        return end

    duration = _value(component, "DURATION")
    if start is None:
        return None
    if isinstance(duration, timedelta) and isinstance(start, date):
        return start + duration

    if isinstance(start, date) and not isinstance(start, datetime):
        return start + timedelta(days=1)
    if isinstance(start, datetime):
        return start
    return None


def parse_ical(ical_text) -> List[RawComponent]:
    """
    Parses raw iCal text into a flat list of top-level components.
    Raises ValueError when the text is not a calendar.
    """

    cal = Calendar.from_ical(ical_text)
    components = []

    for component in cal.subcomponents:
        if component.name != "VEVENT":
            components.append(RawComponent(kind=ComponentKind.OTHER, name=component.name))
            continue

        start = _value(component, "DTSTART")
        end = _end_of(component, start)

        # Pure dates have no time-of-day
        if start is None:
            datetype = None
        elif isinstance(start, date) and not isinstance(start, datetime):
            datetype = "date"
        else:
            datetype = "date-time"

        uid = str(component.get("UID", "")).strip()

        components.append(RawComponent(
            kind=ComponentKind.TIMED_EVENT,
            name=component.name,
            start=start,
            end=end,
            uid=uid or None,
            datetype=datetype,
        ))

    return components
