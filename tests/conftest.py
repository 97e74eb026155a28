"""Shared fixtures for building iCal feeds."""
import pytest

AIRBNB_URL = "https://www.airbnb.com/calendar/ical/12345.ics"
BOOKING_URL = "https://ical.booking.com/v1/export?t=abc"


def make_ics(*components: str) -> str:
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Test//EN",
    ]
    for component in components:
        lines.extend(component.strip().splitlines())
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def vevent(start: str, end: str = None, uid: str = None, summary: str = "Reserved",
           extra: str = "") -> str:
    lines = ["BEGIN:VEVENT", f"DTSTART{start}"]
    if end is not None:
        lines.append(f"DTEND{end}")
    if uid is not None:
        lines.append(f"UID:{uid}")
    lines.append(f"SUMMARY:{summary}")
    if extra:
        lines.extend(extra.strip().splitlines())
    lines.append("END:VEVENT")
    return "\n".join(lines)


VTIMEZONE = """
BEGIN:VTIMEZONE
TZID:Europe/Berlin
BEGIN:STANDARD
DTSTART:19701025T030000
TZOFFSETFROM:+0200
TZOFFSETTO:+0100
END:STANDARD
END:VTIMEZONE
"""


@pytest.fixture
def airbnb_ics():
    """One Airbnb reservation, 1-5 June 2024, with guest details."""
    return make_ics(vevent(
        ";VALUE=DATE:20240601",
        ";VALUE=DATE:20240605",
        uid="X",
        summary="John Smith (HMABC123)",
        extra="DESCRIPTION:Phone: +1 555 0100\nLOCATION:Main Street 1",
    ))


@pytest.fixture
def booking_ics():
    """One Booking.com reservation, 10-12 July 2024, without a UID."""
    return make_ics(vevent(";VALUE=DATE:20240710", ";VALUE=DATE:20240712", summary="CLOSED - Not available"))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment with no calendar settings and a config path that does not exist."""
    for var in ("AIRBNB_ICS_URL", "BOOKING_ICS_URL", "OUTPUT_PATH", "OUTPUT_BUCKET",
                "FETCH_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing.yaml"))
    return tmp_path
