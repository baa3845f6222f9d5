"""
Timezone Normalization Layer

Converts between wall-clock times on a calendar date and absolute instants:
- Zone validation (invalid or missing zones normalize to UTC)
- Wall time -> UTC instant, with forward coercion out of DST gaps
- UTC instant -> zone-local date/hour/minute
- UTC offsets, ISO date parsing, calendar axis label parsing

Instants are timezone-aware datetimes in UTC. Naive datetimes are read as UTC.
"""

import logging
import re
from datetime import UTC, date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import DEFAULT_ZONE, MAX_DST_COERCE_MINUTES
from .errors import InvalidDate, InvalidWallTime, MalformedInput

logger = logging.getLogger(__name__)

ISO_DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WALL_TIME_REGEX = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
LABEL_REGEX = re.compile(r"^(\d{1,2})(?::(\d{2}))?$")

# Offsets accepted by datetime.timezone are strictly less than one day
_MAX_OFFSET_MINUTES = 24 * 60 - 1


class ZoneParts(NamedTuple):
    """Zone-local reading of an instant."""

    date: date
    hour: int
    minute: int


# =============================================================================
# ZONE RESOLUTION
# =============================================================================


def normalize_zone(zone: str | None) -> str:
    """
    Return `zone` if it is a loadable IANA key, otherwise "UTC".

    Never raises.
    """
    if not zone or not isinstance(zone, str):
        return DEFAULT_ZONE
    try:
        ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown timezone %r, falling back to %s", zone, DEFAULT_ZONE)
        return DEFAULT_ZONE
    return zone


def resolve_zone(zone: str | int | tzinfo | None) -> tzinfo:
    """
    Resolve a zone argument to a tzinfo.

    Accepts an IANA key, an existing tzinfo, or a browser-style offset in
    minutes (utc = local + offset, so UTC+8 is -480). Strings always pass
    through normalize_zone.

    The browser sign is the negation of what offset_minutes returns.
    """
    if isinstance(zone, tzinfo):
        return zone
    if isinstance(zone, int) and not isinstance(zone, bool):
        if abs(zone) > _MAX_OFFSET_MINUTES:
            logger.warning("UTC offset %d minutes out of range, falling back to UTC", zone)
            return UTC
        return timezone(-timedelta(minutes=zone))
    return ZoneInfo(normalize_zone(zone))


def as_utc(instant: datetime) -> datetime:
    """Return `instant` in UTC. Naive datetimes are taken to already be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


# =============================================================================
# PARSING
# =============================================================================


def parse_iso_date(value: str | date) -> date:
    """
    Parse a YYYY-MM-DD calendar date.

    Raises:
        InvalidDate: If the value is not a real calendar date in that format
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_REGEX.match(value):
        raise InvalidDate(f'Invalid ISO date "{value}"')
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate(f'Invalid ISO date "{value}"') from e


def parse_wall_time(value: str | time) -> tuple[int, int]:
    """
    Parse "HH:MM" (or "HH:MM:SS" with zero seconds) into (hour, minute).

    "24:00" is accepted and means the midnight that ends the day.

    Raises:
        MalformedInput: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return value.hour, value.minute
    match = WALL_TIME_REGEX.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise MalformedInput(f'Invalid time of day "{value}", expected HH:MM')
    hour, minute, second = int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
    if hour == 24 and minute == 0 and second == 0:
        return hour, minute
    if hour > 23 or minute > 59 or second != 0:
        raise MalformedInput(f'Invalid time of day "{value}", expected HH:MM')
    return hour, minute


def parse_time_label(label: str) -> str | None:
    """
    Parse a calendar axis label into "HH:MM".

    Handles "12am", "12:30 PM", "9 a.m.", "14", "14:30" and non-breaking
    spaces. An explicit am/pm suffix always wins. Returns None if unparseable.
    """
    if not label or not label.strip():
        return None
    text = label.replace("\u00a0", " ").replace("\u202f", " ").replace(".", "")
    text = re.sub(r"\s+", "", text).lower()

    if text.endswith(("am", "pm")):
        period, text = text[-2:], text[:-2]
        match = LABEL_REGEX.match(text)
        if not match:
            return None
        hours, minutes = int(match.group(1)), int(match.group(2) or 0)
        if not 1 <= hours <= 12 or minutes > 59:
            return None
        hours %= 12
        if period == "pm":
            hours += 12
        return f"{hours:02d}:{minutes:02d}"

    match = LABEL_REGEX.match(text)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2) or 0)
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


# =============================================================================
# CONVERSION
# =============================================================================


def _is_valid_wall_time(naive: datetime, tz: tzinfo) -> bool:
    # Nonexistent local times do not survive a round trip through UTC
    local = naive.replace(tzinfo=tz)
    return local.astimezone(UTC).astimezone(tz).replace(tzinfo=None) == naive


def wall_time_to_instant(
    day: str | date,
    wall_time: str | time,
    zone: str | int | tzinfo | None,
    max_coerce_minutes: int = MAX_DST_COERCE_MINUTES,
) -> datetime:
    """
    Compose a calendar date and a time of day in `zone` into a UTC instant.

    A local time inside a DST spring-forward gap is moved forward one minute
    at a time until it exists. Ambiguous fall-back times resolve to their
    first occurrence.

    Raises:
        InvalidDate: If `day` is not a valid date
        MalformedInput: If `wall_time` is not a valid time of day
        InvalidWallTime: If no valid time is found within `max_coerce_minutes`
    """
    target = parse_iso_date(day)
    hour, minute = parse_wall_time(wall_time)
    tz = resolve_zone(zone)

    naive = datetime.combine(target, time()) + timedelta(hours=hour, minutes=minute)
    for step in range(max_coerce_minutes + 1):
        candidate = naive + timedelta(minutes=step)
        if _is_valid_wall_time(candidate, tz):
            if step:
                logger.debug(
                    "Coerced nonexistent local time %s in %s forward by %d min",
                    naive.isoformat(timespec="minutes"),
                    tz,
                    step,
                )
            return candidate.replace(tzinfo=tz).astimezone(UTC)

    raise InvalidWallTime(naive.isoformat(timespec="minutes"), str(tz), max_coerce_minutes)


def start_of_day(day: str | date, zone: str | int | tzinfo | None) -> datetime:
    """First valid instant of `day` in `zone`."""
    return wall_time_to_instant(day, "00:00", zone)


def instant_to_zone_parts(instant: datetime, zone: str | int | tzinfo | None) -> ZoneParts:
    local = as_utc(instant).astimezone(resolve_zone(zone))
    return ZoneParts(local.date(), local.hour, local.minute)


def offset_minutes(zone: str | int | tzinfo | None, at: datetime | None = None) -> int:
    """Signed minutes such that local time = UTC time + offset, at instant `at` (default now)."""
    at = as_utc(at) if at is not None else datetime.now(UTC)
    offset = at.astimezone(resolve_zone(zone)).utcoffset()
    return int(offset.total_seconds()) // 60


# =============================================================================
# FORMATTING
# =============================================================================


def utc_iso_string(instant: datetime) -> str:
    """ISO-8601 UTC string with a Z suffix; milliseconds only when non-zero."""
    instant = as_utc(instant)
    timespec = "milliseconds" if instant.microsecond else "seconds"
    return instant.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def format_time_for_display(
    instant: datetime, zone: str | int | tzinfo | None, time_format: str = "12h"
) -> str:
    """Render an instant's local time as "14:05" (24h) or "2:05 PM" (12h)."""
    parts = instant_to_zone_parts(instant, zone)
    if time_format == "24h":
        return f"{parts.hour:02d}:{parts.minute:02d}"
    hour12 = parts.hour % 12 or 12
    period = "AM" if parts.hour < 12 else "PM"
    return f"{hour12}:{parts.minute:02d} {period}"
