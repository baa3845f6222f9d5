"""
Available-Slot Calculator

Builds the open intervals of one day:
- Working hours converted to instants and clamped to the calendar's visible range
- Past time removed when the day is today
- Existing events and placements (buffered by the minimum gap) subtracted

Slot lists are always sorted by start and non-overlapping. Every operation
returns a new list; input lists are never modified.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta, tzinfo

from .config import TIME_SLOT_INTERVAL
from .models import CalendarEvent, Placement, TimeSlot, WorkingHoursRange
from .timezone import as_utc, instant_to_zone_parts, start_of_day, wall_time_to_instant

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


# =============================================================================
# INTERVAL ALGEBRA
# =============================================================================


def subtract_interval(
    slots: Sequence[TimeSlot], block_start: datetime, block_end: datetime
) -> list[TimeSlot]:
    """
    Remove [block_start, block_end) from every slot.

    A block covering a slot drops it, one inside a slot splits it in two,
    one overlapping an edge truncates that edge.
    """
    if block_end <= block_start:
        return list(slots)

    result: list[TimeSlot] = []
    for slot in slots:
        if block_end <= slot.start or block_start >= slot.end:
            result.append(slot)
            continue
        if block_start > slot.start:
            result.append(TimeSlot(slot.start, block_start))
        if block_end < slot.end:
            result.append(TimeSlot(block_end, slot.end))
    return result


def subtract_intervals(slots: Sequence[TimeSlot], blocks: Iterable[TimeSlot]) -> list[TimeSlot]:
    result = list(slots)
    for block in blocks:
        result = subtract_interval(result, block.start, block.end)
    return result


def merge_slots(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    """Sort slots and union any that overlap. Slots that only touch stay separate."""
    merged: list[TimeSlot] = []
    for slot in sorted(slots, key=lambda s: s.start):
        if merged and slot.start < merged[-1].end:
            if slot.end > merged[-1].end:
                merged[-1] = TimeSlot(merged[-1].start, slot.end)
            continue
        merged.append(slot)
    return merged


def round_up_to_interval(instant: datetime, interval_minutes: int = TIME_SLOT_INTERVAL) -> datetime:
    """Round up to the next interval boundary on the UTC clock. Aligned instants are unchanged."""
    instant = as_utc(instant)
    step = timedelta(minutes=interval_minutes)
    remainder = (instant - _EPOCH) % step
    if not remainder:
        return instant
    return instant + (step - remainder)


# =============================================================================
# SLOT CONSTRUCTION
# =============================================================================


def visible_range(
    day: date, slot_min_time: str, slot_max_time: str, zone: str | int | tzinfo | None
) -> TimeSlot | None:
    """The part of `day` the calendar displays, or None if it is empty."""
    start = wall_time_to_instant(day, slot_min_time, zone)
    end = wall_time_to_instant(day, slot_max_time, zone)
    if start >= end:
        return None
    return TimeSlot(start, end)


def working_hours_slots(
    working_hours: Iterable[WorkingHoursRange],
    calendar_range: TimeSlot | None,
    day: date,
    zone: str | int | tzinfo | None,
) -> list[TimeSlot]:
    """Working hours for `day` as instants, clamped to `calendar_range` (no clamp when None)."""
    slots = []
    for hours in working_hours:
        start = wall_time_to_instant(day, hours.start, zone)
        end = wall_time_to_instant(day, hours.end, zone)
        if calendar_range is not None:
            start = max(start, calendar_range.start)
            end = min(end, calendar_range.end)
        if start < end:
            slots.append(TimeSlot(start, end))
        else:
            logger.debug("Working hours %s-%s contribute nothing on %s", hours.start, hours.end, day)
    return merge_slots(slots)


def build_busy_intervals(
    events: Iterable[CalendarEvent],
    placements: Iterable[Placement],
    min_gap_minutes: int,
) -> list[TimeSlot]:
    """
    Blocked time from existing events and placements.

    Each interval is widened by `min_gap_minutes` on both sides. Events
    without a start and end instant (all-day events) are ignored.
    """
    gap = timedelta(minutes=min_gap_minutes)
    busy = []
    for event in events:
        if not event.is_timed:
            continue
        if event.end + gap > event.start - gap:
            busy.append(TimeSlot(event.start - gap, event.end + gap))
    for placement in placements:
        if placement.end + gap > placement.start - gap:
            busy.append(TimeSlot(placement.start - gap, placement.end + gap))
    return busy


def exclude_past(
    slots: Sequence[TimeSlot],
    day: date,
    zone: str | int | tzinfo | None,
    now: datetime,
    interval_minutes: int = TIME_SLOT_INTERVAL,
) -> list[TimeSlot]:
    """If `day` is today in `zone`, drop everything before `now` rounded up to the interval."""
    if instant_to_zone_parts(now, zone).date != day:
        return list(slots)
    cutoff = round_up_to_interval(now, interval_minutes)
    logger.debug("Scheduling today, excluding time before %s", cutoff.isoformat())
    return subtract_interval(slots, start_of_day(day, zone), cutoff)


def compute_available_slots(
    working_hours: Iterable[WorkingHoursRange],
    calendar_range: TimeSlot | None,
    busy_intervals: Iterable[TimeSlot],
    day: date,
    zone: str | int | tzinfo | None,
    now: datetime,
    interval_minutes: int = TIME_SLOT_INTERVAL,
) -> list[TimeSlot]:
    """
    Open time on `day`.

    Args:
        working_hours: Configured daily windows
        calendar_range: Visible calendar range to clamp working hours to
        busy_intervals: Already-buffered events and placements
        day: Target calendar date
        zone: Zone the wall times are read in
        now: Current instant, sampled once by the caller
        interval_minutes: Granularity "now" is rounded up to

    Returns:
        Sorted, non-overlapping list of TimeSlot
    """
    slots = working_hours_slots(working_hours, calendar_range, day, zone)
    slots = exclude_past(slots, day, zone, now, interval_minutes)
    slots = subtract_intervals(slots, busy_intervals)
    logger.debug(
        "Available on %s: %s",
        day,
        ", ".join(f"{s.start.isoformat()}/{s.end.isoformat()}" for s in slots) or "none",
    )
    return slots
