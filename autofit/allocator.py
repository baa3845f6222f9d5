"""
Task Prioritization & Greedy Placement

- Container tasks (tasks with subtasks) optionally skipped
- Dated tasks first, earliest due first; undated tasks keep input order
- Each task goes to the start of the first slot wide enough to hold it
- Placed time plus the minimum gap is removed before the next task

Single pass, no backtracking: a task that does not fit is never revisited.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta, tzinfo

from .models import AllocationResult, CalendarEvent, Placement, Settings, Task, TimeSlot
from .slots import build_busy_intervals, compute_available_slots, subtract_interval, visible_range
from .timezone import as_utc, parse_iso_date, resolve_zone

logger = logging.getLogger(__name__)


def _priority_key(task: Task) -> tuple[int, datetime]:
    # Undated tasks share one key so the stable sort keeps their input order
    if task.due is None:
        return (1, datetime.min.replace(tzinfo=UTC))
    return (0, task.due)


def sort_tasks_by_priority(tasks: Sequence[Task]) -> list[Task]:
    return sorted(tasks, key=_priority_key)


def find_first_slot(slots: Sequence[TimeSlot], duration_minutes: int) -> TimeSlot | None:
    """The window of `duration_minutes` at the start of the first slot that can hold it."""
    needed = timedelta(minutes=duration_minutes)
    for slot in slots:
        if slot.end - slot.start >= needed:
            return TimeSlot(slot.start, slot.start + needed)
    return None


def summarize(placements: Sequence[Placement], unplaced: Sequence[Task]) -> str:
    if not unplaced:
        return f"Successfully placed {len(placements)} task(s)."
    if not placements:
        return "Could not place any tasks. No available time slots."
    return f"Placed {len(placements)} task(s). {len(unplaced)} task(s) could not fit."


def allocate(tasks: Sequence[Task], slots: Sequence[TimeSlot], settings: Settings) -> AllocationResult:
    """
    Greedily place tasks into slots.

    Args:
        tasks: Candidate tasks, in caller order
        slots: Sorted, non-overlapping open time
        settings: Duration, gap and container-task preferences

    Returns:
        AllocationResult with placements, unplaced tasks and a summary message
    """
    candidates = tasks
    if settings.ignore_container_tasks:
        candidates = [t for t in tasks if not t.has_subtasks]

    duration = settings.default_task_duration
    gap = settings.min_time_between_tasks
    remaining = list(slots)
    placements: list[Placement] = []
    unplaced: list[Task] = []
    placed_ids: set[str] = set()

    for task in sort_tasks_by_priority(candidates):
        if task.id in placed_ids:
            continue

        window = find_first_slot(remaining, duration)
        if window is None:
            unplaced.append(task)
            continue

        placements.append(
            Placement(
                id=f"{task.id}-{uuid.uuid4().hex[:12]}",
                task_id=task.id,
                task_title=task.title,
                start=window.start,
                duration_minutes=duration,
            )
        )
        placed_ids.add(task.id)
        remaining = subtract_interval(
            remaining, window.start, window.start + timedelta(minutes=duration + gap)
        )

    message = summarize(placements, unplaced)
    logger.info(
        "Allocated %d of %d task(s), %d unplaced",
        len(placements),
        len(candidates),
        len(unplaced),
    )
    return AllocationResult(placements=placements, unplaced_tasks=unplaced, message=message)


def auto_fit_tasks(
    tasks: Sequence[Task],
    existing_events: Sequence[CalendarEvent],
    existing_placements: Sequence[Placement],
    settings: Settings,
    day: str | date,
    zone: str | int | tzinfo | None = None,
    now: datetime | None = None,
) -> AllocationResult:
    """
    Fit pending tasks into the open time of one day.

    `zone` is an IANA key or a browser-style offset in minutes (-480 for
    UTC+8). It falls back to settings.timezone, then UTC. `now` is sampled
    once here when not supplied and threaded through every step.

    Raises:
        InvalidDate: If `day` is not YYYY-MM-DD
        InvalidWallTime: If a wall time cannot be resolved across a DST gap
    """
    target = parse_iso_date(day)
    tz = resolve_zone(zone if zone is not None else settings.timezone)
    now = as_utc(now) if now is not None else datetime.now(UTC)

    calendar_range = visible_range(target, settings.slot_min_time, settings.slot_max_time, tz)
    if calendar_range is None:
        logger.warning(
            "Visible range %s-%s is empty, nothing can be placed",
            settings.slot_min_time,
            settings.slot_max_time,
        )
        slots: list[TimeSlot] = []
    else:
        busy = build_busy_intervals(
            existing_events, existing_placements, settings.min_time_between_tasks
        )
        slots = compute_available_slots(settings.working_hours, calendar_range, busy, target, tz, now)

    return allocate(tasks, slots, settings)
