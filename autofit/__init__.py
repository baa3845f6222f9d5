# Autofit - daily task placement engine
"""
Exports for callers wiring the engine to calendar and task providers.
"""

from .allocator import allocate, auto_fit_tasks, sort_tasks_by_priority, summarize
from .errors import AutofitError, InvalidDate, InvalidWallTime, MalformedInput
from .models import (
    AllocationResult,
    CalendarEvent,
    Placement,
    Settings,
    Task,
    TimeSlot,
    WorkingHoursRange,
)
from .schemas import parse_events, parse_placements, parse_settings, parse_tasks
from .settings import load_settings
from .slots import build_busy_intervals, compute_available_slots, subtract_interval
from .timezone import (
    instant_to_zone_parts,
    normalize_zone,
    offset_minutes,
    resolve_zone,
    wall_time_to_instant,
)

__all__ = [
    "auto_fit_tasks",
    "allocate",
    "sort_tasks_by_priority",
    "summarize",
    "compute_available_slots",
    "build_busy_intervals",
    "subtract_interval",
    "normalize_zone",
    "resolve_zone",
    "wall_time_to_instant",
    "instant_to_zone_parts",
    "offset_minutes",
    "parse_settings",
    "parse_tasks",
    "parse_events",
    "parse_placements",
    "load_settings",
    "AllocationResult",
    "CalendarEvent",
    "Placement",
    "Settings",
    "Task",
    "TimeSlot",
    "WorkingHoursRange",
    "AutofitError",
    "InvalidDate",
    "InvalidWallTime",
    "MalformedInput",
]
