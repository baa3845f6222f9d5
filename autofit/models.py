"""
Autofit data model.

All entities are built fresh for one invocation and discarded afterwards.
Instants are normalized to UTC on construction.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .config import DEFAULT_SETTINGS
from .errors import MalformedInput
from .timezone import as_utc, parse_wall_time, utc_iso_string


@dataclass(frozen=True)
class TimeSlot:
    """A half-open interval [start, end) of absolute time. Always non-empty."""

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start >= self.end:
            raise ValueError(
                f"TimeSlot start {self.start.isoformat()} must be before end {self.end.isoformat()}"
            )

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "TimeSlot") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class WorkingHoursRange:
    """A daily window, as "HH:MM" wall times, in which tasks may be placed."""

    start: str
    end: str

    def __post_init__(self):
        parse_wall_time(self.start)
        parse_wall_time(self.end)


@dataclass
class Task:
    id: str
    title: str = ""
    due: datetime | None = None
    has_subtasks: bool = False

    def __post_init__(self):
        if self.due is not None:
            self.due = as_utc(self.due)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "due": utc_iso_string(self.due) if self.due else None,
            "hasSubtasks": self.has_subtasks,
        }


@dataclass
class CalendarEvent:
    """An existing calendar event. All-day events carry no start/end instants."""

    id: str
    summary: str = ""
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self):
        if self.start is not None:
            self.start = as_utc(self.start)
        if self.end is not None:
            self.end = as_utc(self.end)

    @property
    def is_timed(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass
class Placement:
    """A task pinned to a start instant for a number of minutes."""

    id: str
    task_id: str
    task_title: str
    start: datetime
    duration_minutes: int

    def __post_init__(self):
        self.start = as_utc(self.start)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "taskId": self.task_id,
            "taskTitle": self.task_title,
            "startTime": utc_iso_string(self.start),
            "duration": self.duration_minutes,
        }


def _default_working_hours() -> list[WorkingHoursRange]:
    return [WorkingHoursRange(h["start"], h["end"]) for h in DEFAULT_SETTINGS["workingHours"]]


@dataclass
class Settings:
    """
    Per-user scheduling preferences.

    slot_min_time/slot_max_time bound the range the calendar displays;
    working hours outside it are clamped away. Omitted fields take their
    value from config.DEFAULT_SETTINGS.

    Raises:
        MalformedInput: On non-positive duration, negative gap or bad wall times
    """

    default_task_duration: int
    working_hours: list[WorkingHoursRange] = field(default_factory=_default_working_hours)
    min_time_between_tasks: int = DEFAULT_SETTINGS["minTimeBetweenTasks"]
    ignore_container_tasks: bool = DEFAULT_SETTINGS["ignoreContainerTasks"]
    slot_min_time: str = DEFAULT_SETTINGS["slotMinTime"]
    slot_max_time: str = DEFAULT_SETTINGS["slotMaxTime"]
    timezone: str | None = DEFAULT_SETTINGS["timezone"]

    def __post_init__(self):
        if not _is_int(self.default_task_duration) or self.default_task_duration <= 0:
            raise MalformedInput(
                f"default_task_duration must be a positive number of minutes, "
                f"got {self.default_task_duration!r}"
            )
        if not _is_int(self.min_time_between_tasks) or self.min_time_between_tasks < 0:
            raise MalformedInput(
                f"min_time_between_tasks must be zero or more minutes, "
                f"got {self.min_time_between_tasks!r}"
            )
        parse_wall_time(self.slot_min_time)
        parse_wall_time(self.slot_max_time)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class AllocationResult:
    placements: list[Placement] = field(default_factory=list)
    unplaced_tasks: list[Task] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "placements": [p.to_dict() for p in self.placements],
            "unplacedTasks": [t.to_dict() for t in self.unplaced_tasks],
            "message": self.message,
        }
