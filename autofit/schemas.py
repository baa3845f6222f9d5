"""
Input schemas for provider-shaped payloads.

Task, event, placement and settings dicts arrive in camelCase as the calendar
and task providers (and the settings store) produce them. These models
validate them and convert to the engine's dataclasses.

Usage:
    from autofit.schemas import parse_settings, parse_tasks

    settings = parse_settings(raw_settings)
    tasks = parse_tasks(raw_tasks)
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import DEFAULT_SETTINGS
from .errors import MalformedInput
from .models import CalendarEvent, Placement, Settings, Task, WorkingHoursRange
from .timezone import parse_wall_time

_CONFIG = ConfigDict(extra="ignore", populate_by_name=True)


def _check_wall_time(value: str) -> str:
    parse_wall_time(value)
    return value


# ==== Tasks ====


class TaskPayload(BaseModel):
    """A pending task as listed by the task provider."""

    model_config = _CONFIG

    id: str = Field(min_length=1)
    title: str = ""
    due: datetime | None = None
    has_subtasks: bool = Field(default=False, alias="hasSubtasks")

    @field_validator("due", mode="before")
    @classmethod
    def blank_due_is_none(cls, value: Any) -> Any:
        return value or None

    def to_task(self) -> Task:
        return Task(id=self.id, title=self.title, due=self.due, has_subtasks=self.has_subtasks)


# ==== Calendar events ====


class EventTimePayload(BaseModel):
    """Either a dateTime (timed event) or a date (all-day event)."""

    model_config = _CONFIG

    date_time: datetime | None = Field(default=None, alias="dateTime")
    date: str | None = None
    time_zone: str | None = Field(default=None, alias="timeZone")


class EventPayload(BaseModel):
    model_config = _CONFIG

    id: str = ""
    summary: str = ""
    start: EventTimePayload
    end: EventTimePayload | None = None

    def to_event(self) -> CalendarEvent:
        return CalendarEvent(
            id=self.id,
            summary=self.summary,
            start=self.start.date_time,
            end=self.end.date_time if self.end else None,
        )


# ==== Placements ====


class PlacementPayload(BaseModel):
    """A previously stored placement, from auto-fit or a manual drag."""

    model_config = _CONFIG

    id: str = ""
    task_id: str = Field(alias="taskId")
    task_title: str = Field(default="", alias="taskTitle")
    start_time: datetime = Field(alias="startTime")
    duration: int = Field(gt=0)

    def to_placement(self) -> Placement:
        return Placement(
            id=self.id,
            task_id=self.task_id,
            task_title=self.task_title,
            start=self.start_time,
            duration_minutes=self.duration,
        )


# ==== Settings ====


class WorkingHoursPayload(BaseModel):
    model_config = _CONFIG

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def check_times(cls, value: str) -> str:
        return _check_wall_time(value)


class SettingsPayload(BaseModel):
    model_config = _CONFIG

    default_task_duration: int = Field(alias="defaultTaskDuration", gt=0)
    working_hours: list[WorkingHoursPayload] = Field(
        default_factory=lambda: [WorkingHoursPayload(**h) for h in DEFAULT_SETTINGS["workingHours"]],
        alias="workingHours",
    )
    min_time_between_tasks: int = Field(
        default=DEFAULT_SETTINGS["minTimeBetweenTasks"], alias="minTimeBetweenTasks", ge=0
    )
    ignore_container_tasks: bool = Field(
        default=DEFAULT_SETTINGS["ignoreContainerTasks"], alias="ignoreContainerTasks"
    )
    slot_min_time: str = Field(default=DEFAULT_SETTINGS["slotMinTime"], alias="slotMinTime")
    slot_max_time: str = Field(default=DEFAULT_SETTINGS["slotMaxTime"], alias="slotMaxTime")
    timezone: str | None = DEFAULT_SETTINGS["timezone"]

    @field_validator("slot_min_time", "slot_max_time")
    @classmethod
    def check_times(cls, value: str) -> str:
        return _check_wall_time(value)

    def to_settings(self) -> Settings:
        return Settings(
            default_task_duration=self.default_task_duration,
            working_hours=[WorkingHoursRange(h.start, h.end) for h in self.working_hours],
            min_time_between_tasks=self.min_time_between_tasks,
            ignore_container_tasks=self.ignore_container_tasks,
            slot_min_time=self.slot_min_time,
            slot_max_time=self.slot_max_time,
            timezone=self.timezone,
        )


# ==== Parsing helpers ====


def _validate(model: type[BaseModel], data: Any, what: str) -> BaseModel:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedInput(f"Invalid {what}: {exc}") from exc


def parse_settings(data: dict) -> Settings:
    """
    Validate a settings payload.

    Raises:
        MalformedInput: If required fields are missing or out of range
    """
    return _validate(SettingsPayload, data, "settings").to_settings()


def parse_tasks(items: list[dict]) -> list[Task]:
    return [_validate(TaskPayload, item, "task").to_task() for item in items]


def parse_events(items: list[dict]) -> list[CalendarEvent]:
    return [_validate(EventPayload, item, "event").to_event() for item in items]


def parse_placements(items: list[dict]) -> list[Placement]:
    return [_validate(PlacementPayload, item, "placement").to_placement() for item in items]
