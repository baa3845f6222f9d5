"""
Autofit exceptions.

Invalid timezones are not an error: they normalize to UTC.
Partial placement is not an error either: it is a normal AllocationResult.
"""


class AutofitError(Exception):
    """Base class for errors raised by the engine."""

    pass


class InvalidWallTime(AutofitError):
    """Raised when a nonexistent local time cannot be coerced to a valid instant."""

    def __init__(self, label: str, zone: str, max_minutes: int):
        self.label = label
        self.zone = zone
        self.max_minutes = max_minutes
        super().__init__(
            f'Invalid local time "{label}" in zone "{zone}" '
            f"(could not coerce within {max_minutes} minutes)"
        )


class InvalidDate(AutofitError, ValueError):
    """Raised when a calendar date is not a valid YYYY-MM-DD string."""

    pass


class MalformedInput(AutofitError, ValueError):
    """Raised when settings or payload fields are missing or out of range."""

    pass
