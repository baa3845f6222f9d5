"""
Centralized configuration for Autofit.

Values that vary by deployment belong here.
Override via environment variables where marked.
"""

import os

# ============================================================
# Scheduling granularity
# ============================================================

TIME_SLOT_INTERVAL: int = int(os.environ.get("AUTOFIT_SLOT_INTERVAL", "15"))
"""Minutes per calendar slot. "Now" is rounded up to this boundary before scheduling today."""

MAX_DST_COERCE_MINUTES: int = int(os.environ.get("AUTOFIT_MAX_DST_COERCE_MINUTES", "180"))
"""Upper bound on the forward search out of a DST gap."""

# ============================================================
# Timezone
# ============================================================

DEFAULT_ZONE: str = "UTC"
"""Zone used when none is supplied or the supplied one is not a valid IANA key."""

# ============================================================
# Settings
# ============================================================

APP_ENV_HOME = "AUTOFIT_HOME"

DEFAULT_SETTINGS: dict = {
    "defaultTaskDuration": 30,
    "minTimeBetweenTasks": 15,
    "workingHours": [{"start": "09:00", "end": "17:00"}],
    "ignoreContainerTasks": False,
    "slotMinTime": "06:00",
    "slotMaxTime": "22:00",
    "timezone": None,
}
"""Settings applied when the user has not saved any. Keys match the settings payload."""
