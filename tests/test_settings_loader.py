"""
Tests for loading settings from YAML.
"""

import logging

import pytest

from autofit.errors import MalformedInput
from autofit.models import WorkingHoursRange
from autofit.settings import load_settings, settings_path


class TestLoadSettings:
    def test_missing_file_uses_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="autofit.settings"):
            settings = load_settings(tmp_path / "absent.yaml")
        assert settings.default_task_duration == 30
        assert settings.min_time_between_tasks == 15
        assert settings.working_hours == [WorkingHoursRange("09:00", "17:00")]
        assert "not found" in caplog.text

    def test_file_overrides_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "defaultTaskDuration: 45\n"
            "workingHours:\n"
            "  - start: '08:00'\n"
            "    end: '12:00'\n"
            "  - start: '13:00'\n"
            "    end: '16:30'\n"
            "timezone: America/Chicago\n"
        )
        settings = load_settings(path)
        assert settings.default_task_duration == 45
        assert settings.working_hours == [
            WorkingHoursRange("08:00", "12:00"),
            WorkingHoursRange("13:00", "16:30"),
        ]
        assert settings.timezone == "America/Chicago"
        assert settings.slot_min_time == "06:00"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_settings(path).default_task_duration == 30

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("workingHours: [unclosed\n")
        with pytest.raises(MalformedInput):
            load_settings(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- 30\n- 15\n")
        with pytest.raises(MalformedInput):
            load_settings(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("defaultTaskDuration: 0\n")
        with pytest.raises(MalformedInput):
            load_settings(path)

    def test_default_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AUTOFIT_HOME", str(tmp_path))
        assert settings_path() == tmp_path.resolve() / "settings.yaml"
        (tmp_path / "settings.yaml").write_text("minTimeBetweenTasks: 5\n")
        assert load_settings().min_time_between_tasks == 5
