import logging
from pathlib import Path

import pytest

from cloudboard.core.settings import (
    LogVerbosity,
    Settings,
    SettingsError,
    SettingsField,
    SettingsStore,
    format_seconds,
    get_settings_path,
    load_settings_or_default,
)
from cloudboard.logging.handlers import SUCCESS


class TestCycling:
    def test_refresh_interval_wraps_both_ways(self) -> None:
        settings = Settings(refresh_interval_secs=300)
        settings.cycle_refresh_interval(forward=True)
        assert settings.refresh_interval_secs == 15

        settings.cycle_refresh_interval(forward=False)
        assert settings.refresh_interval_secs == 300

    def test_refresh_interval_off_list_restarts_from_default(self) -> None:
        settings = Settings(refresh_interval_secs=45)

        settings.cycle_refresh_interval(forward=True)

        assert settings.refresh_interval_secs == 120

    def test_alert_threshold_wraps(self) -> None:
        settings = Settings(alert_threshold_secs=1800)
        settings.cycle_alert_threshold(forward=False)
        assert settings.alert_threshold_secs == 28800

    def test_alert_threshold_off_list_restarts_from_default(self) -> None:
        settings = Settings(alert_threshold_secs=42)

        settings.cycle_alert_threshold(forward=False)

        assert settings.alert_threshold_secs == 1800

    def test_log_level_cycle(self) -> None:
        settings = Settings(log_level=LogVerbosity.ERROR)

        settings.cycle_log_level(forward=True)
        assert settings.log_level is LogVerbosity.DEBUG

        settings.cycle_log_level(forward=False)
        assert settings.log_level is LogVerbosity.ERROR

    def test_success_level_normalizes_to_info(self) -> None:
        settings = Settings(log_level=LogVerbosity.SUCCESS)

        settings.cycle_log_level(forward=False)

        assert settings.log_level is LogVerbosity.INFO

    def test_toggles(self) -> None:
        settings = Settings()
        settings.toggle_logs_panel()
        settings.toggle_sound()

        assert settings.show_logs_panel is True
        assert settings.sound_enabled is False

    def test_copy_is_independent(self) -> None:
        settings = Settings()
        draft = settings.copy()
        draft.toggle_sound()

        assert settings.sound_enabled is True


class TestSettingsField:
    def test_next_and_prev_wrap(self) -> None:
        assert SettingsField.TEST_SOUND.next() is SettingsField.REFRESH_INTERVAL
        assert SettingsField.REFRESH_INTERVAL.prev() is SettingsField.TEST_SOUND
        assert SettingsField.LOG_LEVEL.next() is SettingsField.ALERT_THRESHOLD

    def test_positions(self) -> None:
        assert [f.position for f in SettingsField] == [0, 1, 2, 3, 4, 5]


class TestLogFiltering:
    @pytest.mark.parametrize(
        "verbosity,level,shown",
        [
            (LogVerbosity.DEBUG, logging.DEBUG, True),
            (LogVerbosity.INFO, logging.DEBUG, False),
            (LogVerbosity.INFO, SUCCESS, True),
            (LogVerbosity.SUCCESS, logging.INFO, True),
            (LogVerbosity.WARNING, SUCCESS, False),
            (LogVerbosity.WARNING, logging.WARNING, True),
            (LogVerbosity.ERROR, logging.WARNING, False),
            (LogVerbosity.ERROR, logging.ERROR, True),
        ],
    )
    def test_should_show_log(self, verbosity, level, shown) -> None:
        assert Settings(log_level=verbosity).should_show_log(level) is shown


@pytest.mark.parametrize(
    "seconds,expected",
    [(15, "15s"), (60, "1m"), (300, "5m"), (3600, "1h"), (28800, "8h")],
)
def test_format_seconds(seconds: int, expected: str) -> None:
    assert format_seconds(seconds) == expected


class TestSettingsStore:
    def test_missing_file_creates_defaults(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path / "nested" / "settings.yaml")

        settings = store.load()

        assert settings == Settings()
        assert store.path.exists()

    def test_save_and_load(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path / "settings.yaml")
        settings = Settings(
            refresh_interval_secs=15,
            show_logs_panel=True,
            log_level=LogVerbosity.WARNING,
            default_profile="dev",
        )

        store.save(settings)

        assert store.load() == settings
        assert "log_level: warning" in store.path.read_text()

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("refresh_interval_secs: 30\ntheme: dark\n")

        assert SettingsStore(path).load() == Settings(refresh_interval_secs=30)

    def test_uppercase_log_level_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("log_level: ERROR\n")

        assert SettingsStore(path).load().log_level is LogVerbosity.ERROR

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")

        assert SettingsStore(path).load() == Settings()

    @pytest.mark.parametrize(
        "content",
        [
            "log_level: loud\n",
            "sound_enabled: maybe\n",
            "refresh_interval_secs: soon\n",
            "- just\n- a list\n",
            "refresh_interval_secs: [unclosed\n",
        ],
    )
    def test_invalid_content_raises(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(content)

        with pytest.raises(SettingsError):
            SettingsStore(path).load()

    def test_load_or_default_falls_back(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("log_level: loud\n")

        settings = load_settings_or_default(SettingsStore(path))

        assert settings == Settings()
        assert "Failed to load settings, using defaults" in caplog.text

    def test_default_path_uses_cloudboard_dir(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("CLOUDBOARD_DIR", str(tmp_path))

        assert get_settings_path() == tmp_path / "settings.yaml"
        assert SettingsStore().path == tmp_path / "settings.yaml"
