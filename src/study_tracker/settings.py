"""Persisted user settings."""
from dataclasses import asdict, dataclass

from study_tracker.db import get_connection
from study_tracker.errors import ValidationError

WORK_CHOICES = (15, 20, 25, 30, 45)
SHORT_BREAK_CHOICES = (3, 5, 10)
LONG_BREAK_CHOICES = (10, 15, 20, 30)


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


@dataclass
class PomodoroSettings:
    work_duration: int = 25  # minutes
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4

    def validate(self) -> None:
        for name, value in asdict(self).items():
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValidationError(f"{name.replace('_', ' ')} must be a positive whole number")


def load_pomodoro_settings(db_path: str) -> PomodoroSettings:
    """Read timer settings; missing or unreadable values use the defaults."""
    defaults = PomodoroSettings()
    values = {}
    for name, default in asdict(defaults).items():
        raw = get_setting(db_path, name)
        try:
            value = int(raw) if raw is not None else default
        except ValueError:
            value = default
        values[name] = value if value > 0 else default
    return PomodoroSettings(**values)


def save_pomodoro_settings(db_path: str, settings: PomodoroSettings) -> None:
    settings.validate()
    for name, value in asdict(settings).items():
        set_setting(db_path, name, str(value))


def get_sound_enabled(db_path: str) -> bool:
    return get_setting(db_path, "sound_enabled", "1") == "1"


def set_sound_enabled(db_path: str, enabled: bool) -> None:
    set_setting(db_path, "sound_enabled", "1" if enabled else "0")
