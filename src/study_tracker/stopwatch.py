"""Focus stopwatch with a persisted session log."""
import json
import logging
import threading
import time
from datetime import date, datetime

from study_tracker.db import FOCUS_SESSIONS_KEY, read_slot, write_slot
from study_tracker.errors import ValidationError
from study_tracker.models import FocusSession
from study_tracker.notify import Notification, send
from study_tracker.ticker import Ticker

logger = logging.getLogger(__name__)

SUBJECTS = (
    "Mathematics",
    "Physics",
    "Chemistry",
    "Computer Science",
    "Engineering Graphics",
    "English",
    "Environmental Science",
)

IDLE = "idle"
RUNNING = "running"
PAUSED = "paused"

MIN_SESSION_MS = 1000


def load_sessions(db_path: str) -> list[FocusSession]:
    raw = read_slot(db_path, FOCUS_SESSIONS_KEY)
    if raw is None:
        return []
    try:
        return [FocusSession.from_dict(s) for s in json.loads(raw)]
    except (ValueError, KeyError, TypeError, AttributeError):
        logger.warning("Stored focus sessions under %r are corrupted; starting an empty log", FOCUS_SESSIONS_KEY)
        return []


def save_sessions(db_path: str, sessions: list[FocusSession]) -> None:
    write_slot(db_path, FOCUS_SESSIONS_KEY, json.dumps([s.to_dict() for s in sessions]))


def todays_sessions(sessions: list[FocusSession], today: date | None = None) -> list[FocusSession]:
    today = today or date.today()
    return [s for s in sessions if datetime.fromtimestamp(s.start_time / 1000).date() == today]


def today_focus_time(sessions: list[FocusSession], today: date | None = None) -> int:
    return sum(s.duration for s in todays_sessions(sessions, today))


def subject_time(sessions: list[FocusSession], subject: str) -> int:
    return sum(s.duration for s in sessions if s.subject == subject)


def format_elapsed(ms: int) -> str:
    """HH:MM:SS from one hour on, MM:SS.cc below."""
    hours = ms // 3_600_000
    minutes = (ms % 3_600_000) // 60_000
    seconds = (ms % 60_000) // 1000
    centis = (ms % 1000) // 10
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}.{centis:02d}"


def format_duration(ms: int) -> str:
    hours = ms // 3_600_000
    minutes = (ms % 3_600_000) // 60_000
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class Stopwatch:
    """Idle/Running/Paused stopwatch attributed to one subject label.

    Elapsed time accumulates across pauses. Stopping logs a session unless
    it lasted under a second. ``on_refresh`` is called from the owned
    ticker so a view can redraw; ``interval=None`` disables the ticker.
    """

    def __init__(self, db_path: str, notify=None, on_refresh=None, clock=None,
                 wall_clock=None, interval: float | None = 0.1):
        self.db_path = db_path
        self.notify = notify
        self.subject = SUBJECTS[0]
        self.state = IDLE
        self.sessions = load_sessions(db_path)
        self._clock = clock or _monotonic_ms
        self._wall_clock = wall_clock or _epoch_ms
        self._accumulated = 0
        self._run_started = None
        self._start_time = None
        self._lock = threading.Lock()
        self._ticker = Ticker(interval, on_refresh) if interval and on_refresh else None

    def elapsed_ms(self) -> int:
        with self._lock:
            return self._elapsed()

    def _elapsed(self) -> int:
        if self.state == RUNNING:
            return self._accumulated + (self._clock() - self._run_started)
        return self._accumulated

    def display(self) -> str:
        return format_elapsed(self.elapsed_ms())

    def set_subject(self, subject: str) -> None:
        if self.state != IDLE:
            raise ValidationError("Subject can only be changed while the stopwatch is idle")
        if subject not in SUBJECTS:
            raise ValidationError(f"Unknown subject: {subject}")
        self.subject = subject

    def start(self) -> None:
        """Start from idle or resume from paused."""
        with self._lock:
            if self.state == RUNNING:
                return
            if self.state == IDLE:
                self._start_time = self._wall_clock()
                self._accumulated = 0
            self._run_started = self._clock()
            resumed = self.state == PAUSED
            self.state = RUNNING
        if self._ticker is not None:
            self._ticker.start()
        if resumed:
            send(self.notify, Notification("Focus Resumed", f"Back to {self.subject}."))
        else:
            send(self.notify, Notification(
                "Focus Session Started!",
                f"You're now focusing on {self.subject}. Stay concentrated!",
            ))

    def pause(self) -> None:
        with self._lock:
            if self.state != RUNNING:
                return
            self._accumulated = self._elapsed()
            self._run_started = None
            self.state = PAUSED
        self._cancel_ticker()
        send(self.notify, Notification(
            "Session Paused", "Take a quick break if needed, then resume your focus!",
        ))

    def stop(self) -> FocusSession | None:
        """Finish the run. Returns the logged session, or None if discarded."""
        with self._lock:
            if self.state == IDLE:
                return None
            elapsed = self._elapsed()
            session = None
            if elapsed >= MIN_SESSION_MS:
                session = FocusSession(
                    subject=self.subject,
                    start_time=self._start_time,
                    end_time=self._wall_clock(),
                    duration=elapsed,
                )
                # a failed write leaves the run in progress so stop can be retried
                logged = self.sessions + [session]
                save_sessions(self.db_path, logged)
                self.sessions = logged
            self._clear()
        self._cancel_ticker()
        if session is None:
            logger.info("Discarded %d ms stopwatch run under %s", elapsed, self.subject)
            return None
        logger.info("Logged %d ms focus session for %s", elapsed, self.subject)
        minutes, seconds = elapsed // 60_000, (elapsed % 60_000) // 1000
        send(self.notify, Notification(
            "Focus Session Complete!",
            f"Great job! You focused on {self.subject} for {minutes}m {seconds}s.",
        ))
        return session

    def reset(self) -> None:
        """Drop the current run without logging it."""
        with self._lock:
            self._clear()
        self._cancel_ticker()

    def _clear(self) -> None:
        self.state = IDLE
        self._accumulated = 0
        self._run_started = None
        self._start_time = None

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()

    def todays_sessions(self, today: date | None = None) -> list[FocusSession]:
        return todays_sessions(self.sessions, today)

    def today_focus_time(self, today: date | None = None) -> int:
        return today_focus_time(self.sessions, today)

    def subject_time(self, subject: str) -> int:
        return subject_time(self.sessions, subject)

    def total_focus_time(self) -> int:
        return sum(s.duration for s in self.sessions)

    def recent_sessions(self, count: int = 3) -> list[FocusSession]:
        return list(reversed(self.sessions[-count:])) if count > 0 else []

    def close(self) -> None:
        self._cancel_ticker()

    def __enter__(self) -> "Stopwatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
