"""Work/break countdown cycle."""
import logging
import threading

from study_tracker.notify import Notification, send
from study_tracker.settings import PomodoroSettings
from study_tracker.ticker import Ticker

logger = logging.getLogger(__name__)

WORK = "work"
SHORT_BREAK = "shortBreak"
LONG_BREAK = "longBreak"

PHASE_TITLES = {
    WORK: "Focus Time",
    SHORT_BREAK: "Short Break",
    LONG_BREAK: "Long Break",
}


class CountdownCycle:
    """Countdown over Work, ShortBreak and LongBreak phases.

    ``tick`` takes one second off the clock. When the clock reaches zero
    the next phase is armed and the cycle pauses until toggled again.
    Pass ``interval=None`` to drive ``tick`` by hand instead of from the
    owned ticker.
    """

    def __init__(self, settings: PomodoroSettings | None = None, notify=None,
                 sound_enabled: bool = True, interval: float | None = 1.0):
        self.settings = settings or PomodoroSettings()
        self.settings.validate()
        self.notify = notify
        self.sound_enabled = sound_enabled
        self.phase = WORK
        self.phase_length = self.settings.work_duration * 60
        self.remaining = self.phase_length
        self.completed_sessions = 0
        self.running = False
        self._lock = threading.RLock()
        self._ticker = Ticker(interval, self.tick) if interval else None

    def duration_for(self, phase: str) -> int:
        """Configured length of a phase in seconds."""
        minutes = {
            WORK: self.settings.work_duration,
            SHORT_BREAK: self.settings.short_break_duration,
            LONG_BREAK: self.settings.long_break_duration,
        }[phase]
        return minutes * 60

    @property
    def duration(self) -> int:
        return self.duration_for(self.phase)

    @property
    def title(self) -> str:
        return PHASE_TITLES[self.phase]

    def progress(self) -> float:
        """Fraction of the current phase already elapsed, 0.0 to 1.0.

        Measured against the length the phase was armed with, so settings
        changed mid-phase do not move the bar.
        """
        elapsed = (self.phase_length - self.remaining) / self.phase_length
        return min(max(elapsed, 0.0), 1.0)

    def format_time(self) -> str:
        return f"{self.remaining // 60:02d}:{self.remaining % 60:02d}"

    def toggle(self) -> None:
        with self._lock:
            self.running = not self.running
        self._sync_ticker()

    def reset(self) -> None:
        with self._lock:
            self.running = False
            self.phase = WORK
            self._arm()
            self.completed_sessions = 0
        self._sync_ticker()

    def tick(self) -> bool:
        """Advance one second. Returns True if a phase completed."""
        with self._lock:
            if not self.running:
                return False
            self.remaining = max(self.remaining - 1, 0)
            if self.remaining > 0:
                return False
            notification = self._complete_phase()
        self._sync_ticker()
        send(self.notify, notification)
        return True

    def _complete_phase(self) -> Notification:
        self.running = False
        finished = self.phase
        if finished == WORK:
            self.completed_sessions += 1
            long_break = self.completed_sessions % self.settings.sessions_until_long_break == 0
            self.phase = LONG_BREAK if long_break else SHORT_BREAK
            title = "Work Session Complete!"
            message = ("Time for a long break! You've earned it." if long_break
                       else "Time for a short break! Step away from your studies.")
        else:
            self.phase = WORK
            title = "Break Complete!"
            message = "Ready to get back to focused studying?"
        self._arm()
        logger.info("Phase %s complete, next %s (%d work sessions)",
                    finished, self.phase, self.completed_sessions)
        return Notification(title=title, message=message, sound=self.sound_enabled)

    def update_settings(self, settings: PomodoroSettings) -> None:
        """Apply new durations.

        A paused cycle sitting at the very start of its phase picks up the
        new length immediately; otherwise it applies from the next phase.
        """
        settings.validate()
        with self._lock:
            untouched = not self.running and self.remaining == self.phase_length
            self.settings = settings
            if untouched:
                self._arm()

    def _arm(self) -> None:
        self.phase_length = self.duration
        self.remaining = self.phase_length

    def _sync_ticker(self) -> None:
        # never called with the lock held: cancel joins the ticker thread
        if self._ticker is None:
            return
        if self.running and not self._ticker.running:
            self._ticker.start()
        elif not self.running and self._ticker.running:
            self._ticker.cancel()

    def close(self) -> None:
        with self._lock:
            self.running = False
        if self._ticker is not None:
            self._ticker.cancel()

    def __enter__(self) -> "CountdownCycle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
