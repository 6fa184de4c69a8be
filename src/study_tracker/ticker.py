"""Periodic callback handle owned by a timer state machine."""
import threading


class Ticker:
    """Calls ``callback`` every ``interval`` seconds until cancelled.

    At most one pending callback exists: ``start`` on a running ticker
    cancels the previous schedule first. Use as a context manager to tie
    the schedule to a block.
    """

    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self._stop = None
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> "Ticker":
        self.cancel()
        stop = threading.Event()
        self._stop = stop
        self._thread = threading.Thread(target=self._run, args=(stop,), daemon=True)
        self._thread.start()
        return self

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.callback()

    def cancel(self) -> None:
        if self._stop is not None:
            self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def __enter__(self) -> "Ticker":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
