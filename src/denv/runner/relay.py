"""
Signal relay
============
Forwards SIGHUP, SIGINT, SIGTERM and SIGQUIT received by denv to the child
process started by `exec`.

Signal handlers only enqueue the signal number. A background thread drains
the queue and forwards each signal. The process handle reaches that thread
through the same queue, so the thread never forwards before it has seen the
child start.
"""

import queue
import signal
import threading
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from denv.logger import Logger, get_logger

FORWARDED_SIGNALS: Tuple[signal.Signals, ...] = (
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGTERM,
    signal.SIGQUIT,
)

_SIGNAL = "signal"
_STARTED = "started"
_STOP = "stop"

_Handler = Union[Callable[[int, Any], Any], int, None]


class SignalTarget(Protocol):
    """Anything signals can be forwarded to (subprocess.Popen qualifies)."""

    pid: int

    def send_signal(self, sig: int) -> None: ...


def signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


class SignalRelay:
    """Relay operating-system signals to a child process.

    Example:
        relay = SignalRelay()
        relay.start()
        try:
            process = subprocess.Popen(argv)
            relay.publish(process)
            process.wait()
        finally:
            relay.stop()
    """

    def __init__(
        self,
        signals: Sequence[int] = FORWARDED_SIGNALS,
        logger: Optional[Logger] = None,
    ):
        """
        Args:
            signals: Signals to intercept and forward
            logger: Optional logger instance. Creates one if not provided.
        """
        self.signals = tuple(signals)
        self.logger = logger if logger is not None else get_logger()
        self._inbox: "queue.SimpleQueue[Tuple[str, Any]]" = queue.SimpleQueue()
        self._thread: Optional[threading.Thread] = None
        self._previous: Dict[int, _Handler] = {}
        self.forwarded: List[int] = []

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "SignalRelay":
        """Install signal handlers and start the relay thread.

        Handlers can only be installed from the main thread; elsewhere the
        relay runs without intercepting anything.

        Returns:
            self for chaining
        """
        if threading.current_thread() is threading.main_thread():
            for signum in self.signals:
                self._previous[signum] = signal.signal(signum, self._on_signal)
        else:
            self.logger.warning("Not on the main thread, signals will not be forwarded")

        self._thread = threading.Thread(target=self._relay_loop, daemon=True, name="denv-signal-relay")
        self._thread.start()
        return self

    def publish(self, process: SignalTarget) -> None:
        """Hand the started child process to the relay thread."""
        self._inbox.put((_STARTED, process))

    def stop(self) -> None:
        """Restore previous handlers and stop the relay thread.

        Signals already queued are processed before the thread exits.
        """
        for signum, handler in self._previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()

        if self._thread is not None:
            self._inbox.put((_STOP, None))
            self._thread.join(timeout=5)
            self._thread = None

    def _on_signal(self, signum: int, frame: Any) -> None:
        self._inbox.put((_SIGNAL, signum))

    def _relay_loop(self) -> None:
        # Keep process-directed signals on the main thread, where the handlers run
        signal.pthread_sigmask(signal.SIG_BLOCK, self.signals)
        process: Optional[SignalTarget] = None
        while True:
            kind, payload = self._inbox.get()
            if kind == _STOP:
                return
            if kind == _STARTED:
                process = payload
                continue
            if process is None:
                self.logger.debug("Child not started yet, signal dropped", signal=signal_name(payload))
                continue
            self._forward(process, payload)

    def _forward(self, process: SignalTarget, signum: int) -> None:
        try:
            process.send_signal(signum)
        except OSError as e:
            # Child already gone
            self.logger.debug("Signal not delivered", signal=signal_name(signum), error=str(e))
            return
        self.forwarded.append(signum)
        self.logger.debug("Forwarded signal", signal=signal_name(signum), pid=process.pid)

    def __enter__(self) -> "SignalRelay":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
