"""
Host environment lifecycle signals.

The host owns the process-level hooks (signal handlers, excepthooks, the
asyncio exception handler) and turns them into named events on its own
dispatcher, so the runtime only ever subscribes to event names.
"""

import logging
import signal
import sys
import threading
import traceback
from typing import Any, Callable, Dict, Optional

from events import EventDispatcher, EventTypes


logger = logging.getLogger(__name__)


class HostEnvironment:
    """Source of ready / resource-loaded / before-teardown / error signals"""

    SHUTDOWN_SIGNALS = ("SIGINT", "SIGTERM")

    def __init__(self, dispatcher: Optional[EventDispatcher] = None):
        self.dispatcher = dispatcher or EventDispatcher()
        self.stopped = threading.Event()

        self._started = False
        self._torn_down = False
        self._lock = threading.Lock()

        self._installed = False
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        self._previous_signal_handlers: Dict[int, Any] = {}

    def add_listener(self, signal_name: str, handler: Callable[[Any], None]):
        """Subscribe handler to a host signal"""
        self.dispatcher.on(signal_name, handler)

    def start(self):
        """Signal readiness, then that resources are loaded"""
        with self._lock:
            if self._started:
                return
            self._started = True

        self.dispatcher.emit(EventTypes.READY, None)
        self.dispatcher.emit(EventTypes.RESOURCE_LOADED, None)

    def teardown(self):
        """Signal imminent shutdown; only the first call emits"""
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True

        try:
            self.dispatcher.emit(EventTypes.BEFORE_TEARDOWN, None)
        finally:
            self.stopped.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until teardown, returns True if teardown happened"""
        return self.stopped.wait(timeout)

    @property
    def is_running(self) -> bool:
        return self._started and not self._torn_down

    # Error reporting

    def report_exception(self, error: BaseException, tb=None):
        """Forward an exception to uncaught-error subscribers"""
        tb = tb if tb is not None else error.__traceback__
        details = {
            "message": str(error) or type(error).__name__,
            "source": None,
            "lineno": None,
            "colno": None,
            "error": error
        }
        frames = traceback.extract_tb(tb) if tb is not None else []
        if frames:
            last = frames[-1]
            details["source"] = last.filename
            details["lineno"] = last.lineno
            details["colno"] = getattr(last, "colno", None)

        self.dispatcher.emit(EventTypes.UNCAUGHT_ERROR, details)

    def asyncio_exception_handler(self, loop, context: Dict[str, Any]):
        """Exception handler for asyncio event loops"""
        reason = context.get("exception")
        self.dispatcher.emit(EventTypes.UNHANDLED_ASYNC_FAILURE, {
            "reason": reason if reason is not None else context.get("message"),
            "message": context.get("message", "")
        })

    def attach_to_loop(self, loop):
        loop.set_exception_handler(self.asyncio_exception_handler)

    # Process hooks

    def install(self, handle_signals: bool = True):
        """Install excepthooks and, on the main thread, shutdown signal handlers"""
        if self._installed:
            return

        self._previous_excepthook = sys.excepthook
        self._previous_threading_excepthook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook

        if handle_signals and threading.current_thread() is threading.main_thread():
            for name in self.SHUTDOWN_SIGNALS:
                signum = getattr(signal, name, None)
                if signum is None:
                    continue
                self._previous_signal_handlers[signum] = signal.signal(signum, self._signal_handler)

        self._installed = True

    def uninstall(self):
        """Restore the hooks replaced by install()"""
        if not self._installed:
            return

        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_excepthook
        for signum, handler in self._previous_signal_handlers.items():
            signal.signal(signum, handler)
        self._previous_signal_handlers.clear()

        self._installed = False

    def _excepthook(self, exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            self._previous_excepthook(exc_type, exc_value, exc_tb)
            return
        self.report_exception(exc_value, exc_tb)

    def _threading_excepthook(self, args):
        if args.exc_value is None:
            return
        self.report_exception(args.exc_value, args.exc_traceback)

    def _signal_handler(self, signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, tearing down")
        self.teardown()
