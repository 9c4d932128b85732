"""
Labelled wall-clock timers
"""

import logging
import threading
import time
from typing import Dict, Optional

from .logging_config import log_performance


class PerformanceMonitor:
    """Measures the time between start(label) and end(label)"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.metrics: Dict[str, float] = {}
        self.lock = threading.Lock()

    def start(self, label: str):
        """Start (or restart) the timer for label"""
        with self.lock:
            self.metrics[label] = time.perf_counter()

    def end(self, label: str) -> Optional[float]:
        """
        Stop the timer for label and log the elapsed time

        Returns:
            Elapsed milliseconds, or None if label was never started
        """
        with self.lock:
            started = self.metrics.pop(label, None)
        if started is None:
            return None

        duration_ms = (time.perf_counter() - started) * 1000
        log_performance(self.logger, label, duration_ms)
        return duration_ms

    def active(self) -> list:
        with self.lock:
            return list(self.metrics)
