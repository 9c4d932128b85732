"""
Connection manager holding network connection status
"""

import logging
import threading
from typing import Optional, Dict, Any

from network import Transport, TransportError
from .app_logger import Logger
from .logging_config import log_error_with_context
from .runtime_config import RuntimeConfig
from .state_manager import StateManager, ConnectionState


class ConnectionManager:
    """
    Represents the connection to the configured endpoint.

    Without a transport, connect() only announces the target and the status
    stays DISCONNECTED. With a transport, connect() drives
    DISCONNECTED → CONNECTING → CONNECTED/DISCONNECTED.
    """

    def __init__(self,
                 config: RuntimeConfig,
                 logger: Logger,
                 transport: Optional[Transport] = None,
                 dispatcher=None):
        """
        Initialize connection manager

        Args:
            config: Runtime configuration snapshot
            logger: Application logger for diagnostic output
            transport: Optional transport performing the actual connection
            dispatcher: Optional EventDispatcher notified of state changes
        """
        self.config = config
        self.logger = logger
        self.transport = transport
        self.state_manager = StateManager(dispatcher=dispatcher)
        self.connect_lock = threading.Lock()

        self.reconnect_attempts = 0

        self._log = logging.getLogger(__name__)

    @property
    def status(self) -> ConnectionState:
        return self.state_manager.get_state()

    def get_status(self) -> ConnectionState:
        """Get current connection status"""
        return self.state_manager.get_state()

    def connect(self) -> ConnectionState:
        """
        Connect to the configured endpoint

        Returns:
            The status after the attempt
        """
        self.logger.info(f"Attempting to connect to {self.config.target_url}")

        if self.transport is None:
            return self.status

        with self.connect_lock:
            if self.status == ConnectionState.CONNECTED:
                return self.status

            if not self.state_manager.transition_to(ConnectionState.CONNECTING, "Connect requested"):
                return self.status

            try:
                return self._attempt_open()
            except Exception as e:
                self.logger.error(f"Unexpected error connecting to {self.config.target_url}", {
                    "error_type": type(e).__name__, "error": str(e)
                })
                self._log.error(f"Transport open failed: {e}", exc_info=True)
                self._close_transport()
                self.state_manager.transition_to(ConnectionState.DISCONNECTED, "Connection error")
                return self.status

    def _attempt_open(self) -> ConnectionState:
        max_attempts = 1 + self.config.retry_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                self.transport.open(self.config.domain, self.config.port, self.config.timeout)
            except (TransportError, OSError) as e:
                self.reconnect_attempts += 1
                self.logger.warn(f"Connection attempt {attempt}/{max_attempts} failed", {"error": str(e)})
                if self.status != ConnectionState.CONNECTING:
                    # Disconnected while the attempt was in flight
                    return self.status
                continue

            if not self.state_manager.transition_to(ConnectionState.CONNECTED, f"Connected on attempt {attempt}"):
                self.logger.warn(f"Connection to {self.config.target_url} abandoned, disconnect requested during attempt")
                self._close_transport()
                return self.status

            self.reconnect_attempts = 0
            self.logger.info(f"Connected to {self.config.target_url}")
            return self.status

        self.logger.error(f"Failed to connect to {self.config.target_url} after {max_attempts} attempt(s)")
        self.state_manager.transition_to(ConnectionState.DISCONNECTED, "Connection attempts exhausted")
        return self.status

    def disconnect(self):
        """Disconnect and mark status DISCONNECTED, safe to call repeatedly"""
        self.logger.info("Disconnecting...")

        if self.transport is not None and self.status != ConnectionState.DISCONNECTED:
            self._close_transport()

        self.state_manager.transition_to(ConnectionState.DISCONNECTED, "Disconnect requested")

    def _close_transport(self):
        try:
            self.transport.close()
        except Exception as e:
            log_error_with_context(self._log, e, "transport close", endpoint=self.config.target_url)

    def get_stats(self) -> Dict[str, Any]:
        """Get connection statistics"""
        return {
            "status": self.status.value,
            "endpoint": self.config.target_url,
            "reconnect_attempts": self.reconnect_attempts,
            "transition_count": len(self.state_manager.transitions),
            "has_transport": self.transport is not None
        }
