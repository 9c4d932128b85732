#!/usr/bin/env python3
"""
Main application - Wires configuration, logging, events, cache and connection
management together and starts them when the host signals readiness
"""

import logging
import sys
from typing import Any, Dict, Optional

import utils
from config import LOGGING_CONFIG, APP_LOG_LEVEL, APP_TRANSPORT, load_runtime_config
from core import (
    ConnectionManager, HostEnvironment, Logger, LogLevel,
    PerformanceMonitor, RuntimeConfig, ConfigValidationError
)
from core.logging_config import setup_logging, get_logger
from events import EventDispatcher, EventEmitter, EventTypes
from network import TcpTransport, Transport
from storage import Cache


class ClientRuntime:
    """Composition root sequencing startup and shutdown"""

    def __init__(self,
                 config: RuntimeConfig,
                 logger: Optional[Logger] = None,
                 host: Optional[HostEnvironment] = None,
                 transport: Optional[Transport] = None,
                 cache: Optional[Cache] = None,
                 events: Optional[EventDispatcher] = None):
        self.config = config
        self.logger = logger or Logger(LogLevel.DEBUG if config.debug else LogLevel.INFO)
        self.host = host or HostEnvironment()
        self.cache = cache or Cache()
        self.events = events or EventDispatcher()
        self.performance = PerformanceMonitor(logging.getLogger(__name__))

        self.connection_manager = ConnectionManager(
            config=self.config,
            logger=self.logger,
            transport=transport,
            dispatcher=self.events
        )

        self.initialized = False

        # Last-resort error reporting is active before readiness
        self.host.add_listener(EventTypes.UNCAUGHT_ERROR, self._handle_uncaught_error)
        self.host.add_listener(EventTypes.UNHANDLED_ASYNC_FAILURE, self._handle_async_failure)
        self.host.add_listener(EventTypes.READY, self._handle_ready)

    def init(self):
        """Log configuration, connect, and register lifecycle handlers"""
        if self.initialized:
            return
        self.initialized = True

        self.performance.start("init")

        self.logger.info("Application starting...")
        self.logger.info("Configuration loaded:", self.config.to_dict())

        if self.config.update_enabled:
            self.logger.info("Update mechanism is enabled")
            self.logger.info(f"Target: {self.config.target_url}")
        else:
            self.logger.warn("Update mechanism is disabled")

        self.connection_manager.connect()

        self.host.add_listener(EventTypes.RESOURCE_LOADED, self._handle_loaded)
        self.host.add_listener(EventTypes.BEFORE_TEARDOWN, self._handle_teardown)

        self.performance.end("init")

    def _handle_ready(self, _data):
        self.init()

    def _handle_loaded(self, _data):
        self.logger.info("Resources loaded")

    def _handle_teardown(self, _data):
        self.connection_manager.disconnect()
        self.logger.info("Application shutting down...")

    def _handle_uncaught_error(self, details: Dict[str, Any]):
        self.logger.error("Global error caught:", details)

    def _handle_async_failure(self, details: Dict[str, Any]):
        self.logger.error("Unhandled async failure:", details.get("reason"))

    def exports(self) -> Dict[str, Any]:
        """Components exposed to an embedding host"""
        return {
            "config": self.config,
            "utils": utils,
            "network": self.connection_manager,
            "storage": self.cache,
            "logger": self.logger,
            "EventEmitter": EventEmitter,
        }

    def run(self, handle_signals: bool = True):
        """Install host hooks, start, and block until teardown"""
        self.host.install(handle_signals=handle_signals)
        try:
            self.host.start()
            while not self.host.wait(timeout=1.0):
                pass
        except KeyboardInterrupt:
            self.stop()
        finally:
            self.host.uninstall()

    def stop(self):
        """Trigger host teardown"""
        self.host.teardown()


def build_transport(name: str, runtime_config: RuntimeConfig) -> Optional[Transport]:
    """
    Create the transport selected by name.

    Raises:
        ConfigValidationError: If the name is not a known transport
    """
    name = (name or "none").strip().lower()
    if name == "none":
        return None
    if name == "tcp":
        return TcpTransport(keep_alive=runtime_config.keep_alive)
    raise ConfigValidationError(f"Unknown transport '{name}'", ["'transport' must be one of: none, tcp"])


def parse_log_level(name: str) -> LogLevel:
    name = name.strip().upper()
    if name == "WARNING":
        name = "WARN"
    try:
        return LogLevel[name]
    except KeyError:
        return LogLevel.INFO


if __name__ == "__main__":
    # Setup logging system
    setup_logging(LOGGING_CONFIG)
    logger = get_logger(__name__)

    try:
        runtime_config = load_runtime_config()
        transport = build_transport(APP_TRANSPORT, runtime_config)
    except ConfigValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    app_logger = Logger(LogLevel.DEBUG if runtime_config.debug else parse_log_level(APP_LOG_LEVEL))
    runtime = ClientRuntime(runtime_config, logger=app_logger, transport=transport)

    try:
        runtime.run()
    except Exception as e:
        logger.error("Client runtime failed", exc_info=True, extra={
            "extra_data": {"error_type": type(e).__name__, "error_message": str(e)}
        })
        sys.exit(1)
