"""
Core runtime components: logging, configuration, connection state and host lifecycle
"""

from .app_logger import Logger, LogLevel, LogRecord
from .config_validator import ConfigValidator, ConfigValidationError
from .connection_manager import ConnectionManager
from .host_environment import HostEnvironment
from .performance import PerformanceMonitor
from .runtime_config import RuntimeConfig
from .state_manager import StateManager, ConnectionState

__all__ = [
    "Logger", "LogLevel", "LogRecord",
    "ConfigValidator", "ConfigValidationError",
    "ConnectionManager", "HostEnvironment", "PerformanceMonitor",
    "RuntimeConfig", "StateManager", "ConnectionState",
]
