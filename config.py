"""
Centralized configuration for the client runtime
"""

import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv, dotenv_values

from core.config_validator import KEY_ALIASES
from core.runtime_config import DEFAULT_ENVIRONMENT, RuntimeConfig
from utils import merge_dicts

load_dotenv()

# Environment variable -> runtime configuration field
ENV_KEYS = {
    "APP_DOMAIN": "domain",
    "APP_PORT": "port",
    "APP_PROTOCOL": "protocol",
    "APP_UPDATE_ENABLED": "update_enabled",
    "APP_TIMEOUT": "timeout",
    "APP_RETRY_ATTEMPTS": "retry_attempts",
    "APP_MAX_CONNECTIONS": "max_connections",
    "APP_KEEP_ALIVE": "keep_alive",
    "APP_COMPRESSION": "compression",
    "APP_DEBUG": "debug",
    "APP_VERSION": "version",
    "ENVIRONMENT": "environment",
}

# Runtime settings (values from the environment are validated on load)
RUNTIME_CONFIG = {
    "domain": os.getenv("APP_DOMAIN", "new.example.com"),
    "port": os.getenv("APP_PORT", 8080),
    "protocol": os.getenv("APP_PROTOCOL", "https"),
    "update_enabled": os.getenv("APP_UPDATE_ENABLED", False),
    "timeout": os.getenv("APP_TIMEOUT", 30.0),  # seconds
    "retry_attempts": os.getenv("APP_RETRY_ATTEMPTS", 3),
    "max_connections": os.getenv("APP_MAX_CONNECTIONS", 10),
    "keep_alive": os.getenv("APP_KEEP_ALIVE", True),
    "compression": os.getenv("APP_COMPRESSION", True),
    "debug": os.getenv("APP_DEBUG", False),
    "version": os.getenv("APP_VERSION", "2.5.1"),
    "environment": os.getenv("ENVIRONMENT", DEFAULT_ENVIRONMENT),
}

# Application logger level (DEBUG, INFO, WARN, ERROR)
APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")

# Connection transport: "none" keeps connect() a stub, "tcp" opens a TCP connection
APP_TRANSPORT = os.getenv("APP_TRANSPORT", "none")

# Logging configuration
LOGGING_CONFIG = {
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "log_dir": os.getenv("LOG_DIR", "./logs"),
    "enable_file_logging": os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true",
    "enable_console_logging": os.getenv("ENABLE_CONSOLE_LOGGING", "true").lower() == "true",
    "structured_logging": os.getenv("ENVIRONMENT", DEFAULT_ENVIRONMENT).lower() == "production",
    "max_log_size_mb": int(os.getenv("MAX_LOG_SIZE_MB", "10")),
    "backup_count": int(os.getenv("LOG_BACKUP_COUNT", "5")),
}


def read_env_file(path: str) -> Dict[str, Any]:
    """Read runtime fields from a .env-style file, ignoring unrelated keys"""
    values = dotenv_values(path)
    return {
        ENV_KEYS[key]: value
        for key, value in values.items()
        if key in ENV_KEYS and value is not None
    }


def load_runtime_config(overrides: Optional[Mapping[str, Any]] = None,
                        env_file: Optional[str] = None,
                        base: Optional[Mapping[str, Any]] = None) -> RuntimeConfig:
    """
    Build the runtime configuration snapshot.

    Layers, lowest priority first: RUNTIME_CONFIG (or base), the env file,
    then overrides.

    Raises:
        ConfigValidationError: If the merged values are invalid
    """
    values = dict(RUNTIME_CONFIG if base is None else base)
    if env_file:
        values = merge_dicts(values, read_env_file(env_file))
    if overrides:
        values = merge_dicts(values, {KEY_ALIASES.get(k, k): v for k, v in overrides.items()})
    return RuntimeConfig.from_mapping(values)
