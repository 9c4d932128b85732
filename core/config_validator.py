"""
Configuration validation for the runtime snapshot.

Externally supplied configuration arrives as a flat mapping, often with
string values read from the environment. The validator normalizes key
names, coerces values to their declared types, and collects errors and
warnings instead of letting malformed values reach the runtime.
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Tuple


logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    def __init__(self, message: str, errors: List[str] = None):
        super().__init__(message)
        self.errors = errors or []


# Canonical field name -> expected type
FIELD_TYPES = {
    "domain": str,
    "port": int,
    "protocol": str,
    "update_enabled": bool,
    "timeout": float,
    "retry_attempts": int,
    "max_connections": int,
    "keep_alive": bool,
    "compression": bool,
    "debug": bool,
    "version": str,
    "environment": str,
}

# Alternative spellings accepted on input
KEY_ALIASES = {
    "host": "domain",
    "domain_key": "domain",
    "port_key": "port",
    "protocol_key": "protocol",
    "updateEnabled": "update_enabled",
    "retryAttempts": "retry_attempts",
    "maxConnections": "max_connections",
    "keepAlive": "keep_alive",
}

KNOWN_PROTOCOLS = ["http", "https", "ws", "wss", "tcp"]
KNOWN_ENVIRONMENTS = ["production", "staging", "development"]

TRUE_STRINGS = ("true", "1", "yes", "on")
FALSE_STRINGS = ("false", "0", "no", "off")


class ConfigValidator:
    """Validates and normalizes a runtime configuration mapping"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.normalized: Dict[str, Any] = {}

    def validate(self, mapping: Mapping[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate a configuration mapping.

        Args:
            mapping: Raw configuration values, any field may be absent

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        self.errors.clear()
        self.warnings.clear()
        self.normalized = {}

        for raw_key, value in mapping.items():
            key = KEY_ALIASES.get(raw_key, raw_key)
            if key not in FIELD_TYPES:
                self.warnings.append(f"Unknown configuration key '{raw_key}' ignored")
                continue
            if key in self.normalized and key != raw_key:
                # Canonical spelling wins over an alias
                continue
            coerced = self._coerce(key, value)
            if coerced is not None:
                self.normalized[key] = coerced

        self._validate_network()
        self._validate_limits()
        self._validate_environment()

        is_valid = len(self.errors) == 0
        return is_valid, self.errors.copy(), self.warnings.copy()

    def _coerce(self, key: str, value: Any) -> Any:
        expected = FIELD_TYPES[key]

        if expected is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in TRUE_STRINGS + FALSE_STRINGS:
                return value.strip().lower() in TRUE_STRINGS
            self.errors.append(f"'{key}' must be a boolean, got {value!r}")
            return None

        if expected in (int, float):
            if isinstance(value, bool):
                self.errors.append(f"'{key}' must be a number, got {value!r}")
                return None
            try:
                number = float(value) if expected is float else int(str(value).strip())
            except (TypeError, ValueError):
                self.errors.append(f"'{key}' must be {'a number' if expected is float else 'an integer'}, got {value!r}")
                return None
            return number

        if not isinstance(value, str):
            self.errors.append(f"'{key}' must be a string, got {type(value).__name__}")
            return None
        return value.strip()

    def _validate_network(self):
        """Validate endpoint settings"""
        domain = self.normalized.get("domain")
        if domain is not None and not domain:
            self.errors.append("'domain' must not be empty")

        port = self.normalized.get("port")
        if port is not None and not 1 <= port <= 65535:
            self.errors.append(f"'port' must be between 1 and 65535, got {port}")

        protocol = self.normalized.get("protocol")
        if protocol is not None:
            if not protocol:
                self.errors.append("'protocol' must not be empty")
            elif protocol.lower() not in KNOWN_PROTOCOLS:
                self.warnings.append(f"Unrecognized protocol '{protocol}'. Known: {', '.join(KNOWN_PROTOCOLS)}")

    def _validate_limits(self):
        """Validate timeout, retry and connection limits"""
        timeout = self.normalized.get("timeout")
        if timeout is not None and not math.isfinite(timeout):
            self.errors.append(f"'timeout' must be a finite number, got {timeout}")
        elif timeout is not None and timeout <= 0:
            self.errors.append(f"'timeout' must be positive, got {timeout}")

        retries = self.normalized.get("retry_attempts")
        if retries is not None and retries < 0:
            self.errors.append(f"'retry_attempts' must not be negative, got {retries}")

        max_connections = self.normalized.get("max_connections")
        if max_connections is not None and max_connections < 1:
            self.errors.append(f"'max_connections' must be at least 1, got {max_connections}")

    def _validate_environment(self):
        environment = self.normalized.get("environment")
        if environment is not None and environment.lower() not in KNOWN_ENVIRONMENTS:
            self.warnings.append(f"Unknown environment '{environment}'. Should be one of: {', '.join(KNOWN_ENVIRONMENTS)}")

        if environment and environment.lower() == "production" and self.normalized.get("debug"):
            self.warnings.append("debug enabled in production may expose sensitive information")


def validate_startup_config(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate configuration on startup.

    Returns:
        The normalized configuration mapping

    Raises:
        ConfigValidationError: If any configuration errors are found
    """
    validator = ConfigValidator()
    is_valid, errors, warnings = validator.validate(mapping)

    for warning in warnings:
        logger.warning(f"Configuration warning: {warning}")

    if not is_valid:
        for error in errors:
            logger.error(f"Configuration error: {error}")

        error_msg = f"Found {len(errors)} configuration error(s): " + "; ".join(errors)
        raise ConfigValidationError(error_msg, errors)

    if warnings:
        logger.info(f"Configuration validated with {len(warnings)} warning(s)")
    else:
        logger.debug("Configuration validated successfully")

    return validator.normalized
