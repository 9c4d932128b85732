"""
Immutable runtime configuration snapshot
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from .config_validator import validate_startup_config


DEFAULT_ENVIRONMENT = "production"


@dataclass(frozen=True)
class RuntimeConfig:
    """Configuration captured once at startup; use replace() for a changed copy"""
    domain: str = "new.example.com"
    port: int = 8080
    protocol: str = "https"
    update_enabled: bool = False
    timeout: float = 30.0
    retry_attempts: int = 3
    max_connections: int = 10
    keep_alive: bool = True
    compression: bool = True
    debug: bool = False
    version: str = "2.5.1"
    environment: str = DEFAULT_ENVIRONMENT

    @property
    def target_url(self) -> str:
        """Endpoint as protocol://host:port"""
        return f"{self.protocol}://{self.domain}:{self.port}"

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RuntimeConfig":
        """
        Build a snapshot from a raw mapping, absent fields take their defaults

        Raises:
            ConfigValidationError: If the mapping contains invalid values
        """
        return cls(**validate_startup_config(mapping))

    def replace(self, **changes) -> "RuntimeConfig":
        """Return a new validated snapshot with the given fields changed"""
        return self.from_mapping({**self.to_dict(), **changes})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
