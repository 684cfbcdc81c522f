"""
Agent Configuration.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional
import yaml

from ..config import Settings
from ..errors import ConfigError


# Target type of each option read from YAML
FIELD_TYPES = {
    "report_interval": int,
    "sample_interval": float,
    "api_host": str,
    "api_port": int,
    "timeout": float,
    "log_level": str,
    "log_file": str,
}
NULLABLE = {"log_file"}


def _coerce(key: str, value):
    """Convert a YAML value to the option's type, raising ConfigError when it can't."""
    if value is None and key in NULLABLE:
        return None

    target = FIELD_TYPES[key]
    if value is None or isinstance(value, (bool, list, dict)):
        raise ConfigError(f"{key} must be {target.__name__}, got {value!r}")

    try:
        if target is int:
            number = float(value)
            if not number.is_integer():
                raise ValueError(value)
            return int(number)
        return target(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be {target.__name__}, got {value!r}") from None


@dataclass
class AgentConfig:
    """Main agent configuration."""
    # Cadence
    report_interval: int = 5  # seconds between flushes
    sample_interval: float = 1.0  # seconds per tick, also the CPU measurement window

    # Collection endpoint
    api_host: str = "localhost"
    api_port: int = 8080
    timeout: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def endpoint(self) -> str:
        """URL the aggregated payload is posted to."""
        return f"http://{self.api_host}:{self.api_port}/metric"

    @classmethod
    def from_yaml(cls, path: str) -> "AgentConfig":
        """Load configuration from YAML file."""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")

        section = data["agent"] if "agent" in data else data
        if not isinstance(section, dict):
            raise ConfigError(f"{path}: 'agent' section must be a mapping")
        return cls._from_dict(section)

    @classmethod
    def from_env(cls) -> "AgentConfig":
        """Load configuration from environment variables."""
        env = Settings()
        return cls(
            report_interval=env.report_interval,
            sample_interval=env.sample_interval,
            api_host=env.api_host,
            api_port=env.api_port,
            timeout=env.timeout,
            log_level=env.log_level,
            log_file=str(env.log_file) if env.log_file else None,
        )

    @classmethod
    def _from_dict(cls, data: dict) -> "AgentConfig":
        """Create config from dictionary."""
        config = cls()
        known = {f.name for f in dataclasses.fields(cls)}

        for key, value in data.items():
            if key not in known:
                raise ConfigError(f"unknown option '{key}'")
            setattr(config, key, _coerce(key, value))

        return config

    def override(self, **values) -> "AgentConfig":
        """Return a copy with every non-None value applied."""
        changes = {k: v for k, v in values.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def validate(self) -> "AgentConfig":
        """Check value ranges, raising ConfigError on the first problem."""
        if self.report_interval < 1:
            raise ConfigError(f"report_interval must be >= 1, got {self.report_interval}")
        if self.sample_interval <= 0:
            raise ConfigError(f"sample_interval must be > 0, got {self.sample_interval}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be > 0, got {self.timeout}")
        if not 1 <= self.api_port <= 65535:
            raise ConfigError(f"api_port must be in 1..65535, got {self.api_port}")
        return self

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    def to_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, 'w') as f:
            yaml.dump({"agent": self.to_dict()}, f, default_flow_style=False)
