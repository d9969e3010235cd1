"""
waitfor Configuration — loads and validates waitfor.yaml
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger("waitfor.config")


@dataclass
class PollConfig:
    interval_seconds: float = 1.0


@dataclass
class HttpConfig:
    timeout_seconds: float = 10.0


@dataclass
class TcpConfig:
    connect_timeout_seconds: Optional[float] = None  # None = system default


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: Optional[str] = None


@dataclass
class WaitforConfig:
    poll: PollConfig = field(default_factory=PollConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    tcp: TcpConfig = field(default_factory=TcpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "WaitforConfig":
        """Load config from YAML file, falling back to defaults."""
        if config_path is None:
            # Search order: ./waitfor.yaml, ~/.config/waitfor/waitfor.yaml
            candidates = [
                Path("waitfor.yaml"),
                Path("~/.config/waitfor/waitfor.yaml").expanduser(),
            ]
            for candidate in candidates:
                if candidate.exists():
                    config_path = str(candidate)
                    break

        if config_path and Path(config_path).exists():
            with open(config_path) as f:
                raw = yaml.safe_load(f) or {}
            logger.debug(f"Loaded config from {config_path}")
            return cls._from_dict(raw)

        return cls()

    @classmethod
    def _from_dict(cls, data: dict) -> "WaitforConfig":
        """Build config from a parsed YAML mapping, applying env var substitution."""
        config = cls()

        if "poll" in data:
            p = data["poll"] or {}
            config.poll = PollConfig(
                interval_seconds=p.get("interval_seconds", config.poll.interval_seconds),
            )

        if "http" in data:
            h = data["http"] or {}
            config.http = HttpConfig(
                timeout_seconds=h.get("timeout_seconds", config.http.timeout_seconds),
            )

        if "tcp" in data:
            t = data["tcp"] or {}
            config.tcp = TcpConfig(
                connect_timeout_seconds=t.get("connect_timeout_seconds", config.tcp.connect_timeout_seconds),
            )

        if "logging" in data:
            lg = data["logging"] or {}
            config.logging = LoggingConfig(
                level=cls._resolve_env(lg.get("level", config.logging.level)),
                file=cls._resolve_env(lg.get("file", config.logging.file)),
            )

        config._validate()

        return config

    def _validate(self):
        """Validate config values."""
        errors = []

        if not isinstance(self.poll.interval_seconds, (int, float)) or self.poll.interval_seconds <= 0:
            errors.append(f"poll.interval_seconds must be positive, got {self.poll.interval_seconds!r}")
        if not isinstance(self.http.timeout_seconds, (int, float)) or self.http.timeout_seconds <= 0:
            errors.append(f"http.timeout_seconds must be positive, got {self.http.timeout_seconds!r}")
        timeout = self.tcp.connect_timeout_seconds
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            errors.append(f"tcp.connect_timeout_seconds must be positive or null, got {timeout!r}")
        if not isinstance(logging.getLevelName(str(self.logging.level).upper()), int):
            errors.append(f"logging.level is not a known level: '{self.logging.level}'")

        if errors:
            raise ValueError("Config validation errors:\n" + "\n".join(f"  - {e}" for e in errors))

    @classmethod
    def _resolve_env(cls, value):
        """Replace ${ENV_VAR} patterns with environment variable values.

        Handles both full-string (${VAR}) and inline (prefix${VAR}suffix)
        patterns. Unset variables are left as-is.
        """
        if not isinstance(value, str):
            return value

        def _replace(match):
            return os.environ.get(match.group(1), match.group(0))

        return re.sub(r'\$\{([^}]+)\}', _replace, value)
