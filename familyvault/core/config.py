"""
Configuration Module
====================

Immutable, environment-aware configuration for the batch tool.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- Sensitive keys (password, salt, ...) are never read from the environment
- Crypto parameters are format constants and cannot be configured
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional

from familyvault.utils.paths import default_output_dir


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "private", "credential", "salt",
})

_VALID_LEVELS: Final[frozenset[str]] = frozenset({
    "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "FamilyVault" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "FamilyVault"
    else:  # Linux and others
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "FamilyVault" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration."""

    output_dir: Path = field(default_factory=default_output_dir)
    log_dir: Path = field(default_factory=_get_default_log_dir)

    def __post_init__(self) -> None:
        for field_name in ("output_dir", "log_dir"):
            path = getattr(self, field_name)
            if not path.is_absolute():
                raise ValueError(f"{field_name} must be an absolute path: {path}")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """
    Batch pipeline settings.

    ``workers == 1`` is the sequential reference behavior.
    """

    workers: int = 1
    atomic_writes: bool = True

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError("workers must be at least 1")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False

    def __post_init__(self) -> None:
        if self.level.upper() not in _VALID_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}")


class VaultConfig:
    """
    Centralized, immutable configuration with environment overrides.

    Environment variables are prefixed with FAMILYVAULT_ and use double
    underscores between section and key.

    Usage:
        config = VaultConfig.load()
        output_dir = config.paths.output_dir
        workers = config.pipeline.workers
    """

    __slots__ = ("_paths", "_pipeline", "_logging", "_frozen")

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        pipeline: Optional[PipelineConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use VaultConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_pipeline", pipeline or PipelineConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_frozen", True)

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def pipeline(self) -> PipelineConfig:
        return self._pipeline

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @classmethod
    def load(cls, env_prefix: str = "FAMILYVAULT") -> VaultConfig:
        """
        Load configuration with environment variable overrides.

        Examples:
            FAMILYVAULT_PATHS__OUTPUT_DIR=/srv/images/encrypted
            FAMILYVAULT_PIPELINE__WORKERS=4
            FAMILYVAULT_LOGGING__LEVEL=DEBUG

        Args:
            env_prefix: Prefix for environment variables

        Returns:
            Configured VaultConfig instance

        Raises:
            ValueError: If an override is malformed or out of range
        """
        env_overrides = cls._parse_env_overrides(env_prefix)
        prefix_name = env_prefix.upper()

        paths_kwargs: dict[str, Any] = {}
        if "paths.output_dir" in env_overrides:
            paths_kwargs["output_dir"] = Path(env_overrides["paths.output_dir"]).expanduser().resolve()
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"]).expanduser().resolve()

        pipeline_kwargs: dict[str, Any] = {}
        if "pipeline.workers" in env_overrides:
            try:
                pipeline_kwargs["workers"] = int(env_overrides["pipeline.workers"])
            except ValueError as e:
                raise ValueError(
                    f"{prefix_name}_PIPELINE__WORKERS must be an integer: {env_overrides['pipeline.workers']!r}"
                ) from e
        if "pipeline.atomic_writes" in env_overrides:
            pipeline_kwargs["atomic_writes"] = _parse_bool(env_overrides["pipeline.atomic_writes"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = _parse_bool(env_overrides["logging.enable_console"])
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = _parse_bool(env_overrides["logging.enable_file"])
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = _parse_bool(env_overrides["logging.enable_json"])

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            pipeline=PipelineConfig(**pipeline_kwargs) if pipeline_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # FAMILYVAULT_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    def __repr__(self) -> str:
        return (
            f"VaultConfig(output_dir={str(self._paths.output_dir)!r}, "
            f"workers={self._pipeline.workers})"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if getattr(self, "_frozen", False):
            raise AttributeError("VaultConfig is immutable after initialization")
        super().__setattr__(name, value)
