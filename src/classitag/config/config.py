"""Configuration management for classitag."""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from classitag import __version__
from classitag.config.file_ops import write_text_file
from classitag.config.paths import default_config_path
from classitag.platform.logging import logger


class ConfigError(Exception):
    """Raised when the config file cannot be parsed or holds invalid values."""


def _path_field(default: Path | None = None) -> Any:
    """Dataclass field flagged for ``str`` to ``Path`` conversion."""
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Application configuration."""

    # Log file path; the default log location is used when unset
    log_file: Path | None = _path_field()

    # HTTP fetcher settings
    http_timeout: float = 15.0
    http_max_attempts: int = 2
    user_agent: str = f"classitag/{__version__}"

    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value.strip() else None)

        if self.http_timeout <= 0:
            raise ConfigError("http_timeout must be positive")
        if self.http_max_attempts < 1:
            raise ConfigError("http_max_attempts must be at least 1")

    def save(self, path: Path | None = None) -> Path:
        """Write the configuration as commented TOML and return the target path."""

        config_dict = asdict(self)
        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        target = path or default_config_path()
        write_text_file(target, self._render_toml(config_dict))
        logger.info("Configuration saved to %s", target)
        return target

    def _render_toml(self, config: dict[str, Any]) -> str:
        lines: list[str] = ["# classitag configuration file", ""]

        lines.append("# Log file path (optional)")
        lines.append('# Example: log_file = "/path/to/logs/classitag.log"')
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        lines.append("# Seconds to wait for a catalogue page")
        lines.append(f"http_timeout = {self._format_toml_value(config['http_timeout'])}")
        lines.append("")

        lines.append("# Attempts per page; throttled and 5xx responses are retried")
        lines.append(f"http_max_attempts = {self._format_toml_value(config['http_max_attempts'])}")
        lines.append("")

        lines.append("# User-Agent header sent with every request")
        lines.append(f"user_agent = {self._format_toml_value(config['user_agent'])}")
        lines.append("")
        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return str(value)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load the configuration, falling back to defaults when the file is absent.

        Raises:
            ConfigError: The file is not valid TOML or names unknown keys.
        """

        config_file = path or default_config_path()
        if cls._instance is not None and cls._loaded_from == config_file:
            return cls._instance

        if not config_file.exists():
            logger.debug("No configuration at %s; using defaults", config_file)
            instance = cls()
        else:
            try:
                with open(config_file, "rb") as f:
                    config_dict = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"invalid TOML in {config_file}: {exc}") from exc

            known = {f.name for f in fields(cls)}
            unknown = sorted(set(config_dict) - known)
            if unknown:
                raise ConfigError(f"unknown configuration key(s) in {config_file}: {', '.join(unknown)}")
            try:
                instance = cls(**config_dict)
            except TypeError as exc:
                raise ConfigError(f"invalid configuration in {config_file}: {exc}") from exc
            logger.debug("Configuration loaded from %s", config_file)

        cls._instance = instance
        cls._loaded_from = config_file
        return instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance."""
        cls._instance = None
        cls._loaded_from = None


__all__ = ["Config", "ConfigError"]
