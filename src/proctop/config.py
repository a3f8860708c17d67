"""Configuration system for proctop."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

import tomlkit

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class DisplayConfig:
    """Dashboard cadence and layout."""

    poll_interval: float = 1.0  # Seconds between refreshes
    name_width: int = 27  # Max characters of a process name, ellipsis included


@dataclass
class SamplingConfig:
    """CPU delta computation settings."""

    # False: CPU% assumes exactly poll_interval elapsed between cycles.
    # True: CPU% uses the measured wall-clock time between cycles.
    measure_elapsed: bool = False


@dataclass
class LoggingConfig:
    """Log file settings."""

    level: str = "warning"
    max_bytes: int = 1024 * 1024  # Max log file size (1MB)
    backup_count: int = 2  # Number of rotated log files to keep


@dataclass
class Config:
    """Main configuration container."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "proctop"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory for logs."""
        return Path.home() / ".local" / "state" / "proctop"

    @property
    def log_path(self) -> Path:
        return self.state_dir / "proctop.log"

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if self.display.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.display.poll_interval}")
        if self.display.name_width < 4:
            raise ValueError(f"name_width must be >= 4, got {self.display.name_width}")
        if self.logging.level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid logging level: {self.logging.level!r}. Must be one of {LOG_LEVELS}"
            )
        if self.logging.max_bytes < 1:
            raise ValueError(f"max_bytes must be >= 1, got {self.logging.max_bytes}")
        if self.logging.backup_count < 0:
            raise ValueError(f"backup_count must be >= 0, got {self.logging.backup_count}")

    def save(self, path: Path | None = None) -> None:
        """Save config to TOML file."""
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)

        doc = tomlkit.document()
        for name in ("display", "sampling", "logging"):
            section = getattr(self, name)
            table = tomlkit.table()
            for f in fields(section):
                table.add(f.name, getattr(section, f.name))
            doc.add(name, table)
            doc.add(tomlkit.nl())

        path.write_text(tomlkit.dumps(doc))

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values."""
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        display_data = _section(data, "display")
        sampling_data = _section(data, "sampling")
        logging_data = _section(data, "logging")

        disp_defaults = defaults.display
        log_defaults = defaults.logging

        config = cls(
            display=DisplayConfig(
                poll_interval=float(
                    display_data.get("poll_interval", disp_defaults.poll_interval)
                ),
                name_width=int(display_data.get("name_width", disp_defaults.name_width)),
            ),
            sampling=SamplingConfig(
                measure_elapsed=_load_bool(
                    sampling_data, "measure_elapsed", defaults.sampling.measure_elapsed
                ),
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", log_defaults.level)).lower(),
                max_bytes=int(logging_data.get("max_bytes", log_defaults.max_bytes)),
                backup_count=int(logging_data.get("backup_count", log_defaults.backup_count)),
            ),
        )
        config.validate()
        return config


def _section(data: dict, name: str) -> dict:
    """Return a top-level TOML table, or an empty dict if absent."""
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ValueError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _load_bool(data: dict, key: str, default: bool) -> bool:
    """Read a TOML boolean, rejecting strings and numbers."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value
