"""
Configuration file support for schemcap.

Provides hierarchical configuration loading from:
1. Project config: .schemcap.toml or schemcap.toml in project root
2. User config: ~/.config/schemcap/config.toml

Project config overrides user config, which overrides the built-in defaults.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import ConfigError
from .geometry import GRID_SIZE
from .history import DEFAULT_HISTORY_DEPTH
from .snap import SNAP_TOLERANCE

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".schemcap.toml", "schemcap.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "schemcap" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "grid": {"size"},
    "snap": {"tolerance"},
    "history": {"depth"},
    "logging": {"verbose", "level"},
}


@dataclass
class GridConfig:
    """Placement grid."""

    size: float = GRID_SIZE


@dataclass
class SnapConfig:
    """Pointer attachment."""

    tolerance: float = SNAP_TOLERANCE


@dataclass
class HistoryConfig:
    """Undo/redo stack."""

    depth: int = DEFAULT_HISTORY_DEPTH


@dataclass
class LoggingConfig:
    verbose: bool = False
    level: str = "INFO"


@dataclass
class Config:
    """Merged configuration from all sources."""

    grid: GridConfig = field(default_factory=GridConfig)
    snap: SnapConfig = field(default_factory=SnapConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Track which file each setting came from
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object

        Raises:
            ConfigError: If a config file is not valid TOML or holds bad values
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(Path(start_dir))
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key, e.g. ``"grid.size"``."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _require_positive(section: str, key: str, value: Any, source: str) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(
            f"'{section}.{key}' must be a positive number, got {value!r}",
            context={"file": source},
        )
    return value


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "grid" in data:
        grid_data = data["grid"]
        _warn_unknown_keys(grid_data, KNOWN_KEYS["grid"], "grid", source)

        if "size" in grid_data:
            config.grid.size = _require_positive("grid", "size", grid_data["size"], source)
            sources["grid.size"] = source

    if "snap" in data:
        snap_data = data["snap"]
        _warn_unknown_keys(snap_data, KNOWN_KEYS["snap"], "snap", source)

        if "tolerance" in snap_data:
            config.snap.tolerance = _require_positive(
                "snap", "tolerance", snap_data["tolerance"], source
            )
            sources["snap.tolerance"] = source

    if "history" in data:
        history_data = data["history"]
        _warn_unknown_keys(history_data, KNOWN_KEYS["history"], "history", source)

        if "depth" in history_data:
            config.history.depth = int(
                _require_positive("history", "depth", history_data["depth"], source)
            )
            sources["history.depth"] = source

    if "logging" in data:
        logging_data = data["logging"]
        _warn_unknown_keys(logging_data, KNOWN_KEYS["logging"], "logging", source)

        if "verbose" in logging_data:
            config.logging.verbose = bool(logging_data["verbose"])
            sources["logging.verbose"] = source
        if "level" in logging_data:
            config.logging.level = str(logging_data["level"]).upper()
            sources["logging.level"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return f"""# schemcap configuration file
# Place as .schemcap.toml in project root or ~/.config/schemcap/config.toml for user defaults

[grid]
# Grid spacing in model units; placements and wire drags snap to it
# size = {GRID_SIZE}

[snap]
# Half-width of the square box within which the pointer attaches to a
# pin, wire end or wire run
# tolerance = {SNAP_TOLERANCE}

[history]
# Number of undo steps kept
# depth = {DEFAULT_HISTORY_DEPTH}

[logging]
# Print editor operations to stderr
# verbose = false

# Level used when verbose: DEBUG, INFO, WARNING, ERROR
# level = "INFO"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
