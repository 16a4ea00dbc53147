"""
Configuration file support for symbol-tools.

Provides hierarchical configuration loading from:
1. Project config: .symbol-tools.toml or symbol-tools.toml in project root
2. User config: ~/.config/symbol-tools/config.toml

CLI arguments override config file values, and project config overrides user config.

The section dataclasses double as the option objects passed to the converters
and the geometry engine, so library callers can build them directly without
touching any file.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError
from .units import EASYEDA_UNIT_MM

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".symbol-tools.toml", "symbol-tools.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "symbol-tools" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "units", "verbose", "quiet"},
    "geometry": {
        "padding",
        "text_width_factor",
        "text_height_factor",
        "default_font_size",
        "include_pin_labels",
    },
    "easyeda": {"scale"},
    "kicad": {"dedupe_precision", "default_pin_length"},
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    units: str | None = None
    verbose: bool = False
    quiet: bool = False


@dataclass
class GeometryConfig:
    """Bounding-box and text-extent heuristics."""

    padding: float = 0.5
    text_width_factor: float = 0.6
    text_height_factor: float = 1.0
    default_font_size: float = 1.27
    include_pin_labels: bool = False


@dataclass
class EasyEDAConfig:
    """EasyEDA conversion settings."""

    scale: float = EASYEDA_UNIT_MM


@dataclass
class KiCadConfig:
    """KiCad conversion settings."""

    dedupe_precision: int = 2
    default_pin_length: float = 2.54


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    easyeda: EasyEDAConfig = field(default_factory=EasyEDAConfig)
    kicad: KiCadConfig = field(default_factory=KiCadConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
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
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<dict>") -> "Config":
        """Build a configuration from already-parsed TOML data."""
        config = cls()
        _merge_config(config, data, source, config._sources)
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return every section as a plain nested dict."""
        return {
            section: {f.name: getattr(getattr(self, section), f.name) for f in fields(getattr(self, section))}
            for section in KNOWN_KEYS
        }


class ConfigError(ConfigurationError):
    """Configuration file could not be read or parsed."""

    pass


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


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


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

    for section, known in KNOWN_KEYS.items():
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigError(
                f"Config section [{section}] must be a table",
                context={"file": source, "got": type(section_data).__name__},
            )
        _warn_unknown_keys(section_data, known, section, source)

        target = getattr(config, section)
        for key in sorted(known):
            if key in section_data:
                setattr(target, key, section_data[key])
                sources[f"{section}.{key}"] = source


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
    return """# symbol-tools configuration file
# Place as .symbol-tools.toml in project root or ~/.config/symbol-tools/config.toml for user defaults

[defaults]
# Output format: table, json
# format = "table"

# Display units: mm, mils
# units = "mm"

# Enable verbose output by default
# verbose = false

# Enable quiet mode by default
# quiet = false

[geometry]
# Margin added on every side of a local bounding box, in mm
# padding = 0.5

# Estimated glyph width and height as a fraction of font size
# text_width_factor = 0.6
# text_height_factor = 1.0

# Font size used when a text primitive does not carry one
# default_font_size = 1.27

# Include pin name/number labels in local bounding boxes
# include_pin_labels = false

[easyeda]
# Source unit to mm scale factor
# scale = 0.254

[kicad]
# Decimal places used when collapsing duplicate pins across units
# dedupe_precision = 2

# Pin length used when a pin has no (length ...) clause
# default_pin_length = 2.54
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
