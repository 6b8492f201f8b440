"""Configuration loader for curlparse.

Settings come from the first readable YAML file, checked in priority order:
1. An explicit path (``curlparse --config PATH``)
2. User config: ~/.config/curlparse/config.yaml
3. Project config: .curlparse/config.yaml in current directory
4. Package defaults: shipped with curlparse (fallback)
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from .curl import DEFAULT_MAX_COMMAND_LENGTH

CONFIG_FILENAME = "config.yaml"

OUTPUT_FORMATS = ("json", "http", "url")

# Lazy import yaml to avoid startup cost
_yaml = None


def _get_yaml():
    """Lazy-load PyYAML."""
    global _yaml
    if _yaml is None:
        import yaml
        _yaml = yaml
    return _yaml


def _get_package_defaults_path() -> Path:
    """Get path to the packaged defaults using importlib.resources."""
    try:
        from importlib.resources import files
        return files("curlparse") / "config_data" / "defaults.yaml"
    except (ImportError, TypeError):
        # Fallback for editable installs
        return Path(__file__).parent / "config_data" / "defaults.yaml"


def config_locations() -> list[Path]:
    """User and project config paths, highest priority first."""
    return [
        Path.home() / ".config" / "curlparse" / CONFIG_FILENAME,  # User overrides
        Path.cwd() / ".curlparse" / CONFIG_FILENAME,              # Project config
    ]


@dataclass
class ParserConfig:
    """Settings for the parser and the curlparse CLI."""
    max_command_length: int = DEFAULT_MAX_COMMAND_LENGTH
    verbose: bool = False
    output: str = "json"  # "json", "http" or "url"
    source: Optional[str] = None  # file the settings came from

    @classmethod
    def from_dict(cls, data: dict, source: Optional[str] = None) -> "ParserConfig":
        """Build a config from a mapping, keeping defaults for bad or missing values."""
        config = cls(source=source)

        limit = data.get("max_command_length")
        if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
            config.max_command_length = limit

        verbose = data.get("verbose")
        if isinstance(verbose, bool):
            config.verbose = verbose

        output = data.get("output")
        if isinstance(output, str) and output.lower() in OUTPUT_FORMATS:
            config.output = output.lower()

        return config

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "source"}


def _read_mapping(config_file: Path) -> Optional[dict]:
    """Read a YAML mapping, or None if the file can't be used."""
    yaml = _get_yaml()

    try:
        content = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return None

    if not isinstance(data, dict):
        return None
    return data


def load_config(path: Optional[Union[str, Path]] = None) -> ParserConfig:
    """Load settings from the highest-priority usable config file.

    Args:
        path: Optional explicit config file, checked before all others.

    Returns:
        The loaded config, or built-in defaults if no file could be used.
    """
    candidates = []
    if path is not None:
        candidates.append(Path(path))
    candidates.extend(config_locations())
    candidates.append(_get_package_defaults_path())

    for config_file in candidates:
        if not config_file.is_file():
            continue
        data = _read_mapping(config_file)
        if data is not None:
            return ParserConfig.from_dict(data, source=str(config_file))

    return ParserConfig()
