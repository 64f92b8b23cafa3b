"""Configuration management for the slideshow renderer."""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

# Default settings; a YAML config file and CLI overrides are layered on top
DEFAULT_CONFIG: Dict[str, Any] = {
    'paths': {
        'input': None,
        'template': 'template.html',
        'static_dir': 'static',
        'output_dir': 'out',
    },
    'settings': {
        'logging': {
            'level': 'WARNING',
        },
        'watch': {
            'enabled': False,
            'debounce_ms': 250,
        },
    },
}

OUTPUT_FILENAME = 'index.html'

# Named levels accepted on the command line and in config files.
# The stdlib has no TRACE level, so it maps to DEBUG.
_LEVEL_NAMES: Dict[str, int] = {
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
    'trace': logging.DEBUG,
}

# Numeric verbosity, 1 (quietest) to 5 (noisiest)
_LEVEL_NUMBERS: Dict[int, int] = {
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
    4: logging.DEBUG,
    5: logging.DEBUG,
}


def parse_log_level(value: Any) -> int:
    """Convert a level name or a 1-5 verbosity number to a logging level.

    Args:
        value: Level name (case-insensitive), integer, or numeric string.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the value is not a recognized level.
    """
    text = str(value).strip()
    if text.isdigit():
        number = int(text)
        if number in _LEVEL_NUMBERS:
            return _LEVEL_NUMBERS[number]
    elif text.lower() in _LEVEL_NAMES:
        return _LEVEL_NAMES[text.lower()]
    raise ValueError(
        f"Invalid log level {value!r}: expected 1-5 or one of "
        f"error, warn, info, debug, trace"
    )


def setup_logging(level: Any = 'WARNING') -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=parse_log_level(level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_dicts(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, overlay taking precedence."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Configuration manager layering defaults, a YAML file and CLI overrides."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """Initialize configuration.

        Args:
            config_path: Optional path to a YAML configuration file.
            overrides: Dot-path keys (e.g. 'paths.input') to values. Keys
                whose value is None are ignored.
        """
        self.config_path = Path(config_path) if config_path else None

        file_config: Dict[str, Any] = {}
        if self.config_path is not None:
            file_config = load_yaml_file(self.config_path)
            logging.debug(f"Loaded config from: {self.config_path}")

        self._config = merge_dicts(copy.deepcopy(DEFAULT_CONFIG), file_config)
        self.project_root = self._resolve_project_root(
            self.config_path.parent if self.config_path else None
        )

        for key_path, value in (overrides or {}).items():
            if value is not None:
                self.set(key_path, value)

    @classmethod
    def from_dict(cls, main_config: Dict[str, Any], config_dir: Path) -> "Config":
        """Create a Config from an already-loaded dictionary.

        Args:
            main_config: Configuration dictionary.
            config_dir: Directory that relative ``project_root`` values are
                resolved against.

        Returns:
            Configured Config instance
        """
        config = cls.__new__(cls)
        config.config_path = None
        config._config = merge_dicts(copy.deepcopy(DEFAULT_CONFIG), main_config)
        config.project_root = config._resolve_project_root(config_dir)
        return config

    def _resolve_project_root(self, config_dir: Optional[Path]) -> Path:
        root = self.get('paths.project_root')
        if root is None:
            return Path.cwd()
        return ((config_dir or Path.cwd()) / root).resolve()

    def _resolve_path_value(self, value: str) -> Path:
        """Resolve a path value relative to project_root and canonicalize it."""
        p = Path(value)
        if not p.is_absolute():
            p = self.project_root / p
        return p.resolve()

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'settings.watch.debounce_ms')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set a configuration value using dot notation, creating sections as needed."""
        keys = key_path.split('.')
        section = self._config
        for key in keys[:-1]:
            if not isinstance(section.get(key), dict):
                section[key] = {}
            section = section[key]
        section[keys[-1]] = value

    def get_path(self, key: str) -> Path:
        """Get a path from the 'paths' section, resolved relative to project_root.

        Args:
            key: Path key in config (e.g., 'template', 'input')

        Returns:
            Resolved Path object
        """
        path_str = self.get(f'paths.{key}')
        if path_str is None:
            raise ValueError(f"Path '{key}' not found in configuration")
        return self._resolve_path_value(str(path_str))

    def validate_paths(self):
        """Validate that the input document and template exist."""
        missing = []

        for path_key in ('input', 'template'):
            try:
                path = self.get_path(path_key)
                if not path.exists():
                    missing.append(f"{path_key}: {path}")
            except ValueError:
                missing.append(f"{path_key}: not configured")

        if missing:
            raise FileNotFoundError(
                "Required files not found:\n" + "\n".join(f"  - {p}" for p in missing)
            )

    def validate_settings(self):
        """Validate the watch and logging settings.

        Raises:
            ValueError: If the debounce interval is not a non-negative
                integer or the log level is unknown.
        """
        value = self.get('settings.watch.debounce_ms', 250)
        try:
            debounce_ms = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"settings.watch.debounce_ms must be an integer, got {value!r}") from None
        if debounce_ms < 0:
            raise ValueError(f"settings.watch.debounce_ms must not be negative, got {debounce_ms}")
        parse_log_level(self.log_level)

    @property
    def input_path(self) -> Path:
        """Get input Markdown file path."""
        return self.get_path('input')

    @property
    def template_path(self) -> Path:
        """Get slideshow template path."""
        return self.get_path('template')

    @property
    def static_dir(self) -> Path:
        """Get static files directory path."""
        return self.get_path('static_dir')

    @property
    def output_dir(self) -> Path:
        """Get output directory path."""
        return self.get_path('output_dir')

    @property
    def output_file(self) -> Path:
        """Get the rendered slideshow path inside the output directory."""
        return self.output_dir / OUTPUT_FILENAME

    @property
    def watch_enabled(self) -> bool:
        return bool(self.get('settings.watch.enabled', False))

    @property
    def debounce_ms(self) -> int:
        return int(self.get('settings.watch.debounce_ms', 250))

    @property
    def log_level(self) -> str:
        return str(self.get('settings.logging.level', 'WARNING'))
