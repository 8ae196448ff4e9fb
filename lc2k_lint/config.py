"""
Lint configuration.

Two settings affect the engine: the formatter's tab stops and the comment
token. Values come from built-in defaults, optionally overridden by a JSON
file (``lc2k.json``) and then by command-line flags.

File format, either flat or under an "lc2k" section:

    {
        "lc2k": {
            "tabStops": [8, 16, 24, 40],
            "commentToken": "#"
        }
    }
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

__all__ = ['LintConfig', 'ConfigError', 'load_config', 'find_config',
           'CONFIG_FILENAME', 'DEFAULT_TAB_STOPS', 'DEFAULT_COMMENT_TOKEN']

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lc2k.json"
CONFIG_SECTION = "lc2k"

DEFAULT_TAB_STOPS: Tuple[int, ...] = (8, 16, 24, 40)
DEFAULT_COMMENT_TOKEN = "#"

# JSON key -> dataclass field
_KEYS = {
    "tabStops": "tab_stops",
    "tab_stops": "tab_stops",
    "commentToken": "comment_token",
    "comment_token": "comment_token",
}


class ConfigError(Exception):
    """Raised on an unreadable config file or invalid setting values."""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def _check_tab_stops(value: Any) -> Tuple[int, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or not value:
        raise ConfigError(f"tabStops must be a non-empty list of positive integers, got {value!r}")
    stops = []
    for stop in value:
        # bool is an int subclass; reject it explicitly
        if isinstance(stop, bool) or not isinstance(stop, int) or stop <= 0:
            raise ConfigError(f"tabStops entries must be positive integers, got {stop!r}")
        stops.append(stop)
    return tuple(stops)


def _check_comment_token(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"commentToken must be a non-empty string, got {value!r}")
    return value


@dataclass(frozen=True)
class LintConfig:
    tab_stops: Tuple[int, ...] = DEFAULT_TAB_STOPS
    comment_token: str = DEFAULT_COMMENT_TOKEN

    def __post_init__(self):
        object.__setattr__(self, 'tab_stops', _check_tab_stops(self.tab_stops))
        _check_comment_token(self.comment_token)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LintConfig":
        """Build a config from a settings mapping.

        Accepts camelCase (editor style) or snake_case keys, optionally
        nested under an "lc2k" section. Unknown keys are an error, and so is
        any top-level key next to an "lc2k" section.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"config must be a JSON object, got {type(data).__name__}")
        if CONFIG_SECTION in data:
            others = sorted(key for key in data if key != CONFIG_SECTION)
            if others:
                raise ConfigError(f"settings outside the '{CONFIG_SECTION}' section: {others}")
            data = data[CONFIG_SECTION]
            if not isinstance(data, dict):
                raise ConfigError(f"'{CONFIG_SECTION}' section must be a JSON object")

        kwargs = {}
        for key, value in data.items():
            if key not in _KEYS:
                raise ConfigError(f"unknown setting: {key!r}")
            kwargs[_KEYS[key]] = value
        return cls(**kwargs)

    def merged(self, tab_stops: Optional[Sequence[int]] = None,
               comment_token: Optional[str] = None) -> "LintConfig":
        """Return a copy with the given non-None overrides applied."""
        changes = {}
        if tab_stops is not None:
            changes['tab_stops'] = tab_stops
        if comment_token is not None:
            changes['comment_token'] = comment_token
        return replace(self, **changes) if changes else self


def load_config(path) -> LintConfig:
    """Read a JSON config file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError("config file not found", path)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON: {e}", path)
    except OSError as e:
        raise ConfigError(f"cannot read config: {e}", path)

    try:
        config = LintConfig.from_dict(data)
    except ConfigError as e:
        raise ConfigError(str(e), path)
    logger.debug("Loaded config from %s: %s", path, config)
    return config


def find_config(start=None) -> Optional[Path]:
    """Look for lc2k.json in *start* (default: cwd) and its parents."""
    directory = Path(start) if start is not None else Path.cwd()
    directory = directory.resolve()
    if directory.is_file():
        directory = directory.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
