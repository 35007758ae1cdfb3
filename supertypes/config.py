"""Picker configuration.

Configuration is an explicit value handed to the presenter, built from
defaults, an optional JSON file and command line overrides (in that order).

Config file format:
    {
        "style": "tree",
        "depth_offset": 1,
        "roots": ["src", "."]
    }
"""

from pathlib import Path
from typing import Any, Optional

import msgspec

from .errors import ConfigError

STYLES = ("tree", "flatten", "relpath")
DEFAULT_STYLE = "tree"


class PickerConfig(msgspec.Struct, forbid_unknown_fields=True):
    """Display and workspace options."""

    style: str = DEFAULT_STYLE
    depth_offset: int = 1
    roots: list[str] = []

    def __post_init__(self):
        if self.style not in STYLES:
            raise ConfigError(
                f"Invalid style '{self.style}'. Use: tree (default) | flatten | relpath"
            )
        if self.depth_offset < 0:
            raise ConfigError(f"depth_offset must be >= 0, got {self.depth_offset}")

    def merged(self, **overrides: Any) -> "PickerConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return PickerConfig(**{**msgspec.structs.asdict(self), **changes})


_decoder = msgspec.json.Decoder(PickerConfig)


def load_config(path: Optional[str | Path] = None) -> PickerConfig:
    """Load configuration from a JSON file, or return the defaults.

    Raises:
        ConfigError: If the file is missing, malformed or has bad values.
    """
    if path is None:
        return PickerConfig()

    try:
        with open(path, "rb") as f:
            return _decoder.decode(f.read())
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    except msgspec.DecodeError as e:
        raise ConfigError(f"Config file is not valid JSON {path}: {e}") from e
