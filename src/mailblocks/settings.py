"""Global presentation settings and configuration loading.

``GlobalEmailSettings`` is the immutable configuration read by the block
compiler and the renderer.  Settings can be built from a mapping with
either camelCase keys (the shape editors store) or snake_case keys, or
loaded from a JSON or YAML file with ``load_settings``.
"""
from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from mailblocks.colors.contrast import is_valid_hex

#: Environment variable holding the image search API access key.
UNSPLASH_ACCESS_KEY_ENV = "UNSPLASH_ACCESS_KEY"

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")

_COLOR_FIELDS = (
    "primary_color",
    "background_color",
    "secondary_color",
    "hero_text_color",
    "headline_color",
    "body_text_color",
)


@dataclass(frozen=True)
class GlobalEmailSettings:
    """Presentation configuration shared by every block of an email.

    Parameters
    ----------
    primary_color:
        Brand color used for hero backgrounds, buttons and accents.
    font_family:
        CSS font stack applied to the email body.
    background_color:
        Background of the content area.
    secondary_color:
        Optional accent for secondary buttons and highlights.
    max_width:
        CSS width of the content column.
    hero_text_color:
        Requested text color on primary-colored hero backgrounds.
    headline_color:
        Requested headline color on the content background.
    body_text_color:
        Requested body text color on the content background.
    copyright_year:
        Year printed in footer copyright lines; omitted when unset.
    """

    primary_color: str = "#7c3aed"
    font_family: str = "Arial, Helvetica, sans-serif"
    background_color: str = "#ffffff"
    secondary_color: str | None = None
    max_width: str = "600px"
    hero_text_color: str | None = None
    headline_color: str | None = None
    body_text_color: str | None = None
    copyright_year: int | None = None

    def __post_init__(self) -> None:
        for name in _COLOR_FIELDS:
            value = getattr(self, name)
            if name in ("primary_color", "background_color") or value is not None:
                if not is_valid_hex(value):
                    raise ValueError(f"{name} must be a 6-digit hex color, got {value!r}")
        if self.copyright_year is not None and (
            isinstance(self.copyright_year, bool) or not isinstance(self.copyright_year, int)
        ):
            raise ValueError(f"copyright_year must be an integer, got {self.copyright_year!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GlobalEmailSettings:
        """Build settings from a mapping with camelCase or snake_case keys.

        Unknown keys are ignored.

        Raises
        ------
        ValueError
            If a color value is not a 6-digit hex color.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL.sub("_", key).lower()
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return the settings as a camelCase mapping, omitting unset values."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            head, *rest = f.name.split("_")
            out[head + "".join(part.title() for part in rest)] = value
        return out


def load_settings(path: str | Path) -> GlobalEmailSettings:
    """Load settings from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises
    ------
    ValueError
        If the file does not contain a mapping or holds invalid colors.
    OSError
        If the file cannot be read.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return GlobalEmailSettings.from_dict(data)


def unsplash_access_key() -> str | None:
    """Return the image search access key from the environment, if set."""
    return os.environ.get(UNSPLASH_ACCESS_KEY_ENV) or None
