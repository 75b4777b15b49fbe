"""
CampusSettings - Application configuration.

Settings are immutable once loaded. They come from code defaults or a
JSON file; there are no environment variables.

All models use Pydantic for validation.
Unknown fields are rejected.

Keys:
- storage_path: SQLite file for slots (None keeps slots in memory)
- chat_reply_delay: seconds before the bot answers
- viewport: map centre, allowed radius (degrees) and zoom limits
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class MapViewport(BaseModel):
    """
    Bounded map area around the campus.

    The map cannot be panned outside the box centre ± radius and cannot
    zoom out below min_zoom.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    center_lat: float = 13.0100751
    center_lng: float = 76.1205015
    radius_degrees: float = 2 / 111  # roughly 2 km
    initial_zoom: float = 18.0
    min_zoom: int = 15
    max_zoom: int = 19

    @field_validator("radius_degrees")
    @classmethod
    def validate_radius(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"radius_degrees must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_zoom_range(self) -> "MapViewport":
        if self.min_zoom > self.max_zoom:
            raise ValueError(f"min_zoom {self.min_zoom} exceeds max_zoom {self.max_zoom}")
        return self

    @property
    def south_west(self) -> Tuple[float, float]:
        return (self.center_lat - self.radius_degrees, self.center_lng - self.radius_degrees)

    @property
    def north_east(self) -> Tuple[float, float]:
        return (self.center_lat + self.radius_degrees, self.center_lng + self.radius_degrees)

    def contains(self, lat: float, lng: float) -> bool:
        (south, west), (north, east) = self.south_west, self.north_east
        return south <= lat <= north and west <= lng <= east

    def clamp(self, lat: float, lng: float) -> Tuple[float, float]:
        """Nearest point inside the bounds (pan-inside-bounds on drag)."""
        (south, west), (north, east) = self.south_west, self.north_east
        return (min(max(lat, south), north), min(max(lng, west), east))

    def clamp_zoom(self, zoom: float) -> float:
        return min(max(zoom, self.min_zoom), self.max_zoom)


class CampusSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    storage_path: Optional[Path] = None
    chat_reply_delay: float = 0.4
    viewport: MapViewport = Field(default_factory=MapViewport)

    @field_validator("chat_reply_delay")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"chat_reply_delay must be >= 0, got {v}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CampusSettings":
        """
        Build settings from a plain dict.

        Missing keys take their defaults.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid settings: {e}") from e


def load_settings(path: Optional[Path] = None) -> CampusSettings:
    """
    Load settings from a JSON file, or return defaults when path is None.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid settings
        FileNotFoundError: If path does not exist
    """
    if path is None:
        return CampusSettings()

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must hold a JSON object")
    return CampusSettings.from_dict(data)
