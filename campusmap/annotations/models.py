"""
Annotations - Immutable Data Models

Purpose: Define the frozen Annotation record and its slot encoding.
The persisted record names the description field `desc`.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict


DEFAULT_NAME = "Untitled"


@dataclass(frozen=True)
class Annotation:
    """
    An immutable spot on the map.
    
    The id is assigned once at creation and never changes.
    Removing a spot is the only lifecycle transition after creation.
    """
    
    id: str
    lat: float
    lng: float
    name: str = DEFAULT_NAME
    description: str = ""
    
    def to_record(self) -> Dict[str, Any]:
        """Encode as a campusMarkers slot record."""
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.name,
            "desc": self.description,
        }
    
    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Annotation":
        """
        Decode a campusMarkers slot record.
        
        Raises:
            ValueError: If the record is not a mapping, lacks an id, or its
                coordinates are not finite numbers
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        
        annotation_id = data.get("id")
        if not isinstance(annotation_id, str) or not annotation_id:
            raise ValueError("Record has no id")
        
        try:
            lat = float(data["lat"])
            lng = float(data["lng"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Record {annotation_id} has invalid coordinates: {e}") from e
        
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Record {annotation_id} has non-finite coordinates")
        
        return cls(
            id=annotation_id,
            lat=lat,
            lng=lng,
            name=str(data.get("name") or DEFAULT_NAME),
            description=str(data.get("desc") or ""),
        )
