"""
Event record model.

Events carry no id. They are referenced by their position in the list
most recently loaded from the campusEvents slot.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class EventRecord:
    name: str
    description: str
    
    def to_record(self) -> Dict[str, str]:
        return {"name": self.name, "desc": self.description}
    
    @classmethod
    def from_record(cls, data: Any) -> "EventRecord":
        """
        Decode a campusEvents slot record.
        
        Raises:
            ValueError: If the record is not an object with string fields
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        
        name = data.get("name")
        description = data.get("desc")
        if not isinstance(name, str) or not isinstance(description, str):
            raise ValueError("Event record needs string 'name' and 'desc'")
        
        return cls(name=name, description=description)
