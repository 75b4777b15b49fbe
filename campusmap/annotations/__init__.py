"""
Annotations - user-placed spots on the campus map.

Spots are created and removed explicitly. There is no edit operation.
"""

from .ids import IdGenerator
from .models import Annotation
from .presenter import AnnotationPresenter, MapPresenter
from .store import AnnotationStore

__all__ = [
    "Annotation",
    "AnnotationPresenter",
    "AnnotationStore",
    "IdGenerator",
    "MapPresenter",
]
