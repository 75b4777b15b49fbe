"""
Annotations - Slot-Backed Store

Purpose: Own the ordered list of spots and keep it in step with the
campusMarkers slot and the map.

Rules:
------
- create and remove persist the full list before touching the map
- A failed persist rolls the in-memory change back and re-raises
- A failed render on create rolls back the list and the slot, then re-raises
- Removing a missing id is a no-op, not an error
- restore() runs once, before any spot is created in this session
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from campusmap.errors import (
    InvalidCoordinate,
    NotFoundError,
    StorageError,
    StorageReadError,
)
from campusmap.storage.slots import MARKERS_SLOT, SlotStore, read_json, write_json

from .ids import IdGenerator
from .models import DEFAULT_NAME, Annotation
from .presenter import AnnotationPresenter

logger = logging.getLogger(__name__)


def _coerce_coordinate(field: str, value: Any) -> float:
    """Parse a coordinate from a number or a numeric form string."""
    if isinstance(value, bool):
        raise InvalidCoordinate(field, value)
    
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise InvalidCoordinate(field, value) from None
    
    if not math.isfinite(number):
        raise InvalidCoordinate(field, value)
    return number


class AnnotationStore:
    """
    In-memory ordered collection of spots, persisted to one slot.
    
    The store and the campusMarkers slot are updated together: no
    operation leaves one changed without the other.
    """
    
    def __init__(
        self,
        slots: SlotStore,
        presenter: AnnotationPresenter,
        id_generator: Optional[IdGenerator] = None,
    ):
        """
        Initialize the annotation store.
        
        Args:
            slots: Key-value store holding the campusMarkers slot
            presenter: Rendering collaborator for spots
            id_generator: Source of new ids (a fresh IdGenerator by default)
        """
        self._slots = slots
        self._presenter = presenter
        self._ids = id_generator or IdGenerator()
        self._annotations: List[Annotation] = []
        self._handles: Dict[str, Any] = {}
    
    def create(
        self,
        lat: Any,
        lng: Any,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Annotation:
        """
        Create, persist and render a new spot.
        
        Args:
            lat: Latitude, a number or numeric string
            lng: Longitude, a number or numeric string
            name: Optional display name (blank becomes "Untitled")
            description: Optional description
        
        Returns:
            The created Annotation
        
        Raises:
            StorageError: If the slot cannot be written (nothing is changed)
            Exception: Whatever the presenter raises; the spot is not kept
        """
        lat_value = _coerce_coordinate("lat", lat)
        lng_value = _coerce_coordinate("lng", lng)
        
        annotation = Annotation(
            id=self._ids.next(),
            lat=lat_value,
            lng=lng_value,
            name=(name or "").strip() or DEFAULT_NAME,
            description=(description or "").strip(),
        )
        
        self._annotations.append(annotation)
        try:
            self.persist()
        except StorageError:
            self._annotations.pop()
            raise
        
        try:
            handle = self._presenter.render(annotation)
        except Exception:
            # Not drawn, so not kept: undo the append and the write.
            self._annotations.pop()
            self.persist()
            raise
        
        self._handles[annotation.id] = handle
        logger.info(f"Created spot {annotation.id} '{annotation.name}' at ({lat_value}, {lng_value})")
        return annotation
    
    def remove(self, annotation_id: str) -> bool:
        """
        Remove a spot from the store, the slot and the map.
        
        Returns:
            True if a spot was removed, False if the id was unknown
        
        Raises:
            StorageError: If the slot cannot be written (nothing is changed)
        """
        try:
            index = self._index_of(annotation_id)
        except NotFoundError:
            logger.debug(f"remove: no spot with id {annotation_id}")
            return False
        
        annotation = self._annotations.pop(index)
        try:
            self.persist()
        except StorageError:
            self._annotations.insert(index, annotation)
            raise
        
        handle = self._handles.pop(annotation_id, None)
        if handle is not None:
            self._presenter.unrender(handle)
        
        logger.info(f"Removed spot {annotation_id} '{annotation.name}'")
        return True
    
    def list(self) -> Tuple[Annotation, ...]:
        """Snapshot of all spots in insertion order."""
        return tuple(self._annotations)
    
    def get(self, annotation_id: str) -> Optional[Annotation]:
        try:
            return self._annotations[self._index_of(annotation_id)]
        except NotFoundError:
            return None
    
    def __len__(self) -> int:
        return len(self._annotations)
    
    def persist(self) -> None:
        """Overwrite the campusMarkers slot with the full current list."""
        write_json(
            self._slots,
            MARKERS_SLOT,
            [annotation.to_record() for annotation in self._annotations],
        )
    
    def restore(self) -> int:
        """
        Load spots from the campusMarkers slot and render them.
        
        Absent or malformed data is treated as an empty list. Records that
        cannot be decoded, and records repeating an earlier id, are skipped.
        
        Returns:
            Number of spots restored
        
        Raises:
            RuntimeError: If the store already holds spots
        """
        if self._annotations:
            raise RuntimeError("restore() must run before any spot is created")
        
        try:
            records = read_json(self._slots, MARKERS_SLOT)
        except StorageReadError as e:
            if e.missing:
                logger.debug(f"No saved spots: {e}")
            else:
                logger.warning(f"Ignoring saved spots: {e}")
            return 0
        
        if not isinstance(records, list):
            logger.warning(f"Ignoring saved spots: expected a list, got {type(records).__name__}")
            return 0
        
        for position, record in enumerate(records):
            try:
                annotation = Annotation.from_record(record)
            except ValueError as e:
                logger.warning(f"Skipping saved spot #{position}: {e}")
                continue
            
            if not self._ids.reserve(annotation.id):
                logger.warning(f"Skipping saved spot #{position}: duplicate id {annotation.id}")
                continue
            
            self._annotations.append(annotation)
            self._handles[annotation.id] = self._presenter.render(annotation)
        
        logger.info(f"Restored {len(self._annotations)} spot(s)")
        return len(self._annotations)
    
    def _index_of(self, annotation_id: str) -> int:
        for index, annotation in enumerate(self._annotations):
            if annotation.id == annotation_id:
                return index
        raise NotFoundError(f"No spot with id {annotation_id}")
