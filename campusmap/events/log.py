"""
Event Log - campus events persisted in the campusEvents slot.

Every read goes back to the slot. Nothing is cached, so a delete by
position always applies to the latest persisted list.

Known limitation:
-----------------
Deletion is positional. An index taken from an older list() snapshot
(for example two quick deletes against the same rendered list, or a
second writer on the same store) can remove a different record than
the one the user saw. Records have no id to guard against this.
"""

import logging
from typing import List

from campusmap.errors import NotFoundError, StorageReadError, ValidationError
from campusmap.markup import event_cards_html
from campusmap.storage.slots import EVENTS_SLOT, SlotStore, read_json, write_json

from .models import EventRecord

logger = logging.getLogger(__name__)


class EventLog:
    """Ordered campus events with add / delete-by-position."""
    
    def __init__(self, slots: SlotStore):
        self._slots = slots
    
    def list(self) -> List[EventRecord]:
        """
        Load events fresh from the slot.
        
        Absent or malformed data reads as an empty list. Malformed
        entries inside a valid list are skipped.
        """
        try:
            records = read_json(self._slots, EVENTS_SLOT)
        except StorageReadError as e:
            if not e.missing:
                logger.warning(f"Ignoring saved events: {e}")
            return []
        
        if not isinstance(records, list):
            logger.warning(f"Ignoring saved events: expected a list, got {type(records).__name__}")
            return []
        
        events = []
        for position, record in enumerate(records):
            try:
                events.append(EventRecord.from_record(record))
            except ValueError as e:
                logger.warning(f"Skipping saved event #{position}: {e}")
        return events
    
    def add(self, name: str, description: str) -> EventRecord:
        """
        Append a new event and persist.
        
        Raises:
            ValidationError: If name or description is empty after trimming
        """
        name = (name or "").strip()
        description = (description or "").strip()
        
        if not name or not description:
            raise ValidationError("Please fill all fields.")
        
        event = EventRecord(name=name, description=description)
        events = self.list()
        events.append(event)
        self._save(events)
        
        logger.info(f"Added event '{name}' ({len(events)} total)")
        return event
    
    def remove_at(self, index: int) -> bool:
        """
        Remove the event at a position of the freshly loaded list.
        
        Out-of-range positions are ignored.
        
        Returns:
            True if an event was removed
        """
        events = self.list()
        try:
            removed = events.pop(self._check_index(index, len(events)))
        except NotFoundError as e:
            logger.debug(f"remove_at: {e}")
            return False
        
        self._save(events)
        logger.info(f"Removed event #{index} '{removed.name}'")
        return True
    
    def render_cards(self) -> str:
        return event_cards_html([(event.name, event.description) for event in self.list()])
    
    def _save(self, events: List[EventRecord]) -> None:
        write_json(self._slots, EVENTS_SLOT, [event.to_record() for event in events])
    
    @staticmethod
    def _check_index(index: int, size: int) -> int:
        # Negative positions would wrap around in Python; they are out of range here.
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < size:
            raise NotFoundError(f"No event at position {index!r} (have {size})")
        return index
