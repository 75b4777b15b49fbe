"""
Chat transcript - append-only rendered message log.

The transcript is kept and persisted as markup, verbatim. The campusChat
slot holds the raw markup string, not JSON. No per-message structure
survives persistence; a restore reproduces the markup exactly.
"""

import logging

from campusmap.markup import message_html
from campusmap.storage.slots import CHAT_SLOT, SlotStore

logger = logging.getLogger(__name__)


USER_ROLE = "userMsg"
BOT_ROLE = "botMsg"


class ChatTranscript:
    def __init__(self, slots: SlotStore):
        self._slots = slots
        self._markup = ""
    
    @property
    def markup(self) -> str:
        return self._markup
    
    def append(self, text: str, role: str) -> str:
        """
        Render one message, append it, and persist the whole transcript.
        
        Raises:
            StorageError: If the slot cannot be written (transcript unchanged)
        """
        rendered = message_html(text, role)
        markup = self._markup + rendered
        self._slots.set(CHAT_SLOT, markup)
        self._markup = markup
        return rendered
    
    def persist(self) -> None:
        self._slots.set(CHAT_SLOT, self._markup)
    
    def restore(self) -> bool:
        """
        Load the saved transcript verbatim.
        
        Returns:
            True if a saved transcript was loaded
        """
        saved = self._slots.get(CHAT_SLOT)
        if not saved:
            logger.debug("No saved chat")
            return False
        
        self._markup = saved
        return True
