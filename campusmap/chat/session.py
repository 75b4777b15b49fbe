"""
Chat session - user submissions and delayed bot replies.

The reply is scheduled after a short fixed delay for perceived latency.
Submitting never waits for a pending reply.
"""

import logging

from campusmap.scheduling import Scheduler

from .responder import KeywordResponder
from .transcript import BOT_ROLE, USER_ROLE, ChatTranscript

logger = logging.getLogger(__name__)


DEFAULT_REPLY_DELAY = 0.4


class ChatSession:
    def __init__(
        self,
        transcript: ChatTranscript,
        responder: KeywordResponder,
        scheduler: Scheduler,
        reply_delay: float = DEFAULT_REPLY_DELAY,
    ):
        self.transcript = transcript
        self.responder = responder
        self._scheduler = scheduler
        self._reply_delay = reply_delay
    
    def submit(self, text: str) -> bool:
        """
        Post a user message and schedule the answer.
        
        Returns:
            False if the message was blank and ignored
        """
        message = (text or "").strip()
        if not message:
            return False
        
        self.transcript.append(message, USER_ROLE)
        answer = self.responder.respond(message)
        self._scheduler.call_later(self._reply_delay, lambda: self._reply(answer))
        return True
    
    def _reply(self, answer: str) -> None:
        self.transcript.append(answer, BOT_ROLE)
        logger.debug(f"Bot replied: {answer}")
