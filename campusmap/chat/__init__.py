"""
Chat assistant - canned answers picked by keyword containment.
"""

from .responder import CHAT_DATA, FALLBACK_ANSWER, KeywordResponder, QAEntry
from .session import ChatSession
from .transcript import BOT_ROLE, USER_ROLE, ChatTranscript

__all__ = [
    "BOT_ROLE",
    "CHAT_DATA",
    "ChatSession",
    "ChatTranscript",
    "FALLBACK_ANSWER",
    "KeywordResponder",
    "QAEntry",
    "USER_ROLE",
]
