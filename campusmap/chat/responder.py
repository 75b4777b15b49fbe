"""
Keyword Responder - first-containment canned answers.

Matching:
---------
1. Lower-case the utterance
2. Walk the table in declaration order
3. Return the answer of the first entry whose question is a substring
4. Otherwise return FALLBACK_ANSWER

Table order decides overlaps, not specificity. "hi" is tested first, so
any utterance containing "hi" (including "this" or "which") gets the
greeting even when a longer question also matches.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class QAEntry:
    question: str  # lowercase keyword or phrase
    answer: str


CHAT_DATA: Tuple[QAEntry, ...] = (
    QAEntry("hi", "Hello! 👋 How can I assist you today?"),
    QAEntry("hello", "Hey there! How can I help?"),
    QAEntry("college name", "Our college is Global Institute of Technology, Tumkur."),
    QAEntry("library timing", "📚 The library is open from 9 AM to 7 PM, Monday to Saturday."),
    QAEntry("canteen", "🍔 The canteen near Block B serves snacks and meals from 9 AM to 5 PM."),
    QAEntry("sports", "🏏 We have football, cricket, badminton, and indoor games facilities."),
    QAEntry("location", "📍 The campus is located at NH-48, Tumkur Road, Karnataka."),
    QAEntry("admission process", "📝 Admissions are open through CET and management quota."),
    QAEntry("bye", "Goodbye! 👋 Have a great day ahead!"),
    QAEntry(
        "how to reach principal office",
        "From collage enterence take left straight upto the end then take right",
    ),
)

FALLBACK_ANSWER = "🤔 Sorry, I don't have an answer for that yet!"


class KeywordResponder:
    def __init__(
        self,
        table: Sequence[QAEntry] = CHAT_DATA,
        fallback: str = FALLBACK_ANSWER,
    ):
        for entry in table:
            if entry.question != entry.question.lower():
                raise ValueError(f"Question must be lowercase: {entry.question!r}")
        self._table = tuple(table)
        self._fallback = fallback
    
    def match(self, utterance: str) -> Optional[QAEntry]:
        """First table entry contained in the utterance, or None."""
        lowered = utterance.lower()
        for entry in self._table:
            if entry.question in lowered:
                return entry
        return None
    
    def respond(self, utterance: str) -> str:
        entry = self.match(utterance)
        return entry.answer if entry else self._fallback
