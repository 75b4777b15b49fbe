"""
Annotation id generation.

Ids look like `<epoch-millis>_<7 base-36 chars>`. They are unique within
one store instance, not globally.
"""

import random
import time
from typing import Callable, Optional, Set


_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_SUFFIX_LENGTH = 7


class IdGenerator:
    """
    Produces collision-resistant annotation ids.
    
    Reads a wall clock and a randomness source. Ids issued (or reserved)
    during this session are remembered so a repeated draw is redrawn.
    """
    
    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._issued: Set[str] = set()
    
    def next(self) -> str:
        while True:
            millis = int(self._clock() * 1000)
            suffix = "".join(self._rng.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
            candidate = f"{millis}_{suffix}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
    
    def reserve(self, annotation_id: str) -> bool:
        """Mark an externally sourced id as taken. Returns False if already taken."""
        if annotation_id in self._issued:
            return False
        self._issued.add(annotation_id)
        return True
