"""
Domain Service: Dedup Registry

Remembers which riddles each consumer key has already been given.
"""

from typing import Dict, Hashable, Set, Tuple

from riddle_access.models import Riddle


class DedupRegistry:
    """
    Per-key identity sets.

    Identity is the riddle id when present, otherwise the stripped question
    text. The two namespaces are kept apart so an id of "7" never collides
    with a question that reads "7".
    """

    def __init__(self):
        self._delivered: Dict[str, Set[Hashable]] = {}

    @staticmethod
    def identity(riddle: Riddle) -> Tuple[str, Hashable]:
        if riddle.id is not None:
            try:
                hash(riddle.id)
                return ("id", riddle.id)
            except TypeError:
                return ("id", repr(riddle.id))
        return ("question", riddle.question.strip())

    def seen(self, key: str, riddle: Riddle) -> bool:
        return self.identity(riddle) in self._delivered.get(key, ())

    def mark(self, key: str, riddle: Riddle) -> None:
        self._delivered.setdefault(key, set()).add(self.identity(riddle))

    def count(self, key: str) -> int:
        return len(self._delivered.get(key, ()))

    def forget(self, key: str) -> None:
        self._delivered.pop(key, None)

    def clear(self) -> None:
        self._delivered.clear()
