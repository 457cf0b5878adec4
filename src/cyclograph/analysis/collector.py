"""
Aggregation of per-function complexity scores.

Scores are keyed by function name. With the default ``KeyPolicy.NAME`` two
functions that share a bare name (methods of different classes, overloads)
map to the same key and the last score recorded wins. The collision is
logged and counted, but the earlier score is gone. ``KeyPolicy.QUALIFIED``
keys by qualified name plus signature instead and avoids this.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Dict, Iterator, List, Tuple

LOG = logging.getLogger(__name__)

LINE_FORMAT = "Function: %s, Cyclomatic Complexity: %d"


class KeyPolicy(enum.Enum):
    NAME = "name"
    QUALIFIED = "qualified"


class ComplexityRecord:
    """Ordered mapping of function key to complexity score."""

    def __init__(self):
        self._scores: Dict[str, int] = {}

    def __setitem__(self, key: str, score: int) -> None:
        if score < 1:
            raise ValueError("complexity must be at least 1, got %d for %s" % (score, key))
        self._scores[key] = score

    def __getitem__(self, key: str) -> int:
        return self._scores[key]

    def __contains__(self, key: str) -> bool:
        return key in self._scores

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def items(self) -> List[Tuple[str, int]]:
        return list(self._scores.items())

    def to_dict(self) -> Dict[str, int]:
        return dict(self._scores)


def function_key(function, policy: KeyPolicy) -> str:
    """Key for ``function`` (anything with ``name``, ``qualname`` and ``signature``)."""
    if policy is KeyPolicy.QUALIFIED:
        return "%s%s" % (function.qualname, function.signature)
    return function.name


class ResultCollector:
    """
    Thread-safe accumulator of ``(function, score)`` pairs.

    Attributes:
        policy: How functions are turned into record keys.
        record: The ComplexityRecord being filled.
        collisions: Keys that were written more than once.
    """

    def __init__(self, policy: KeyPolicy = KeyPolicy.NAME):
        self.policy = policy
        self.record = ComplexityRecord()
        self.collisions: List[str] = []
        self._lock = threading.Lock()

    def record_score(self, key: str, score: int) -> None:
        with self._lock:
            if key in self.record:
                LOG.warning(
                    "Function key %r recorded twice; replacing complexity %d with %d",
                    key,
                    self.record[key],
                    score,
                )
                self.collisions.append(key)
            self.record[key] = score

    def add(self, function, score: int) -> str:
        """Record ``score`` for ``function`` and return the key used."""
        key = function_key(function, self.policy)
        self.record_score(key, score)
        return key

    def lines(self) -> List[str]:
        with self._lock:
            return [LINE_FORMAT % (key, value) for key, value in self.record.items()]

    def serialize(self) -> str:
        """The report text, one line per function in insertion order."""
        return "".join(line + "\n" for line in self.lines())

    def __len__(self) -> int:
        return len(self.record)
