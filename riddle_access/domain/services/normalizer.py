"""
Domain Service: Payload Normalizer

Turns a decoded JSON payload of unknown shape into a flat list of valid
riddles.

Supported shapes, tried in order:
1. array                 -> [ {...}, {...} ]
2. wrapped               -> {"riddles": [...]} / {"data": [...]} / {"items": [...]}
3. first_array_property  -> {"anything": [...], ...}
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from pydantic import ValidationError

from riddle_access.models import Riddle

WRAPPER_KEYS = ("riddles", "data", "items")

Extractor = Callable[[Any], Optional[list]]


@dataclass(frozen=True)
class ExtractionStrategy:
    """A named way of locating the candidate list inside a payload."""

    name: str
    extract: Extractor


def _extract_array(payload: Any) -> Optional[list]:
    return payload if isinstance(payload, list) else None


def _extract_wrapped(payload: Any) -> Optional[list]:
    if not isinstance(payload, dict):
        return None
    for key in WRAPPER_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return None


def _extract_first_array_property(payload: Any) -> Optional[list]:
    if not isinstance(payload, dict):
        return None
    for value in payload.values():
        if isinstance(value, list):
            return value
    return None


DEFAULT_STRATEGIES = (
    ExtractionStrategy("array", _extract_array),
    ExtractionStrategy("wrapped", _extract_wrapped),
    ExtractionStrategy("first_array_property", _extract_first_array_property),
)


class PayloadNormalizer:
    """
    Extracts and validates riddles from arbitrary payloads.

    Never raises: an unrecognized shape yields an empty list, and entries
    that are not objects or fail Riddle validation are dropped.
    """

    def __init__(self, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)
        self.logger = logging.getLogger(__name__)

    def extract(self, payload: Any) -> List[Any]:
        """Return the raw candidate list, or [] if no strategy matches."""
        for strategy in self.strategies:
            try:
                candidates = strategy.extract(payload)
            except Exception as e:
                self.logger.debug(f"Extraction strategy {strategy.name} failed: {e}")
                continue
            if candidates is not None:
                return list(candidates)
        return []

    def normalize(self, payload: Any) -> List[Riddle]:
        """
        Extract candidates and keep the valid ones, in payload order.

        Args:
            payload: Decoded JSON (list, dict, or anything else)

        Returns:
            List of valid Riddle objects
        """
        candidates = self.extract(payload)
        riddles = []
        for candidate in candidates:
            riddle = self.to_riddle(candidate)
            if riddle is not None:
                riddles.append(riddle)

        dropped = len(candidates) - len(riddles)
        if dropped:
            self.logger.debug(f"Dropped {dropped} malformed entries of {len(candidates)}")
        return riddles

    @staticmethod
    def to_riddle(candidate: Any) -> Optional[Riddle]:
        if not isinstance(candidate, dict):
            return None
        try:
            return Riddle.model_validate(candidate)
        except ValidationError:
            return None


_default_normalizer = PayloadNormalizer()


def normalize(payload: Any) -> List[Riddle]:
    """Normalize a payload with the default strategies."""
    return _default_normalizer.normalize(payload)
