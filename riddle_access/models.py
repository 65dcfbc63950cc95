import math
import time
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ComponentType(str, Enum):
    ACCESS_LAYER = "AccessLayer"
    SHARD_STORE = "ShardStore"
    PROJECTION = "Projection"
    RIDDLE_SOURCE = "RiddleSource"
    NORMALIZER = "Normalizer"


class EventType(str, Enum):
    SHARD_LOADED = "Shard_Loaded"
    FALLBACK_ENGAGED = "Fallback_Engaged"
    DATASET_EXHAUSTED = "Dataset_Exhausted"
    BATCH_DELIVERED = "Batch_Delivered"
    CACHE_CLEARED = "Cache_Cleared"


class LogEntry(BaseModel):
    trace_id: str
    timestamp: float = Field(default_factory=time.time)
    component: ComponentType
    event_type: EventType
    payload_hash: Optional[str] = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = None


class Riddle(BaseModel):
    """One riddle as served by the data files.

    Construction fails (pydantic ValidationError) unless question and answer
    are strings that are non-empty after stripping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[Any] = None
    question: str
    answer: str
    category: str = ""
    popularity: float = 0

    @field_validator("question", "answer", mode="before")
    @classmethod
    def _require_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("popularity", mode="before")
    @classmethod
    def _coerce_popularity(cls, value: Any) -> float:
        # Only real JSON numbers count; "12", true, NaN all score 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        try:
            finite = math.isfinite(value)
        except OverflowError:
            # JSON integers past the float range
            return 0
        if not finite:
            return 0
        return value

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
