import logging
import json
import os
import hashlib
import time
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from .models import LogEntry, ComponentType, EventType

_configured_level: Optional[str] = None


class RiddleJSONFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(RiddleJSONFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = time.time()
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def get_logger(name: str, level: Optional[str] = None):
    logger = logging.getLogger(name)
    # Loggers are process-wide; only the first caller attaches a handler
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = RiddleJSONFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    logger.propagate = False
    return logger


def resolve_level(level: Optional[str] = None) -> str:
    """Explicit level, else the LOG_LEVEL env var, else the configured level, else INFO."""
    return (level or os.getenv("LOG_LEVEL") or _configured_level or "INFO").upper()


def set_log_level(level: Optional[str]) -> None:
    """Apply the configured level to every component logger."""
    global _configured_level
    _configured_level = level
    for component in ComponentType:
        logging.getLogger(f"riddle_access.{component.value}").setLevel(resolve_level())


class StructuredLogger:
    def __init__(self, component: ComponentType, level: Optional[str] = None):
        self.logger = get_logger(f"riddle_access.{component.value}", level)
        self.component = component

    def hash_payload(self, payload: Any) -> str:
        """Create a hash of the payload for audit."""
        dumped = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.md5(dumped.encode()).hexdigest()[:16]

    def log_event(self,
                  trace_id: str,
                  event_type: EventType,
                  payload: Any,
                  metrics: Optional[Dict[str, Any]] = None):

        entry = LogEntry(
            trace_id=trace_id,
            component=self.component,
            event_type=event_type,
            payload_hash=self.hash_payload(payload),
            metrics=metrics or {},
            message=str(payload)[:200]
        )

        self.logger.info(json.dumps(entry.model_dump(), default=str))
