"""Structured JSON logging.

One JSON object per line on stderr, filtered by RULES_ENGINE_LOG_LEVEL.
"""

import json
import sys
import time
from typing import Any, Optional

from . import config

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


def is_enabled(level: str, threshold: Optional[str] = None) -> bool:
    threshold = (threshold or config.LOG_LEVEL).lower()
    return LEVELS.get(level, 0) >= LEVELS.get(threshold, LEVELS["warning"])


def log_structured(level: str, message: str, **fields: Any) -> None:
    """Emit structured JSON log for observability."""
    if not is_enabled(level):
        return
    log_entry = {
        "timestamp": time.time(),
        "level": level,
        "message": message,
        "source": "rules_engine",
        **fields
    }
    print(json.dumps(log_entry, default=repr), file=sys.stderr, flush=True)
