"""Environment configuration.

Read once at import time so tests can monkeypatch the module constants.
The engine never reads the environment itself: these only provide
defaults for the command line and the structured log threshold.
"""

import os
from typing import Mapping, Optional

from .types import EngineOptions

LOG_LEVEL: str = os.environ.get("RULES_ENGINE_LOG_LEVEL", "warning").lower()
CASE_SENSITIVE: bool = os.environ.get("RULES_ENGINE_CASE_SENSITIVE", "0") == "1"
MODIFY_DATASET: bool = os.environ.get("RULES_ENGINE_MODIFY_DATASET", "0") == "1"


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> EngineOptions:
    """Build engine options from RULES_ENGINE_* variables.

    With no mapping given, uses the values captured at import time.
    """
    if environ is None:
        return EngineOptions(case_sensitive=CASE_SENSITIVE, modify_dataset=MODIFY_DATASET)

    return EngineOptions(
        case_sensitive=environ.get("RULES_ENGINE_CASE_SENSITIVE", "0") == "1",
        modify_dataset=environ.get("RULES_ENGINE_MODIFY_DATASET", "0") == "1",
    )
