"""System instruction for the text-generation providers.

The text lives in a plain file so it can be edited without touching code;
DAILY_DROP_PROMPT_PATH points at an alternative file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from daily_drop.settings import DEFAULT_PROMPT_PATH

logger = logging.getLogger(__name__)


def load_system_prompt(path: Optional[str] = None) -> str:
    prompt_path = Path(path or DEFAULT_PROMPT_PATH)
    text = prompt_path.read_text(encoding="utf8")
    logger.debug("Loaded system prompt from %s (%d chars)", prompt_path, len(text))
    return text
