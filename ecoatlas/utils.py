"""
Utility functions for ecoatlas

Provides logging setup and small numeric parsing helpers
"""

import logging
import math
import re
from pathlib import Path
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for ecoatlas"""
    level = getattr(logging, log_level.upper())

    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# PARSING
# ═══════════════════════════════════════════════════════════════════

_INT_KEY = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_int_key(value: Any) -> Optional[int]:
    """Parse an entity key such as ``"076"`` into ``76``.

    Returns None for missing, empty or non-numeric values. Only ASCII digits
    count, so forms like ``"7_6"`` are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INT_KEY.fullmatch(text):
        return None
    return int(text)


def parse_number(value: Any, default: float = 0.0) -> float:
    """Coerce a SPARQL literal to a finite float, falling back to ``default``."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number
