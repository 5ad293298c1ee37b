"""Engine settings read from the environment."""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class SegmentCountFormula(str, Enum):
    """How the expected number of segments is derived from file and segment length."""

    CEIL = "ceil"
    LEGACY = "legacy"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _default_max_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


def max_workers_from_env() -> int:
    """
    Worker pool size from SEGVAULT_MAX_WORKERS.

    Returns:
        The configured size, or the default when unset, non-numeric or not positive
    """
    value = os.environ.get("SEGVAULT_MAX_WORKERS", "").strip()
    if not value:
        return _default_max_workers()
    try:
        workers = int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid SEGVAULT_MAX_WORKERS={value!r}")
        return _default_max_workers()
    if workers <= 0:
        logger.warning(f"Ignoring non-positive SEGVAULT_MAX_WORKERS={value!r}")
        return _default_max_workers()
    return workers


def segment_count_formula_from_env() -> SegmentCountFormula:
    """
    Segment count formula from SEGVAULT_SEGMENT_COUNT_FORMULA.

    Returns:
        The configured formula, or CEIL when unset or unknown
    """
    value = os.environ.get("SEGVAULT_SEGMENT_COUNT_FORMULA", SegmentCountFormula.CEIL.value)
    try:
        return SegmentCountFormula(value.strip().lower())
    except ValueError:
        logger.warning(f"Ignoring unknown SEGVAULT_SEGMENT_COUNT_FORMULA={value!r}")
        return SegmentCountFormula.CEIL


MAX_WORKERS = max_workers_from_env()

SEGMENT_COUNT_FORMULA = segment_count_formula_from_env()

INDEPENDENT_NONCE = _env_flag("SEGVAULT_INDEPENDENT_NONCE")
