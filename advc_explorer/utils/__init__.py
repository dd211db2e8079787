"""Utility functions and helpers."""

from advc_explorer.utils.logging import setup_logging
from advc_explorer.utils.units import (
    SATOSHIS_PER_COIN,
    to_smallest_unit,
    from_smallest_unit,
)

__all__ = [
    "setup_logging",
    "SATOSHIS_PER_COIN",
    "to_smallest_unit",
    "from_smallest_unit",
]
