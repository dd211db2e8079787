"""Ordered source fallback.

Each view is resolved from an ordered list of ``(source, producer)`` steps.
The first producer returning a non-empty value wins. A producer failing with
one of ``SOURCE_ERRORS`` counts as empty; any other exception propagates.
"""

from enum import Enum
from typing import Any, Callable, Tuple
from sqlalchemy.exc import SQLAlchemyError
import structlog

from advc_explorer.core.rpc_client import NodeRPCError
from advc_explorer.utils.metrics import metrics

logger = structlog.get_logger(__name__)

SOURCE_ERRORS = (SQLAlchemyError, NodeRPCError)

Step = Tuple[str, Callable[[], Any]]


class SourceOutcome(str, Enum):
    FOUND = "found"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, set, str)):
        return len(value) == 0
    return False


def attempt(source: str, producer: Callable[[], Any]) -> Tuple[SourceOutcome, Any]:
    """Run one producer and classify its outcome."""
    try:
        value = producer()
    except SOURCE_ERRORS as e:
        logger.warning("Source unavailable", source=source, error=str(e))
        metrics.source_lookups.labels(source=source, outcome=SourceOutcome.UNAVAILABLE.value).inc()
        return SourceOutcome.UNAVAILABLE, None
    
    if is_empty(value):
        logger.debug("Source returned nothing", source=source)
        metrics.source_lookups.labels(source=source, outcome=SourceOutcome.EMPTY.value).inc()
        return SourceOutcome.EMPTY, None
    
    metrics.source_lookups.labels(source=source, outcome=SourceOutcome.FOUND.value).inc()
    return SourceOutcome.FOUND, value


def first_available(*steps: Step, default: Any = None) -> Any:
    """Return the first non-empty producer result, or ``default``."""
    for source, producer in steps:
        outcome, value = attempt(source, producer)
        if outcome is SourceOutcome.FOUND:
            return value
    return default
