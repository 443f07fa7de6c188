"""Core functionality for release-tool"""

from .config_evaluator import (
    Property,
    NormalizedValue,
    FieldError,
    EvaluationResult,
    evaluate,
    parse_property_expression,
)
from .event_bus import EventBus, EventHandler
from .path_resolver import PathResolver

__all__ = [
    "Property",
    "NormalizedValue",
    "FieldError",
    "EvaluationResult",
    "evaluate",
    "parse_property_expression",
    "EventBus",
    "EventHandler",
    "PathResolver",
]
