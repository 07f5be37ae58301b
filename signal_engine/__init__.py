"""
Signal Engine Package.

Window arithmetic, source/decay weighting, aggregation and the
request-level computation that ties ingestion and scoring together.
"""

from signal_engine.aggregator import AggregateState, compute_percentages, recommend
from signal_engine.engine import SignalEngine
from signal_engine.models import Recommendation, SignalItem, SignalResponse
from signal_engine.response_cache import ResponseCache
from signal_engine.weighting import SOURCE_WEIGHTS, resolve_source, weight_for_source
from signal_engine.window import (
    TimeWindow,
    compute_start_of_day,
    compute_window_minutes,
    decay_weight,
    linear_time_decay,
    parse_published,
    within_window,
)


__all__ = [
    "SignalEngine",
    "ResponseCache",
    "AggregateState",
    "compute_percentages",
    "recommend",
    "Recommendation",
    "SignalItem",
    "SignalResponse",
    "SOURCE_WEIGHTS",
    "resolve_source",
    "weight_for_source",
    "TimeWindow",
    "compute_start_of_day",
    "compute_window_minutes",
    "decay_weight",
    "linear_time_decay",
    "parse_published",
    "within_window",
]
