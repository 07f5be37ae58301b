"""
Core Module Package.

Infrastructure shared by every other package.

Components:
- clock: Injectable time source
- config: Environment-driven service configuration
- exceptions: Custom exception hierarchy
"""

from .clock import ClockProtocol, MockClock, SystemClock, format_utc
from .config import SignalConfig, SignalTunables, parse_offset_minutes
from .exceptions import (
    ConfigurationError,
    FeedFetchError,
    FeedParseError,
    InferenceError,
    IngestionError,
    ModelLoadError,
    SentimentError,
    SignalError,
)


__all__ = [
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "format_utc",
    "SignalConfig",
    "SignalTunables",
    "parse_offset_minutes",
    "SignalError",
    "ConfigurationError",
    "IngestionError",
    "FeedFetchError",
    "FeedParseError",
    "SentimentError",
    "ModelLoadError",
    "InferenceError",
]
