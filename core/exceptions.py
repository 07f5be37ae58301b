"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the exception hierarchy for the sentiment signal service.

- Gives every recoverable failure a concrete type
- Carries context for structured logging
- Lets callers decide what to swallow and what to surface

============================================================
EXCEPTION HIERARCHY
============================================================
SignalError (base)
├── ConfigurationError
├── IngestionError
│   ├── FeedFetchError
│   └── FeedParseError
└── SentimentError
    ├── ModelLoadError
    └── InferenceError

============================================================
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# BASE EXCEPTION
# ============================================================

class SignalError(Exception):
    """
    Base exception for all signal service errors.

    All exceptions carry:
    - message: human readable summary
    - details: context for debugging
    - recoverable: whether the request can continue without this feature
    - timestamp: when the error occurred
    """

    default_recoverable: bool = True

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.details = details or {}
        self.recoverable = (
            recoverable if recoverable is not None else self.default_recoverable
        )
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause is not None:
            self.details["cause_type"] = type(cause).__name__
            self.details["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(SignalError):
    """Invalid configuration value."""

    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if actual_value is not None:
            details["actual_value"] = str(actual_value)[:100]
        super().__init__(message, details=details, **kwargs)


# ============================================================
# INGESTION ERRORS
# ============================================================

class IngestionError(SignalError):
    """Base exception for feed ingestion errors."""

    def __init__(
        self,
        message: str,
        source: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.source = source

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["source"] = self.source
        return data


class FeedFetchError(IngestionError):
    """Network or HTTP failure while fetching a feed."""

    def __init__(
        self,
        message: str,
        source: str = "",
        status_code: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, source, **kwargs)
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class FeedParseError(IngestionError):
    """Feed body could not be parsed."""
    pass


# ============================================================
# SENTIMENT ERRORS
# ============================================================

class SentimentError(SignalError):
    """Base exception for sentiment model errors."""

    def __init__(
        self,
        message: str,
        track: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.track = track

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["track"] = self.track
        return data


class ModelLoadError(SentimentError):
    """No candidate model could be loaded for a track."""
    pass


class InferenceError(SentimentError):
    """A loaded model failed while classifying text."""
    pass
