"""Utility modules."""
from .logger import get_logger, configure_logging, set_session_context
from .exceptions import (
    BrokeAgainError,
    ConfigError,
    NetworkError,
    LLMError,
    ExtractionError,
    StorageError,
    ValidationError,
    RetryableError,
    RetryableNetworkError,
    RetryableLLMError
)
from .retry import retry_with_backoff

__all__ = [
    "get_logger",
    "configure_logging",
    "set_session_context",
    "BrokeAgainError",
    "ConfigError",
    "NetworkError",
    "LLMError",
    "ExtractionError",
    "StorageError",
    "ValidationError",
    "RetryableError",
    "RetryableNetworkError",
    "RetryableLLMError",
    "retry_with_backoff"
]
