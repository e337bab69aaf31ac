"""Custom exception classes for Broke-Again."""


class BrokeAgainError(Exception):
    """Base exception for Broke-Again."""
    pass


class ConfigError(BrokeAgainError):
    """Configuration-related errors."""
    pass


class NetworkError(BrokeAgainError):
    """Network and API-related errors."""
    pass


class LLMError(BrokeAgainError):
    """LLM processing errors."""
    pass


class ExtractionError(LLMError):
    """Receipt extraction failed for a whole upload."""
    pass


class StorageError(BrokeAgainError):
    """Key-value store errors."""
    pass


class ValidationError(BrokeAgainError):
    """Data validation errors."""
    pass


# Retryable errors
class RetryableError(BrokeAgainError):
    """Base class for errors that should trigger retry."""
    pass


class RetryableNetworkError(RetryableError, NetworkError):
    """Network errors that can be retried."""
    pass


class RetryableLLMError(RetryableError, LLMError):
    """LLM errors that can be retried."""
    pass
