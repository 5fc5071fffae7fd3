"""
Custom exceptions for the ambient extraction pipeline.

Errors fall into four groups: transport (retried, then provider fallback),
configuration (terminal), semantic (terminal for one call, caught one level
up) and policy (expected outcomes such as duplicate content).
"""

from typing import Any


class AmbientError(Exception):
    """Base exception for all pipeline errors."""

    is_retryable: bool = False

    def __init__(self, message: str, error_code: str | None = None, details: dict | None = None):
        """
        Initialize exception.

        Args:
            message: Error message
            error_code: Optional error code
            details: Optional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


# Model Access Errors


class ModelAccessError(AmbientError):
    """Errors raised by the model access layer."""

    pass


class MissingCredentialError(ModelAccessError):
    """Provider credential is not configured."""

    def __init__(self, key_name: str):
        """
        Initialize exception.

        Args:
            key_name: Environment variable holding the credential
        """
        super().__init__(
            f"{key_name} not set",
            error_code="MISSING_CREDENTIAL",
            details={"key": key_name},
        )
        self.key_name = key_name


class NoResponseError(ModelAccessError):
    """Provider returned an empty or garbled response."""

    def __init__(self, message: str = "No response from LLM", details: dict | None = None):
        """Initialize exception."""
        super().__init__(message, error_code="NO_RESPONSE", details=details)


class ResponseParseError(NoResponseError):
    """Response text did not match the expected structured contract."""

    def __init__(self, message: str, raw_response: str | None = None):
        """
        Initialize exception.

        Args:
            message: Parse failure description
            raw_response: Offending response text (truncated)
        """
        details = {"raw_response": raw_response[:500]} if raw_response else {}
        super().__init__(f"Parse error: {message}", details=details)
        self.error_code = "PARSE_ERROR"


class RetryableProviderError(ModelAccessError):
    """Transient provider failure worth retrying."""

    is_retryable = True


class RateLimitedError(RetryableProviderError):
    """Provider rate limit hit."""

    def __init__(self, provider: str | None = None):
        """Initialize exception."""
        super().__init__(
            "Rate limited",
            error_code="RATE_LIMITED",
            details={"provider": provider} if provider else {},
        )


class ServerError(RetryableProviderError):
    """Provider returned a 5xx status or the transport failed."""

    def __init__(self, status_code: int, provider: str | None = None, message: str | None = None):
        """
        Initialize exception.

        Args:
            status_code: HTTP status code (0 for transport failures)
            provider: Provider name
            message: Optional override message
        """
        details: dict[str, Any] = {"status_code": status_code}
        if provider:
            details["provider"] = provider
        super().__init__(
            message or f"Server error: {status_code}",
            error_code="SERVER_ERROR",
            details=details,
        )
        self.status_code = status_code


class ProviderRequestError(ModelAccessError):
    """Provider rejected the request (non-retryable 4xx)."""

    def __init__(self, status_code: int, provider: str | None = None, message: str | None = None):
        """Initialize exception."""
        super().__init__(
            message or f"Request rejected: {status_code}",
            error_code="PROVIDER_REQUEST_ERROR",
            details={"status_code": status_code, "provider": provider},
        )
        self.status_code = status_code


class EmbeddingError(ModelAccessError):
    """Embedding endpoint failed."""

    def __init__(self, message: str):
        """Initialize exception."""
        super().__init__(message, error_code="EMBEDDING_ERROR")


class AllProvidersFailedError(ModelAccessError):
    """Every provider in the routing chain failed."""

    def __init__(self, errors: dict[str, Exception] | None = None):
        """
        Initialize exception.

        Args:
            errors: Last error per provider name, in chain order
        """
        self.errors = errors or {}
        super().__init__(
            "All providers failed",
            error_code="ALL_PROVIDERS_FAILED",
            details={name: str(error) for name, error in self.errors.items()},
        )


# Agent Errors


class AgentError(AmbientError):
    """Agent-level errors."""

    pass


class DuplicateContentError(AgentError):
    """Batch content matches a recently processed batch."""

    def __init__(self, message: str = "Duplicate content"):
        """Initialize exception."""
        super().__init__(message, error_code="DUPLICATE_CONTENT")


# Persistence Errors


class PersistenceError(AmbientError):
    """Storage-related errors."""

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception."""
        super().__init__(message, error_code="PERSISTENCE_ERROR", details=details)
