"""Error classification for LLM API failures.

This module classifies the exceptions raised by the provider SDKs into a
small set of categories so the orchestrator can translate them into the
quiz generation error taxonomy without knowing any SDK specifics.
"""

import re
from enum import Enum
from typing import Any, Optional


class ErrorCategory(Enum):
    """Categories of API errors."""

    BILLING_QUOTA = "billing_quota"  # Insufficient funds, quota exceeded
    RATE_LIMIT = "rate_limit"  # Rate limit/throttling errors
    AUTHENTICATION = "authentication"  # API key invalid or expired
    INVALID_REQUEST = "invalid_request"  # Malformed request or invalid parameters
    SERVER_ERROR = "server_error"  # Provider server errors (5xx)
    NETWORK_ERROR = "network_error"  # Connection/timeout errors
    MODEL_ERROR = "model_error"  # Model not found or unavailable
    UNKNOWN = "unknown"  # Unclassified errors


class ClassifiedError:
    """A classified API error with category and provider context."""

    def __init__(
        self,
        category: ErrorCategory,
        provider: str,
        original_error: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        """Initialize classified error.

        Args:
            category: Error category
            provider: LLM provider name (openai, gemini, claude)
            original_error: Original exception type name
            message: Human-readable error message
            status_code: HTTP status reported by the provider, if any
        """
        self.category = category
        self.provider = provider
        self.original_error = original_error
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        """String representation of classified error."""
        return f"{self.provider}: {self.category.value} - {self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "category": self.category.value,
            "provider": self.provider,
            "original_error": self.original_error,
            "message": self.message,
            "status_code": self.status_code,
        }


class ErrorClassifier:
    """Classifies API errors from the supported LLM providers."""

    # Machine-readable error codes reported by the SDKs
    # (OpenAI ``code``, Google ``status``).
    ERROR_CODES = {
        "insufficient_quota": ErrorCategory.BILLING_QUOTA,
        "billing_hard_limit_reached": ErrorCategory.BILLING_QUOTA,
        "invalid_api_key": ErrorCategory.AUTHENTICATION,
        "unauthenticated": ErrorCategory.AUTHENTICATION,
        "permission_denied": ErrorCategory.AUTHENTICATION,
        "model_not_found": ErrorCategory.MODEL_ERROR,
        "not_found": ErrorCategory.MODEL_ERROR,
    }

    STATUS_CODES = {
        401: ErrorCategory.AUTHENTICATION,
        402: ErrorCategory.BILLING_QUOTA,
        403: ErrorCategory.AUTHENTICATION,
        404: ErrorCategory.MODEL_ERROR,
    }

    # Patterns for billing/quota errors
    BILLING_PATTERNS = [
        r"insufficient.*funds",
        r"quota",
        r"billing",
        r"credit.*balance",
        r"payment.*required",
        r"account.*suspended",
    ]

    # Patterns for authentication errors
    AUTH_PATTERNS = [
        r"invalid.*api.*key",
        r"api.*key.*not.*valid",
        r"incorrect.*api.*key",
        r"authentication",
        r"unauthorized",
        r"api.*key.*expired",
        r"invalid.*credentials",
        r"\b401\b",
        r"\b403\b",
    ]

    # Patterns for rate limit errors
    RATE_LIMIT_PATTERNS = [
        r"rate.*limit",
        r"too.*many.*requests",
        r"throttl",
        r"\b429\b",
    ]

    # Patterns for model errors
    MODEL_PATTERNS = [
        r"model.*not.*found",
        r"model.*does.*not.*exist",
        r"invalid.*model",
        r"model.*unavailable",
        r"model.*deprecated",
        r"unknown.*model",
    ]

    # Patterns for server errors
    SERVER_ERROR_PATTERNS = [
        r"internal.*server.*error",
        r"service.*unavailable",
        r"\b50[0-9]\b",
        r"server.*error",
        r"overloaded",
    ]

    # Patterns for network errors
    NETWORK_PATTERNS = [
        r"connection",
        r"timed?\s?out",
        r"network",
        r"dns",
    ]

    @staticmethod
    def classify_error(error: Exception, provider: str) -> ClassifiedError:
        """Classify an API error.

        Structured attributes (SDK error codes, HTTP status) win over message
        text; message patterns are the fallback for SDKs that only report
        free-form errors.

        Args:
            error: The exception that was raised
            provider: Provider name (openai, gemini, claude)

        Returns:
            ClassifiedError with category
        """
        status_code = ErrorClassifier._status_code(error)
        category = ErrorClassifier._category_from_attributes(error, status_code)
        if category is None:
            category = ErrorClassifier._category_from_message(error)

        return ClassifiedError(
            category=category,
            provider=provider,
            original_error=type(error).__name__,
            message=ErrorClassifier._describe(category, provider, error),
            status_code=status_code,
        )

    @staticmethod
    def _status_code(error: Exception) -> Optional[int]:
        for attr in ("status_code", "code"):
            value: Any = getattr(error, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None

    @staticmethod
    def _category_from_attributes(
        error: Exception, status_code: Optional[int]
    ) -> Optional[ErrorCategory]:
        for attr in ("code", "status"):
            value = getattr(error, attr, None)
            if isinstance(value, str):
                category = ErrorClassifier.ERROR_CODES.get(value.lower())
                if category is not None:
                    return category

        if status_code in ErrorClassifier.STATUS_CODES:
            return ErrorClassifier.STATUS_CODES[status_code]

        # 429 is shared by quota exhaustion and throttling; let the message decide.
        if status_code == 429:
            if ErrorClassifier._match_patterns(
                str(error), ErrorClassifier.BILLING_PATTERNS
            ):
                return ErrorCategory.BILLING_QUOTA
            return ErrorCategory.RATE_LIMIT

        if status_code is not None and 500 <= status_code < 600:
            return ErrorCategory.SERVER_ERROR

        error_type = type(error).__name__
        if "Connect" in error_type or "Timeout" in error_type:
            return ErrorCategory.NETWORK_ERROR

        return None

    @staticmethod
    def _category_from_message(error: Exception) -> ErrorCategory:
        error_str = str(error).lower()

        ordered_patterns = [
            (ErrorClassifier.BILLING_PATTERNS, ErrorCategory.BILLING_QUOTA),
            (ErrorClassifier.AUTH_PATTERNS, ErrorCategory.AUTHENTICATION),
            (ErrorClassifier.RATE_LIMIT_PATTERNS, ErrorCategory.RATE_LIMIT),
            (ErrorClassifier.MODEL_PATTERNS, ErrorCategory.MODEL_ERROR),
            (ErrorClassifier.SERVER_ERROR_PATTERNS, ErrorCategory.SERVER_ERROR),
            (ErrorClassifier.NETWORK_PATTERNS, ErrorCategory.NETWORK_ERROR),
        ]
        for patterns, category in ordered_patterns:
            if ErrorClassifier._match_patterns(error_str, patterns):
                return category

        if "invalid" in error_str or "bad request" in error_str or "400" in error_str:
            return ErrorCategory.INVALID_REQUEST

        return ErrorCategory.UNKNOWN

    @staticmethod
    def _describe(category: ErrorCategory, provider: str, error: Exception) -> str:
        name = provider.upper()
        if category == ErrorCategory.BILLING_QUOTA:
            return (
                f"{name} API quota exceeded. Please check your API key and billing."
            )
        if category == ErrorCategory.AUTHENTICATION:
            return f"Invalid {name} API key. Please check your configuration."
        if category == ErrorCategory.MODEL_ERROR:
            return f"Model not found. Please check your {name} model configuration."
        if category == ErrorCategory.RATE_LIMIT:
            return f"Rate limit exceeded for {name}. Please try again later."
        if category == ErrorCategory.SERVER_ERROR:
            return f"{name} server error. This may be temporary."
        if category == ErrorCategory.NETWORK_ERROR:
            return f"Could not reach the {name} API. Check network connectivity."
        if category == ErrorCategory.INVALID_REQUEST:
            return f"Invalid request to {name}: {str(error)[:200]}"
        return f"Unclassified error from {name}: {str(error)[:200]}"

    @staticmethod
    def _match_patterns(text: str, patterns: list[str]) -> bool:
        """Check if text matches any of the given regex patterns.

        Args:
            text: Text to search
            patterns: List of regex patterns

        Returns:
            True if any pattern matches
        """
        for pattern in patterns:
            if re.search(pattern, text, re.IGNORECASE):
                return True
        return False
