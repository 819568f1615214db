"""LLM exception hierarchy."""

from seo_agent.core.errors import ErrorCategory, ErrorCode


class LLMError(Exception):
    """Base class for LLM API call errors."""

    code: ErrorCode = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        provider: str,
        model: str | None = None,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize.

        Args:
            message: Human-readable error message
            category: Error category (RETRYABLE/NON_RETRYABLE/VALIDATION_FAIL)
            provider: Provider name (openai, gemini, anthropic)
            model: Model name used
            original_error: Underlying SDK exception
            status_code: HTTP status returned by the provider, if any
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.provider = provider
        self.model = model
        self.original_error = original_error
        self.status_code = status_code

    def is_retryable(self) -> bool:
        """Whether a caller may retry."""
        return self.category == ErrorCategory.RETRYABLE

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "code": self.code.value,
            "category": self.category.value,
            "provider": self.provider,
            "model": self.model,
            "status_code": self.status_code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, code={self.code.value}, "
            f"category={self.category.value}, provider={self.provider!r}, model={self.model!r})"
        )


class LLMConfigurationError(LLMError):
    """Missing or invalid client configuration (raised at construction)."""

    code = ErrorCode.CONFIGURATION_ERROR

    def __init__(
        self,
        message: str,
        provider: str,
        missing_config: list[str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.NON_RETRYABLE,
            provider=provider,
        )
        self.missing_config = missing_config or []


class LLMAuthenticationError(LLMError):
    """Rejected credentials."""

    code = ErrorCode.AUTH_ERROR

    def __init__(self, message: str, provider: str, model: str | None = None, **kwargs) -> None:
        super().__init__(message, ErrorCategory.NON_RETRYABLE, provider, model, **kwargs)


class LLMRateLimitError(LLMError):
    """Provider is throttling; not retried by the adapter."""

    code = ErrorCode.RATE_LIMIT

    def __init__(self, message: str, provider: str, model: str | None = None, **kwargs) -> None:
        super().__init__(message, ErrorCategory.RETRYABLE, provider, model, **kwargs)


class LLMConnectionError(LLMError):
    """Transport failure or timeout."""

    code = ErrorCode.NETWORK_ERROR

    def __init__(self, message: str, provider: str, model: str | None = None, **kwargs) -> None:
        super().__init__(message, ErrorCategory.RETRYABLE, provider, model, **kwargs)


class LLMServiceError(LLMError):
    """Generic remote error (bad request, content filter, 5xx)."""

    code = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
        **kwargs,
    ) -> None:
        category = (
            ErrorCategory.RETRYABLE
            if status_code is not None and status_code >= 500
            else ErrorCategory.NON_RETRYABLE
        )
        super().__init__(message, category, provider, model, status_code=status_code, **kwargs)
