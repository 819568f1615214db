"""
Research provider exceptions

Every failure of the keyword-metrics provider surfaces as a ResearchError
subclass carrying a user-visible code and a retry category.
"""

from seo_agent.core.errors import ErrorCategory, ErrorCode


class ResearchError(Exception):
    """Base class for research provider errors"""

    code: ErrorCode = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.NON_RETRYABLE,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.status_code = status_code

    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.RETRYABLE

    def __repr__(self) -> str:
        cls_name = self.__class__.__name__
        return f"<{cls_name}(code={self.code.value}, cat={self.category.value}, msg={self.message})>"


class ResearchConfigurationError(ResearchError):
    """Credentials not configured (raised at construction)"""

    code = ErrorCode.AUTH_ERROR

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.NON_RETRYABLE)


class ResearchAuthError(ResearchError):
    """Credentials rejected by the provider (HTTP 401)"""

    code = ErrorCode.AUTH_ERROR

    def __init__(self, message: str, status_code: int | None = 401):
        super().__init__(message, ErrorCategory.NON_RETRYABLE, status_code)


class ResearchRateLimitError(ResearchError):
    """Provider throttling (HTTP 429); not retried here"""

    code = ErrorCode.RATE_LIMIT

    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message, ErrorCategory.RETRYABLE, 429)
        self.retry_after = retry_after


class ResearchNetworkError(ResearchError):
    """Transport failure or timeout"""

    code = ErrorCode.NETWORK_ERROR

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.RETRYABLE)


class ResearchAPIError(ResearchError):
    """Any other non-success response"""

    code = ErrorCode.API_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        category = (
            ErrorCategory.RETRYABLE
            if status_code is not None and status_code >= 500
            else ErrorCategory.NON_RETRYABLE
        )
        super().__init__(message, category, status_code)
