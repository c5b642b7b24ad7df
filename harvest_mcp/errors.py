from typing import List, Optional

SERVER_ERROR_STATUSES = (500, 502, 503, 504)


class ConfigError(Exception):
    """Raised when the environment does not describe a usable configuration."""


class HarvestAPIError(Exception):
    """Custom exception for Harvest API errors."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class ToolInputError(Exception):
    """Raised when tool arguments do not match the tool's input schema."""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


def error_for_status(
    status_code: int,
    body: str,
    endpoint: str,
    retry_after: Optional[str] = None,
) -> HarvestAPIError:
    """Classify an HTTP error response from Harvest.

    Args:
        status_code: HTTP status of the response
        body: Raw response body
        endpoint: The endpoint that was called
        retry_after: Value of the Retry-After header, if any

    Returns:
        A HarvestAPIError carrying a readable message and a stable error code
    """
    if status_code == 401:
        message, code = "Authentication failed: Invalid access token or account ID", "auth_error"
    elif status_code == 403:
        message, code = "Access forbidden: Insufficient permissions", "permission_error"
    elif status_code == 404:
        message, code = "Resource not found", "not_found"
    elif status_code == 422:
        message, code = f"Validation failed: {body}", "validation_error"
    elif status_code == 429:
        message = f"Rate limit exceeded. Retry after {retry_after or 'unknown'} seconds"
        code = "rate_limit"
    elif status_code in SERVER_ERROR_STATUSES:
        message, code = f"Server error ({status_code}): Please try again later", "server_error"
    else:
        message, code = f"HTTP {status_code}: {body[:500]}", "unknown_error"

    return HarvestAPIError(message, status_code=status_code, code=code, endpoint=endpoint)
