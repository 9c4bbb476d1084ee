"""
Standardized error handling for API responses.

This module provides the error taxonomy used by the gateway handlers. Every error
is rendered by the application factory as the same JSON envelope:

    {"error": "<message>"}

paired with a 4xx/5xx status code, so clients never have to distinguish between
validation failures, permission problems, and errors reported by the
authentication backend by response shape.

Taxonomy:
    - MissingFieldError (400): a required field is missing. Raised before
      any network call is attempted.
    - BackendError (400): the authentication backend returned an error. The
      backend's own message is passed through unmodified.
    - PermissionDeniedError (403): an operation needs the privileged key and
      none was resolved for the request.
    - ConfigurationError (500): the backend URL or public key could not be
      resolved when a backend client was needed.
    - Anything else (500): rendered with the raw error text by the global
      exception handler in common.fastapi.app_factory.

Example:
    ```python
    from common.exceptions import MissingFieldError

    if not payload.email:
        raise MissingFieldError("email required")
    ```
"""

from loguru import logger

# HTTP Status Code Constants
HTTP_400_BAD_REQUEST = 400
HTTP_403_FORBIDDEN = 403
HTTP_404_NOT_FOUND = 404
HTTP_500_INTERNAL_SERVER_ERROR = 500
HTTP_502_BAD_GATEWAY = 502


class APIError(Exception):
    """
    Base exception class for API errors rendered as an error envelope.

    Attributes:
        message (str): Error message returned to the client as ``{"error": message}``.
        status_code (int): HTTP status code to return (default: 500).
        internal_error (Exception | None): The original exception that caused this
            error, kept for logging.

    Example:
        ```python
        raise APIError("Admin key missing", status_code=403)
        ```
    """

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        internal_error: Exception | None = None,
    ) -> None:
        """
        Initialize an APIError instance.

        Args:
            message: Message returned to the client.
            status_code: HTTP status code; defaults to the class-level code.
            internal_error: Optional original exception, logged but not returned.
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.internal_error = internal_error
        super().__init__(self.message)

    def to_content(self) -> dict[str, str]:
        """Return the JSON body for this error."""
        return {"error": self.message}


class MissingFieldError(APIError):
    """A required request field is missing or empty."""

    status_code = HTTP_400_BAD_REQUEST


class BackendError(APIError):
    """
    Error reported by the authentication backend.

    The message is the backend's own text and must reach the client verbatim
    (no translation or localization).
    """

    status_code = HTTP_400_BAD_REQUEST


class PermissionDeniedError(APIError):
    """The privileged key is required but was not resolved for this request."""

    status_code = HTTP_403_FORBIDDEN


class ConfigurationError(APIError):
    """The backend URL or public key is missing when a backend client is needed."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR


def log_api_error(method: str, path: str, exc: APIError) -> None:
    """
    Log an APIError at a level matching its severity.

    Client errors (4xx) are expected and logged at WARNING; server errors are
    logged at ERROR together with the wrapped internal error, if any.
    """
    if exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning(f"{method} {path} rejected ({exc.status_code}): {exc.message}")
        return
    if exc.internal_error is not None:
        logger.opt(exception=exc.internal_error).error(
            f"{method} {path} failed ({exc.status_code}): {exc.message}"
        )
    else:
        logger.error(f"{method} {path} failed ({exc.status_code}): {exc.message}")
