"""Errors raised by the Notion client.

Every non-200 response becomes a ``NotionAPIError``. The body is decoded as
the API's error object when possible; when it is missing or malformed the
class defaults below are used instead.
"""

from typing import Dict, Optional, Type

import httpx
from loguru import logger
from pydantic import ValidationError

from .types import ErrorObject


class NotionError(Exception):
    """Base class for errors raised by this library."""


class DecodeError(NotionError):
    """A 200 response whose body could not be decoded into the expected model."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"failed to parse a response of {operation}: {cause}")


class NotionAPIError(NotionError):
    """The API answered with a non-200 status."""

    default_code = "unknown_error"
    default_message = "unexpected response from the Notion API"

    def __init__(
        self,
        status: int,
        code: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.status = status
        self.code = code or self.default_code
        self.message = message or self.default_message
        super().__init__(f"{self.code}: {self.message}")


class BadRequestError(NotionAPIError):
    default_code = "invalid_request"
    default_message = "bad request"


class UnauthorizedError(NotionAPIError):
    default_code = "unauthorized"
    default_message = "API token is invalid"


class RateLimitedError(NotionAPIError):
    default_code = "rate_limited"
    default_message = "rate limit exceeded"


class NotFoundError(NotionAPIError):
    default_code = "object_not_found"
    default_message = "object not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class DatabaseNotFoundError(NotFoundError):
    default_message = "database not found"


class PageNotFoundError(NotFoundError):
    default_message = "page not found"


class BlockNotFoundError(NotFoundError):
    default_message = "block not found"


_BY_STATUS: Dict[int, Type[NotionAPIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    429: RateLimitedError,
}


def _error_body(response: httpx.Response) -> Optional[ErrorObject]:
    try:
        return ErrorObject.model_validate_json(response.content)
    except ValidationError:
        logger.warning(f"[notion] undecodable error body ({response.status_code})")
        return None


def raise_for_status(
    response: httpx.Response, not_found: Type[NotFoundError] = NotFoundError
) -> None:
    """Raise the matching ``NotionAPIError`` unless the response is a 200.

    Args:
        response: The HTTP response
        not_found: Error class for 404, scoped to the requested resource kind
    """
    if response.status_code == 200:
        return

    status = response.status_code
    if status == 404:
        cls: Type[NotionAPIError] = not_found
    else:
        cls = _BY_STATUS.get(status, NotionAPIError)

    body = _error_body(response)
    if body is None:
        raise cls(status)
    raise cls(status, body.code, body.message)
