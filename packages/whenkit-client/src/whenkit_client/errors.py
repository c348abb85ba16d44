"""Error hierarchy for the datasource resource client."""

from __future__ import annotations

from typing import Any


class ClientError(Exception):
    """Base error for all client errors."""

    def __init__(
        self,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.data = data
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return False


class RequestError(ClientError):
    """Error status returned by a datasource resource endpoint."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
        data: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, data=data, cause=cause)
        self.status_code = status_code
        self._retryable = retryable

    @property
    def retryable(self) -> bool:
        return self._retryable


class InvalidRequestError(RequestError):
    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 400)
        super().__init__(message, retryable=False, **kwargs)


class AuthenticationError(RequestError):
    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 401)
        super().__init__(message, retryable=False, **kwargs)


class AccessDeniedError(RequestError):
    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 403)
        super().__init__(message, retryable=False, **kwargs)


class NotFoundError(RequestError):
    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 404)
        super().__init__(message, retryable=False, **kwargs)


class ServerError(RequestError):
    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("status_code", 500)
        super().__init__(message, retryable=True, **kwargs)


# Transport errors

class RequestTimeoutError(ClientError):
    @property
    def retryable(self) -> bool:
        return True


class NetworkError(ClientError):
    @property
    def retryable(self) -> bool:
        return True


class ConfigurationError(ClientError):
    pass


def error_message_from_body(body: Any, default: str) -> str:
    """Pick the most useful message out of an error response body."""
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str) and body.strip():
        return body.strip()
    return default
