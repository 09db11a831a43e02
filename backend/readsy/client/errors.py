"""
Client-side errors.
"""

from typing import Any, Dict, List, Optional

import httpx

# Statuses callers routinely expect (not logged in yet, empty collections)
EXPECTED_STATUSES = frozenset({401, 404})
# Paths whose failures are never reported, e.g. the initial profile load
QUIET_PATHS = ("/users/me",)


class ReadsyClientError(Exception):
    """Base class for errors raised by the Readsy client."""


class SessionExpiredError(ReadsyClientError):
    """The session could not be refreshed; the user has to log in again."""


class ApiError(ReadsyClientError):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, path: str = "", payload: Any = None):
        super().__init__(f"{status_code} {message}")
        self.status_code = status_code
        self.message = message
        self.path = path
        self.payload = payload

    @property
    def field_errors(self) -> Dict[str, List[str]]:
        """Validation messages per field, from a 422 response."""
        errors: Dict[str, List[str]] = {}
        detail = self.payload.get("detail") if isinstance(self.payload, dict) else None
        if not isinstance(detail, list):
            return errors
        for item in detail:
            if isinstance(item, str):
                errors.setdefault("__root__", []).append(item)
                continue
            if not isinstance(item, dict):
                continue
            loc = [str(part) for part in item.get("loc", []) if part not in ("body", "query", "path")]
            field = ".".join(loc) or "__root__"
            errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
        return errors

    @property
    def is_expected(self) -> bool:
        return is_expected_error(self.status_code, self.path)


def is_expected_error(status_code: int, path: str) -> bool:
    """Whether a failed call is part of normal flow and should not be reported."""
    if status_code in EXPECTED_STATUSES:
        return True
    return any(path.startswith(quiet) for quiet in QUIET_PATHS)


def _message_from_payload(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
        if isinstance(payload.get("detail"), list):
            return "Validation failed"
    return default


def error_from_response(response: httpx.Response, path: str = "") -> ApiError:
    payload: Optional[Any]
    try:
        payload = response.json()
    except ValueError:
        payload = None
    message = _message_from_payload(payload, response.reason_phrase or "Unexpected error")
    return ApiError(response.status_code, message, path=path, payload=payload)
