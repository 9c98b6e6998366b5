"""
Error taxonomy for the sync run.

- ConfigurationError: bad env / artifacts / mapping; raised before any network call.
- PipedriveHTTPError: non-2xx status or the request never got a response.
- PipedriveEnvelopeError: HTTP was fine but the JSON envelope says success=false.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SyncError(RuntimeError):
    pass


class ConfigurationError(SyncError):
    pass


class PipedriveError(SyncError):
    def __init__(
        self,
        message: str,
        *,
        method: str = "",
        path: str = "",
        status_code: Optional[int] = None,
        envelope: Any = None,
    ):
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.envelope = envelope


# status -> (category, hint shown to the operator)
_STATUS_CATEGORIES: Dict[int, tuple[str, str]] = {
    400: ("bad_request", "bad request (check the mapped payload)"),
    401: ("unauthorized", "unauthorized (check PIPEDRIVE_API_TOKEN)"),
    403: ("unauthorized", "forbidden (token lacks permission)"),
    404: ("bad_request", "not found (check PIPEDRIVE_COMPANY_DOMAIN and ids)"),
    422: ("bad_request", "unprocessable entity (check the mapped payload)"),
}


def categorize_status(status_code: int) -> tuple[str, str]:
    if status_code in _STATUS_CATEGORIES:
        return _STATUS_CATEGORIES[status_code]
    if status_code >= 500:
        return "server_error", "Pipedrive server error"
    return "http_error", f"unexpected HTTP status {status_code}"


class PipedriveHTTPError(PipedriveError):
    def __init__(
        self,
        message: str,
        *,
        category: str,
        method: str = "",
        path: str = "",
        status_code: Optional[int] = None,
        envelope: Any = None,
    ):
        super().__init__(
            message, method=method, path=path, status_code=status_code, envelope=envelope
        )
        self.category = category

    @classmethod
    def from_status(cls, method: str, path: str, status_code: int, body: str) -> "PipedriveHTTPError":
        category, hint = categorize_status(status_code)
        return cls(
            f"Pipedrive {method} {path} failed: {status_code} {hint}: {body[:300]}",
            category=category,
            method=method,
            path=path,
            status_code=status_code,
            envelope=body,
        )


class PipedriveEnvelopeError(PipedriveError):
    pass
