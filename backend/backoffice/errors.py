"""Error taxonomy shared by the upstream clients, the state machine and the
orchestrators.

Every error knows the HTTP status it maps to and how to render itself for an
end caller: the upstream message when one is known, otherwise a generic
description of the error kind. Internal details never leave the process.
"""

from __future__ import annotations

from typing import Any


class BackofficeError(Exception):
    kind = "error"
    status_code = 500
    generic_message = "Something went wrong"

    def __init__(self, message: str = "", *, upstream_message: str | None = None, details: dict | None = None):
        super().__init__(message or self.generic_message)
        self.message = message or self.generic_message
        self.upstream_message = upstream_message
        self.details = dict(details or {})

    @property
    def public_message(self) -> str:
        return self.upstream_message or self.message or self.generic_message

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": False, "error": self.public_message}
        if self.upstream_message and self.upstream_message != self.message:
            out["message"] = self.message
        out.update(self.details)
        return out


class ValidationError(BackofficeError):
    """Malformed caller input, rejected before any upstream call."""

    kind = "validation"
    status_code = 400
    generic_message = "Invalid request"


class NotFoundError(BackofficeError):
    kind = "not_found"
    status_code = 404
    generic_message = "Not found"


class PreconditionError(BackofficeError):
    """Illegal courier lifecycle transition."""

    kind = "precondition"
    status_code = 409
    generic_message = "Operation not allowed in the current state"


class UpstreamError(BackofficeError):
    """Non-2xx, timeout, connection failure or malformed body from an upstream API."""

    kind = "upstream"
    status_code = 502
    generic_message = "Upstream service request failed"


class ConfigurationError(BackofficeError):
    """Missing credentials. Fatal for the call, never retried."""

    kind = "configuration"
    status_code = 503
    generic_message = "Integration is not configured"


class PersistenceError(BackofficeError):
    """Database read or write failed."""

    kind = "persistence"
    status_code = 500
    generic_message = "Could not save the order"
