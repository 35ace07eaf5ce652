from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from backoffice.errors import ConfigurationError, UpstreamError

log = logging.getLogger(__name__)

FRAUD_CHECK_BASE = "https://bdcourier.com/api/courier-check"
DEFAULT_TIMEOUT = 10


@dataclass(frozen=True)
class RiskLookup:
    """Raw courier-check answer. ``payload`` is upstream JSON, untouched."""

    success: bool
    payload: Optional[Any] = None
    error: Optional[UpstreamError] = None

    @classmethod
    def failed(cls, message: str, upstream_message: str | None = None) -> "RiskLookup":
        return cls(success=False, error=UpstreamError(message, upstream_message=upstream_message))


class FraudCheckClient:
    """Phone-number delivery history lookup (BD Courier courier-check)."""

    def __init__(self, api_key: str, *, base_url: str | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.api_key = (api_key or "").strip()
        self.base_url = (base_url or FRAUD_CHECK_BASE).rstrip("/")
        self.timeout = timeout

    def lookup(self, phone: str) -> RiskLookup:
        if not self.api_key:
            raise ConfigurationError("Fraud Check API key not configured")

        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            r = requests.post(self.base_url, headers=headers, json={"phone": phone}, timeout=self.timeout)
        except requests.Timeout:
            log.warning("Fraud check timed out after %ss", self.timeout)
            return RiskLookup.failed("Fraud check service timed out")
        except requests.RequestException as e:
            log.warning("Fraud check request failed: %s", e)
            return RiskLookup.failed("Network error while checking fraud status")

        try:
            data = r.json() if r.content else {}
        except ValueError:
            log.warning("Fraud check returned malformed JSON (HTTP %s)", r.status_code)
            return RiskLookup.failed("Malformed response from fraud check service")

        if not 200 <= r.status_code < 300:
            upstream = None
            if isinstance(data, dict):
                upstream = data.get("error") or data.get("message")
            log.warning("Fraud check HTTP %s: %s", r.status_code, upstream)
            return RiskLookup.failed(f"Failed to check fraud status (HTTP {r.status_code})", upstream_message=upstream)

        if not isinstance(data, dict) or not data:
            log.warning("Fraud check HTTP %s returned no data", r.status_code)
            return RiskLookup.failed("Malformed response from fraud check service")

        log.debug("Fraud check HTTP %s", r.status_code)
        return RiskLookup(success=True, payload=data)
