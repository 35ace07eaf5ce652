"""Steadfast Courier (Packzy) API client.

Every operation is a single HTTP call. Failures raise :class:`UpstreamError`
carrying Steadfast's own ``message`` when it sent one; missing credentials
raise :class:`ConfigurationError` before any request is made.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional
from urllib.parse import quote

import requests

from backoffice.errors import ConfigurationError, UpstreamError

log = logging.getLogger(__name__)

STEADFAST_BASE = "https://portal.packzy.com/api/v1"
DEFAULT_TIMEOUT = 10

HOME_DELIVERY = 0
HUB_PICKUP = 1


@dataclass(frozen=True)
class CreateOrderParams:
    invoice: str
    recipient_name: str
    recipient_phone: str
    recipient_address: str
    cod_amount: float
    note: Optional[str] = None
    item_description: Optional[str] = None
    total_lot: Optional[int] = None
    delivery_type: int = HOME_DELIVERY

    def to_payload(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class Consignment:
    consignment_id: int
    tracking_code: str
    status: Optional[str] = None
    invoice: Optional[str] = None


@dataclass(frozen=True)
class DeliveryStatus:
    delivery_status: str


class SteadfastClient:
    def __init__(self, api_key: str, secret_key: str, *, base_url: str | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.api_key = (api_key or "").strip()
        self.secret_key = (secret_key or "").strip()
        self.base_url = (base_url or STEADFAST_BASE).rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Api-Key": self.api_key,
            "Secret-Key": self.secret_key,
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, *, json: Any = None, failure: str) -> dict:
        if not self.api_key or not self.secret_key:
            raise ConfigurationError("Steadfast API credentials are not configured")

        url = f"{self.base_url}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(), json=json, timeout=self.timeout)
        except requests.Timeout as e:
            log.warning("Steadfast %s %s timed out after %ss", method, path, self.timeout)
            raise UpstreamError(f"{failure}: courier service timed out") from e
        except requests.RequestException as e:
            log.warning("Steadfast %s %s failed: %s", method, path, e)
            raise UpstreamError(f"{failure}: network error") from e

        try:
            data = r.json() if r.content else {}
        except ValueError as e:
            log.warning("Steadfast %s %s returned malformed JSON (HTTP %s)", method, path, r.status_code)
            raise UpstreamError(f"{failure}: malformed response") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"{failure}: malformed response")

        if not 200 <= r.status_code < 300:
            upstream = data.get("message") or data.get("error")
            log.warning("Steadfast %s %s HTTP %s: %s", method, path, r.status_code, upstream)
            raise UpstreamError(failure, upstream_message=upstream)

        log.debug("Steadfast %s %s HTTP %s", method, path, r.status_code)
        return data

    # -----------------------------
    # Consignments
    # -----------------------------
    def create_order(self, params: CreateOrderParams) -> Consignment:
        failure = "Failed to create order in Steadfast Courier"
        data = self._request("POST", "/create_order", json=params.to_payload(), failure=failure)
        c = data.get("consignment")
        if not isinstance(c, dict) or c.get("consignment_id") is None or not c.get("tracking_code"):
            raise UpstreamError(failure, upstream_message=data.get("message") or "Response had no consignment")
        try:
            consignment_id = int(c["consignment_id"])
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"{failure}: malformed consignment id") from e
        return Consignment(
            consignment_id=consignment_id,
            tracking_code=str(c["tracking_code"]),
            status=c.get("status"),
            invoice=c.get("invoice"),
        )

    # -----------------------------
    # Delivery status
    # -----------------------------
    def _status(self, path: str) -> DeliveryStatus:
        failure = "Failed to get delivery status"
        data = self._request("GET", path, failure=failure)
        status = data.get("delivery_status")
        if not status:
            raise UpstreamError(failure, upstream_message=data.get("message") or "Response had no delivery status")
        return DeliveryStatus(delivery_status=str(status))

    def status_by_consignment_id(self, consignment_id: int) -> DeliveryStatus:
        return self._status(f"/status_by_cid/{int(consignment_id)}")

    def status_by_tracking_code(self, tracking_code: str) -> DeliveryStatus:
        return self._status(f"/status_by_trackingcode/{quote(str(tracking_code), safe='')}")

    def status_by_invoice(self, invoice: str) -> DeliveryStatus:
        return self._status(f"/status_by_invoice/{quote(str(invoice), safe='')}")

    # -----------------------------
    # Account
    # -----------------------------
    def get_balance(self) -> float:
        failure = "Failed to get balance"
        data = self._request("GET", "/get_balance", failure=failure)
        try:
            return float(data["current_balance"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(failure, upstream_message="Response had no current balance") from e
