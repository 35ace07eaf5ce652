from __future__ import annotations

import logging
from datetime import datetime

from backoffice.errors import BackofficeError, ConfigurationError, NotFoundError, UpstreamError, ValidationError
from backoffice.order_store import SqlOrderStore
from backoffice.risk.normalizer import normalize
from backoffice.services.result import ServiceResult
from backoffice.services.upstream import fraud_check_client
from backoffice.services.validation import require_order_id, validate_phone

log = logging.getLogger(__name__)


def check_risk(phone, *, client=None, credentials=None, now: datetime | None = None) -> ServiceResult:
    """Look a phone number up and classify it. Persists nothing.

    Each call is an independent snapshot.
    """
    try:
        phone = validate_phone(phone)
        client = client or fraud_check_client(credentials)
        lookup = client.lookup(phone)
        if not lookup.success:
            raise lookup.error or UpstreamError("Failed to check fraud status")
    except BackofficeError as e:
        log.warning("Fraud check for %s failed (%s): %s", phone, e.kind, e.public_message)
        return ServiceResult.failed(e)

    assessment = normalize(lookup.payload, phone=phone, now=now)
    log.info("Fraud check for %s: %s (%.1f%%)", phone, assessment.risk_tier.value, assessment.effective_ratio)
    return ServiceResult.ok(assessment.to_dict(), value=assessment)


def _failure_marker(error: BackofficeError, at: datetime) -> dict:
    return {**error.to_dict(), "checkedAt": at.isoformat()}


def check_order_risk(order_id, *, store=None, client=None, credentials=None, now: datetime | None = None) -> ServiceResult:
    """Check the order's phone and overwrite the snapshot stored on the order.

    A failed lookup is stored too (``fraud_checked`` with a failure-shaped
    result) so "checked, upstream failed" differs from "never checked".
    Missing credentials or a malformed phone on the order store nothing: no
    check happened.
    """
    store = store or SqlOrderStore()
    try:
        order_id = require_order_id(order_id)
        order = store.find_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
    except BackofficeError as e:
        return ServiceResult.failed(e)

    now = now or datetime.utcnow()
    result = check_risk(order.phone, client=client, credentials=credentials, now=now)
    if not result.success and isinstance(result.error, (ConfigurationError, ValidationError)):
        return result

    order.fraud_checked = True
    order.fraud_check_result = result.data if result.success else _failure_marker(result.error, now)
    order.fraud_check_at = now
    try:
        store.save(order)
    except BackofficeError as e:
        return ServiceResult.failed(e)

    level = result.data.get("riskLevel") if result.success else "failed"
    store.record_event(order, "fraud_checked", note=f"risk: {level}")
    return result
