"""Turn a courier-check lookup payload into a :class:`RiskAssessment`.

Upstream has shipped at least two response shapes:

* flat counts at the top level, ``{"success_ratio": .., "total_orders": ..}``
  (older deployments, sometimes camelCase, sometimes wrapped in ``data``);
* per-courier history, ``{"courierData": {"pathao": {..}, "summary": {..}}}``.

Everything here is best effort and never raises: garbled numbers become
"absent", not zero and not an exception.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from backoffice.risk.assessment import CourierStats, RiskAssessment

_NON_NUMERIC = re.compile(r"[^\d.\-]")

_FLAT_FIELDS = {
    "success_ratio": ("success_ratio", "successRatio"),
    "total_orders": ("total_orders", "totalOrders"),
    "successful_orders": ("successful_orders", "successfulOrders"),
    "failed_orders": ("failed_orders", "failedOrders"),
    "fraud_score": ("fraud_score", "fraudScore"),
    "last_order_date": ("last_order_date", "lastOrderDate"),
}


def parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value.strip())
        if not cleaned:
            return None
        try:
            num = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def parse_count(value: Any) -> Optional[int]:
    num = parse_number(value)
    if num is None or num < 0:
        return None
    # half-up, so 2.5 parcels reads as 3
    return int(math.floor(num + 0.5))


def scale_ratio(value: Any) -> Optional[float]:
    """Express a success ratio as a 0-100 percentage.

    Values in [0, 1] are fractions and get multiplied by 100, so a ratio of
    exactly 1 reads as 100%, never 1%. Anything else is already a percentage
    and is clamped into range.
    """
    num = parse_number(value)
    if num is None:
        return None
    if 0 <= num <= 1:
        return num * 100
    return min(100.0, max(0.0, num))


def _first(data: Mapping[str, Any], keys) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _unwrap(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        return {}
    data = dict(payload)
    inner = data.get("data")
    if isinstance(inner, Mapping) and "courierData" not in data and "summary" not in data:
        return dict(inner)
    return data


def _summary_source(data: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    summary = data.get("summary")
    if isinstance(summary, Mapping):
        return summary
    courier_data = data.get("courierData")
    if isinstance(courier_data, Mapping) and isinstance(courier_data.get("summary"), Mapping):
        return courier_data["summary"]
    return None


def _courier_stats(raw: Mapping[str, Any], name: Optional[str] = None) -> CourierStats:
    logo = _first(raw, ("logo", "logo_url", "logoUrl"))
    name = raw.get("name") or name
    return CourierStats(
        name=str(name) if name else None,
        logo_url=str(logo) if logo else None,
        total_parcel=parse_count(raw.get("total_parcel")),
        success_parcel=parse_count(raw.get("success_parcel")),
        cancelled_parcel=parse_count(raw.get("cancelled_parcel")),
        success_ratio=scale_ratio(raw.get("success_ratio")),
    )


def _breakdown(data: Mapping[str, Any]) -> Dict[str, CourierStats]:
    courier_data = data.get("courierData")
    if not isinstance(courier_data, Mapping):
        return {}
    out: Dict[str, CourierStats] = {}
    for key, entry in courier_data.items():
        if key == "summary" or not isinstance(entry, Mapping):
            continue
        out[str(key)] = _courier_stats(entry, name=str(key))
    return out


def normalize(payload: Any, *, phone: str, now: Optional[datetime] = None) -> RiskAssessment:
    data = _unwrap(payload)
    checked_at = now or datetime.utcnow()

    source = _summary_source(data)
    if source is not None:
        ratio = scale_ratio(source.get("success_ratio"))
        total = parse_count(source.get("total_parcel"))
        successful = parse_count(source.get("success_parcel"))
        failed = parse_count(source.get("cancelled_parcel"))
    else:
        ratio = scale_ratio(_first(data, _FLAT_FIELDS["success_ratio"]))
        total = parse_count(_first(data, _FLAT_FIELDS["total_orders"]))
        successful = parse_count(_first(data, _FLAT_FIELDS["successful_orders"]))
        failed = parse_count(_first(data, _FLAT_FIELDS["failed_orders"]))

    summary = CourierStats(
        total_parcel=total or 0,
        success_parcel=successful or 0,
        cancelled_parcel=failed or 0,
        success_ratio=ratio if ratio is not None else 0.0,
    )

    last_order_date = _first(data, _FLAT_FIELDS["last_order_date"])
    status = data.get("status")

    return RiskAssessment(
        phone=phone,
        checked_at=checked_at,
        summary=summary,
        success_ratio=ratio,
        total_orders=total,
        successful_orders=successful,
        failed_orders=failed,
        fraud_score=parse_number(_first(data, _FLAT_FIELDS["fraud_score"])),
        status=str(status) if status else "checked",
        last_order_date=str(last_order_date) if last_order_date else None,
        courier_breakdown=_breakdown(data),
    )
