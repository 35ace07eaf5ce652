from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CourierStats:
    """Parcel history for one courier, or the aggregate across all of them."""

    name: Optional[str] = None
    logo_url: Optional[str] = None
    total_parcel: Optional[int] = None
    success_parcel: Optional[int] = None
    cancelled_parcel: Optional[int] = None
    success_ratio: Optional[float] = None

    def to_dict(self, *, fill_missing: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.logo_url is not None:
            out["logo"] = self.logo_url
        counts = {
            "total_parcel": self.total_parcel,
            "success_parcel": self.success_parcel,
            "cancelled_parcel": self.cancelled_parcel,
            "success_ratio": self.success_ratio,
        }
        for key, value in counts.items():
            if value is None:
                if not fill_missing:
                    continue
                value = 0
            out[key] = value
        return out


@dataclass(frozen=True)
class RiskAssessment:
    phone: str
    checked_at: datetime
    summary: CourierStats
    success_ratio: Optional[float] = None
    total_orders: Optional[int] = None
    successful_orders: Optional[int] = None
    failed_orders: Optional[int] = None
    fraud_score: Optional[float] = None
    status: str = "checked"
    last_order_date: Optional[str] = None
    courier_breakdown: Dict[str, CourierStats] = field(default_factory=dict)

    @property
    def effective_ratio(self) -> float:
        return self.success_ratio if self.success_ratio is not None else 0.0

    @property
    def risk_tier(self) -> RiskTier:
        from backoffice.risk.classifier import classify

        return classify(self.success_ratio)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": True,
            "phone": self.phone,
            "riskLevel": self.risk_tier.value,
            "successRatio": self.effective_ratio,
        }
        optional = {
            "totalOrders": self.total_orders,
            "successfulOrders": self.successful_orders,
            "failedOrders": self.failed_orders,
            "fraudScore": self.fraud_score,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        out["status"] = self.status
        if self.last_order_date:
            out["lastOrderDate"] = self.last_order_date
        if self.courier_breakdown:
            out["courierData"] = {name: stats.to_dict() for name, stats in self.courier_breakdown.items()}
        out["summary"] = self.summary.to_dict(fill_missing=True)
        out["checkedAt"] = self.checked_at.isoformat()
        return out
