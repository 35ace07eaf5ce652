"""Courier lifecycle of a single order.

    UNSENT --dispatch--> SENT --refresh_status--> TRACKED --refresh_status--> TRACKED

The state is derived from the order's courier fields; transitions return a
new :class:`CourierFulfillment` and never clear a field. A failed dispatch or
status lookup simply does not call a transition.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from backoffice.errors import PreconditionError


class FulfillmentState(str, Enum):
    UNSENT = "unsent"
    SENT = "sent"
    TRACKED = "tracked"


@dataclass(frozen=True)
class CourierFulfillment:
    consignment_id: Optional[int] = None
    tracking_code: Optional[str] = None
    delivery_status: Optional[str] = None
    sent_at: Optional[datetime] = None
    status_checked_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order) -> "CourierFulfillment":
        return cls(
            consignment_id=order.steadfast_consignment_id,
            tracking_code=order.steadfast_tracking_code or None,
            delivery_status=order.steadfast_status or None,
            sent_at=order.steadfast_sent_at,
            status_checked_at=order.steadfast_checked_at,
        )

    def apply_to(self, order) -> None:
        order.steadfast_consignment_id = self.consignment_id
        order.steadfast_tracking_code = self.tracking_code
        order.steadfast_status = self.delivery_status
        order.steadfast_sent_at = self.sent_at
        order.steadfast_checked_at = self.status_checked_at

    @property
    def state(self) -> FulfillmentState:
        if self.status_checked_at is not None:
            return FulfillmentState.TRACKED
        if self.consignment_id is not None or self.tracking_code:
            return FulfillmentState.SENT
        return FulfillmentState.UNSENT


def ensure_dispatchable(f: CourierFulfillment) -> None:
    if f.state is not FulfillmentState.UNSENT:
        raise PreconditionError(
            "Order already sent to Steadfast Courier",
            details={"consignmentId": f.consignment_id, "trackingCode": f.tracking_code},
        )


def ensure_refreshable(f: CourierFulfillment) -> None:
    if f.state is FulfillmentState.UNSENT:
        raise PreconditionError("Order has not been sent to Steadfast Courier yet")


def dispatch(f: CourierFulfillment, *, consignment_id: int, tracking_code: str, status: Optional[str], at: datetime) -> CourierFulfillment:
    ensure_dispatchable(f)
    return replace(
        f,
        consignment_id=consignment_id,
        tracking_code=tracking_code,
        delivery_status=status or f.delivery_status,
        sent_at=at,
    )


def refresh_status(f: CourierFulfillment, *, delivery_status: str, at: datetime) -> CourierFulfillment:
    ensure_refreshable(f)
    return replace(f, delivery_status=delivery_status, status_checked_at=at)


def status_lookup(f: CourierFulfillment) -> Tuple[str, object]:
    """Which courier lookup to use: tracking code when known, else consignment id."""
    ensure_refreshable(f)
    if f.tracking_code:
        return "tracking_code", f.tracking_code
    return "consignment_id", f.consignment_id
