from __future__ import annotations

import logging
from datetime import datetime

from backoffice.errors import BackofficeError, NotFoundError, UpstreamError
from backoffice.fulfillment import state_machine as sm
from backoffice.order_store import SqlOrderStore
from backoffice.services.result import ServiceResult
from backoffice.services.upstream import steadfast_client
from backoffice.services.validation import parse_delivery_type, require_order_id
from backoffice.utils.locks import order_lock
from backoffice.utils.steadfast_client import CreateOrderParams

log = logging.getLogger(__name__)


def _load(store, order_id: str):
    order = store.find_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def build_create_params(order, delivery_type: int) -> CreateOrderParams:
    items = list(order.items or [])
    description = ", ".join(f"{item.get('name', '')} (Qty: {item.get('quantity', 0)})" for item in items)
    return CreateOrderParams(
        invoice=order.order_id,
        recipient_name=order.customer_name,
        recipient_phone=order.phone,
        recipient_address=order.address,
        cod_amount=float(order.total or 0.0),
        note=f"Order from grocery store. Total items: {len(items)}",
        item_description=description or None,
        total_lot=len(items) or None,
        delivery_type=delivery_type,
    )


def dispatch_to_courier(order_id, delivery_type=None, *, store=None, client=None, credentials=None, now: datetime | None = None) -> ServiceResult:
    """Create a Steadfast consignment for an unsent order.

    An order that already has a consignment is rejected before the courier
    is contacted.
    """
    store = store or SqlOrderStore()
    try:
        order_id = require_order_id(order_id)
        delivery_type = parse_delivery_type(delivery_type)
        with order_lock(order_id):
            order = _load(store, order_id)
            current = sm.CourierFulfillment.from_order(order)
            sm.ensure_dispatchable(current)

            client = client or steadfast_client(credentials)
            consignment = client.create_order(build_create_params(order, delivery_type))

            updated = sm.dispatch(
                current,
                consignment_id=consignment.consignment_id,
                tracking_code=consignment.tracking_code,
                status=consignment.status,
                at=now or datetime.utcnow(),
            )
            updated.apply_to(order)
            try:
                store.save(order)
            except BackofficeError as e:
                log.error(
                    "Order %s dispatched as consignment %s but the order could not be saved",
                    order_id,
                    consignment.consignment_id,
                )
                e.details.update({"consignmentId": consignment.consignment_id, "trackingCode": consignment.tracking_code})
                raise
    except BackofficeError as e:
        log.warning("Dispatch of order %s failed (%s): %s", order_id, e.kind, e.public_message)
        return ServiceResult.failed(e)

    store.record_event(order, "courier_dispatched", note=f"consignment {consignment.consignment_id}", key=str(consignment.consignment_id))
    log.info("Order %s dispatched: consignment %s, tracking %s", order_id, consignment.consignment_id, consignment.tracking_code)
    return ServiceResult.ok(
        {
            "message": "Order sent to Steadfast Courier successfully",
            "consignmentId": consignment.consignment_id,
            "trackingCode": consignment.tracking_code,
            "status": consignment.status,
        },
        value=updated,
    )


def _lookup_status(client, kind, key, *, invoice):
    try:
        if kind == "tracking_code":
            return client.status_by_tracking_code(key)
        return client.status_by_consignment_id(key)
    except UpstreamError as e:
        # dispatch sends the order id as the invoice, so it is the last resort
        log.warning("Status lookup by %s failed, trying invoice %s: %s", kind, invoice, e.public_message)
        try:
            return client.status_by_invoice(invoice)
        except UpstreamError:
            raise e


def refresh_courier_status(order_id, *, store=None, client=None, credentials=None, now: datetime | None = None) -> ServiceResult:
    store = store or SqlOrderStore()
    try:
        order_id = require_order_id(order_id)
        with order_lock(order_id):
            order = _load(store, order_id)
            current = sm.CourierFulfillment.from_order(order)
            kind, key = sm.status_lookup(current)

            client = client or steadfast_client(credentials)
            status = _lookup_status(client, kind, key, invoice=order.order_id)

            updated = sm.refresh_status(current, delivery_status=status.delivery_status, at=now or datetime.utcnow())
            updated.apply_to(order)
            store.save(order)
    except BackofficeError as e:
        log.warning("Status refresh of order %s failed (%s): %s", order_id, e.kind, e.public_message)
        return ServiceResult.failed(e)

    store.record_event(order, "courier_status_refreshed", note=status.delivery_status)
    return ServiceResult.ok(
        {
            "deliveryStatus": updated.delivery_status,
            "orderId": order.order_id,
            "trackingCode": updated.tracking_code,
            "consignmentId": updated.consignment_id,
        },
        value=updated,
    )


def courier_balance(*, client=None, credentials=None) -> ServiceResult:
    try:
        client = client or steadfast_client(credentials)
        balance = client.get_balance()
    except BackofficeError as e:
        log.warning("Steadfast balance lookup failed (%s): %s", e.kind, e.public_message)
        return ServiceResult.failed(e)
    return ServiceResult.ok({"currentBalance": balance})
