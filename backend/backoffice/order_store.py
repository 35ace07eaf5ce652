from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from backoffice.errors import PersistenceError, PreconditionError
from backoffice.extensions import db
from backoffice.models import Order, OrderEvent

log = logging.getLogger(__name__)


class SqlOrderStore:
    """Order persistence backed by Flask-SQLAlchemy.

    ``save`` commits the order's pending changes. The row's version counter
    turns a write that raced another writer into a PreconditionError; any
    other database failure becomes a PersistenceError.
    """

    def find_order(self, order_id: str) -> Order | None:
        try:
            return Order.query.filter_by(order_id=str(order_id)).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            log.error("Could not load order %s: %s", order_id, e)
            raise PersistenceError("Could not load the order") from e

    def save(self, order: Order) -> Order:
        order.updated_at = datetime.utcnow()
        try:
            db.session.add(order)
            db.session.commit()
        except StaleDataError as e:
            db.session.rollback()
            log.warning("Concurrent update on order %s rejected", order.order_id)
            raise PreconditionError("Order was modified by another request; reload and retry") from e
        except SQLAlchemyError as e:
            db.session.rollback()
            log.error("Could not save order %s: %s", order.order_id, e)
            raise PersistenceError("Could not save the order") from e
        return order

    def record_event(self, order: Order, event: str, note: str = "", key: str | None = None) -> None:
        try:
            if key:
                key = f"order:{int(order.id)}:{event}:{key}"[:160]
                if OrderEvent.query.filter_by(idempotency_key=key).first():
                    return
            db.session.add(OrderEvent(order_id=order.id, event=event, note=note[:240], idempotency_key=key))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            log.warning("Could not record %s event for order %s: %s", event, order.order_id, e)
