from datetime import datetime

from backoffice.extensions import db


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)

    # Public invoice id shown to customers and sent to the courier
    order_id = db.Column(db.String(64), nullable=False, unique=True, index=True)

    customer_name = db.Column(db.String(120), nullable=False, default="")
    phone = db.Column(db.String(32), nullable=False, index=True)
    address = db.Column(db.String(400), nullable=False, default="")

    # [{"name": ..., "quantity": ..., "price": ...}]
    items = db.Column(db.JSON, nullable=False, default=list)
    total = db.Column(db.Float, nullable=False, default=0.0)

    status = db.Column(db.String(32), nullable=False, default="pending", index=True)

    # =====================================================
    # FRAUD CHECK SNAPSHOT (overwritten by every check)
    # =====================================================
    fraud_checked = db.Column(db.Boolean, nullable=False, default=False)
    fraud_check_result = db.Column(db.JSON, nullable=True)
    fraud_check_at = db.Column(db.DateTime, nullable=True)

    # =====================================================
    # STEADFAST COURIER
    # =====================================================
    # unsent -> sent (consignment created) -> tracked (status polled)
    steadfast_consignment_id = db.Column(db.Integer, nullable=True, index=True)
    steadfast_tracking_code = db.Column(db.String(64), nullable=True)
    steadfast_status = db.Column(db.String(64), nullable=True)
    steadfast_sent_at = db.Column(db.DateTime, nullable=True)
    steadfast_checked_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Optimistic concurrency: a stale write raises StaleDataError
    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        return {
            "id": int(self.id) if self.id is not None else None,
            "order_id": self.order_id,
            "customer_name": self.customer_name or "",
            "phone": self.phone or "",
            "address": self.address or "",
            "items": list(self.items or []),
            "total": float(self.total or 0.0),
            "status": self.status or "pending",
            "fraud_checked": bool(self.fraud_checked),
            "fraud_check_result": self.fraud_check_result,
            "fraud_check_at": self.fraud_check_at.isoformat() if self.fraud_check_at else None,
            "steadfast_consignment_id": int(self.steadfast_consignment_id) if self.steadfast_consignment_id is not None else None,
            "steadfast_tracking_code": self.steadfast_tracking_code or None,
            "steadfast_status": self.steadfast_status or None,
            "steadfast_sent_at": self.steadfast_sent_at.isoformat() if self.steadfast_sent_at else None,
            "steadfast_checked_at": self.steadfast_checked_at.isoformat() if self.steadfast_checked_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
