from __future__ import annotations

from flask import Blueprint, jsonify

from backoffice.models import Order, OrderEvent

orders_bp = Blueprint("orders_bp", __name__, url_prefix="/api/admin")


@orders_bp.get("/orders/<order_id>")
def get_order(order_id):
    order = Order.query.filter_by(order_id=str(order_id)).first()
    if not order:
        return jsonify({"success": False, "error": "Order not found"}), 404
    events = OrderEvent.query.filter_by(order_id=order.id).order_by(OrderEvent.created_at.asc()).all()
    return jsonify({"success": True, "order": order.to_dict(), "events": [e.to_dict() for e in events]}), 200
