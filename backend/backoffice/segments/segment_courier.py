from __future__ import annotations

from flask import Blueprint, jsonify, request

from backoffice.services.courier import courier_balance, dispatch_to_courier, refresh_courier_status

courier_bp = Blueprint("courier_bp", __name__, url_prefix="/api/admin")


@courier_bp.post("/orders/<order_id>/courier/dispatch")
def dispatch(order_id):
    payload = request.get_json(silent=True) or {}
    # deliveryType: 0 = home delivery, 1 = hub pick-up
    result = dispatch_to_courier(order_id, payload.get("deliveryType"))
    return jsonify(result.to_dict()), result.status_code


@courier_bp.post("/orders/<order_id>/courier/status")
def status(order_id):
    result = refresh_courier_status(order_id)
    return jsonify(result.to_dict()), result.status_code


@courier_bp.get("/courier/balance")
def balance():
    result = courier_balance()
    return jsonify(result.to_dict()), result.status_code
