from __future__ import annotations

from flask import Blueprint, jsonify, request

from backoffice.extensions import db
from backoffice.services.fraud_check import check_order_risk, check_risk

fraud_check_bp = Blueprint("fraud_check_bp", __name__, url_prefix="/api/admin")

_INIT_DONE = False


@fraud_check_bp.before_app_request
def _ensure_tables_once():
    global _INIT_DONE
    if _INIT_DONE:
        return
    db.create_all()
    _INIT_DONE = True


@fraud_check_bp.post("/check-fraud")
def check_fraud():
    """Courier history and risk tier for a phone number. Nothing is stored."""
    payload = request.get_json(silent=True) or {}
    result = check_risk(payload.get("phone"))
    return jsonify(result.to_dict()), result.status_code


@fraud_check_bp.post("/orders/<order_id>/fraud-check")
def order_fraud_check(order_id):
    result = check_order_risk(order_id)
    return jsonify(result.to_dict()), result.status_code
