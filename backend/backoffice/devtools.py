import os

from flask import Blueprint, jsonify, current_app, request
from sqlalchemy import inspect

from backoffice.extensions import db
from backoffice.models import Module
from backoffice.utils.credentials import FRAUD_CHECK_MODULE, STEADFAST_MODULE

dev = Blueprint("devtools", __name__, url_prefix="/dev")

REQUIRED_ENV_VARS = [
    "SECRET_KEY",
    "DATABASE_URL",
]

OPTIONAL_BUT_COMMON = [
    "FRAUD_CHECK_API_KEY",
    "STEADFAST_API_KEY",
    "STEADFAST_SECRET_KEY",
    "UPSTREAM_TIMEOUT_SECONDS",
    "CORS_ORIGINS",
]

_MODULE_NAMES = {
    FRAUD_CHECK_MODULE: "Fraud Check",
    STEADFAST_MODULE: "Steadfast Courier",
}


@dev.get("/routes")
def list_routes():
    # Lists all registered routes. Helpful to verify the admin endpoints exist.
    out = []
    for rule in sorted(current_app.url_map.iter_rules(), key=lambda r: r.rule):
        methods = sorted([m for m in rule.methods if m not in ("HEAD", "OPTIONS")])
        out.append({"rule": rule.rule, "methods": methods, "endpoint": rule.endpoint})
    return jsonify(out)


@dev.get("/env")
def env_check():
    missing_required = [k for k in REQUIRED_ENV_VARS if not os.getenv(k)]
    present_optional = [k for k in OPTIONAL_BUT_COMMON if os.getenv(k)]
    missing_optional = [k for k in OPTIONAL_BUT_COMMON if not os.getenv(k)]
    return jsonify({
        "missing_required": missing_required,
        "present_optional": present_optional,
        "missing_optional": missing_optional,
        "note": "Integration keys may also be stored per module via POST /dev/modules/<module_id>.",
    })


@dev.post("/modules/<module_id>")
def upsert_module(module_id):
    """Dev helper: store integration credentials for a module."""
    if module_id not in _MODULE_NAMES:
        return jsonify({"success": False, "error": f"Unknown module: {module_id}"}), 404
    payload = request.get_json(silent=True) or {}
    row = Module.query.filter_by(module_id=module_id).first()
    if not row:
        row = Module(module_id=module_id, name=_MODULE_NAMES[module_id], settings={})
    settings = dict(row.settings or {})
    for key in ("apiKey", "secretKey", "baseUrl"):
        if key in payload:
            settings[key] = (str(payload.get(key) or "")).strip()
    row.settings = settings
    if "enabled" in payload:
        row.enabled = bool(payload.get("enabled"))
    db.session.add(row)
    db.session.commit()
    return jsonify({"success": True, "module": row.to_dict()})


@dev.get("/db/info")
def db_info():
    """Basic DB info + table list."""
    insp = inspect(db.engine)
    tables = sorted(insp.get_table_names())
    return jsonify({"ok": True, "tables": tables, "count": len(tables)})
