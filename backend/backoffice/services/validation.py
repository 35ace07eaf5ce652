from __future__ import annotations

import re

from backoffice.errors import ValidationError
from backoffice.utils.steadfast_client import HOME_DELIVERY, HUB_PICKUP

_PHONE_RE = re.compile(r"^[0-9+\-\s()]+$")

_DELIVERY_TYPES = {
    "0": HOME_DELIVERY,
    "home": HOME_DELIVERY,
    "1": HUB_PICKUP,
    "hub": HUB_PICKUP,
    "point": HUB_PICKUP,
    "pickup": HUB_PICKUP,
}


def validate_phone(phone) -> str:
    if phone is None or not str(phone).strip():
        raise ValidationError("Phone number is required")
    value = str(phone).strip()
    if not _PHONE_RE.match(value) or not any(ch.isdigit() for ch in value):
        raise ValidationError("Invalid phone number format")
    return value


def require_order_id(order_id) -> str:
    if order_id is None or not str(order_id).strip():
        raise ValidationError("Order ID is required")
    return str(order_id).strip()


def parse_delivery_type(value) -> int:
    """0 = home delivery (default), 1 = Steadfast hub / point pick-up."""
    if value is None or value == "":
        return HOME_DELIVERY
    if isinstance(value, bool):
        raise ValidationError("deliveryType must be 0 (home) or 1 (hub pick-up)")
    key = str(value).strip().lower()
    if key not in _DELIVERY_TYPES:
        raise ValidationError("deliveryType must be 0 (home) or 1 (hub pick-up)")
    return _DELIVERY_TYPES[key]
