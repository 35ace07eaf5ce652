"""Credential lookup for the upstream integrations.

Module settings stored in the database win; the environment is the explicit
fallback. Nothing is cached: every call reads the current values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from backoffice.errors import ConfigurationError

log = logging.getLogger(__name__)

FRAUD_CHECK_MODULE = "fraud-check"
STEADFAST_MODULE = "steadfast-courier"


@dataclass(frozen=True)
class Credentials:
    api_key: str
    secret_key: Optional[str] = None
    base_url: Optional[str] = None

    def __repr__(self) -> str:
        return f"Credentials(api_key=***, secret_key={'***' if self.secret_key else None}, base_url={self.base_url!r})"


# module id -> (settings key -> env var), and which settings keys are required
_ENV_FALLBACK = {
    FRAUD_CHECK_MODULE: {"apiKey": "FRAUD_CHECK_API_KEY", "baseUrl": "FRAUD_CHECK_BASE_URL"},
    STEADFAST_MODULE: {
        "apiKey": "STEADFAST_API_KEY",
        "secretKey": "STEADFAST_SECRET_KEY",
        "baseUrl": "STEADFAST_BASE_URL",
    },
}
_REQUIRED = {
    FRAUD_CHECK_MODULE: ("apiKey",),
    STEADFAST_MODULE: ("apiKey", "secretKey"),
}
_MISSING_HINT = {
    FRAUD_CHECK_MODULE: "Fraud Check API key not configured. Set it in module settings or FRAUD_CHECK_API_KEY.",
    STEADFAST_MODULE: "Steadfast API credentials are not configured. Set them in module settings or STEADFAST_API_KEY and STEADFAST_SECRET_KEY.",
}

CredentialSource = Callable[[str], Credentials]


def module_settings(module_id: str) -> dict:
    from backoffice.models import Module

    try:
        row = Module.query.filter_by(module_id=module_id).first()
    except SQLAlchemyError as e:
        log.warning("Could not read settings for module %s, using environment: %s", module_id, e)
        return {}
    return dict(row.settings or {}) if row else {}


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def _complete(module_id: str, values: Mapping[str, str]) -> bool:
    return all(values.get(k) for k in _REQUIRED[module_id])


def resolve_credentials(module_id: str, *, settings: Optional[Mapping] = None, env: Optional[Mapping] = None) -> Credentials:
    if module_id not in _ENV_FALLBACK:
        raise ConfigurationError(f"Unknown integration module: {module_id}")

    env = os.environ if env is None else env
    if settings is None:
        settings = module_settings(module_id)

    stored = {k: _clean(settings.get(k)) for k in _ENV_FALLBACK[module_id]}
    if _complete(module_id, stored):
        values = stored
        origin = "settings"
    else:
        values = {k: _clean(env.get(var)) for k, var in _ENV_FALLBACK[module_id].items()}
        origin = "environment"
        if not _complete(module_id, values):
            raise ConfigurationError(_MISSING_HINT[module_id])
        if not values.get("baseUrl") and stored.get("baseUrl"):
            values["baseUrl"] = stored["baseUrl"]

    log.debug("Resolved %s credentials from %s", module_id, origin)
    return Credentials(
        api_key=values["apiKey"],
        secret_key=values.get("secretKey") or None,
        base_url=values.get("baseUrl") or None,
    )
