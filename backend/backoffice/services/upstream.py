"""Builds upstream clients from resolved credentials and app config."""

from __future__ import annotations

from flask import current_app, has_app_context

from backoffice.utils.credentials import FRAUD_CHECK_MODULE, STEADFAST_MODULE, Credentials, resolve_credentials
from backoffice.utils.fraud_check_client import DEFAULT_TIMEOUT, FraudCheckClient
from backoffice.utils.steadfast_client import SteadfastClient


def _config(key: str, default=None):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def upstream_timeout() -> float:
    return float(_config("UPSTREAM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT) or DEFAULT_TIMEOUT)


def fraud_check_client(credentials: Credentials | None = None) -> FraudCheckClient:
    creds = credentials or resolve_credentials(FRAUD_CHECK_MODULE)
    return FraudCheckClient(
        creds.api_key,
        base_url=creds.base_url or _config("FRAUD_CHECK_BASE_URL"),
        timeout=upstream_timeout(),
    )


def steadfast_client(credentials: Credentials | None = None) -> SteadfastClient:
    creds = credentials or resolve_credentials(STEADFAST_MODULE)
    return SteadfastClient(
        creds.api_key,
        creds.secret_key or "",
        base_url=creds.base_url or _config("STEADFAST_BASE_URL"),
        timeout=upstream_timeout(),
    )
