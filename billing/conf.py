"""
Application settings with defaults.

Projects override values through the ELECTRIC_BILLING dict in Django settings.
"""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "MAX_CUSTOMERS": 100,
    "MAX_BILL_HISTORY": 12,
    "CUSTOMER_ID_BASE": 1001,
    # "sequential": directory-wide counter; "positional": customer_id * 100 + slot + 1
    "BILL_ID_SCHEME": "sequential",
    "RATE_TABLE_PATH": None,
    "REPORT_DIR": "reports_out",
}


def billing_setting(name: str) -> Any:
    """Look up one ELECTRIC_BILLING setting, falling back to DEFAULTS."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown ELECTRIC_BILLING setting: {name}")
    overrides = getattr(settings, "ELECTRIC_BILLING", {})
    return overrides.get(name, DEFAULTS[name])
