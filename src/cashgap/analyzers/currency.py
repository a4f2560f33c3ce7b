"""
Currency rates — convert order amounts into the base currency (RUB).

Only one foreign currency is priced: CNY, at a rate kept in the settings
store. A missing, zero, negative or non-finite rate falls back to 1 so
conversion can never zero out or blow up an amount.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from cashgap.models.records import AppSettings, Currency
from cashgap.parsing import normalize_amount

logger = logging.getLogger("cashgap.analyzers.currency")

DEFAULT_SETTINGS = AppSettings()
SETTINGS_KEY = "tech"


def stored_settings(raw: Any) -> AppSettings | None:
    """Settings that actually carry a rate, or ``None``.

    Accepts a settings row (``{"key": ..., "value": {...}}``), a bare mapping
    with ``cnyRate`` or ``cny_rate``, or an ``AppSettings`` instance. Blank
    values and mappings without a rate give ``None``.
    """
    if isinstance(raw, AppSettings):
        return raw
    if not isinstance(raw, Mapping):
        return None

    candidate = raw.get("value", raw)
    if not isinstance(candidate, Mapping):
        return None

    rate = candidate.get("cnyRate", candidate.get("cny_rate"))
    if rate is None or rate == "":
        return None
    return AppSettings(cny_rate=rate)


def normalize_settings(raw: Any) -> AppSettings:
    """Coerce a stored settings value into :class:`AppSettings`, defaulting the rate to 1."""
    return stored_settings(raw) or DEFAULT_SETTINGS


def currency_rate(currency: str | Currency, settings: AppSettings | None = None) -> float:
    """Multiplier that converts ``currency`` into the base currency."""
    code = currency.value if isinstance(currency, Currency) else str(currency).upper()
    if code == Currency.CNY.value:
        rate = (settings or DEFAULT_SETTINGS).cny_rate
    else:
        rate = 1.0

    if not math.isfinite(rate) or rate <= 0:
        logger.debug("Ignoring invalid %s rate %r", code, rate)
        return 1.0
    return rate


def rate_table(settings: AppSettings | None = None) -> dict[str, float]:
    """Rates for every currency an order can be priced in."""
    return {c.value: currency_rate(c, settings) for c in Currency}


def convert_to_base(amount: Any, currency: str | Currency, settings: AppSettings | None = None) -> float:
    """Convert a (possibly loose) amount into the base currency."""
    return normalize_amount(amount) * currency_rate(currency, settings)
