"""
Settings Store

Owns the session's LedgerSettings, merges partial updates into it and
writes it back after every change. Also home of currency conversion and
formatting, which only make sense relative to a settings object.

DESIGN DECISION: Conversion multiplies by rates[displayCurrency] and
never divides by rates[baseCurrency]. Amounts are assumed to be in the
base currency already; changing baseCurrency does not re-key anything.
"""

from typing import Any, Optional

import structlog
from babel.numbers import format_currency as babel_format_currency
from pydantic import ValidationError

from ledger.config import get_settings
from ledger.models.preferences import LedgerSettings, SettingsUpdate, merge_rates
from ledger.services.storage.persistence import LedgerPersistence


logger = structlog.get_logger(__name__)


def _accepts(data: dict[str, Any]) -> bool:
    try:
        SettingsUpdate.model_validate(data)
    except ValidationError:
        return False
    return True


def salvage_stored(loaded: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """
    Keep every stored key that validates on its own.

    Rates are checked entry by entry, so one bad rate never costs the
    others. Returns the kept data and the dropped keys ('rates.JPY' for
    a single rate).
    """
    kept: dict[str, Any] = {}
    dropped: list[str] = []

    for key, value in loaded.items():
        if key == "rates" and isinstance(value, dict):
            rates = {}
            for code, rate in value.items():
                if _accepts({"rates": {code: rate}}):
                    rates[code] = rate
                else:
                    dropped.append(f"rates.{code}")
            value = rates
        if _accepts({key: value}):
            kept[key] = value
        else:
            dropped.append(key)

    return kept, dropped


def settings_from_stored(loaded: Optional[dict[str, Any]]) -> LedgerSettings:
    """
    Effective settings for a stored configuration.

    Keys present in storage override the defaults (rates one level deep);
    absent keys fall back to defaults. Stored values that do not validate
    are dropped one by one and replaced by their defaults; the valid rest
    of the configuration is kept.
    """
    defaults = LedgerSettings()
    if loaded is None:
        return defaults

    kept, dropped = salvage_stored(loaded)
    if dropped:
        logger.warning("stored_settings_invalid", dropped=dropped)
    return defaults.merged(SettingsUpdate.model_validate(kept))


def convert_amount(amount: float, settings: LedgerSettings) -> float:
    """Base amount -> display currency."""
    return amount * settings.rates.get(settings.display_currency, 1)


def format_currency(
    amount: float,
    settings: LedgerSettings,
    locale: Optional[str] = None,
) -> str:
    """Converted amount as a locale-aware currency string, e.g. '$1,234.50'."""
    return babel_format_currency(
        convert_amount(amount, settings),
        settings.display_currency,
        locale=locale or get_settings().app.locale,
    )


class SettingsStore:
    """Write-through holder of the session settings."""

    def __init__(self, persistence: LedgerPersistence):
        self._persistence = persistence
        self._settings = LedgerSettings()

    @property
    def current(self) -> LedgerSettings:
        return self._settings

    def initialize(self) -> LedgerSettings:
        """
        Load, merge over defaults and immediately save the result.

        Saving on every start upgrades a partial or outdated stored
        configuration to a complete one.

        Raises:
            PersistenceWriteError: If the effective settings cannot be saved
        """
        self._settings = settings_from_stored(self._persistence.load_settings())
        self._persistence.save_settings(self._settings)
        return self._settings

    def update(self, partial: SettingsUpdate) -> LedgerSettings:
        """
        Apply a partial update and save.

        Raises:
            ValidationError: If the merged settings are invalid (nothing changes)
            PersistenceWriteError: If saving fails (the update stays in memory)
        """
        self._settings = self._settings.merged(partial)
        self._persistence.save_settings(self._settings)
        return self._settings

    def convert(self, amount: float) -> float:
        return convert_amount(amount, self._settings)

    def format(self, amount: float, locale: Optional[str] = None) -> str:
        return format_currency(amount, self._settings, locale)


__all__ = [
    "SettingsStore",
    "convert_amount",
    "format_currency",
    "merge_rates",
    "salvage_stored",
    "settings_from_stored",
]
