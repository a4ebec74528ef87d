"""
Settings Models for the Ledger

One LedgerSettings object exists per session. It is loaded once at
startup, changed only through SettingsUpdate, and written back after
every change.

DESIGN DECISION: Updates are explicit partial structures merged field by
field against a fixed schema. The rates map has its own one-level merge,
so changing one currency's rate never drops the others.
"""

from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveFloat,
)


DEFAULT_CATEGORIES = ["Food", "Books", "Transport", "Entertainment", "Fees", "Other"]

DEFAULT_RATES = {"USD": 1.0, "EUR": 0.92, "GBP": 0.79}


def merge_rates(
    current: dict[str, float],
    incoming: Optional[dict[str, float]],
) -> dict[str, float]:
    """One-level map merge: incoming codes overwrite, all others are kept."""
    merged = dict(current)
    merged.update(incoming or {})
    return merged


class SettingsUpdate(BaseModel):
    """
    Partial settings change.

    None means "not provided". Unknown keys (from newer or older stored
    configurations) are ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_currency: Optional[str] = Field(default=None, alias="baseCurrency")
    display_currency: Optional[str] = Field(default=None, alias="displayCurrency")
    rates: Optional[dict[str, PositiveFloat]] = None
    cap: Optional[NonNegativeFloat] = None
    categories: Optional[list[str]] = None

    def scalar_changes(self) -> dict:
        """Every provided field except rates, keyed by field name."""
        return self.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"rates"},
        )


class LedgerSettings(BaseModel):
    """
    Session-wide configuration.

    rates maps a currency code to the multiplier that turns a base
    amount into that currency. cap is in the base currency; 0 means
    no cap is configured.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    base_currency: str = Field(default="USD", alias="baseCurrency")
    display_currency: str = Field(default="USD", alias="displayCurrency")
    rates: dict[str, PositiveFloat] = Field(
        default_factory=lambda: dict(DEFAULT_RATES)
    )
    cap: NonNegativeFloat = Field(
        default=0.0,
        description="Spending ceiling in the base currency (0 = none)"
    )
    categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES),
        description="Suggested category labels, not enforced on records"
    )

    @property
    def has_cap(self) -> bool:
        return self.cap > 0

    def merged(self, update: SettingsUpdate) -> "LedgerSettings":
        """Return a new LedgerSettings with the update applied."""
        data = self.model_dump()
        data.update(update.scalar_changes())
        if update.rates is not None:
            data["rates"] = merge_rates(self.rates, update.rates)
        return LedgerSettings.model_validate(data)

    def to_payload(self) -> dict:
        """Convert to the JSON-ready dict used for storage."""
        return self.model_dump(by_alias=True)


class SettingsForm(BaseModel):
    """
    Raw text of the settings form.

    rates maps a currency code (as typed) to the rate text. categories is
    a comma-separated list.
    """
    model_config = ConfigDict(extra="ignore")

    base_currency: str = "USD"
    display_currency: str = "USD"
    rates: dict[str, str] = Field(default_factory=dict)
    cap: str = ""
    categories: str = ""
