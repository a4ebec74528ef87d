"""
Core Data Models for the Ledger

These models define the schemas for records flowing through the system.
They are designed to:
1. Keep the stored JSON shape stable (camelCase keys, numeric amounts)
2. Be immutable once handed out by the store
3. Carry per-field validation results back to the caller

DESIGN DECISION: Grammar checks (what a valid description or date looks
like) live in ledger.validation, not here. These models only enforce
types, so that already-stored data is never rejected by a stricter
model than the one that wrote it.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)

from ledger.exceptions import FieldValidationError


RECORD_FIELDS = (
    "id",
    "description",
    "amount",
    "category",
    "date",
    "createdAt",
    "updatedAt",
)

FORM_FIELDS = ("description", "amount", "category", "date")


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC instant with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


# =============================================================================
# RECORD MODELS
# =============================================================================

class Record(BaseModel):
    """
    One ledger transaction entry.

    CRITICAL: Only the RecordStore creates these. Callers describe a new
    record with a RecordDraft and change one with a RecordUpdate.

    Unknown keys from imported or stored data are kept so an export
    reproduces exactly what was imported.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(
        ...,
        description="Store-assigned identifier, e.g. txn_0001"
    )
    description: str
    amount: float = Field(
        ...,
        ge=0,
        description="Amount in the base currency"
    )
    category: str
    date: str = Field(
        ...,
        description="Calendar date as YYYY-MM-DD"
    )
    created_at: str = Field(
        ...,
        alias="createdAt",
        description="When the record was created (ISO-8601, immutable)"
    )
    updated_at: str = Field(
        ...,
        alias="updatedAt",
        description="When the record was last changed (ISO-8601)"
    )

    @field_serializer('amount')
    def serialize_amount(self, v: float) -> float | int:
        """Integral amounts are written as 12, not 12.0."""
        return int(v) if v.is_integer() else v

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON-ready dict used for storage and export."""
        return self.model_dump(by_alias=True)


class RecordDraft(BaseModel):
    """The validated fields of a record that does not exist yet."""
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    date: str


class RecordUpdate(BaseModel):
    """
    Explicit partial update for a record.

    Every field is optional; unset fields keep their current value.
    id and createdAt cannot be expressed here, so they can never change.
    """
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    date: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class RecordForm(BaseModel):
    """
    Raw text of a record form as typed by the user.

    An empty id means "create"; otherwise the record with that id is updated.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    description: str = ""
    amount: str = ""
    category: str = ""
    date: str = ""


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class FieldResult(BaseModel):
    """Outcome of validating one field's raw text."""
    model_config = ConfigDict(frozen=True)

    valid: bool
    value: Any = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, value: Any) -> "FieldResult":
        return cls(valid=True, value=value)

    @classmethod
    def fail(cls, message: str) -> "FieldResult":
        return cls(valid=False, message=message)


class RecordInputValidation(BaseModel):
    """
    Per-field validation of a candidate record.

    This is what a form shows next to each input.
    """

    results: dict[str, FieldResult] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return all(result.valid for result in self.results.values())

    @property
    def errors(self) -> dict[str, str]:
        """Field name -> reason, for failed fields only."""
        return {
            name: result.message or "Invalid value."
            for name, result in self.results.items()
            if not result.valid
        }

    @property
    def cleaned(self) -> dict[str, Any]:
        """Field name -> normalized value, for passing fields only."""
        return {
            name: result.value
            for name, result in self.results.items()
            if result.valid
        }

    def to_draft(self) -> RecordDraft:
        """
        Build a RecordDraft from the cleaned values.

        Raises:
            FieldValidationError: for the first field that failed
        """
        errors = self.errors
        if errors:
            name, message = next(iter(errors.items()))
            raise FieldValidationError(name, message)
        return RecordDraft(**self.cleaned)
