"""
Field Validation

Each validator takes one field's raw text and either normalizes it into a
typed value or rejects it with a human-readable reason. Nothing here has
side effects.

Two levels:

FIELD VALIDATION:
- One function per field (description, amount, date, category, currency)
- Returns FieldResult(valid, value | message)
- Used for form feedback, so every rejection carries a reason

SHAPE VALIDATION:
- validate_record_shape() re-runs every field validator on a whole record
- Returns a plain bool because it filters arrays (imports, stored data)
- Re-validating already-normalized data is harmless: the validators are
  idempotent on valid input

IMPORTANT: Dates are checked by pattern only. 2023-02-30 is accepted.
"""

import re
from collections.abc import Mapping
from typing import Any

from ledger.models.record import (
    FORM_FIELDS,
    RECORD_FIELDS,
    FieldResult,
    RecordInputValidation,
)


SPACE_RUN_RE = re.compile(r"\s{2,}")
DESCRIPTION_RE = re.compile(r"\S(?:.*\S)?")
# Word characters are Unicode: "café café" counts as a repeat
DUPLICATE_WORD_RE = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
AMOUNT_RE = re.compile(r"(0|[1-9][0-9]*)(\.[0-9]{1,2})?")
DATE_RE = re.compile(r"[0-9]{4}-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])")
CATEGORY_RE = re.compile(r"[A-Za-z]+(?:[ -][A-Za-z]+)*")
CURRENCY_CODE_RE = re.compile(r"[A-Z]{3}")


def normalize_spaces(value: str) -> str:
    """Collapse every run of 2+ whitespace characters to one space and trim."""
    return SPACE_RUN_RE.sub(" ", value).strip()


def format_amount(value: Any) -> str:
    """
    Canonical decimal text of an amount.

    Integral values drop the fraction (10.0 -> "10"); everything else uses
    the shortest text that round-trips (12.5 -> "12.5").
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def validate_description(value: str) -> FieldResult:
    normalized = normalize_spaces(value)
    if not normalized:
        return FieldResult.fail("Description is required.")
    if not DESCRIPTION_RE.fullmatch(normalized):
        return FieldResult.fail("Description cannot start/end with spaces.")
    if DUPLICATE_WORD_RE.search(normalized):
        return FieldResult.fail("Duplicate consecutive words are not allowed.")
    return FieldResult.ok(normalized)


def validate_amount(value: str) -> FieldResult:
    """Plain non-negative decimal: no sign, no exponent, no separators, max 2 decimals."""
    trimmed = value.strip()
    if not AMOUNT_RE.fullmatch(trimmed):
        return FieldResult.fail("Use a valid number (e.g. 0, 10, 10.25).")
    return FieldResult.ok(float(trimmed))


def validate_date(value: str) -> FieldResult:
    if not DATE_RE.fullmatch(value):
        return FieldResult.fail("Use YYYY-MM-DD format.")
    return FieldResult.ok(value)


def validate_category(value: str) -> FieldResult:
    normalized = normalize_spaces(value)
    if not CATEGORY_RE.fullmatch(normalized):
        return FieldResult.fail("Only letters, spaces, and hyphens are allowed.")
    return FieldResult.ok(normalized)


def validate_currency_code(value: str) -> FieldResult:
    code = value.strip().upper()
    if not CURRENCY_CODE_RE.fullmatch(code):
        return FieldResult.fail("Currency code must be 3 uppercase letters.")
    return FieldResult.ok(code)


FIELD_VALIDATORS = {
    "description": validate_description,
    "amount": validate_amount,
    "category": validate_category,
    "date": validate_date,
}


def _as_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, (bool, int, float)):
        return format_amount(value)
    return str(value)


def validate_record_shape(record: Any) -> bool:
    """
    Structural gate for bulk data (imports, stored records).

    A record passes when it is a mapping with every record key, a string
    id, and scalar fields that each pass their own validator.
    """
    if not isinstance(record, Mapping):
        return False
    if not all(key in record for key in RECORD_FIELDS):
        return False
    if not isinstance(record["id"], str):
        return False
    return all(
        validate(_as_text(record[name])).valid
        for name, validate in FIELD_VALIDATORS.items()
    )


def validate_record_input(fields: Mapping[str, Any]) -> RecordInputValidation:
    """
    Validate every field of a candidate record.

    All fields are checked, so the caller can show every problem at once.
    Missing fields are validated as empty text.
    """
    results = {
        name: FIELD_VALIDATORS[name](_as_text(fields.get(name, "")))
        for name in FORM_FIELDS
    }
    return RecordInputValidation(results=results)
