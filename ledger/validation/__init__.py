"""Field validation package."""

from ledger.validation.validator import (
    FIELD_VALIDATORS,
    format_amount,
    normalize_spaces,
    validate_amount,
    validate_category,
    validate_currency_code,
    validate_date,
    validate_description,
    validate_record_input,
    validate_record_shape,
)

__all__ = [
    "FIELD_VALIDATORS",
    "format_amount",
    "normalize_spaces",
    "validate_amount",
    "validate_category",
    "validate_currency_code",
    "validate_date",
    "validate_description",
    "validate_record_input",
    "validate_record_shape",
]
