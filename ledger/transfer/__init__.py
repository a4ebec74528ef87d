"""Import/export package."""

from ledger.transfer.gate import (
    import_records,
    parse_import_payload,
    prepare_export,
    prepare_import,
)

__all__ = [
    "import_records",
    "parse_import_payload",
    "prepare_export",
    "prepare_import",
]
