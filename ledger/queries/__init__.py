"""Query execution package."""

from ledger.queries.executor import QueryExecutor, cap_status, top_category
from ledger.queries.search import compile_pattern, highlight_spans, matches, search_text
from ledger.queries.sorting import collation_key, sort_records

__all__ = [
    "QueryExecutor",
    "cap_status",
    "collation_key",
    "compile_pattern",
    "highlight_spans",
    "matches",
    "search_text",
    "sort_records",
    "top_category",
]
