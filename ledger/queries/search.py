"""
Record Search

Compiles the user's search expression and matches records against it.

FAIL-OPEN: a pattern that does not compile never crashes a query and
never hides records. It turns filtering off and carries the reason, so
the caller can show a warning next to the unfiltered list.
"""

import re
from collections.abc import Iterator

from ledger.exceptions import PatternSyntaxError
from ledger.models.query import CompiledPattern
from ledger.models.record import Record
from ledger.validation import format_amount


def compile_pattern(pattern_text: str, case_insensitive: bool = True) -> CompiledPattern:
    """
    Compile a search expression.

    Returns:
        COMPILED with the regex, NO_FILTER for empty text, or INVALID with
        the syntax error when the text is not a valid regular expression
    """
    if not pattern_text:
        return CompiledPattern.no_filter()
    flags = re.IGNORECASE if case_insensitive else 0
    try:
        return CompiledPattern.compiled(re.compile(pattern_text, flags))
    except (re.error, OverflowError, RecursionError) as e:
        # Huge repeat counts raise OverflowError, deep nesting RecursionError
        return CompiledPattern.invalid(PatternSyntaxError(pattern_text, str(e) or type(e).__name__))


def search_text(record: Record) -> str:
    """The text a pattern is tested against: description, category, amount, date."""
    return " ".join((
        record.description,
        record.category,
        format_amount(record.amount),
        record.date,
    ))


def matches(record: Record, pattern: CompiledPattern) -> bool:
    if not pattern.is_active:
        return True
    return pattern.regex.search(search_text(record)) is not None


def highlight_spans(text: str, pattern: CompiledPattern) -> Iterator[tuple[int, int]]:
    """
    Lazily yield (start, end) of every non-overlapping match in text.

    Empty matches are skipped since they mark nothing. Yields nothing
    when no filter is active.
    """
    if not pattern.is_active:
        return
    for match in pattern.regex.finditer(text):
        start, end = match.span()
        if end > start:
            yield start, end
