"""
Query Models

What a caller asks the query engine for, and what it gets back.

The result types are read-only snapshots derived from the stores. All
monetary values in them are already converted to the display currency
and formatted.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger.exceptions import PatternSyntaxError
from ledger.models.record import Record


class SortKey(str, Enum):
    """Supported sort orders."""
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"
    DESCRIPTION_ASC = "description_asc"
    DESCRIPTION_DESC = "description_desc"
    AMOUNT_ASC = "amount_asc"
    AMOUNT_DESC = "amount_desc"


class PatternKind(str, Enum):
    """
    Outcome of compiling a search pattern.

    NO_FILTER and INVALID both match everything; only INVALID carries an
    error that the caller must surface.
    """
    COMPILED = "compiled"
    NO_FILTER = "no_filter"
    INVALID = "invalid"


@dataclass(frozen=True)
class CompiledPattern:
    """Tagged result of compile_pattern()."""

    kind: PatternKind
    regex: Optional[re.Pattern] = None
    exception: Optional[PatternSyntaxError] = None

    @classmethod
    def compiled(cls, regex: re.Pattern) -> "CompiledPattern":
        return cls(kind=PatternKind.COMPILED, regex=regex)

    @classmethod
    def no_filter(cls) -> "CompiledPattern":
        return cls(kind=PatternKind.NO_FILTER)

    @classmethod
    def invalid(cls, exception: PatternSyntaxError) -> "CompiledPattern":
        return cls(kind=PatternKind.INVALID, exception=exception)

    @property
    def is_active(self) -> bool:
        """True only when a usable regex filters records."""
        return self.kind is PatternKind.COMPILED

    @property
    def has_error(self) -> bool:
        return self.kind is PatternKind.INVALID

    @property
    def error(self) -> Optional[str]:
        """Why compilation failed, or None."""
        return self.exception.reason if self.exception else None


class RecordQuery(BaseModel):
    """The user's current search and sort preferences."""
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(
        default="",
        description="Regular expression; empty means no filter"
    )
    case_insensitive: bool = True
    sort_by: str = Field(
        default=SortKey.DATE_DESC.value,
        description="One of SortKey; unknown keys keep store order"
    )


@dataclass(frozen=True)
class RecordRow:
    """One record ready for presentation."""

    record: Record
    display_amount: str
    description_spans: list[tuple[int, int]] = field(default_factory=list)
    category_spans: list[tuple[int, int]] = field(default_factory=list)


@dataclass(frozen=True)
class QueryResult:
    """Filtered and sorted records plus the pattern that filtered them."""

    rows: list[RecordRow]
    pattern: CompiledPattern

    @property
    def records(self) -> list[Record]:
        return [row.record for row in self.rows]

    @property
    def result_count(self) -> int:
        return len(self.rows)

    @property
    def pattern_error(self) -> Optional[str]:
        return self.pattern.error


class CapStatus(BaseModel):
    """Where total spending stands against the configured cap."""

    configured: bool
    remaining: float = Field(
        default=0.0,
        description="Base-currency amount left under the cap (0 when exceeded)"
    )
    exceeded_by: float = Field(
        default=0.0,
        description="Base-currency amount over the cap (0 when under)"
    )
    alerting: bool = False
    status_text: str = Field(
        ...,
        description="Short status, e.g. '$20.00 remaining'"
    )
    announcement: str = Field(
        ...,
        description="Full sentence for assistive announcements"
    )


class SummaryStats(BaseModel):
    """Aggregates over the whole store, independent of the active search."""

    record_count: int = Field(ge=0)
    total_amount: float = Field(
        ...,
        description="Sum of all amounts converted to the display currency"
    )
    total_display: str
    top_category: Optional[str] = Field(
        default=None,
        description="Category with the largest summed amount"
    )
    cap: CapStatus


class TrendPoint(BaseModel):
    """Converted spending total for one calendar day."""

    day: str = Field(..., description="YYYY-MM-DD")
    label: str = Field(..., description="Short weekday name, e.g. 'Mon'")
    total: float
