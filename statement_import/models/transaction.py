"""
Core Data Models for Statement Import

These models define the schemas for all data flowing through the import
pipeline. They are designed to:
1. Represent partially-filled rows (validation reports, it does not reject)
2. Be serializable for the host application (model_dump() gives plain data)
3. Keep amounts sign-less, with the direction carried by TransactionType

Amounts are floats and may be NaN on a candidate row. NaN is a defect that
validate_transactions() reports; the model itself accepts it.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# Placeholder written by clean_description() when nothing usable is left
DESCRIPTION_PLACEHOLDER = "Sin descripción"

# Catch-all bucket when no categorization tier matches
FALLBACK_CATEGORY = "Otros"

# A CSV row: header -> raw cell, in column order
RawRow = dict[str, str]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class DateFormat(str, Enum):
    """
    Date layouts the sniffer can report.

    Slash-separated dates are always reported as day-first.
    """
    ISO = "YYYY-MM-DD"
    DAY_FIRST = "DD/MM/YYYY"


# =============================================================================
# REFERENCE DATA
# =============================================================================

class MerchantMapping(BaseModel):
    """
    Rule associating description keywords with a category.

    Keywords are uppercase and matched as substrings of the
    uppercased description.
    """
    model_config = ConfigDict(frozen=True)

    keywords: list[str] = Field(
        ...,
        min_length=1,
        description="Uppercase keywords, any of which triggers the mapping"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category assigned on match"
    )
    sub_category: Optional[str] = Field(
        default=None,
        description="Subcategory assigned on match"
    )


class CategoryDefinition(BaseModel):
    """A category known to the host application."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    id: str = Field(
        default="",
        description="Host identifier of the category"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name, matched case-insensitively"
    )
    sub_categories: list[str] = Field(
        default_factory=list,
        alias="subCategories",
        description="Subcategory names belonging to this category"
    )


class CategoryMatch(BaseModel):
    """Result of categorizing one row."""

    category: str
    sub_category: Optional[str] = None


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class CandidateTransaction(BaseModel):
    """
    A parsed and normalized row, not yet accepted by the host.

    All fields are optional: rows built by hand or by a host may be
    incomplete, and validate_transactions() reports what is missing.
    """

    date: Optional[str] = Field(
        default=None,
        description="Canonical YYYY-MM-DD date"
    )
    amount: Optional[float] = Field(
        default=None,
        description="Sign-less amount; direction is in `type`"
    )
    type: Optional[TransactionType] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    raw_category: Optional[str] = Field(
        default=None,
        description="Category label as read from the CSV, if any"
    )


class ExistingTransaction(BaseModel):
    """
    A transaction the host already stores.

    Host fields beyond the ones below are kept as extras, so duplicate
    matches hand the host back its whole record.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    date: str
    amount: float
    description: Optional[str] = None
    type: TransactionType = TransactionType.EXPENSE
    category: Optional[str] = None


# =============================================================================
# COLUMN MAPPING
# =============================================================================

class ColumnMapping(BaseModel):
    """Which CSV header feeds each transaction field."""

    date: Optional[str] = None
    amount: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    def as_header_map(self) -> dict[str, str]:
        """Return {header: field} for the mapped fields, usable with map_csv_columns()."""
        return {
            header: field
            for field, header in self.model_dump().items()
            if header
        }

    @property
    def missing_fields(self) -> list[str]:
        """Required fields with no header assigned (category is optional)."""
        return [
            field for field in ("date", "amount", "description")
            if not getattr(self, field)
        ]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """One defect found on one row."""

    row: int = Field(
        ...,
        ge=1,
        description="1-based row number (header excluded)"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    value: Any = Field(
        default=None,
        description="The offending value as found on the row"
    )


class DuplicateMatch(BaseModel):
    """An incoming row paired with every stored transaction it duplicates."""

    index: int = Field(
        ...,
        ge=0,
        description="0-based position of the incoming row"
    )
    matches: list[ExistingTransaction] = Field(default_factory=list)


# =============================================================================
# AGGREGATES
# =============================================================================

class DateRange(BaseModel):
    """Inclusive range of dates; empty strings when there are no dates."""

    date_from: str = ""
    date_to: str = ""


class TransactionStats(BaseModel):
    """Aggregate figures over a batch of rows."""

    total: int = 0
    income: int = 0
    expense: int = 0
    total_income: float = 0.0
    total_expense: float = 0.0
    date_range: DateRange = Field(default_factory=DateRange)
    categories: dict[str, int] = Field(default_factory=dict)


class BalanceImpact(BaseModel):
    """Effect of a batch on an account balance."""

    impact: float
    final_balance: float
    income_total: float
    expense_total: float


class ImportResult(BaseModel):
    """Everything one import run produces."""

    correlation_id: UUID = Field(default_factory=uuid4)
    processed_at: datetime = Field(default_factory=datetime.utcnow)

    delimiter: str
    date_format: DateFormat
    columns: ColumnMapping
    row_count: int = Field(ge=0)

    transactions: list[CandidateTransaction] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)
    duplicates: list[DuplicateMatch] = Field(default_factory=list)
    stats: TransactionStats = Field(default_factory=TransactionStats)
    balance_impact: Optional[BalanceImpact] = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    @property
    def rows_with_errors(self) -> set[int]:
        """0-based indexes of transactions carrying at least one issue."""
        return {issue.row - 1 for issue in self.errors}
