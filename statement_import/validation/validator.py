"""
Row Validation and Duplicate Detection

Validation reports defects, it never fixes or drops rows. A row can carry
up to three issues (date, amount, description); the caller decides whether
to reject the batch or import it with the flagged rows shown to the user.

Duplicate detection links incoming rows to transactions the host already
stores: same date, amounts within a tolerance, and the same description
ignoring case and surrounding whitespace.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from statement_import.config import get_settings
from statement_import.models.transaction import (
    DESCRIPTION_PLACEHOLDER,
    CandidateTransaction,
    DuplicateMatch,
    ExistingTransaction,
    TransactionType,
    ValidationIssue,
)

INVALID_DATE = "Invalid Date"

RowLike = Union[CandidateTransaction, Mapping]

# Host fields coerced to text before building models
_TEXT_FIELDS = ("date", "description", "category", "sub_category", "raw_category")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_float(value: Any) -> Optional[float]:
    """Numbers pass through; anything that does not convert becomes NaN."""
    if value is None:
        return None
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return math.nan


def _as_type(value: Any) -> Optional[TransactionType]:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().upper())
    except ValueError:
        return None


def as_candidate(row: RowLike) -> CandidateTransaction:
    """
    Accept model instances or plain mappings.

    Mapping values are coerced leniently: an amount that is not a number
    becomes NaN and an unknown type becomes None, so validation reports the
    row instead of failing the batch.
    """
    if isinstance(row, CandidateTransaction):
        return row

    data: dict[str, Any] = {field: _as_text(row.get(field)) for field in _TEXT_FIELDS}
    data["amount"] = _as_float(row.get("amount"))
    data["type"] = _as_type(row.get("type"))
    return CandidateTransaction(**data)


def _as_existing(
    row: Union[ExistingTransaction, Mapping],
) -> Optional[ExistingTransaction]:
    """
    Coerce a stored transaction, keeping every host field.

    Records without a date or a numeric amount cannot be matched and give None.
    """
    if isinstance(row, ExistingTransaction):
        return row

    date = _as_text(row.get("date"))
    amount = _as_float(row.get("amount"))
    if not date or amount is None or math.isnan(amount):
        return None

    data = dict(row)
    data.update(
        id=_as_text(row.get("id")),
        date=date,
        amount=amount,
        description=_as_text(row.get("description")),
        type=_as_type(row.get("type")) or TransactionType.EXPENSE,
        category=_as_text(row.get("category")),
    )
    return ExistingTransaction.model_validate(data)


def _invalid_amount(amount: Optional[float]) -> bool:
    return amount is None or math.isnan(amount)


def validate_transactions(rows: Sequence[RowLike]) -> list[ValidationIssue]:
    """
    Check every row independently and list the defects found.

    Per row (``row`` is 1-based):
    - date missing or "Invalid Date"
    - amount missing or NaN
    - description missing, blank or the "Sin descripción" placeholder
    """
    issues: list[ValidationIssue] = []

    for index, raw in enumerate(rows):
        tx = as_candidate(raw)
        row = index + 1

        if not tx.date or tx.date == INVALID_DATE:
            issues.append(ValidationIssue(
                row=row,
                field="date",
                message="Fecha inválida o faltante",
                value=tx.date,
            ))

        if _invalid_amount(tx.amount):
            issues.append(ValidationIssue(
                row=row,
                field="amount",
                message="Cantidad inválida o faltante",
                value=tx.amount,
            ))

        if (
            not tx.description
            or not tx.description.strip()
            or tx.description == DESCRIPTION_PLACEHOLDER
        ):
            issues.append(ValidationIssue(
                row=row,
                field="description",
                message="Descripción faltante o genérica",
                value=tx.description,
            ))

    return issues


def _description_key(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    return description.strip().lower()


def detect_duplicates(
    new_rows: Sequence[RowLike],
    existing_transactions: Sequence[Union[ExistingTransaction, Mapping]],
    tolerance: Optional[float] = None,
) -> list[DuplicateMatch]:
    """
    Pair each incoming row with the stored transactions it duplicates.

    A match needs an identical date, an amount difference strictly below
    ``tolerance`` (default from settings, 0.01) and equal descriptions after
    trimming and lower-casing. Rows without matches are left out, so the
    result is sparse and each entry carries the row's original index.
    Stored records without a date or a numeric amount are skipped.
    """
    if tolerance is None:
        tolerance = get_settings().importer.duplicate_amount_tolerance

    existing = [
        tx for tx in (_as_existing(raw) for raw in existing_transactions)
        if tx is not None
    ]
    duplicates: list[DuplicateMatch] = []

    for index, raw in enumerate(new_rows):
        new_tx = as_candidate(raw)
        new_amount = new_tx.amount or 0.0
        new_description = _description_key(new_tx.description)

        matches = [
            tx for tx in existing
            if tx.date == new_tx.date
            and abs(tx.amount - new_amount) < tolerance
            and _description_key(tx.description) == new_description
        ]

        if matches:
            duplicates.append(DuplicateMatch(index=index, matches=matches))

    return duplicates


def summarize_issues(issues: Sequence[ValidationIssue]) -> str:
    """
    Build a plain-text summary of validation issues, grouped by row.

    This is what the host shows before the user confirms an import.
    """
    if not issues:
        return "Todas las filas son válidas."

    by_row: dict[int, list[ValidationIssue]] = {}
    for issue in issues:
        by_row.setdefault(issue.row, []).append(issue)

    lines = [f"{len(issues)} problemas en {len(by_row)} filas:"]
    for row in sorted(by_row):
        messages = "; ".join(issue.message for issue in by_row[row])
        lines.append(f"  • Fila {row}: {messages}")

    return "\n".join(lines)
