"""Aggregates over a batch of candidate rows: statistics and balance impact."""

import math
from collections.abc import Sequence
from typing import Optional

from statement_import.models.transaction import (
    BalanceImpact,
    DateRange,
    TransactionStats,
    TransactionType,
)
from statement_import.validation.validator import RowLike, as_candidate


def _amount(value: Optional[float]) -> float:
    # Missing and NaN amounts contribute nothing
    if value is None or math.isnan(value):
        return 0.0
    return value


def get_transaction_stats(rows: Sequence[RowLike]) -> TransactionStats:
    """
    Count and sum rows by type, find the date range and count categories.

    Every row that is not INCOME counts as an expense, so
    ``income + expense == total`` always holds. Rows without a category
    are left out of the histogram.
    """
    candidates = [as_candidate(r) for r in rows]
    stats = TransactionStats(total=len(candidates))

    if not candidates:
        return stats

    dates = sorted(tx.date for tx in candidates if tx.date)
    if dates:
        stats.date_range = DateRange(date_from=dates[0], date_to=dates[-1])

    for tx in candidates:
        if tx.type == TransactionType.INCOME:
            stats.income += 1
            stats.total_income += _amount(tx.amount)
        else:
            stats.expense += 1
            stats.total_expense += _amount(tx.amount)

        if tx.category:
            stats.categories[tx.category] = stats.categories.get(tx.category, 0) + 1

    return stats


def calculate_balance_impact(
    rows: Sequence[RowLike],
    current_balance: float,
) -> BalanceImpact:
    """
    Compute how importing ``rows`` would move an account balance.

    impact = income total - expense total; final = current + impact.
    """
    income_total = 0.0
    expense_total = 0.0

    for row in rows:
        tx = as_candidate(row)
        if tx.type == TransactionType.INCOME:
            income_total += _amount(tx.amount)
        else:
            expense_total += _amount(tx.amount)

    impact = income_total - expense_total

    return BalanceImpact(
        impact=impact,
        final_balance=current_balance + impact,
        income_total=income_total,
        expense_total=expense_total,
    )
