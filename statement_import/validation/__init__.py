"""Validation package: row checks, duplicates and aggregates."""

from statement_import.validation.stats import (
    calculate_balance_impact,
    get_transaction_stats,
)
from statement_import.validation.validator import (
    detect_duplicates,
    summarize_issues,
    validate_transactions,
)

__all__ = [
    "calculate_balance_impact",
    "detect_duplicates",
    "get_transaction_stats",
    "summarize_issues",
    "validate_transactions",
]
