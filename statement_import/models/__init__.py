"""
Data Models Package

This package contains all Pydantic models used by the import pipeline.
All data flowing through the pipeline conforms to these schemas.
"""

from statement_import.models.transaction import (
    DESCRIPTION_PLACEHOLDER,
    FALLBACK_CATEGORY,
    BalanceImpact,
    CandidateTransaction,
    CategoryDefinition,
    CategoryMatch,
    ColumnMapping,
    DateFormat,
    DateRange,
    DuplicateMatch,
    ExistingTransaction,
    ImportResult,
    MerchantMapping,
    RawRow,
    TransactionStats,
    TransactionType,
    ValidationIssue,
)
from statement_import.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "DESCRIPTION_PLACEHOLDER",
    "FALLBACK_CATEGORY",
    "BalanceImpact",
    "CandidateTransaction",
    "CategoryDefinition",
    "CategoryMatch",
    "ColumnMapping",
    "DateFormat",
    "DateRange",
    "DuplicateMatch",
    "ExistingTransaction",
    "ImportResult",
    "MerchantMapping",
    "RawRow",
    "TransactionStats",
    "TransactionType",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
