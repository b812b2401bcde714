"""Audit logging package."""

from statement_import.audit.logger import AuditLogger, configure_logging, create_correlation_id
from statement_import.audit.sink import AuditSinkInterface, InMemoryAuditSink

__all__ = [
    "AuditLogger",
    "AuditSinkInterface",
    "InMemoryAuditSink",
    "configure_logging",
    "create_correlation_id",
]
