"""
Audit Models for Statement Import

Every stage of an import run emits an audit event. Events from one run share
a correlation ID so a whole import can be reconstructed from the log.

Audit events are append-only. Nothing updates or deletes them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every stage of the import pipeline has its own event type.
    """
    IMPORT_STARTED = "import_started"
    FORMAT_DETECTED = "format_detected"
    ROWS_PARSED = "rows_parsed"
    COLUMNS_MAPPED = "columns_mapped"
    VALIDATION_COMPLETED = "validation_completed"
    DUPLICATES_DETECTED = "duplicates_detected"
    IMPORT_COMPLETED = "import_completed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - every event of one import run shares this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID of the import run this event belongs to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events for each pipeline stage.

    Usage:
        event = AuditEventBuilder.rows_parsed(row_count=120, correlation_id=cid)
        audit_logger.log(event)
    """

    @staticmethod
    def import_started(
        text_length: int,
        delimiter_override: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            correlation_id=correlation_id,
            description=f"Import started ({text_length} characters)",
            details={
                "text_length": text_length,
                "delimiter_override": delimiter_override,
            },
        )

    @staticmethod
    def format_detected(
        delimiter: str,
        date_format: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FORMAT_DETECTED,
            correlation_id=correlation_id,
            description=f"Detected delimiter {delimiter!r} and dates as {date_format}",
            details={"delimiter": delimiter, "date_format": date_format},
        )

    @staticmethod
    def rows_parsed(
        row_count: int,
        headers: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        severity = AuditSeverity.INFO if row_count else AuditSeverity.WARNING
        return AuditEvent(
            event_type=AuditEventType.ROWS_PARSED,
            severity=severity,
            correlation_id=correlation_id,
            description=f"Parsed {row_count} rows",
            details={"row_count": row_count, "headers": headers},
        )

    @staticmethod
    def columns_mapped(
        mapping: dict[str, Optional[str]],
        missing_fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        """Warn when a required field has no column."""
        severity = AuditSeverity.WARNING if missing_fields else AuditSeverity.INFO
        description = (
            f"No column found for: {', '.join(missing_fields)}"
            if missing_fields
            else "All required columns mapped"
        )
        return AuditEvent(
            event_type=AuditEventType.COLUMNS_MAPPED,
            severity=severity,
            correlation_id=correlation_id,
            description=description,
            details={"mapping": mapping, "missing_fields": missing_fields},
        )

    @staticmethod
    def validation_completed(
        row_count: int,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if issues else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_COMPLETED,
            severity=severity,
            correlation_id=correlation_id,
            description=f"{len(issues)} validation issues in {row_count} rows",
            details={"row_count": row_count, "issues": issues},
        )

    @staticmethod
    def duplicates_detected(
        duplicate_count: int,
        existing_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if duplicate_count else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.DUPLICATES_DETECTED,
            severity=severity,
            correlation_id=correlation_id,
            description=(
                f"{duplicate_count} rows duplicate one of "
                f"{existing_count} existing transactions"
            ),
            details={
                "duplicate_count": duplicate_count,
                "existing_count": existing_count,
            },
        )

    @staticmethod
    def import_completed(
        row_count: int,
        error_count: int,
        duplicate_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            correlation_id=correlation_id,
            description=f"Import completed with {row_count} candidate transactions",
            details={
                "row_count": row_count,
                "error_count": error_count,
                "duplicate_count": duplicate_count,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
