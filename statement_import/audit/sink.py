"""
Audit Sink Interface

The import pipeline does not persist anything itself. Hosts that want the
audit trail somewhere (a database, a monitoring service) implement
AuditSinkInterface and hand it to the AuditLogger.

InMemoryAuditSink keeps events in a list, for tests and for hosts that
want to show the trail of the current run.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from statement_import.models.audit import AuditEvent


class AuditSinkInterface(ABC):
    """
    Abstract interface for audit event persistence.

    Implementations should be append-only.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Args:
            event: The audit event to store

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events of one import run, in chronological order.
        """
        pass


class InMemoryAuditSink(AuditSinkInterface):
    """Keeps events in memory, in append order."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def clear(self) -> None:
        self._events.clear()
