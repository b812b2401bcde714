"""
Main Orchestrator for Statement Import

Ties the pipeline stages together into one import run:

    raw text -> sniff -> parse -> map columns -> normalize -> categorize
             -> validate -> detect duplicates -> stats (-> balance impact)

The run is synchronous and stateless: every call builds fresh data and
nothing is kept between calls. Each stage emits an audit event under the
run's correlation ID. Bad data never aborts a run; it shows up in
ImportResult.errors for the host to act on.
"""

from collections.abc import Mapping, Sequence
from typing import Optional, Union
from uuid import UUID

from statement_import.audit import AuditLogger, AuditSinkInterface, create_correlation_id
from statement_import.config import ImportSettings, get_settings
from statement_import.models.audit import AuditEvent, AuditEventBuilder
from statement_import.models.transaction import (
    CandidateTransaction,
    CategoryDefinition,
    ColumnMapping,
    DateFormat,
    ExistingTransaction,
    ImportResult,
    RawRow,
)
from statement_import.pipeline import (
    auto_map_columns,
    build_candidate,
    categorize_candidates,
    detect_date_format,
    detect_delimiter,
    read_csv,
)
from statement_import.validation import (
    calculate_balance_impact,
    detect_duplicates,
    get_transaction_stats,
    validate_transactions,
)


class CSVImportFlow:
    """
    Orchestrates one bank-statement import.

    Flow:
    1. Sniff the delimiter (unless given)
    2. Parse rows and map columns (auto-mapped unless given)
    3. Sniff the date layout of the date column
    4. Normalize each row into a candidate transaction
    5. Categorize against the host's categories
    6. Validate rows and look for duplicates of stored transactions
    7. Aggregate statistics and, with a balance, the balance impact

    Nothing is persisted. The host decides what to import.
    """

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ImportSettings] = None,
    ):
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().importer

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def parse(
        self,
        text: str,
        delimiter: Optional[str] = None,
    ) -> tuple[str, list[str], list[RawRow]]:
        """
        Sniff (if needed) and parse the file.

        Returns:
            (delimiter, headers, rows), rows capped at max_rows when configured
        """
        if delimiter is None:
            delimiter = detect_delimiter(text)
        headers, rows = read_csv(text, delimiter)
        if self._settings.max_rows is not None:
            rows = rows[: self._settings.max_rows]
        return delimiter, headers, rows

    def build_candidates(
        self,
        rows: Sequence[RawRow],
        columns: ColumnMapping,
        categories: Sequence[CategoryDefinition] = (),
    ) -> list[CandidateTransaction]:
        """Normalize and categorize every row."""
        candidates = [build_candidate(row, columns) for row in rows]
        return categorize_candidates(candidates, categories)

    def run(
        self,
        text: str,
        *,
        delimiter: Optional[str] = None,
        columns: Optional[ColumnMapping] = None,
        categories: Optional[Sequence[Union[CategoryDefinition, Mapping]]] = None,
        existing_transactions: Optional[Sequence[Union[ExistingTransaction, Mapping]]] = None,
        current_balance: Optional[float] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Run the whole pipeline on one file's text.

        Args:
            text: Full CSV content
            delimiter: Field separator; sniffed when omitted
            columns: Header per field; auto-mapped from the headers when omitted
            categories: Categories known to the host
            existing_transactions: Stored transactions, for duplicate detection
            current_balance: Account balance; when given the result includes
                the balance impact of the candidates
            correlation_id: ID grouping the audit events of this run

        Returns:
            ImportResult with candidates, issues, duplicates and statistics
        """
        correlation_id = correlation_id or create_correlation_id()
        text = text or ""

        self._audit(AuditEventBuilder.import_started(
            text_length=len(text),
            delimiter_override=delimiter,
            correlation_id=correlation_id,
        ))

        try:
            known_categories = [
                c if isinstance(c, CategoryDefinition) else CategoryDefinition.model_validate(c)
                for c in (categories or [])
            ]

            delimiter, headers, rows = self.parse(text, delimiter)
            self._audit(AuditEventBuilder.rows_parsed(
                row_count=len(rows),
                headers=headers,
                correlation_id=correlation_id,
            ))

            columns = columns or auto_map_columns(headers)
            self._audit(AuditEventBuilder.columns_mapped(
                mapping=columns.model_dump(),
                missing_fields=columns.missing_fields,
                correlation_id=correlation_id,
            ))

            date_format = (
                detect_date_format(
                    (row.get(columns.date) for row in rows),
                    sample_size=self._settings.date_sample_size,
                )
                if columns.date
                else DateFormat.ISO
            )
            self._audit(AuditEventBuilder.format_detected(
                delimiter=delimiter,
                date_format=date_format.value,
                correlation_id=correlation_id,
            ))

            transactions = self.build_candidates(rows, columns, known_categories)

            errors = validate_transactions(transactions)
            self._audit(AuditEventBuilder.validation_completed(
                row_count=len(transactions),
                issues=[issue.model_dump(mode="json") for issue in errors],
                correlation_id=correlation_id,
            ))

            existing = existing_transactions or []
            duplicates = detect_duplicates(
                transactions,
                existing,
                tolerance=self._settings.duplicate_amount_tolerance,
            )
            self._audit(AuditEventBuilder.duplicates_detected(
                duplicate_count=len(duplicates),
                existing_count=len(existing),
                correlation_id=correlation_id,
            ))

            stats = get_transaction_stats(transactions)
            balance_impact = (
                calculate_balance_impact(transactions, current_balance)
                if current_balance is not None
                else None
            )
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        self._audit(AuditEventBuilder.import_completed(
            row_count=len(transactions),
            error_count=len(errors),
            duplicate_count=len(duplicates),
            correlation_id=correlation_id,
        ))

        return ImportResult(
            correlation_id=correlation_id,
            delimiter=delimiter,
            date_format=date_format,
            columns=columns,
            row_count=len(rows),
            transactions=transactions,
            errors=errors,
            duplicates=duplicates,
            stats=stats,
            balance_impact=balance_impact,
        )


def create_import_flow(
    sink: Optional[AuditSinkInterface] = None,
) -> CSVImportFlow:
    """
    Factory for an import flow with audit logging.

    Args:
        sink: Where audit events are forwarded. None logs locally only.
    """
    return CSVImportFlow(audit_logger=AuditLogger(sink))
