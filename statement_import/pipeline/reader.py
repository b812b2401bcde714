"""
Row Parser and Column Mapper

Turns CSV text into header -> cell mappings and reshapes them.

Quoting follows the usual CSV convention via the stdlib csv module: a quoted
field may contain the delimiter or a line break, and a doubled quote inside
it is one literal quote. Records end only at CR, LF or CRLF. The whole text
is held in memory; there is no streaming.
"""

import csv
import io
from collections.abc import Mapping, Sequence
from typing import Optional

import structlog

from statement_import.models.transaction import ColumnMapping, RawRow
from statement_import.pipeline.sniffer import detect_delimiter

logger = structlog.get_logger(__name__)

BOM = "\ufeff"

# Header keywords per field, matched as lowercase substrings
COLUMN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "date": ("date", "fecha", "time"),
    "amount": ("amount", "cantidad", "importe", "monto", "valor"),
    "description": ("description", "descripción", "concepto", "memo", "detail"),
    "category": ("category", "categoría"),
}


class CSVImportError(ValueError):
    """Base exception for misuse of the import API."""
    pass


class InvalidDelimiterError(CSVImportError):
    """An explicit delimiter was not a single character."""

    def __init__(self, delimiter: object):
        self.delimiter = delimiter
        super().__init__(f"Delimiter must be a single character, got {delimiter!r}")


def parse_csv(text: str, delimiter: Optional[str] = None) -> list[RawRow]:
    """
    Parse CSV text into a list of rows keyed by header.

    Args:
        text: The whole file content
        delimiter: Field separator; sniffed from the header line when omitted

    Returns:
        One dict per data row, in file order. Lines that are blank after
        trimming are skipped. A row shorter than the header lacks the
        trailing keys; cells beyond the header are ignored.

    Raises:
        InvalidDelimiterError: if an explicit delimiter is not one character
    """
    _, rows = read_csv(text, delimiter)
    return rows


def read_csv(
    text: str,
    delimiter: Optional[str] = None,
) -> tuple[list[str], list[RawRow]]:
    """
    Parse CSV text into its headers and rows.

    Same rules as parse_csv(); the header list is returned as well.
    """
    if delimiter is None:
        delimiter = detect_delimiter(text or "")
    elif not isinstance(delimiter, str) or len(delimiter) != 1:
        raise InvalidDelimiterError(delimiter)

    # newline="" leaves record splitting to the csv module: only \r, \n and
    # \r\n end a record, and quoted fields may span lines
    reader = csv.reader(
        io.StringIO(text or "", newline=""),
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
    )
    # Blank lines carry no cells, or only whitespace
    records = (cells for cells in reader if delimiter.join(cells).strip())

    header_cells = next(records, None)
    if header_cells is None:
        return [], []
    headers = [h.replace(BOM, "").strip() for h in header_cells]

    rows: list[RawRow] = []
    for cells in records:
        # zip() stops at the shorter side: short rows simply lack keys
        rows.append(dict(zip(headers, cells)))

    logger.debug("csv_parsed", delimiter=delimiter, headers=headers, row_count=len(rows))
    return headers, rows


def map_csv_columns(
    rows: Sequence[Mapping[str, str]],
    header_to_field: Mapping[str, str],
    preserve_unmapped: bool = False,
) -> list[dict[str, str]]:
    """
    Rename row keys according to ``header_to_field``.

    Source headers missing from a row leave the target key absent. With
    ``preserve_unmapped`` the remaining keys are copied under their original
    names, without overwriting a mapped field. Input rows are not modified.
    """
    mapped_rows = []
    for row in rows:
        result: dict[str, str] = {}
        for header, field in header_to_field.items():
            if header in row:
                result[field] = row[header]

        if preserve_unmapped:
            for key, value in row.items():
                if key not in header_to_field:
                    result.setdefault(key, value)

        mapped_rows.append(result)
    return mapped_rows


def auto_map_columns(headers: Sequence[str]) -> ColumnMapping:
    """
    Guess which header feeds each transaction field.

    Fields are resolved in COLUMN_KEYWORDS order. For each field the
    keywords are tried in order and the first unclaimed header containing
    the keyword (case-insensitive) wins, so "Importe" beats "Fecha valor"
    for the amount. Fields without a match stay None.
    """
    lowered = [h.lower() for h in headers]
    claimed: set[str] = set()

    def find(keywords: tuple[str, ...]) -> Optional[str]:
        for keyword in keywords:
            for header, low in zip(headers, lowered):
                if header not in claimed and keyword in low:
                    claimed.add(header)
                    return header
        return None

    mapping = {}
    for field, keywords in COLUMN_KEYWORDS.items():
        mapping[field] = find(keywords)
    return ColumnMapping(**mapping)
