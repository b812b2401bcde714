"""
Format Sniffer

Guesses the field delimiter and the date layout of a bank export.
Detection is heuristic and always returns a best guess, never "unknown".
"""

import re
from collections.abc import Iterable
from typing import Optional

import structlog

from statement_import.config import get_settings
from statement_import.models.transaction import DateFormat

logger = structlog.get_logger(__name__)

# Candidate order doubles as tie-break order
DELIMITER_CANDIDATES = (",", ";", "\t", "|")
CSV_FORMAT_CANDIDATES = (",", ";", "\t")
DEFAULT_DELIMITER = ","

ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
SLASH_DATE_RE = re.compile(r"^[0-9]{1,2}/[0-9]{1,2}/[0-9]{4}$")

# Same record separators as the csv module
LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _header_line(text: str) -> str:
    for line in LINE_BREAK_RE.split(text):
        if line.strip():
            return line
    return ""


def _most_frequent(line: str, candidates: Iterable[str]) -> str:
    best = DEFAULT_DELIMITER
    best_count = 0
    for delimiter in candidates:
        count = line.count(delimiter)
        # strict comparison keeps the earlier candidate on ties
        if count > best_count:
            best = delimiter
            best_count = count
    return best


def detect_delimiter(text: str) -> str:
    """
    Detect the delimiter of a CSV export.

    Counts ``,`` ``;`` tab and ``|`` on the header line and returns the most
    frequent one. Ties go to the candidate listed first; a header with none
    of them yields a comma.
    """
    delimiter = _most_frequent(_header_line(text or ""), DELIMITER_CANDIDATES)
    logger.debug("delimiter_detected", delimiter=delimiter)
    return delimiter


def detect_csv_format(text: str) -> str:
    """Like detect_delimiter(), restricted to comma, semicolon and tab."""
    return _most_frequent(_header_line(text or ""), CSV_FORMAT_CANDIDATES)


def detect_date_format(
    sample_dates: Iterable[Optional[str]],
    sample_size: Optional[int] = None,
) -> DateFormat:
    """
    Classify the date layout of a column from sample values.

    Only the first ``sample_size`` non-blank values are inspected
    (default from settings, 10). Slash-separated dates are always reported
    as DD/MM/YYYY; month-first exports must be converted by the caller.
    Anything else, including an empty sample, is reported as YYYY-MM-DD.
    """
    if sample_size is None:
        sample_size = get_settings().importer.date_sample_size

    sample: list[str] = []
    for value in sample_dates:
        if value and value.strip():
            sample.append(value.strip())
            if len(sample) >= sample_size:
                break

    if all(ISO_DATE_RE.match(d) for d in sample):
        return DateFormat.ISO

    if all(SLASH_DATE_RE.match(d) for d in sample):
        return DateFormat.DAY_FIRST

    return DateFormat.ISO
