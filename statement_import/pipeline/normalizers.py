"""
Field Normalizers

Convert raw CSV cells into canonical values:
- dates   -> "YYYY-MM-DD" strings
- amounts -> finite floats
- descriptions -> single-spaced display strings

None of these functions raise on bad input. Each one degrades to a usable
value (today's date, 0.0, the placeholder description) and leaves it to
validate_transactions() to flag the row.

Slash, dash and dot separated dates are read day-first (DD/MM/YYYY).
A month-first export has to be converted by the caller.
"""

import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Optional, Union

from statement_import.models.transaction import (
    DESCRIPTION_PLACEHOLDER,
    CandidateTransaction,
    ColumnMapping,
    TransactionType,
)


# =============================================================================
# DATES
# =============================================================================

ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
DAY_FIRST_RE = re.compile(r"^([0-9]{1,2})[/\-.]([0-9]{1,2})[/\-.]([0-9]{4})$")
YEAR_FIRST_RE = re.compile(r"^([0-9]{4})[/\-.]([0-9]{1,2})[/\-.]([0-9]{1,2})$")

# Last-resort layouts, tried in order after ISO date-times
FALLBACK_DATE_FORMATS = (
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%a %b %d %Y",
    "%Y%m%d",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
)


def _today() -> str:
    return date.today().isoformat()


def parse_date(raw: object) -> str:
    """
    Normalize a date cell to YYYY-MM-DD.

    Tried in order:
    1. Already YYYY-MM-DD: returned as is
    2. D/M/YYYY (also with - or .): day-first, zero-padded
    3. YYYY/M/D (also with - or .): zero-padded
    4. ISO date-times and a fixed list of textual layouts

    Returns today's date when nothing matches, including for empty input.
    """
    if raw is None:
        return _today()
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()

    cleaned = str(raw).strip()
    if not cleaned:
        return _today()

    if ISO_DATE_RE.match(cleaned):
        return cleaned

    match = DAY_FIRST_RE.match(cleaned)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    match = YEAR_FIRST_RE.match(cleaned)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass

    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue

    return _today()


# =============================================================================
# AMOUNTS
# =============================================================================

CURRENCY_AND_SPACE_RE = re.compile(r"[€$£\s]")
TWO_DECIMALS_AFTER_COMMA_RE = re.compile(r",[0-9]{2}$")
# Leading numeric prefix, the part a lenient float parser would read
NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def normalize_amount(raw: Union[str, int, float, None]) -> float:
    """
    Normalize an amount cell to a float, keeping its sign.

    Currency symbols (€ $ £) and whitespace are removed, then:
    - "," and "." both present: the one appearing last is the decimal
      separator, the other is a thousands separator
    - only ",": decimal separator if exactly two digits follow it at the
      end ("12,50"), thousands separator otherwise ("1,234")
    - only "." or neither: parsed as is

    Unparseable input gives 0.0.

    Known limitation: "1,234" always means 1234 and "1,5" means 15; a
    comma followed by one or three decimals cannot be told apart from a
    thousands separator.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else 0.0

    cleaned = CURRENCY_AND_SPACE_RE.sub("", str(raw))
    if not cleaned:
        return 0.0

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            # 1.234,56
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            # 1,234.56
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if TWO_DECIMALS_AFTER_COMMA_RE.search(cleaned):
            head, _, tail = cleaned.rpartition(",")
            cleaned = f"{head.replace(',', '')}.{tail}"
        else:
            cleaned = cleaned.replace(",", "")

    match = NUMBER_PREFIX_RE.match(cleaned)
    if not match:
        return 0.0

    value = float(match.group(0))
    return value if math.isfinite(value) else 0.0


# =============================================================================
# DESCRIPTIONS
# =============================================================================

# Letters (with Spanish diacritics), digits, whitespace and . , ; : ( ) / - € $
DISALLOWED_DESCRIPTION_CHARS_RE = re.compile(r"[^A-Za-z0-9áéíóúñÁÉÍÓÚÑüÜ\s.,;:()/\-€$]")
WHITESPACE_RE = re.compile(r"\s+")


def clean_description(raw: Optional[str]) -> str:
    """
    Normalize a description for display.

    Drops characters outside the allow-list, collapses whitespace runs to
    one space and upper-cases the first character (the rest is kept).
    Returns "Sin descripción" when nothing is left.
    """
    if raw is None:
        return DESCRIPTION_PLACEHOLDER

    cleaned = DISALLOWED_DESCRIPTION_CHARS_RE.sub("", str(raw))
    cleaned = WHITESPACE_RE.sub(" ", cleaned).strip()

    if not cleaned:
        return DESCRIPTION_PLACEHOLDER

    return cleaned[0].upper() + cleaned[1:]


# =============================================================================
# ROW -> CANDIDATE
# =============================================================================

def build_candidate(
    row: Mapping[str, str],
    columns: ColumnMapping,
) -> CandidateTransaction:
    """
    Build a candidate transaction from one parsed row.

    The signed amount decides the type: zero or positive is INCOME,
    negative is EXPENSE. The stored amount is the magnitude.
    """
    def cell(header: Optional[str]) -> Optional[str]:
        if not header:
            return None
        return row.get(header)

    signed_amount = normalize_amount(cell(columns.amount))
    raw_category = cell(columns.category)

    return CandidateTransaction(
        date=parse_date(cell(columns.date)),
        amount=abs(signed_amount),
        type=TransactionType.INCOME if signed_amount >= 0 else TransactionType.EXPENSE,
        description=clean_description(cell(columns.description)),
        raw_category=raw_category.strip() if raw_category and raw_category.strip() else None,
    )
