"""Tests for date, amount and description normalization."""

from datetime import date, datetime

import pytest

from statement_import.models import (
    DESCRIPTION_PLACEHOLDER,
    ColumnMapping,
    TransactionType,
)
from statement_import.pipeline.normalizers import (
    build_candidate,
    clean_description,
    normalize_amount,
    parse_date,
)


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_passthrough(self):
        """Test that canonical dates are returned unchanged."""
        assert parse_date("2024-01-15") == "2024-01-15"

    def test_surrounding_whitespace(self):
        """Test that cells are trimmed first."""
        assert parse_date("  2024-01-15 ") == "2024-01-15"

    @pytest.mark.parametrize("raw", ["05/03/2024", "5/3/2024", "05-03-2024", "05.03.2024"])
    def test_day_first(self, raw):
        """Test that separated dates are read day-first and zero-padded."""
        assert parse_date(raw) == "2024-03-05"

    def test_year_first_with_slashes(self):
        """Test year-first dates with other separators."""
        assert parse_date("2024/3/5") == "2024-03-05"

    def test_iso_datetime(self):
        """Test that date-times keep their date part."""
        assert parse_date("2024-01-15T10:30:00") == "2024-01-15"
        assert parse_date("2024-01-15T10:30:00Z") == "2024-01-15"

    @pytest.mark.parametrize("raw", ["15 Jan 2024", "January 15, 2024", "15-Jan-2024"])
    def test_textual_dates(self, raw):
        """Test textual month layouts."""
        assert parse_date(raw) == "2024-01-15"

    def test_date_objects(self):
        """Test date and datetime values."""
        assert parse_date(date(2024, 1, 15)) == "2024-01-15"
        assert parse_date(datetime(2024, 1, 15, 23, 59)) == "2024-01-15"

    @pytest.mark.parametrize("raw", ["", "   ", "garbage", None])
    def test_unparseable_gives_today(self, raw):
        """Test that anything unrecognized degrades to today."""
        assert parse_date(raw) == date.today().isoformat()

    def test_full_width_digits_are_not_canonical(self):
        """Test that only ASCII digits form a canonical date."""
        result = parse_date("２０２４-０１-１５")

        assert result.isascii()
        assert result == date.today().isoformat()


class TestNormalizeAmount:
    """Tests for normalize_amount."""

    @pytest.mark.parametrize("raw", ["1.234,56", "1234.56", "1,234.56", "1234,56", "1 234,56"])
    def test_separator_conventions(self, raw):
        """Test European and US separator conventions."""
        assert normalize_amount(raw) == 1234.56

    def test_comma_with_two_decimals(self):
        """Test a lone comma followed by two digits."""
        assert normalize_amount("12,50") == 12.5

    def test_comma_as_thousands(self):
        """Test a lone comma not followed by exactly two digits."""
        assert normalize_amount("1,234") == 1234.0

    def test_many_thousands_groups(self):
        """Test repeated thousands separators."""
        assert normalize_amount("1.234.567,89") == 1234567.89
        assert normalize_amount("1,234,567.89") == 1234567.89

    def test_sign_kept(self):
        """Test that negative amounts stay negative."""
        assert normalize_amount("-45,30") == -45.3
        assert normalize_amount("€ -45,30") == -45.3

    @pytest.mark.parametrize("raw,expected", [
        ("€12,50", 12.5),
        ("$1,000,000.00", 1000000.0),
        ("£ 3.5", 3.5),
        ("12,50 €", 12.5),
    ])
    def test_currency_symbols(self, raw, expected):
        """Test that currency symbols and spaces are ignored."""
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "-", None])
    def test_unparseable_gives_zero(self, raw):
        """Test that unparseable input degrades to 0.0."""
        assert normalize_amount(raw) == 0.0

    def test_leading_number_is_read(self):
        """Test that trailing junk after a number is ignored."""
        assert normalize_amount("12abc") == 12.0

    def test_numeric_input(self):
        """Test int and float input."""
        assert normalize_amount(42) == 42.0
        assert normalize_amount(-3.25) == -3.25

    def test_non_finite_gives_zero(self):
        """Test that NaN and infinity are never returned."""
        assert normalize_amount(float("nan")) == 0.0
        assert normalize_amount(float("inf")) == 0.0
        assert normalize_amount("1e999") == 0.0


class TestCleanDescription:
    """Tests for clean_description."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "★★★", "#@!"])
    def test_placeholder_when_empty(self, raw):
        """Test that nothing usable gives the placeholder."""
        assert clean_description(raw) == DESCRIPTION_PLACEHOLDER

    def test_whitespace_collapsed(self):
        """Test that whitespace runs become one space."""
        assert clean_description("  pago   en\tmercadona ") == "Pago en mercadona"

    def test_disallowed_characters_removed(self):
        """Test that symbols outside the allow-list are dropped."""
        assert clean_description("compra ★ tienda #12") == "Compra tienda 12"

    def test_spanish_letters_kept(self):
        """Test that Spanish diacritics survive."""
        assert clean_description("cafetería ñandú pingüino") == "Cafetería ñandú pingüino"

    def test_allowed_punctuation_kept(self):
        """Test the allowed punctuation and currency signs."""
        raw = "recibo (luz) 12/2024 - 45,00€; ref: a.b $5"
        assert clean_description(raw) == "Recibo (luz) 12/2024 - 45,00€; ref: a.b $5"

    def test_only_first_character_uppercased(self):
        """Test that the rest of the text keeps its case."""
        assert clean_description("mERCADONA Madrid") == "MERCADONA Madrid"


class TestBuildCandidate:
    """Tests for build_candidate."""

    COLUMNS = ColumnMapping(
        date="Fecha",
        amount="Importe",
        description="Concepto",
        category="Categoría",
    )

    def test_expense_row(self):
        """Test that a negative amount becomes an expense magnitude."""
        row = {
            "Fecha": "15/01/2024",
            "Concepto": "compra mercadona",
            "Importe": "-45,30",
            "Categoría": " Comida ",
        }

        candidate = build_candidate(row, self.COLUMNS)

        assert candidate.date == "2024-01-15"
        assert candidate.amount == 45.3
        assert candidate.type == TransactionType.EXPENSE
        assert candidate.description == "Compra mercadona"
        assert candidate.raw_category == "Comida"
        assert candidate.category is None

    def test_income_row(self):
        """Test that a positive amount is income."""
        row = {"Fecha": "2024-01-16", "Concepto": "nómina", "Importe": "1.500,00"}

        candidate = build_candidate(row, self.COLUMNS)

        assert candidate.amount == 1500.0
        assert candidate.type == TransactionType.INCOME
        assert candidate.raw_category is None

    def test_zero_amount_is_income(self):
        """Test that zero counts as income."""
        candidate = build_candidate({"Importe": "0,00"}, self.COLUMNS)
        assert candidate.type == TransactionType.INCOME

    def test_missing_columns_degrade(self):
        """Test that unmapped or absent cells fall back to defaults."""
        candidate = build_candidate({"Otro": "x"}, ColumnMapping())

        assert candidate.date == date.today().isoformat()
        assert candidate.amount == 0.0
        assert candidate.type == TransactionType.INCOME
        assert candidate.description == DESCRIPTION_PLACEHOLDER
        assert candidate.raw_category is None
