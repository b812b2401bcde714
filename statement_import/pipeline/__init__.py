"""Import pipeline stages: sniff, parse, normalize, categorize."""

from statement_import.pipeline.categorizer import (
    categorize_candidates,
    detect_category_from_description,
    detect_subcategory,
    map_category,
)
from statement_import.pipeline.normalizers import (
    build_candidate,
    clean_description,
    normalize_amount,
    parse_date,
)
from statement_import.pipeline.reader import (
    CSVImportError,
    InvalidDelimiterError,
    auto_map_columns,
    map_csv_columns,
    parse_csv,
    read_csv,
)
from statement_import.pipeline.sniffer import (
    detect_csv_format,
    detect_date_format,
    detect_delimiter,
)

__all__ = [
    # Sniffer
    "detect_csv_format",
    "detect_date_format",
    "detect_delimiter",
    # Reader
    "CSVImportError",
    "InvalidDelimiterError",
    "auto_map_columns",
    "map_csv_columns",
    "parse_csv",
    "read_csv",
    # Normalizers
    "build_candidate",
    "clean_description",
    "normalize_amount",
    "parse_date",
    # Categorizer
    "categorize_candidates",
    "detect_category_from_description",
    "detect_subcategory",
    "map_category",
]
