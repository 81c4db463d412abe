"""CSV import and export of business records."""

from app.ingest.csv_export import businesses_to_csv
from app.ingest.csv_import import (
    MAX_UPLOAD_BYTES,
    ParsedUpload,
    RowValidationError,
    parse_csv,
    validate_row,
)

__all__ = [
    "MAX_UPLOAD_BYTES",
    "ParsedUpload",
    "RowValidationError",
    "businesses_to_csv",
    "parse_csv",
    "validate_row",
]
