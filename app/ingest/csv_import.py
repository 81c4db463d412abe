"""
CSV ingestion of businesses to survey.

Expected columns: name, phone and an optional hasDiscount ("true"/"false").
Invalid rows are reported with their 1-based data row number and do not
stop the rest of the file from being imported.
"""

import csv
import io
from dataclasses import dataclass, field

import structlog

from app.models.business import BusinessCreate
from app.telephony.phone import is_valid_phone, normalize_phone

logger = structlog.get_logger()

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5MB

REQUIRED_COLUMNS = {"name", "phone"}

# DictReader key for cells beyond the header
EXTRA_CELLS = "__extra__"


class RowValidationError(ValueError):
    """A CSV row that cannot be imported."""

    def __init__(self, row_number: int, message: str):
        self.row_number = row_number
        self.message = message
        super().__init__(f"Row {row_number}: {message}")


@dataclass
class ParsedUpload:
    """Validated rows and the row-numbered errors of one CSV file."""

    records: list[BusinessCreate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duplicates: int = 0


def validate_row(row: dict[str, str], row_number: int) -> BusinessCreate:
    """
    Validate one CSV row and build the record to insert.

    Raises:
        RowValidationError: If the row is invalid
    """
    name = (row.get("name") or "").strip()
    phone = (row.get("phone") or "").strip()
    has_discount = (row.get("hasDiscount") or row.get("has_discount") or "").strip().lower()

    if len(name) < 2:
        raise RowValidationError(row_number, "Name must be at least 2 characters long")
    if not is_valid_phone(phone):
        raise RowValidationError(row_number, "Invalid phone number format")
    if has_discount and has_discount not in ("true", "false"):
        raise RowValidationError(row_number, "hasDiscount must be true or false")

    return BusinessCreate(
        name=name,
        phone=normalize_phone(phone),
        has_discount=has_discount == "true",
    )


def parse_csv(content: str) -> ParsedUpload:
    """
    Parse and validate a CSV document.

    Raises:
        ValueError: If the header is missing a required column
    """
    reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")), restkey=EXTRA_CELLS)
    columns = {c.strip() for c in (reader.fieldnames or [])}
    missing = REQUIRED_COLUMNS - columns
    if missing:
        raise ValueError(f"CSV is missing required columns: {', '.join(sorted(missing))}")

    parsed = ParsedUpload()
    seen_phones: set[str] = set()
    row_number = 0

    for raw in reader:
        extra = [c for c in raw.pop(EXTRA_CELLS, None) or [] if c.strip()]
        row = {(k or "").strip(): (v or "") for k, v in raw.items()}
        if not extra and not any(v.strip() for v in row.values()):
            continue

        row_number += 1
        try:
            if extra:
                raise RowValidationError(row_number, "Row has more cells than the header")
            record = validate_row(row, row_number)
        except RowValidationError as e:
            parsed.errors.append(str(e))
            continue

        if record.phone in seen_phones:
            parsed.duplicates += 1
            continue
        seen_phones.add(record.phone)
        parsed.records.append(record)

    logger.info(
        "Parsed CSV upload",
        valid=len(parsed.records),
        invalid=len(parsed.errors),
        duplicates=parsed.duplicates,
    )
    return parsed
