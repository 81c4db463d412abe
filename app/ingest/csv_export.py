"""CSV export of surveyed businesses."""

import csv
import io

EXPORT_COLUMNS = [
    ("name", "name"),
    ("phone", "phone"),
    ("hasDiscount", "has_discount"),
    ("discountAmount", "discount_amount"),
    ("discountDetails", "discount_details"),
    ("availabilityInfo", "availability_info"),
    ("eligibilityInfo", "eligibility_info"),
    ("callStatus", "call_status"),
    ("lastCalled", "last_called"),
]


def businesses_to_csv(businesses: list[dict]) -> str:
    """Render business rows as CSV text with a header line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for header, _ in EXPORT_COLUMNS])

    for business in businesses:
        row = []
        for _, key in EXPORT_COLUMNS:
            value = business.get(key)
            if isinstance(value, bool):
                value = "true" if value else "false"
            row.append("" if value is None else value)
        writer.writerow(row)

    return buffer.getvalue()
