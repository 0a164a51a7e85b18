import csv
import io
from typing import Any, Callable, Dict, List, Sequence, Tuple

from fastapi import Response

# (header, row -> cell value)
Column = Tuple[str, Callable[[Dict[str, Any]], Any]]


def _field(name: str) -> Callable[[Dict[str, Any]], Any]:
    return lambda row: row.get(name)


PRODUCT_COLUMNS: List[Column] = [
    ("ID", _field("id")),
    ("Name", _field("name")),
    ("Description", _field("description")),
    ("Original Price", _field("originalPrice")),
    ("Discounted Price", _field("discountedPrice")),
    ("Category", _field("category")),
    ("Stock", _field("stock")),
    ("Status", _field("status")),
    ("Origin", _field("origin")),
    ("Shape", _field("shape")),
    ("Weight", _field("weight")),
    ("Colour", _field("colour")),
]

ORDER_COLUMNS: List[Column] = [
    ("Order ID", _field("id")),
    ("Customer", _field("customer")),
    ("Email", _field("email")),
    ("Date", _field("date")),
    ("Total", _field("total")),
    ("Status", _field("status")),
]

CONSULTATION_COLUMNS: List[Column] = [
    ("ID", _field("id")),
    ("Name", _field("name")),
    ("Email", _field("email")),
    ("Phone", _field("phone")),
    ("Birth Place", _field("birthPlace")),
    ("Purpose", _field("service")),
    ("Gender", _field("gender")),
    ("Date of Birth", _field("dateOfBirth")),
    ("Time of Birth", _field("timeOfBirth")),
    ("Status", _field("status")),
    ("Submitted At", _field("submittedAt")),
]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def to_csv(rows: Sequence[Dict[str, Any]], columns: Sequence[Column]) -> str:
    """Render rows as CSV text with a header line.

    Quoting follows RFC 4180, so commas, quotes and newlines inside values
    survive a round trip through ``csv.reader``.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow([_cell(getter(row)) for _, getter in columns])
    return buffer.getvalue()


def csv_response(content: str, entity: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={entity}.csv"},
    )
