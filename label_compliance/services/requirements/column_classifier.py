"""
Column classification for tabular requirement sources.

Spreadsheet headers vary between authors ("Legal Term", "Item Text",
"Symbol / Icon", "Mandatory?"). Each column role is assigned the first header
that contains one of the role's keywords, case-insensitively. The resulting
``ColumnMapping`` can be inspected and overridden before rows are parsed.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional

from label_compliance.core.constants import COLUMN_KEYWORDS
from label_compliance.models.requirement_models import ColumnMapping

logger = logging.getLogger(__name__)


def collect_headers(rows: Iterable[Any]) -> List[str]:
    """Union of string keys across all rows, in first-seen order."""
    headers: List[str] = []
    seen = set()
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        for key in row.keys():
            if isinstance(key, str) and key not in seen:
                seen.add(key)
                headers.append(key)
    return headers


def find_column(headers: Iterable[str], keywords: Iterable[str]) -> Optional[str]:
    """First header containing any keyword (case-insensitive), or None."""
    keywords = tuple(k.lower() for k in keywords)
    for header in headers:
        header_lower = header.lower()
        if any(keyword in header_lower for keyword in keywords):
            return header
    return None


def classify_columns(headers: Iterable[str]) -> ColumnMapping:
    """
    Best-guess role for each column.

    Args:
        headers: Column headers in spreadsheet order

    Returns:
        ColumnMapping with one header (or None) per role
    """
    headers = list(headers)
    mapping = ColumnMapping(**{
        role: find_column(headers, keywords)
        for role, keywords in COLUMN_KEYWORDS.items()
    })
    logger.info(f"Detected requirement columns: {mapping.to_dict()}")
    return mapping
