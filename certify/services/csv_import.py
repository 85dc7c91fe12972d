"""
CSV Import

Parses the admin portal's candidate spreadsheet into CandidateIn records.
"""

import csv
import io
import re
from typing import Dict, List

from certify.core.exceptions import ValidationError
from certify.schemas.certificate import CandidateIn


# Normalized header -> CandidateIn attribute
COLUMN_MAP: Dict[str, str] = {
    "name": "name",
    "candidatename": "name",
    "hours": "hours",
    "position": "position",
    "startdate": "start_date",
    "enddate": "end_date",
    "email": "email",
}


def _normalize(header: str) -> str:
    return re.sub(r"[^a-z0-9]", "", header.lower())


def parse_candidates_csv(content: bytes) -> List[CandidateIn]:
    """
    Parse a CSV file with a header row.

    Header matching ignores case, spaces and underscores, so ``startDate``,
    ``start_date`` and ``Start Date`` are equivalent. Unknown columns are
    ignored and fully blank rows skipped.

    Raises:
        ValidationError: If the file is not UTF-8 or has no usable header.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError("CSV file must be UTF-8 encoded") from e

    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise ValidationError("CSV file is empty")

    columns = {h: COLUMN_MAP[_normalize(h)] for h in reader.fieldnames if h and _normalize(h) in COLUMN_MAP}
    if not columns:
        raise ValidationError("CSV header has no recognised columns")

    candidates = []
    for row in reader:
        values = {attr: (row.get(header) or "").strip() for header, attr in columns.items()}
        if not any(values.values()):
            continue
        candidates.append(CandidateIn(**values))
    return candidates
