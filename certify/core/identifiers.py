"""
Certificate Identifiers

Human-readable certificate IDs of the form ``HF-<year>-<4 digits>``.
"""

import random
import re
from datetime import datetime
from typing import Optional


CERT_ID_PATTERN = re.compile(r"^[A-Z]+-\d{4}-\d{4}$")


def generate_certificate_id(
    prefix: str = "HF",
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a certificate ID.

    No uniqueness check is made here; collisions surface as a
    DuplicateCertificateError when the record is persisted.

    Args:
        prefix: Leading organisation code.
        now: Clock override for the year component.
        rng: Random source override.

    Returns:
        str: e.g. ``HF-2024-4821``.
    """
    year = (now or datetime.now()).year
    number = (rng or random).randint(1000, 9999)
    return f"{prefix}-{year}-{number}"
