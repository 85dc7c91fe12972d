"""
Identifier Unit Tests

Certificate IDs are checked for format only; uniqueness is not guaranteed.
"""

import random
import re
from datetime import datetime

from certify.core.identifiers import CERT_ID_PATTERN, generate_certificate_id


class TestGenerateCertificateId:
    """Tests for generate_certificate_id."""

    def test_format(self):
        """Verify the HF-<year>-<4 digits> shape."""
        cert_id = generate_certificate_id()

        assert re.fullmatch(r"HF-\d{4}-\d{4}", cert_id)
        assert CERT_ID_PATTERN.match(cert_id)

    def test_year_comes_from_clock(self):
        cert_id = generate_certificate_id(now=datetime(2031, 5, 1))

        assert cert_id.startswith("HF-2031-")

    def test_number_range(self):
        """Verify the random part stays within 1000..9999 over many draws."""
        rng = random.Random(7)

        for _ in range(500):
            number = int(generate_certificate_id(rng=rng).rsplit("-", 1)[1])
            assert 1000 <= number <= 9999

    def test_custom_prefix(self):
        assert generate_certificate_id(prefix="XY").startswith("XY-")

    def test_repeated_calls_stay_well_formed(self):
        """Repeated calls may collide, so only the format is asserted."""
        ids = [generate_certificate_id() for _ in range(50)]

        assert all(CERT_ID_PATTERN.match(i) for i in ids)
