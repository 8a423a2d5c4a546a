"""
Tests for TrackingCodeGenerator.
"""

import random
import re

import pytest

from app.modules.bookings.tracking import TrackingCodeGenerator, to_base36

CODE_PATTERN = re.compile(r"^RC[0-9A-Z]+$")


class TestBase36:

    def test_known_values(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"
        assert to_base36(36 ** 4) == "10000"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            to_base36(-1)


class TestTrackingCodeGenerator:

    def test_format(self):
        code = TrackingCodeGenerator().generate()
        assert CODE_PATTERN.match(code)
        assert len(code) <= 32

    def test_time_component_prefix(self):
        generator = TrackingCodeGenerator(clock=lambda: 1_700_000_000.123)
        code = generator.generate()
        assert code.startswith("RC" + to_base36(1_700_000_000_123))
        assert len(code) == 2 + len(to_base36(1_700_000_000_123)) + 6

    def test_codes_sort_roughly_by_time(self):
        earlier = TrackingCodeGenerator(clock=lambda: 1_700_000_000.0).generate()
        later = TrackingCodeGenerator(clock=lambda: 1_800_000_000.0).generate()
        assert earlier[:-6] < later[:-6]

    def test_seeded_rng_is_deterministic(self):
        first = TrackingCodeGenerator(rng=random.Random(7), clock=lambda: 1.0).generate()
        second = TrackingCodeGenerator(rng=random.Random(7), clock=lambda: 1.0).generate()
        assert first == second

    def test_same_millisecond_codes_differ(self):
        generator = TrackingCodeGenerator(clock=lambda: 1_700_000_000.0)
        codes = {generator.generate() for _ in range(10_000)}
        assert len(codes) == 10_000
