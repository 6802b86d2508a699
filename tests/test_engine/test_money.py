"""
Currency Helper Tests.
"""

import pytest

from pitchcover.engine.money import format_inr, round_half_up


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected",
        [(0.49, 0), (0.5, 1), (2.5, 3), (301.5, 302), (98.6, 99), (99.0, 99)],
    )
    def test_halves_round_up(self, value, expected):
        assert round_half_up(value) == expected


class TestFormatInr:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "₹0.00"),
            (199, "₹199.00"),
            (5000, "₹5,000.00"),
            (125000, "₹1,25,000.00"),
            (1234567.5, "₹12,34,567.50"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        assert format_inr(amount) == expected

    def test_negative(self):
        assert format_inr(-2500) == "-₹2,500.00"
