import pytest

from walletsync.core.sync import format_amount, seconds_to_string


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (-1, "Unknown"),
        (-90061, "Unknown"),
        (0, "Unknown"),
        (59, "Unknown"),
        (60, "1 minute "),
        (120, "2 minutes "),
        (3600, "1 hour "),
        (7260, "2 hours 1 minute "),
        (86400, "1 day "),
        (90061, "1 day 1 hour 1 minute "),
        (172800, "2 days "),
        (180000, "2 days 2 hours "),
    ],
)
def test_seconds_to_string(seconds, expected):
    assert seconds_to_string(seconds) == expected


def test_leftover_seconds_are_not_rendered():
    assert seconds_to_string(3661) == seconds_to_string(3600 + 60)
    assert "second" not in seconds_to_string(90061)


def test_skips_zero_components_between_non_zero_ones():
    assert seconds_to_string(86400 + 60) == "1 day 1 minute "


@pytest.mark.parametrize(
    "amount,decimals,expected",
    [
        (0, 8, "0"),
        (100000000, 8, "1"),
        (150000000, 8, "1.5"),
        (1, 8, "0.00000001"),
        (42, 0, "42"),
    ],
)
def test_format_amount(amount, decimals, expected):
    assert format_amount(amount, decimals) == expected
