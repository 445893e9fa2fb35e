from __future__ import annotations

import pytest

from lighthouse_impact.formatting import (
    format_number,
    format_numeric_diff,
    lighthouse_viewer_url,
    pull_request_url,
    two_decimals,
)


def test_numeric_diff_zero() -> None:
    assert format_numeric_diff(0) == "0"
    assert format_numeric_diff(0.0) == "0"
    assert format_numeric_diff(-0.0) == "0"


def test_numeric_diff_is_signed() -> None:
    assert format_numeric_diff(1.5) == "+1.5"
    assert format_numeric_diff(-1.5) == "-1.5"
    assert format_numeric_diff(2) == "+2"


def test_numeric_diff_after_two_decimal_rounding() -> None:
    assert format_numeric_diff(two_decimals(0.004999)) == "0"


def test_numeric_diff_does_not_round() -> None:
    assert format_numeric_diff(0.123456) == "+0.123456"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.0, "1"), (0.0, "0"), (-0.0, "0"), (0.9, "0.9"), (1800, "1800"), (None, "null")],
)
def test_format_number_matches_comment_display(value, expected) -> None:
    assert format_number(value) == expected


@pytest.mark.parametrize(
    ("score", "expected"),
    [(0.871, 0.87), (0.125, 0.13), (1, 1.0), (0, 0.0), (None, 0.0)],
)
def test_two_decimals(score, expected) -> None:
    assert two_decimals(score) == expected


def test_urls() -> None:
    assert lighthouse_viewer_url("abc") == "https://googlechrome.github.io/lighthouse/viewer/?gist=abc"
    assert pull_request_url("octo", "site", 42) == "https://github.com/octo/site/pull/42"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3.2e-05, "0.000032"), (-3.2e-05, "-0.000032"), (1e-07, "0.0000001"), (0.0001, "0.0001")],
)
def test_format_number_small_values_stay_positional(value, expected) -> None:
    assert format_number(value) == expected


def test_numeric_diff_small_values_are_not_exponential() -> None:
    assert format_numeric_diff(3.2e-05) == "+0.000032"


def test_numeric_diff_hides_subtraction_noise() -> None:
    assert format_numeric_diff(0.9 - 0.8) == "+0.1"
    assert format_numeric_diff(0.873 - 0.871) == "+0.002"


def test_numeric_diff_never_collapses_nonzero_to_zero() -> None:
    assert format_numeric_diff(1e-13) != "0"
    assert format_numeric_diff(-1e-13) != "0"
