"""
Age bucketing used by the SDRM intake form.

Tests validate:
- every integer age lands in exactly one bucket
- buckets never go backwards as age grows
- inclusive upper bounds at each cut-off
- non-numeric input gives an empty bucket
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from outreach.services.intake import AGE_RANGE_OPTIONS, calculate_age_range


@given(st.integers(min_value=-10, max_value=150))
def test_bucketing_is_total(age: int):
    assert calculate_age_range(age) in AGE_RANGE_OPTIONS


@given(st.integers(min_value=-10, max_value=149))
def test_bucketing_is_monotonic(age: int):
    here = AGE_RANGE_OPTIONS.index(calculate_age_range(age))
    nxt = AGE_RANGE_OPTIONS.index(calculate_age_range(age + 1))
    assert nxt in (here, here + 1)


@given(st.integers(min_value=0, max_value=120))
def test_string_and_int_agree(age: int):
    assert calculate_age_range(str(age)) == calculate_age_range(age)


@pytest.mark.parametrize(
    "age,expected",
    [
        (0, "Under 18"),
        (17, "Under 18"),
        (18, "18-24"),
        (24, "18-24"),
        (25, "25-34"),
        (34, "25-34"),
        (35, "35-44"),
        (44, "35-44"),
        (45, "45-54"),
        (54, "45-54"),
        (55, "55-64"),
        (64, "55-64"),
        (65, "65+"),
        (99, "65+"),
    ],
)
def test_cutoffs_are_inclusive(age, expected):
    assert calculate_age_range(age) == expected


@pytest.mark.parametrize("age", ["", "unknown", "  ", None, "about forty", float("nan")])
def test_non_numeric_age_gives_empty_bucket(age):
    assert calculate_age_range(age) == ""


def test_leading_number_is_read():
    assert calculate_age_range("30 years") == "25-34"
    assert calculate_age_range(" 17") == "Under 18"
    assert calculate_age_range("24.9") == "18-24"
