# tests/test_screen_sizes.py
# Purpose:
# Screen-size distribution checks (violations accumulate) and the
# operator-side sanity check of a requirement set.
import pytest

from cuplab_backend.app.quality.screen_sizes import (
    STANDARD_SCREEN_SIZES, ConstraintType, ScreenSizeConstraint, ScreenSizeRequirements,
    get_constrained_screen_sizes, get_constraint_display_text,
    validate_screen_size_distribution, validate_screen_size_requirements,
)

def _reqs(*constraints):
    return ScreenSizeRequirements(constraints=list(constraints))

PAN_MIN_5 = ScreenSizeConstraint(screen_size="Pan", constraint_type=ConstraintType.MINIMUM, min_value=5)
S16_RANGE = ScreenSizeConstraint(screen_size="Screen 16", constraint_type=ConstraintType.RANGE, min_value=10, max_value=20)

def test_minimum_violation_reports_actual():
    res = validate_screen_size_distribution({"Pan": 3}, _reqs(PAN_MIN_5))
    assert not res.is_valid
    assert len(res.violations) == 1
    v = res.violations[0]
    assert v.screen_size == "Pan"
    assert v.actual == 3
    assert v.expected == "≥5%"
    assert v.message == "Pan must be at least 5%, but is 3%"

def test_missing_size_counts_as_zero():
    res = validate_screen_size_distribution({}, _reqs(PAN_MIN_5))
    assert [v.actual for v in res.violations] == [0]

def test_null_percentage_counts_as_zero():
    res = validate_screen_size_distribution({"Pan": None}, _reqs(PAN_MIN_5))
    assert res.violations[0].actual == 0

@pytest.mark.parametrize("value", [10, 15, 20])
def test_range_bounds_are_inclusive(value):
    assert validate_screen_size_distribution({"Screen 16": value}, _reqs(S16_RANGE)).is_valid

@pytest.mark.parametrize("value", [9.99, 20.01])
def test_range_outside_bounds_violates(value):
    res = validate_screen_size_distribution({"Screen 16": value}, _reqs(S16_RANGE))
    assert not res.is_valid
    assert res.violations[0].expected == "10%-20%"
    assert res.violations[0].message == f"Screen 16 must be between 10% and 20%, but is {value}%"

def test_maximum_violation_message():
    c = ScreenSizeConstraint(screen_size="Peas 9", constraint_type=ConstraintType.MAXIMUM, max_value=2.5)
    res = validate_screen_size_distribution({"Peas 9": 4}, _reqs(c))
    assert res.violations[0].message == "Peas 9 must be at most 2.5%, but is 4%"

@pytest.mark.parametrize("value", [0, 50, 100, 250])
def test_any_never_violates(value):
    c = ScreenSizeConstraint(screen_size="Screen 18", constraint_type=ConstraintType.ANY)
    assert validate_screen_size_distribution({"Screen 18": value}, _reqs(c)).is_valid

def test_constraint_without_bound_is_skipped():
    # a half-configured range is not evaluated; the requirement check flags it instead
    half = ScreenSizeConstraint(screen_size="Screen 15", constraint_type=ConstraintType.RANGE, min_value=10)
    no_min = ScreenSizeConstraint(screen_size="Screen 14", constraint_type=ConstraintType.MINIMUM)
    assert validate_screen_size_distribution({"Screen 15": 99}, _reqs(half, no_min)).is_valid

def test_brazil_natural_grading(brazil_natural_requirements):
    res = validate_screen_size_distribution({"Screen 17": 55, "Screen 16": 25}, brazil_natural_requirements)
    assert res.is_valid is False
    assert [(v.screen_size, v.expected, v.actual) for v in res.violations] == [
        ("Screen 17", "≥60%", 55),
        ("Screen 16", "≤20%", 25),
    ]

def test_brazil_natural_passing_sample(brazil_natural_requirements):
    res = validate_screen_size_distribution({"Screen 17": 60, "Screen 16": 20, "Pan": 1}, brazil_natural_requirements)
    assert res.is_valid
    assert res.violations == []

def test_display_text():
    assert get_constraint_display_text(PAN_MIN_5) == "≥5%"
    assert get_constraint_display_text(S16_RANGE) == "10%-20%"
    any_c = ScreenSizeConstraint(screen_size="Pan", constraint_type=ConstraintType.ANY)
    assert get_constraint_display_text(any_c) == "Any amount"
    no_max = ScreenSizeConstraint(screen_size="Pan", constraint_type=ConstraintType.MAXIMUM)
    assert get_constraint_display_text(no_max) == "≤?%"

def test_constrained_sizes_keep_order(brazil_natural_requirements):
    assert get_constrained_screen_sizes(brazil_natural_requirements) == ["Screen 17", "Screen 16"]
    assert get_constrained_screen_sizes(_reqs()) == []

def test_standard_sizes_listed():
    assert STANDARD_SCREEN_SIZES[0] == "Pan"
    assert "Screen 17" in STANDARD_SCREEN_SIZES
    assert len(STANDARD_SCREEN_SIZES) == 13

def test_requirement_sanity_ok(brazil_natural_requirements):
    assert validate_screen_size_requirements(brazil_natural_requirements).valid
    assert validate_screen_size_requirements(_reqs()).valid

@pytest.mark.parametrize("constraints, error", [
    ([PAN_MIN_5, PAN_MIN_5], 'Duplicate constraint for screen size "Pan"'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="minimum")],
     'Minimum constraint for "Pan" needs a minimum value'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="maximum")],
     'Maximum constraint for "Pan" needs a maximum value'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="range", max_value=5)],
     'Range constraint for "Pan" needs both minimum and maximum values'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="maximum", max_value=120)],
     'Maximum percentage for "Pan" must be between 0 and 100'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="minimum", min_value=-1)],
     'Minimum percentage for "Pan" must be between 0 and 100'),
    ([ScreenSizeConstraint(screen_size="Pan", constraint_type="range", min_value=30, max_value=10)],
     'Minimum percentage cannot exceed maximum for "Pan"'),
])
def test_requirement_sanity_failures(constraints, error):
    r = validate_screen_size_requirements(_reqs(*constraints))
    assert not r.valid
    assert r.error == error
