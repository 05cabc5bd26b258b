# cuplab_backend/app/quality/screen_sizes.py
"""
Screen-size distribution rules for quality templates.

A template lists one constraint per screen size (minimum / maximum / range /
any, in percent). At grading time the measured distribution is checked
against every constraint and *all* violations are returned together, so the
grading form can show the full list at once.

Two deliberate quirks are kept:
  - a screen size missing from the distribution counts as 0%
  - a constraint missing the bound(s) it needs never raises a violation;
    `validate_screen_size_requirements` is the place that flags those
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.utils.numbers import fmt_number

log = logging.getLogger("cuplab.screen_sizes")

STANDARD_SCREEN_SIZES = (
    "Pan",
    "Peas 9",
    "Peas 10",
    "Peas 11",
    "Screen 12",
    "Screen 13",
    "Screen 14",
    "Screen 15",
    "Screen 16",
    "Screen 17",
    "Screen 18",
    "Screen 19",
    "Screen 20",
)

# screen size name -> measured percentage
ScreenSizeDistribution = Dict[str, Union[int, float]]


# ===================== Models =====================

class ConstraintType(str, Enum):
    MINIMUM = "minimum"               # at least X%
    MAXIMUM = "maximum"               # at most X%
    RANGE = "range"                   # between X% and Y%, inclusive
    ANY = "any"                       # tracked, never checked

class ScreenSizeConstraint(BaseModel):
    screen_size: str                  # e.g. "Pan", "Screen 16"
    constraint_type: ConstraintType
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    display_order: Optional[int] = None

class ScreenSizeRequirements(BaseModel):
    constraints: List[ScreenSizeConstraint] = Field(default_factory=list)
    notes: Optional[str] = None

class ConstraintViolation(BaseModel):
    screen_size: str
    constraint_type: ConstraintType
    expected: str                     # human readable, e.g. "≥5%"
    actual: float
    message: str

class ConstraintValidationResult(BaseModel):
    is_valid: bool
    violations: List[ConstraintViolation] = Field(default_factory=list)


# ===================== Evaluation =====================

def _violation(c: ScreenSizeConstraint, actual: float, message: str) -> ConstraintViolation:
    return ConstraintViolation(
        screen_size=c.screen_size,
        constraint_type=c.constraint_type,
        expected=get_constraint_display_text(c),
        actual=actual,
        message=message,
    )

def _check_constraint(c: ScreenSizeConstraint, actual: float) -> Optional[ConstraintViolation]:
    size, pct = c.screen_size, fmt_number(actual)

    if c.constraint_type == ConstraintType.MINIMUM:
        if c.min_value is not None and actual < c.min_value:
            return _violation(c, actual, f"{size} must be at least {fmt_number(c.min_value)}%, but is {pct}%")
        return None

    if c.constraint_type == ConstraintType.MAXIMUM:
        if c.max_value is not None and actual > c.max_value:
            return _violation(c, actual, f"{size} must be at most {fmt_number(c.max_value)}%, but is {pct}%")
        return None

    if c.constraint_type == ConstraintType.RANGE:
        if c.min_value is None or c.max_value is None:
            return None
        if actual < c.min_value or actual > c.max_value:
            return _violation(
                c, actual,
                f"{size} must be between {fmt_number(c.min_value)}% and {fmt_number(c.max_value)}%, but is {pct}%",
            )
        return None

    # ANY: descriptive only
    return None

def validate_screen_size_distribution(
    distribution: ScreenSizeDistribution,
    requirements: ScreenSizeRequirements,
) -> ConstraintValidationResult:
    """
    Check a measured distribution against every constraint, in stored order.
    Violations accumulate; one failing screen size never hides another.
    """
    violations: List[ConstraintViolation] = []
    for c in requirements.constraints:
        actual = distribution.get(c.screen_size) or 0
        v = _check_constraint(c, actual)
        if v is not None:
            violations.append(v)

    if violations:
        log.debug("screen size distribution failed %d constraint(s)", len(violations))
    return ConstraintValidationResult(is_valid=not violations, violations=violations)


# ===================== Display helpers =====================

def get_constraint_display_text(constraint: ScreenSizeConstraint) -> str:
    t = constraint.constraint_type
    if t == ConstraintType.MINIMUM:
        return f"≥{_bound(constraint.min_value)}%"
    if t == ConstraintType.MAXIMUM:
        return f"≤{_bound(constraint.max_value)}%"
    if t == ConstraintType.RANGE:
        return f"{_bound(constraint.min_value)}%-{_bound(constraint.max_value)}%"
    if t == ConstraintType.ANY:
        return "Any amount"
    return ""

def _bound(value: Optional[float]) -> str:
    return "?" if value is None else fmt_number(value)

# What it does:
# Screen sizes the grading form should show, in constraint order.
def get_constrained_screen_sizes(requirements: ScreenSizeRequirements) -> List[str]:
    return [c.screen_size for c in requirements.constraints]


# ===================== Configuration sanity =====================

def _in_pct_range(v: float) -> bool:
    return 0 <= v <= 100

def validate_screen_size_requirements(requirements: ScreenSizeRequirements) -> ValidationOutcome:
    """
    Structural check of a requirement set as authored by an operator.
    Stops at the first problem. Percentages are not summed across sizes.
    """
    seen = set()
    for c in requirements.constraints:
        size = c.screen_size
        if size in seen:
            return ValidationOutcome.fail(f'Duplicate constraint for screen size "{size}"')
        seen.add(size)

        t = c.constraint_type
        if t == ConstraintType.MINIMUM and c.min_value is None:
            return ValidationOutcome.fail(f'Minimum constraint for "{size}" needs a minimum value')
        if t == ConstraintType.MAXIMUM and c.max_value is None:
            return ValidationOutcome.fail(f'Maximum constraint for "{size}" needs a maximum value')
        if t == ConstraintType.RANGE and (c.min_value is None or c.max_value is None):
            return ValidationOutcome.fail(f'Range constraint for "{size}" needs both minimum and maximum values')

        for label, v in (("Minimum", c.min_value), ("Maximum", c.max_value)):
            if v is not None and not _in_pct_range(v):
                return ValidationOutcome.fail(f'{label} percentage for "{size}" must be between 0 and 100')

        if t == ConstraintType.RANGE and c.min_value > c.max_value:
            return ValidationOutcome.fail(f'Minimum percentage cannot exceed maximum for "{size}"')

    return ValidationOutcome.ok()


__all__ = [
    "STANDARD_SCREEN_SIZES", "ScreenSizeDistribution",
    "ConstraintType", "ScreenSizeConstraint", "ScreenSizeRequirements",
    "ConstraintViolation", "ConstraintValidationResult",
    "validate_screen_size_distribution", "get_constraint_display_text",
    "get_constrained_screen_sizes", "validate_screen_size_requirements",
]
