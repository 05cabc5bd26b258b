# cuplab_backend/app/quality/attribute_scales.py
from __future__ import annotations

import math
from enum import Enum
from functools import lru_cache
from typing import Annotated, Iterable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from cuplab_backend.app.config import manifest
from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.quality.catalog_loader import catalog_entries, derived_catalog_cache
from cuplab_backend.app.utils.ids import new_custom_id
from cuplab_backend.app.utils.numbers import round2

# Purpose:
# How a sensory attribute (cupping score, taint/fault intensity) is measured.
# Either a stepped numeric range or an ordered list of labelled options,
# each label mapped to a numeric severity for aggregate comparisons.

SCALE_TEMPLATES_FILE = "scale_templates.yaml"

# Scores within this distance of a valid step count as on-scale.
SCORE_TOLERANCE = 0.01


# ===================== Models =====================

class NumericScale(BaseModel):
    type: Literal["numeric"] = "numeric"
    min: float
    max: float
    increment: float                  # step size, e.g. 0.25, 0.5, 1.0

class WordingScaleOption(BaseModel):
    label: str                        # e.g. "Outstanding", "Good", "Poor"
    value: float                      # numeric severity behind the label
    display_order: int

class WordingScale(BaseModel):
    type: Literal["wording"] = "wording"
    options: List[WordingScaleOption] = Field(default_factory=list)

AttributeScale = Annotated[Union[NumericScale, WordingScale], Field(discriminator="type")]


class ScaleTemplateCategory(str, Enum):
    STANDARD = "standard"
    REGIONAL = "regional"
    CUSTOM = "custom"

class ScaleTemplate(BaseModel):
    id: str
    name: str
    description: str
    scale: AttributeScale
    category: ScaleTemplateCategory
    is_system: bool = False


# ===================== Factories =====================

def create_numeric_scale(min: float, max: float, increment: float) -> NumericScale:
    return NumericScale(min=min, max=max, increment=increment)

# What it does:
# Build a wording scale; display_order follows list position.
def create_wording_scale(options: Iterable[Tuple[str, float]]) -> WordingScale:
    return WordingScale(options=[
        WordingScaleOption(label=label, value=value, display_order=i)
        for i, (label, value) in enumerate(options)
    ])


# ===================== Validation =====================

def _has_duplicates(values: List) -> bool:
    return len(set(values)) != len(values)

def validate_scale(scale: NumericScale | WordingScale, strict_steps: Optional[bool] = None) -> ValidationOutcome:
    """
    Check a scale definition. Advisory only: problems come back as a
    ValidationOutcome, nothing is raised for a badly configured scale.

    strict_steps (default: STRICT_SCALE_STEPS env flag) additionally requires
    the numeric range to be a whole number of increments.
    """
    if isinstance(scale, NumericScale):
        if scale.min >= scale.max:
            return ValidationOutcome.fail("Minimum must be less than maximum")
        if scale.increment <= 0:
            return ValidationOutcome.fail("Increment must be greater than 0")
        if scale.increment >= (scale.max - scale.min):
            return ValidationOutcome.fail("Increment must be less than the scale range")
        if strict_steps is None:
            strict_steps = manifest.STRICT_SCALE_STEPS
        if strict_steps:
            steps = (scale.max - scale.min) / scale.increment
            if abs(steps - round(steps)) > 1e-9:
                return ValidationOutcome.fail("Scale range must be a whole number of increments")
        return ValidationOutcome.ok()

    if isinstance(scale, WordingScale):
        if not scale.options:
            return ValidationOutcome.fail("At least one option is required")
        if _has_duplicates([o.label.lower() for o in scale.options]):
            return ValidationOutcome.fail("Duplicate labels are not allowed")
        if _has_duplicates([o.value for o in scale.options]):
            return ValidationOutcome.fail("Duplicate values are not allowed")
        if _has_duplicates([o.display_order for o in scale.options]):
            return ValidationOutcome.fail("Duplicate display orders are not allowed")
        return ValidationOutcome.ok()

    raise TypeError(f"Unsupported scale type: {type(scale).__name__}")


# ===================== Helpers =====================

def get_scale_min_value(scale: NumericScale | WordingScale) -> float:
    if isinstance(scale, NumericScale):
        return scale.min
    return min(o.value for o in scale.options)

def get_scale_max_value(scale: NumericScale | WordingScale) -> float:
    if isinstance(scale, NumericScale):
        return scale.max
    return max(o.value for o in scale.options)

def get_scale_valid_values(scale: NumericScale | WordingScale) -> List[float]:
    """
    Every score a grader may pick. Numeric: min, min+inc, ... up to max
    (rounded to 2 dp). Wording: option values, highest first.
    """
    if isinstance(scale, NumericScale):
        if scale.increment <= 0 or scale.max < scale.min:
            return []
        n = math.floor((scale.max - scale.min) / scale.increment + 1e-9)
        return [round2(scale.min + i * scale.increment) for i in range(n + 1)]
    return sorted((o.value for o in scale.options), reverse=True)

# What it does:
# Numeric scales are checked arithmetically (nearest step, then distance);
# only wording scales walk their options.
def is_valid_score(score: float, scale: NumericScale | WordingScale) -> bool:
    if isinstance(scale, NumericScale):
        if scale.increment <= 0 or scale.max < scale.min:
            return False
        if score < scale.min - SCORE_TOLERANCE or score > scale.max + SCORE_TOLERANCE:
            return False
        last = math.floor((scale.max - scale.min) / scale.increment + 1e-9)
        k = min(max(round((score - scale.min) / scale.increment), 0), last)
        return abs(round2(scale.min + k * scale.increment) - score) < SCORE_TOLERANCE
    return any(abs(v - score) < SCORE_TOLERANCE for v in get_scale_valid_values(scale))

# What it does:
# Label to show for a score; numeric scales echo the number, wording scales
# return the matching option label or None.
def get_score_label(score: float, scale: NumericScale | WordingScale) -> Optional[str]:
    if isinstance(scale, NumericScale):
        return str(score)
    for o in scale.options:
        if abs(o.value - score) < SCORE_TOLERANCE:
            return o.label
    return None

def get_label_value(label: str, scale: WordingScale) -> Optional[float]:
    for o in scale.options:
        if o.label == label:
            return o.value
    return None


# ===================== Scale template catalog =====================

@derived_catalog_cache
@lru_cache(maxsize=1)
def _scale_templates() -> Tuple[ScaleTemplate, ...]:
    return tuple(ScaleTemplate.model_validate(e) for e in catalog_entries(SCALE_TEMPLATES_FILE))

def list_scale_templates() -> List[ScaleTemplate]:
    return [t.model_copy(deep=True) for t in _scale_templates()]

def get_scale_template(template_id: str) -> Optional[ScaleTemplate]:
    for t in _scale_templates():
        if t.id == template_id:
            return t.model_copy(deep=True)
    return None

def clone_scale_template(
    template: ScaleTemplate,
    new_name: str,
    new_description: Optional[str] = None,
) -> ScaleTemplate:
    return template.model_copy(deep=True, update={
        "id": new_custom_id(),
        "name": new_name,
        "description": new_description or template.description,
        "category": ScaleTemplateCategory.CUSTOM,
        "is_system": False,
    })


__all__ = [
    "NumericScale", "WordingScaleOption", "WordingScale", "AttributeScale",
    "ScaleTemplateCategory", "ScaleTemplate",
    "create_numeric_scale", "create_wording_scale", "validate_scale",
    "get_scale_min_value", "get_scale_max_value", "get_scale_valid_values",
    "is_valid_score", "get_score_label", "get_label_value",
    "list_scale_templates", "get_scale_template", "clone_scale_template",
]
