# cuplab_backend/app/quality/micro_regions.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from cuplab_backend.app.models.validation import ValidationOutcome

# Purpose:
# Per-origin micro-region requirements for a quality template: which
# sub-regions are required, optional percentage bounds per region, and
# whether a lot may mix regions. Only the configuration is checked here;
# there is no sample-side evaluator for this model.

POPULAR_COFFEE_ORIGINS = (
    "Brazil",
    "Peru",
    "Colombia",
    "Guatemala",
    "Mexico",
    "El Salvador",
    "Nicaragua",
    "Honduras",
)


# ===================== Models =====================

class MicroRegionPercentageConstraint(BaseModel):
    min: Optional[float] = None       # 0-100
    max: Optional[float] = None       # 0-100

class MicroRegionRequirement(BaseModel):
    origin: str                       # country, e.g. "Brazil"
    required_micro_regions: List[str] = Field(default_factory=list)   # empty = any region
    percentage_per_region: Optional[Dict[str, MicroRegionPercentageConstraint]] = None
    allow_mix: bool = True
    notes: Optional[str] = None

class MicroRegionConfiguration(BaseModel):
    requirements: List[MicroRegionRequirement] = Field(default_factory=list)


# ===================== Factories =====================

def create_empty_micro_region_configuration() -> MicroRegionConfiguration:
    return MicroRegionConfiguration(requirements=[])

def create_origin_requirement(origin: str, allow_mix: bool = True) -> MicroRegionRequirement:
    return MicroRegionRequirement(
        origin=origin,
        required_micro_regions=[],
        percentage_per_region={},
        allow_mix=allow_mix,
        notes="",
    )


# ===================== Validation =====================

def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)

def _check_bound(region: str, label: str, v: Any) -> Optional[str]:
    if v is None:
        return None
    if not _is_number(v) or v < 0 or v > 100:
        return f'{label} percentage for "{region}" must be between 0 and 100'
    return None

def validate_micro_region_configuration(
    config: Union[MicroRegionConfiguration, Mapping[str, Any]],
) -> ValidationOutcome:
    """
    Structural check of a micro-region configuration. Stops at the first
    problem.

    Accepts the parsed model or the raw JSON object from a template's
    parameters column, so type problems in stored blobs (a string where a
    list belongs, a non-boolean allow_mix) are reported rather than raised.
    """
    if isinstance(config, BaseModel):
        data: Mapping[str, Any] = config.model_dump()
    elif isinstance(config, Mapping):
        data = config
    else:
        raise TypeError(f"Expected a micro-region configuration, got {type(config).__name__}")

    requirements = data.get("requirements")
    if not isinstance(requirements, list):
        return ValidationOutcome.fail("Configuration is missing requirements array")

    for req in requirements:
        if not isinstance(req, Mapping):
            return ValidationOutcome.fail("Each requirement must be an object")

        origin = req.get("origin")
        if not isinstance(origin, str) or not origin.strip():
            return ValidationOutcome.fail("Origin is required for each requirement")

        if not isinstance(req.get("required_micro_regions"), list):
            return ValidationOutcome.fail(f'required_micro_regions must be an array for origin "{origin}"')

        percentages = req.get("percentage_per_region")
        if percentages:
            if not isinstance(percentages, Mapping):
                return ValidationOutcome.fail(f'percentage_per_region must be an object for origin "{origin}"')
            for region, c in percentages.items():
                c = c or {}
                if not isinstance(c, Mapping):
                    return ValidationOutcome.fail(f'Percentage constraint for "{region}" must be an object')
                lo, hi = c.get("min"), c.get("max")
                err = _check_bound(region, "Minimum", lo) or _check_bound(region, "Maximum", hi)
                if err:
                    return ValidationOutcome.fail(err)
                if lo is not None and hi is not None and lo > hi:
                    return ValidationOutcome.fail(f'Minimum percentage cannot exceed maximum for "{region}"')

        if not isinstance(req.get("allow_mix"), bool):
            return ValidationOutcome.fail(f'allow_mix must be a boolean for origin "{origin}"')

    return ValidationOutcome.ok()


# ===================== Display / aggregation =====================

def get_micro_region_requirement_display_text(req: MicroRegionRequirement) -> str:
    if not req.required_micro_regions:
        return "Any micro-region"
    regions = ", ".join(req.required_micro_regions)
    mix = " (mix allowed)" if req.allow_mix else " (single region only)"
    return f"{regions}{mix}"

def get_total_percentage_constraints(req: MicroRegionRequirement) -> Dict[str, float]:
    """
    Sum the per-region bounds. A region without a max is skipped, not
    counted as 100, so `max` can read low when some regions are open-ended.
    With no percentage map at all the result is the full 0-100 span.
    """
    if req.percentage_per_region is None:
        return {"min": 0, "max": 100}

    total_min = 0.0
    total_max = 0.0
    for c in req.percentage_per_region.values():
        if c.min is not None:
            total_min += c.min
        if c.max is not None:
            total_max += c.max
    return {"min": total_min, "max": total_max}

# What it does:
# First requirement for an origin (case-insensitive); origins are not
# enforced unique, so later duplicates are ignored here.
def find_origin_requirement(config: MicroRegionConfiguration, origin: str) -> Optional[MicroRegionRequirement]:
    key = origin.strip().lower()
    for req in config.requirements:
        if req.origin.strip().lower() == key:
            return req
    return None


__all__ = [
    "POPULAR_COFFEE_ORIGINS",
    "MicroRegionPercentageConstraint", "MicroRegionRequirement", "MicroRegionConfiguration",
    "create_empty_micro_region_configuration", "create_origin_requirement",
    "validate_micro_region_configuration", "get_micro_region_requirement_display_text",
    "get_total_percentage_constraints", "find_origin_requirement",
]
