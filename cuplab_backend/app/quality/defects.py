# cuplab_backend/app/quality/defects.py
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.quality.catalog_loader import catalog_entries, derived_catalog_cache
from cuplab_backend.app.utils.ids import new_custom_id
from cuplab_backend.app.utils.numbers import fmt_number, round2

# Purpose:
# Physical green-coffee defects (black, sour, broca, ...) counted on a sample.
# Each defect has a weight converting raw counts into full-defect
# equivalents; thresholds cap primary, secondary and total equivalents.

DEFECT_TEMPLATES_FILE = "defect_templates.yaml"

# Weights above this are almost certainly a typo (e.g. 20 instead of 0.2).
MAX_DEFECT_WEIGHT = 10

# defect name -> raw count on the sample
DefectCounts = Mapping[str, float]


# ===================== Models =====================

class DefectCategory(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"

class DefectTemplateCategory(str, Enum):
    ORIGIN = "origin"
    CLIENT = "client"
    CUSTOM = "custom"

class DefectConfig(BaseModel):
    name: str                         # e.g. "Full Black", "Severe Broca"
    weight: float                     # full-defect equivalent per occurrence
    category: DefectCategory
    display_order: int = 0
    description: Optional[str] = None

class DefectThresholds(BaseModel):
    max_primary: Optional[float] = None
    max_secondary: Optional[float] = None
    max_total: Optional[float] = None

class DefectConfiguration(BaseModel):
    defects: List[DefectConfig] = Field(default_factory=list)
    thresholds: DefectThresholds = Field(default_factory=DefectThresholds)
    notes: Optional[str] = None

class DefectTemplate(BaseModel):
    id: str
    name: str
    description: str
    origin: Optional[str] = None
    category: DefectTemplateCategory
    configuration: DefectConfiguration
    is_system: bool = False

class DefectCountResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    primary_total: float = 0
    secondary_total: float = 0
    overall_total: float = 0


# ===================== Arithmetic =====================

def calculate_defect_equivalents(count: float, weight: float) -> float:
    return round2(count * weight)

def _category_total(defects: List[DefectConfig], counts: DefectCounts, category: DefectCategory) -> float:
    total = 0.0
    for d in defects:
        if d.category == category:
            total += calculate_defect_equivalents(counts.get(d.name) or 0, d.weight)
    return round2(total)

def calculate_primary_defects(defects: List[DefectConfig], counts: DefectCounts) -> float:
    return _category_total(defects, counts, DefectCategory.PRIMARY)

def calculate_secondary_defects(defects: List[DefectConfig], counts: DefectCounts) -> float:
    return _category_total(defects, counts, DefectCategory.SECONDARY)

def calculate_total_defects(defects: List[DefectConfig], counts: DefectCounts) -> float:
    return round2(calculate_primary_defects(defects, counts) + calculate_secondary_defects(defects, counts))


# ===================== Validation =====================

def validate_defect_counts(
    defects: List[DefectConfig],
    counts: DefectCounts,
    thresholds: DefectThresholds,
) -> DefectCountResult:
    """
    Compare a sample's counts with the thresholds. Every exceeded threshold
    is reported; the computed totals are returned alongside.
    """
    primary = calculate_primary_defects(defects, counts)
    secondary = calculate_secondary_defects(defects, counts)
    overall = calculate_total_defects(defects, counts)
    errors: List[str] = []

    checks = (
        ("Primary", primary, thresholds.max_primary),
        ("Secondary", secondary, thresholds.max_secondary),
        ("Total", overall, thresholds.max_total),
    )
    for label, total, limit in checks:
        if limit is not None and total > limit:
            errors.append(f"{label} defects ({fmt_number(total)}) exceed maximum allowed ({fmt_number(limit)})")

    return DefectCountResult(
        valid=not errors,
        errors=errors,
        primary_total=primary,
        secondary_total=secondary,
        overall_total=overall,
    )

def validate_defect_configuration(config: DefectConfiguration) -> ValidationOutcome:
    if not config.defects:
        return ValidationOutcome.fail("At least one defect is required")

    names = [d.name.lower() for d in config.defects]
    if len(set(names)) != len(names):
        return ValidationOutcome.fail("Duplicate defect names are not allowed")

    for d in config.defects:
        if d.weight <= 0:
            return ValidationOutcome.fail(f'Defect "{d.name}" must have a weight greater than 0')
        if d.weight > MAX_DEFECT_WEIGHT:
            return ValidationOutcome.fail(f'Defect "{d.name}" weight seems unusually high (>{MAX_DEFECT_WEIGHT})')

    t = config.thresholds
    if t.max_primary is not None and t.max_primary < 0:
        return ValidationOutcome.fail("Max primary defects cannot be negative")
    if t.max_secondary is not None and t.max_secondary < 0:
        return ValidationOutcome.fail("Max secondary defects cannot be negative")
    if t.max_total is not None and t.max_total < 0:
        return ValidationOutcome.fail("Max total defects cannot be negative")

    return ValidationOutcome.ok()


# ===================== Helpers =====================

def get_defects_by_category(defects: List[DefectConfig], category: DefectCategory) -> List[DefectConfig]:
    return sorted((d for d in defects if d.category == category), key=lambda d: d.display_order)

def create_empty_defect_configuration() -> DefectConfiguration:
    return DefectConfiguration()

def clone_defect_template(
    template: DefectTemplate,
    new_name: str,
    new_description: Optional[str] = None,
) -> DefectTemplate:
    return template.model_copy(deep=True, update={
        "id": new_custom_id(),
        "name": new_name,
        "description": new_description or template.description,
        "category": DefectTemplateCategory.CUSTOM,
        "is_system": False,
    })

# What it does:
# Thresholds are written for a reference sample weight (usually 300g);
# rescale them proportionally for another sample weight.
def scale_defect_thresholds(
    thresholds: DefectThresholds,
    from_sample_size: float,
    to_sample_size: float,
) -> DefectThresholds:
    ratio = to_sample_size / from_sample_size

    def _scaled(v: Optional[float]) -> Optional[float]:
        return round2(v * ratio) if v is not None else None

    return DefectThresholds(
        max_primary=_scaled(thresholds.max_primary),
        max_secondary=_scaled(thresholds.max_secondary),
        max_total=_scaled(thresholds.max_total),
    )


# ===================== Catalog =====================

@derived_catalog_cache
@lru_cache(maxsize=1)
def _defect_templates() -> Tuple[DefectTemplate, ...]:
    return tuple(DefectTemplate.model_validate(e) for e in catalog_entries(DEFECT_TEMPLATES_FILE))

def list_defect_templates(origin: Optional[str] = None) -> List[DefectTemplate]:
    out = []
    for t in _defect_templates():
        if origin is not None and (t.origin or "").lower() != origin.lower():
            continue
        out.append(t.model_copy(deep=True))
    return out

def get_defect_template(template_id: str) -> Optional[DefectTemplate]:
    for t in _defect_templates():
        if t.id == template_id:
            return t.model_copy(deep=True)
    return None


__all__ = [
    "DefectCounts", "DefectCategory", "DefectTemplateCategory",
    "DefectConfig", "DefectThresholds", "DefectConfiguration", "DefectTemplate",
    "DefectCountResult",
    "calculate_defect_equivalents", "calculate_primary_defects",
    "calculate_secondary_defects", "calculate_total_defects",
    "validate_defect_counts", "validate_defect_configuration",
    "get_defects_by_category", "create_empty_defect_configuration",
    "clone_defect_template", "scale_defect_thresholds",
    "list_defect_templates", "get_defect_template",
]
