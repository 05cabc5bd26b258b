# cuplab_backend/app/quality/taint_faults.py
"""
Taint and fault configuration for quality templates.

A configuration names the sensory defects a lab records (taints are mild
off-flavours, faults severe ones), gives each its own intensity scale, and
sets aggregate acceptance rules: count limits, intensity ceilings and a
zero-tolerance switch.

Two kinds of check live here:
  - validate_taint_fault_configuration: is the configuration itself sound?
    Stops at the first problem (operator fixes one thing, re-saves).
  - validate_sample_against_rules: does a graded sample pass the rules?
    Collects every violation so the grading form can list them all.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.quality.attribute_scales import (
    AttributeScale,
    create_numeric_scale,
    is_valid_score,
    validate_scale,
)
from cuplab_backend.app.quality.catalog_loader import catalog_entries, derived_catalog_cache
from cuplab_backend.app.utils.ids import new_definition_id
from cuplab_backend.app.utils.numbers import fmt_number

log = logging.getLogger("cuplab.taint_faults")

TAINT_FAULT_TEMPLATES_FILE = "taint_fault_templates.yaml"


# ===================== Models =====================

class TaintFaultCategory(str, Enum):
    TAINT = "taint"
    FAULT = "fault"

class TaintFaultDefinition(BaseModel):
    id: str                           # unique within one configuration
    name: str                         # e.g. "Fermented", "Earthy", "Rancid"
    category: TaintFaultCategory
    scale: AttributeScale
    description: Optional[str] = None
    display_order: int = 0

class TaintFaultValidationRules(BaseModel):
    max_taints: Optional[int] = None
    max_faults: Optional[int] = None
    max_combined: Optional[int] = None
    max_taint_intensity: Optional[float] = None
    max_fault_intensity: Optional[float] = None
    zero_tolerance: Optional[bool] = None
    validation_message: Optional[str] = None

class TaintFaultConfiguration(BaseModel):
    taints: List[TaintFaultDefinition] = Field(default_factory=list)
    faults: List[TaintFaultDefinition] = Field(default_factory=list)
    rules: TaintFaultValidationRules = Field(default_factory=TaintFaultValidationRules)
    notes: Optional[str] = None

class TaintFaultTemplate(BaseModel):
    id: str
    name: str
    description: str
    configuration: TaintFaultConfiguration

class TaintFaultStats(BaseModel):
    total_definitions: int
    taint_count: int
    fault_count: int
    has_validation_rules: bool
    zero_tolerance: bool


# ---- measured (grading-time) side ----

class MeasuredDefect(BaseModel):
    name: str                         # matched case-insensitively to a definition
    intensity: float                  # <= 0 means "not detected"

class DefectRule(str, Enum):
    UNKNOWN_DEFINITION = "unknown_definition"
    INVALID_INTENSITY = "invalid_intensity"
    ZERO_TOLERANCE = "zero_tolerance"
    MAX_TAINTS = "max_taints"
    MAX_FAULTS = "max_faults"
    MAX_COMBINED = "max_combined"
    MAX_TAINT_INTENSITY = "max_taint_intensity"
    MAX_FAULT_INTENSITY = "max_fault_intensity"

class DefectRuleViolation(BaseModel):
    rule: DefectRule
    subject: Optional[str] = None     # defect name, None for aggregate rules
    expected: str
    actual: float
    message: str

class DefectEvaluationResult(BaseModel):
    is_valid: bool
    violations: List[DefectRuleViolation] = Field(default_factory=list)
    message: Optional[str] = None     # rules.validation_message when invalid


# ===================== Factories =====================

def _default_scale():
    return create_numeric_scale(1, 5, 0.5)

def create_empty_taint_fault_configuration() -> TaintFaultConfiguration:
    return TaintFaultConfiguration(notes="")

def create_taint_definition(name: str, display_order: int = 0, scale=None) -> TaintFaultDefinition:
    return TaintFaultDefinition(
        id=new_definition_id(TaintFaultCategory.TAINT.value),
        name=name,
        category=TaintFaultCategory.TAINT,
        scale=scale or _default_scale(),
        display_order=display_order,
    )

def create_fault_definition(name: str, display_order: int = 0, scale=None) -> TaintFaultDefinition:
    return TaintFaultDefinition(
        id=new_definition_id(TaintFaultCategory.FAULT.value),
        name=name,
        category=TaintFaultCategory.FAULT,
        scale=scale or _default_scale(),
        display_order=display_order,
    )

# What it does:
# Duplicate-and-edit: deep copy with a fresh id and " (copy)" on the name.
def clone_taint_fault_definition(definition: TaintFaultDefinition) -> TaintFaultDefinition:
    return definition.model_copy(deep=True, update={
        "id": new_definition_id(definition.category.value),
        "name": f"{definition.name} (copy)",
    })


# ===================== Configuration validation =====================

# Names compare trimmed and case-insensitive, in the config check and the evaluator alike.
def _name_key(name: str) -> str:
    return name.strip().lower()

def _first_duplicate(names: List[str]) -> Optional[str]:
    seen = set()
    for n in names:
        key = _name_key(n)
        if key in seen:
            return n
        seen.add(key)
    return None

def validate_taint_fault_configuration(config: TaintFaultConfiguration) -> ValidationOutcome:
    """
    Structural check, first problem wins:
      1. names unique (case-insensitive) across taints and faults together
      2. every definition's scale is valid
      3. count limits >= 0, intensity ceilings > 0
      4. zero tolerance is not combined with any count limit
    """
    dup = _first_duplicate([d.name for d in config.taints] + [d.name for d in config.faults])
    if dup is not None:
        return ValidationOutcome.fail(f'Duplicate taint/fault names found: "{dup}"')

    for label, defs in (("Taint", config.taints), ("Fault", config.faults)):
        for d in defs:
            scale_check = validate_scale(d.scale)
            if not scale_check.valid:
                return ValidationOutcome.fail(f'{label} "{d.name}": {scale_check.error}')

    rules = config.rules
    if rules.max_taints is not None and rules.max_taints < 0:
        return ValidationOutcome.fail("Max taints must be non-negative")
    if rules.max_faults is not None and rules.max_faults < 0:
        return ValidationOutcome.fail("Max faults must be non-negative")
    if rules.max_combined is not None and rules.max_combined < 0:
        return ValidationOutcome.fail("Max combined must be non-negative")
    if rules.max_taint_intensity is not None and rules.max_taint_intensity <= 0:
        return ValidationOutcome.fail("Max taint intensity must be positive")
    if rules.max_fault_intensity is not None and rules.max_fault_intensity <= 0:
        return ValidationOutcome.fail("Max fault intensity must be positive")

    count_limits = (rules.max_taints, rules.max_faults, rules.max_combined)
    if rules.zero_tolerance and any(v is not None for v in count_limits):
        return ValidationOutcome.fail(
            "Zero tolerance mode conflicts with count limits (set zero tolerance OR count limits, not both)"
        )

    return ValidationOutcome.ok()

def calculate_taint_fault_stats(config: TaintFaultConfiguration) -> TaintFaultStats:
    r = config.rules
    limits = (r.max_taints, r.max_faults, r.max_combined, r.max_taint_intensity, r.max_fault_intensity)
    return TaintFaultStats(
        total_definitions=len(config.taints) + len(config.faults),
        taint_count=len(config.taints),
        fault_count=len(config.faults),
        has_validation_rules=any(v is not None for v in limits) or bool(r.zero_tolerance),
        zero_tolerance=bool(r.zero_tolerance),
    )


# ===================== Sample evaluation =====================

def _index_definitions(config: TaintFaultConfiguration) -> Dict[str, TaintFaultDefinition]:
    index: Dict[str, TaintFaultDefinition] = {}
    for d in list(config.taints) + list(config.faults):
        index.setdefault(_name_key(d.name), d)
    return index

def _label(d: TaintFaultDefinition) -> str:
    return "Taint" if d.category == TaintFaultCategory.TAINT else "Fault"

def _count_violation(rule: DefectRule, what: str, count: int, limit: int) -> DefectRuleViolation:
    return DefectRuleViolation(
        rule=rule,
        expected=f"≤{limit}",
        actual=count,
        message=f"{count} {what} detected, maximum allowed is {limit}",
    )

def validate_sample_against_rules(
    measured: List[MeasuredDefect],
    config: TaintFaultConfiguration,
) -> DefectEvaluationResult:
    """
    Check the taints/faults recorded for one sample against the rules.

    - each recorded name must match a definition (case-insensitive)
    - intensity must sit on that definition's scale
    - a defect recorded more than once counts once, at its highest intensity
    - counts are distinct detected definitions; max_combined = taints + faults
    """
    index = _index_definitions(config)
    violations: List[DefectRuleViolation] = []
    detected: Dict[str, Tuple[TaintFaultDefinition, float]] = {}

    for m in measured:
        if m.intensity <= 0:
            continue
        d = index.get(_name_key(m.name))
        if d is None:
            violations.append(DefectRuleViolation(
                rule=DefectRule.UNKNOWN_DEFINITION,
                subject=m.name,
                expected="a configured taint or fault",
                actual=m.intensity,
                message=f'"{m.name}" is not a configured taint or fault',
            ))
            continue
        if not is_valid_score(m.intensity, d.scale):
            violations.append(DefectRuleViolation(
                rule=DefectRule.INVALID_INTENSITY,
                subject=d.name,
                expected="a value on the intensity scale",
                actual=m.intensity,
                message=f'{_label(d)} "{d.name}" intensity {fmt_number(m.intensity)} is not on its scale',
            ))
        prev = detected.get(d.id)
        if prev is None or m.intensity > prev[1]:
            detected[d.id] = (d, m.intensity)

    rules = config.rules
    found = list(detected.values())
    taints = [(d, x) for d, x in found if d.category == TaintFaultCategory.TAINT]
    faults = [(d, x) for d, x in found if d.category == TaintFaultCategory.FAULT]

    if rules.zero_tolerance:
        for d, x in found:
            violations.append(DefectRuleViolation(
                rule=DefectRule.ZERO_TOLERANCE,
                subject=d.name,
                expected="none",
                actual=x,
                message=f'{_label(d)} "{d.name}" detected; no taints or faults are acceptable',
            ))

    if rules.max_taints is not None and len(taints) > rules.max_taints:
        violations.append(_count_violation(DefectRule.MAX_TAINTS, "taints", len(taints), rules.max_taints))
    if rules.max_faults is not None and len(faults) > rules.max_faults:
        violations.append(_count_violation(DefectRule.MAX_FAULTS, "faults", len(faults), rules.max_faults))
    if rules.max_combined is not None and len(found) > rules.max_combined:
        violations.append(_count_violation(
            DefectRule.MAX_COMBINED, "taints and faults", len(found), rules.max_combined,
        ))

    ceilings = (
        (DefectRule.MAX_TAINT_INTENSITY, taints, rules.max_taint_intensity),
        (DefectRule.MAX_FAULT_INTENSITY, faults, rules.max_fault_intensity),
    )
    for rule, group, ceiling in ceilings:
        if ceiling is None:
            continue
        for d, x in group:
            if x > ceiling:
                violations.append(DefectRuleViolation(
                    rule=rule,
                    subject=d.name,
                    expected=f"≤{fmt_number(ceiling)}",
                    actual=x,
                    message=f'{_label(d)} "{d.name}" intensity {fmt_number(x)} exceeds maximum {fmt_number(ceiling)}',
                ))

    if violations:
        log.debug("sample failed %d taint/fault rule(s)", len(violations))
    return DefectEvaluationResult(
        is_valid=not violations,
        violations=violations,
        message=rules.validation_message if violations else None,
    )


# ===================== Predefined templates =====================

@derived_catalog_cache
@lru_cache(maxsize=1)
def _taint_fault_templates() -> Tuple[TaintFaultTemplate, ...]:
    return tuple(
        TaintFaultTemplate.model_validate(e)
        for e in catalog_entries(TAINT_FAULT_TEMPLATES_FILE)
    )

def list_taint_fault_templates() -> List[TaintFaultTemplate]:
    return [t.model_copy(deep=True) for t in _taint_fault_templates()]

# What it does:
# Look up a predefined template; None when the id is unknown.
def get_taint_fault_template(template_id: str) -> Optional[TaintFaultTemplate]:
    for t in _taint_fault_templates():
        if t.id == template_id:
            return t.model_copy(deep=True)
    return None


__all__ = [
    "TaintFaultCategory", "TaintFaultDefinition", "TaintFaultValidationRules",
    "TaintFaultConfiguration", "TaintFaultTemplate", "TaintFaultStats",
    "MeasuredDefect", "DefectRule", "DefectRuleViolation", "DefectEvaluationResult",
    "create_empty_taint_fault_configuration", "create_taint_definition",
    "create_fault_definition", "clone_taint_fault_definition",
    "validate_taint_fault_configuration", "calculate_taint_fault_stats",
    "validate_sample_against_rules",
    "list_taint_fault_templates", "get_taint_fault_template",
]
