# cuplab_backend/app/routers/quality.py
from __future__ import annotations
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

import logging
logger = logging.getLogger("uvicorn.error")

from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.quality.attribute_scales import AttributeScale, validate_scale
from cuplab_backend.app.quality.aspects import (
    AspectConfiguration, AspectConfigTemplate, AspectKind,
    list_aspect_templates, validate_aspect_configuration,
)
from cuplab_backend.app.quality.catalog_loader import inventory
from cuplab_backend.app.quality.defects import (
    DefectConfiguration, DefectCountResult,
    validate_defect_configuration, validate_defect_counts,
)
from cuplab_backend.app.quality.micro_regions import validate_micro_region_configuration
from cuplab_backend.app.quality.screen_sizes import (
    ConstraintValidationResult, ScreenSizeRequirements,
    validate_screen_size_distribution, validate_screen_size_requirements,
)
from cuplab_backend.app.quality.taint_faults import (
    DefectEvaluationResult, MeasuredDefect, TaintFaultConfiguration, TaintFaultTemplate,
    get_taint_fault_template, list_taint_fault_templates,
    validate_sample_against_rules, validate_taint_fault_configuration,
)

router = APIRouter(prefix="/quality", tags=["quality"])

# Verdicts (valid or not) come back as 200; turning an invalid verdict into
# a 400 on save is the template-update route's decision.

# ---------- Request bodies ----------
class ScaleIn(BaseModel):
    scale: AttributeScale

class ScreenSizeCheckIn(BaseModel):
    distribution: Dict[str, float] = {}
    requirements: ScreenSizeRequirements

class SampleDefectsIn(BaseModel):
    defects: List[MeasuredDefect] = []
    configuration: TaintFaultConfiguration

class DefectCountsIn(BaseModel):
    configuration: DefectConfiguration
    counts: Dict[str, float] = {}

def _log_rejection(what: str, outcome: ValidationOutcome) -> ValidationOutcome:
    if not outcome.valid:
        logger.info(f"[quality] {what} rejected: {outcome.error}")
    return outcome

# ---------- Scales ----------
# What it does:
# Check a numeric or wording scale definition.
@router.post("/scales/validate", response_model=ValidationOutcome)
def check_scale(payload: ScaleIn) -> ValidationOutcome:
    return _log_rejection("scale", validate_scale(payload.scale))

# ---------- Screen sizes ----------
# What it does:
# Check a measured distribution against the template's constraints; returns every violation.
@router.post("/screen-sizes/validate", response_model=ConstraintValidationResult)
def check_screen_sizes(payload: ScreenSizeCheckIn) -> ConstraintValidationResult:
    return validate_screen_size_distribution(payload.distribution, payload.requirements)

# What it does:
# Sanity-check the constraints themselves (missing bounds, out of 0-100, min > max).
@router.post("/screen-sizes/requirements/validate", response_model=ValidationOutcome)
def check_screen_size_requirements(payload: ScreenSizeRequirements) -> ValidationOutcome:
    return _log_rejection("screen size requirements", validate_screen_size_requirements(payload))

# ---------- Taints / faults ----------
# What it does:
# Check a taint/fault configuration before it is saved on a template.
@router.post("/taint-faults/validate", response_model=ValidationOutcome)
def check_taint_fault_configuration(payload: TaintFaultConfiguration) -> ValidationOutcome:
    return _log_rejection("taint/fault configuration", validate_taint_fault_configuration(payload))

# What it does:
# Evaluate the taints/faults recorded for a sample against the configuration's rules.
@router.post("/taint-faults/evaluate", response_model=DefectEvaluationResult)
def evaluate_taint_faults(payload: SampleDefectsIn) -> DefectEvaluationResult:
    return validate_sample_against_rules(payload.defects, payload.configuration)

# What it does:
# List the predefined taint/fault templates.
@router.get("/taint-faults/templates", response_model=List[TaintFaultTemplate])
def get_taint_fault_templates() -> List[TaintFaultTemplate]:
    return list_taint_fault_templates()

# What it does:
# Fetch one predefined taint/fault template by id.
@router.get("/taint-faults/templates/{template_id}", response_model=TaintFaultTemplate)
def get_one_taint_fault_template(template_id: str) -> TaintFaultTemplate:
    t = get_taint_fault_template(template_id)
    if t is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="template id not found")
    return t

# ---------- Micro-regions ----------
# What it does:
# Check a micro-region configuration. Takes the raw JSON so type mistakes are reported, not 422'd.
@router.post("/micro-regions/validate", response_model=ValidationOutcome)
def check_micro_regions(payload: Dict[str, Any]) -> ValidationOutcome:
    return _log_rejection("micro-region configuration", validate_micro_region_configuration(payload))

# ---------- Physical defects ----------
# What it does:
# Check a defect list + thresholds configuration.
@router.post("/defects/validate", response_model=ValidationOutcome)
def check_defect_configuration(payload: DefectConfiguration) -> ValidationOutcome:
    return _log_rejection("defect configuration", validate_defect_configuration(payload))

# What it does:
# Convert raw defect counts into equivalents and compare with the thresholds.
@router.post("/defects/counts", response_model=DefectCountResult)
def check_defect_counts(payload: DefectCountsIn) -> DefectCountResult:
    cfg = payload.configuration
    return validate_defect_counts(cfg.defects, payload.counts, cfg.thresholds)

# ---------- Visual aspects ----------
# What it does:
# Check a green/roast aspect wording configuration.
@router.post("/aspects/validate", response_model=ValidationOutcome)
def check_aspect_configuration(payload: AspectConfiguration) -> ValidationOutcome:
    return _log_rejection("aspect configuration", validate_aspect_configuration(payload))

# What it does:
# List green or roast aspect templates (both when kind is omitted).
@router.get("/aspects/templates", response_model=List[AspectConfigTemplate])
def get_aspect_templates(kind: Optional[AspectKind] = None) -> List[AspectConfigTemplate]:
    return list_aspect_templates(kind)

# ---------- Catalogs ----------
# What it does:
# Report which catalog files are present and how many templates each holds.
@router.get("/catalogs")
def catalogs() -> Dict[str, Any]:
    try:
        return {"ok": True, "catalogs": inventory()}
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"catalog load failed: {e}")
