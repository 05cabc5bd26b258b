# cuplab_backend/app/quality/aspects.py
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from cuplab_backend.app.models.validation import ValidationOutcome
from cuplab_backend.app.quality.catalog_loader import catalog_entries, derived_catalog_cache
from cuplab_backend.app.utils.ids import new_definition_id

# Purpose:
# Visual aspect scales: green aspect (raw bean appearance) and roast aspect
# (roasted bean appearance). Each is a list of wordings with a numeric
# value, higher = better, plus an optional pass mark.

ASPECT_TEMPLATES_FILE = "aspect_templates.yaml"


class AspectKind(str, Enum):
    GREEN = "green"
    ROAST = "roast"

class AspectWording(BaseModel):
    id: str
    label: str
    value: float
    display_order: int
    description: Optional[str] = None

class AspectValidation(BaseModel):
    min_acceptable_value: Optional[float] = None
    validation_message: Optional[str] = None

class AspectConfiguration(BaseModel):
    wordings: List[AspectWording] = Field(default_factory=list)
    validation: Optional[AspectValidation] = None
    notes: Optional[str] = None

class AspectConfigTemplate(BaseModel):
    id: str
    kind: AspectKind
    name: str
    description: str
    configuration: AspectConfiguration


def create_aspect_wording(
    label: str,
    value: float,
    order: int,
    description: Optional[str] = None,
) -> AspectWording:
    return AspectWording(
        id=new_definition_id("aspect"),
        label=label,
        value=value,
        display_order=order,
        description=description,
    )

def create_empty_aspect_configuration() -> AspectConfiguration:
    return AspectConfiguration(wordings=[], validation=None, notes="")

def validate_aspect_configuration(config: AspectConfiguration) -> ValidationOutcome:
    if not config.wordings:
        return ValidationOutcome.fail("At least one wording option is required")

    labels = [w.label.strip().lower() for w in config.wordings]
    if len(set(labels)) != len(labels):
        return ValidationOutcome.fail("Duplicate wording labels are not allowed")

    values = [w.value for w in config.wordings]
    if len(set(values)) != len(values):
        return ValidationOutcome.fail("Duplicate values are not allowed")

    pass_mark = config.validation.min_acceptable_value if config.validation else None
    if pass_mark is not None and pass_mark not in values:
        return ValidationOutcome.fail("Minimum acceptable value must match one of the wording values")

    return ValidationOutcome.ok()


@derived_catalog_cache
@lru_cache(maxsize=1)
def _aspect_templates() -> Tuple[AspectConfigTemplate, ...]:
    return tuple(AspectConfigTemplate.model_validate(e) for e in catalog_entries(ASPECT_TEMPLATES_FILE))

def list_aspect_templates(kind: Optional[AspectKind] = None) -> List[AspectConfigTemplate]:
    return [t.model_copy(deep=True) for t in _aspect_templates() if kind is None or t.kind == kind]

def get_aspect_template(template_id: str) -> Optional[AspectConfigTemplate]:
    for t in _aspect_templates():
        if t.id == template_id:
            return t.model_copy(deep=True)
    return None


__all__ = [
    "AspectKind", "AspectWording", "AspectValidation", "AspectConfiguration",
    "AspectConfigTemplate", "create_aspect_wording", "create_empty_aspect_configuration",
    "validate_aspect_configuration", "list_aspect_templates", "get_aspect_template",
]
