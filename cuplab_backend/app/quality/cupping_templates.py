# cuplab_backend/app/quality/cupping_templates.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from cuplab_backend.app.quality.attribute_scales import AttributeScale
from cuplab_backend.app.quality.catalog_loader import catalog_entries, derived_catalog_cache

CUPPING_TEMPLATES_FILE = "cupping_templates.yaml"


class AttributeWithScale(BaseModel):
    attribute: str                    # e.g. "Fragrance/Aroma", "Flavor"
    scale: AttributeScale

class CuppingAttribute(AttributeWithScale):
    min_score: Optional[float] = None
    weight: Optional[float] = None
    is_required: Optional[bool] = None

class CuppingAttributeTemplate(BaseModel):
    id: str
    name: str
    description: str
    attributes: List[AttributeWithScale] = Field(default_factory=list)


@derived_catalog_cache
@lru_cache(maxsize=1)
def _cupping_templates() -> Tuple[CuppingAttributeTemplate, ...]:
    return tuple(
        CuppingAttributeTemplate.model_validate(e)
        for e in catalog_entries(CUPPING_TEMPLATES_FILE)
    )

# What it does:
# All cupping forms (SCA, COE, Brazil numeric/wording, simple 5-point), as copies.
def list_cupping_templates() -> List[CuppingAttributeTemplate]:
    return [t.model_copy(deep=True) for t in _cupping_templates()]

def get_cupping_template(template_id: str) -> Optional[CuppingAttributeTemplate]:
    for t in _cupping_templates():
        if t.id == template_id:
            return t.model_copy(deep=True)
    return None


__all__ = [
    "AttributeWithScale", "CuppingAttribute", "CuppingAttributeTemplate",
    "list_cupping_templates", "get_cupping_template",
]
