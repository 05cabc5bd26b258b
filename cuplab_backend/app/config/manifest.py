# cuplab_backend/app/config/manifest.py
from __future__ import annotations

import os
from typing import Dict, List

# ---- Environment mode ----
APP_ENV: str = os.getenv("APP_ENV", "development")
DEBUG_MODE: bool = os.getenv("DEBUG", "0") not in ("", "0", "false", "False")

# Reject numeric scales whose range is not a whole number of increments.
STRICT_SCALE_STEPS: bool = os.getenv("STRICT_SCALE_STEPS", "0") not in ("", "0", "false", "False")

# ---- Catalog manifest ----
from .paths import resolve_catalog_file

CATALOGS_REQUIRED: List[str] = [
    "scale_templates.yaml",
    "cupping_templates.yaml",
    "taint_fault_templates.yaml",
    "defect_templates.yaml",
    "aspect_templates.yaml",
]

def validate_manifest() -> Dict[str, object]:
    missing_required: List[str] = []
    for name in CATALOGS_REQUIRED:
        if not resolve_catalog_file(name).exists():
            missing_required.append(name)

    status = "ok" if not missing_required else "missing_required"
    return {
        "status": status,
        "required": CATALOGS_REQUIRED,
        "missing_required": missing_required,
    }


__all__ = ["APP_ENV", "DEBUG_MODE", "STRICT_SCALE_STEPS", "CATALOGS_REQUIRED", "validate_manifest"]
