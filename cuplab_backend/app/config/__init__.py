# cuplab_backend/app/config/__init__.py
from __future__ import annotations

# Re-export config surface expected by callers across the app.

# Env settings live in manifest.py
from .manifest import (
    APP_ENV,
    DEBUG_MODE,
    STRICT_SCALE_STEPS,
    CATALOGS_REQUIRED,
    validate_manifest,
)

# Path helpers live in paths.py
from .paths import (
    REPO_ROOT,
    APP_ROOT,
    CATALOG_DIR,
    resolve_catalog_file,
)

__all__ = [
    # manifest
    "APP_ENV",
    "DEBUG_MODE",
    "STRICT_SCALE_STEPS",
    "CATALOGS_REQUIRED",
    "validate_manifest",
    # paths
    "REPO_ROOT",
    "APP_ROOT",
    "CATALOG_DIR",
    "resolve_catalog_file",
]
