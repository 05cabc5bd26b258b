# cuplab_backend/app/config/paths.py
from __future__ import annotations

"""
Central path resolution for the quality-control backend.

Env overrides:
    CUPLAB_CATALOG_DIR

Defaults:
    <repo_root>/cuplab_backend/app/quality/catalogs

Exports:
    - constants: REPO_ROOT, APP_ROOT, CATALOG_DIR
    - getters: get_repo_root(), get_app_root(), get_catalog_dir()
    - resolvers: resolve_catalog_file()
"""

import os
from pathlib import Path

# ──────────────────────────────────────────────────────────────────────────────
_THIS_FILE = Path(__file__).resolve()

def _resolve_repo_root() -> Path:
    p = _THIS_FILE
    for _ in range(6):
        if (p.parent / "cuplab_backend" / "app").exists():
            return p.parent
        p = p.parent
    return _THIS_FILE.parents[3]

REPO_ROOT: Path = _resolve_repo_root()
APP_ROOT: Path = _THIS_FILE.parents[1]

def _clean_env(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().strip('"').strip("'")
    return v or None

def _env_path(name: str) -> Path | None:
    raw = _clean_env(os.getenv(name))
    if not raw:
        return None
    return Path(raw).expanduser().resolve()

_default_catalogs = APP_ROOT / "quality" / "catalogs"

CATALOG_DIR: Path = (_env_path("CUPLAB_CATALOG_DIR") or _default_catalogs).resolve()

# ── Getters
def get_repo_root() -> Path: return REPO_ROOT
def get_app_root()  -> Path: return APP_ROOT
def get_catalog_dir() -> Path: return CATALOG_DIR

# ── Resolvers
def resolve_catalog_file(name: str) -> Path:
    """Return absolute path under the catalog dir for a given filename."""
    return CATALOG_DIR / name

__all__ = [
    "REPO_ROOT", "APP_ROOT", "CATALOG_DIR",
    "get_repo_root", "get_app_root", "get_catalog_dir",
    "resolve_catalog_file",
]
