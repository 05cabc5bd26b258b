# cuplab_backend/app/quality/catalog_loader.py
from __future__ import annotations

import copy
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List

import yaml

from cuplab_backend.app.config.paths import resolve_catalog_file
from cuplab_backend.app.config.manifest import CATALOGS_REQUIRED

# -----------------------------------------------------------------------------
# Logger
# -----------------------------------------------------------------------------
log = logging.getLogger("cuplab.catalog_loader")
if not log.handlers:
    handler = logging.StreamHandler()
    log.addHandler(handler)
    log.setLevel(logging.INFO)

# -----------------------------------------------------------------------------
# Internal IO helpers
# -----------------------------------------------------------------------------
def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")

def _load_yaml_from(path: Path) -> Any:
    try:
        txt = _read_text(path)
        return yaml.safe_load(txt)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

# -----------------------------------------------------------------------------
# Public loader API
# -----------------------------------------------------------------------------
@lru_cache(maxsize=16)
def load_yaml_catalog(filename: str) -> Any:
    """
    Load a YAML catalog from the catalog dir.
    Raises FileNotFoundError if not present, ValueError if it does not parse.
    """
    path = resolve_catalog_file(filename)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    obj = _load_yaml_from(path)
    log.info(f"[catalog] loaded {filename} from {path}")
    return obj

def catalog_entries(filename: str) -> List[Dict[str, Any]]:
    """
    Return a copy of the `templates` list of a catalog file.
    A catalog without a `templates` list is rejected as malformed.
    """
    data = load_yaml_catalog(filename)
    entries = data.get("templates") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"Catalog {filename} has no 'templates' list")
    return copy.deepcopy(entries)

def has_catalog_file(filename: str) -> bool:
    return resolve_catalog_file(filename).exists()

# Parsed-template caches built on top of the raw files; cleared together.
_DERIVED_CACHES: List[Callable[..., Any]] = []

def derived_catalog_cache(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Register an lru_cached parser so clear_catalog_cache() also resets it."""
    _DERIVED_CACHES.append(fn)
    return fn

def clear_catalog_cache() -> None:
    """Drop cached catalog files and every parsed catalog (tests point CATALOG_DIR elsewhere)."""
    load_yaml_catalog.cache_clear()
    for fn in _DERIVED_CACHES:
        fn.cache_clear()

# -----------------------------------------------------------------------------
# Debug / inventory helpers
# -----------------------------------------------------------------------------
def inventory() -> Dict[str, Any]:
    """
    Return a light inventory of what's available. Safe to call from a health or debug route.
    """
    out: Dict[str, Any] = {}
    for name in CATALOGS_REQUIRED:
        present = has_catalog_file(name)
        count = len(catalog_entries(name)) if present else 0
        out[name] = {"present": present, "templates": count}
    return out
