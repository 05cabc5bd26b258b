from __future__ import annotations
import pytest
from fastapi.testclient import TestClient
from cuplab_backend.app.main import app
from cuplab_backend.app.quality.screen_sizes import (
    ConstraintType, ScreenSizeConstraint, ScreenSizeRequirements,
)
from cuplab_backend.app.quality.taint_faults import get_taint_fault_template

# --- HTTP client for router tests ---
@pytest.fixture(scope="session")
def client():
    return TestClient(app)

# --- Screen-size requirements of the "Brazil Natural" template ---
@pytest.fixture
def brazil_natural_requirements():
    return ScreenSizeRequirements(constraints=[
        ScreenSizeConstraint(screen_size="Screen 17", constraint_type=ConstraintType.MINIMUM, min_value=60),
        ScreenSizeConstraint(screen_size="Screen 16", constraint_type=ConstraintType.MAXIMUM, max_value=20),
    ])

# --- Predefined taint/fault configurations (fresh copies per test) ---
@pytest.fixture
def sca_config():
    return get_taint_fault_template("sca-standard").configuration

@pytest.fixture
def zero_tolerance_config():
    return get_taint_fault_template("zero-tolerance").configuration

@pytest.fixture
def commercial_config():
    return get_taint_fault_template("commercial-grade").configuration
