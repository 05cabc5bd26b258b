# cuplab_backend/app/quality/__init__.py
"""
Unified export surface for the quality-template rule models.

Import from here in routers or grading code, e.g.:
    from cuplab_backend.app.quality import (
        # Scales
        NumericScale, WordingScale, validate_scale,
        # Screen sizes
        ScreenSizeRequirements, validate_screen_size_distribution,
        # Taints / faults
        TaintFaultConfiguration, validate_taint_fault_configuration,
        validate_sample_against_rules, get_taint_fault_template,
        # Micro-regions
        validate_micro_region_configuration,
    )
"""

from __future__ import annotations

# ---- Attribute scales ----
from .attribute_scales import (  # noqa: F401
    NumericScale,
    WordingScaleOption,
    WordingScale,
    AttributeScale,
    ScaleTemplate,
    create_numeric_scale,
    create_wording_scale,
    validate_scale,
    get_scale_min_value,
    get_scale_max_value,
    get_scale_valid_values,
    is_valid_score,
    get_score_label,
    get_label_value,
    list_scale_templates,
    get_scale_template,
    clone_scale_template,
)

# ---- Cupping forms ----
from .cupping_templates import (  # noqa: F401
    CuppingAttribute,
    CuppingAttributeTemplate,
    list_cupping_templates,
    get_cupping_template,
)

# ---- Screen sizes ----
from .screen_sizes import (  # noqa: F401
    STANDARD_SCREEN_SIZES,
    ConstraintType,
    ScreenSizeConstraint,
    ScreenSizeRequirements,
    ConstraintViolation,
    ConstraintValidationResult,
    validate_screen_size_distribution,
    validate_screen_size_requirements,
    get_constraint_display_text,
    get_constrained_screen_sizes,
)

# ---- Taints / faults ----
from .taint_faults import (  # noqa: F401
    TaintFaultCategory,
    TaintFaultDefinition,
    TaintFaultValidationRules,
    TaintFaultConfiguration,
    TaintFaultTemplate,
    MeasuredDefect,
    DefectEvaluationResult,
    create_empty_taint_fault_configuration,
    create_taint_definition,
    create_fault_definition,
    clone_taint_fault_definition,
    validate_taint_fault_configuration,
    calculate_taint_fault_stats,
    validate_sample_against_rules,
    list_taint_fault_templates,
    get_taint_fault_template,
)

# ---- Micro-regions ----
from .micro_regions import (  # noqa: F401
    POPULAR_COFFEE_ORIGINS,
    MicroRegionRequirement,
    MicroRegionConfiguration,
    create_empty_micro_region_configuration,
    create_origin_requirement,
    validate_micro_region_configuration,
    get_micro_region_requirement_display_text,
    get_total_percentage_constraints,
    find_origin_requirement,
)

# ---- Physical defects ----
from .defects import (  # noqa: F401
    DefectConfig,
    DefectThresholds,
    DefectConfiguration,
    DefectTemplate,
    validate_defect_counts,
    validate_defect_configuration,
    list_defect_templates,
    get_defect_template,
)

# ---- Visual aspects ----
from .aspects import (  # noqa: F401
    AspectConfiguration,
    validate_aspect_configuration,
    list_aspect_templates,
    get_aspect_template,
)
