# tests/test_attribute_scales.py
# Purpose:
# Scale validation rules, stepped-value helpers and the scale template catalog.
import pytest

from cuplab_backend.app.quality.attribute_scales import (
    NumericScale, ScaleTemplateCategory, WordingScale, WordingScaleOption,
    clone_scale_template, create_numeric_scale, create_wording_scale,
    get_label_value, get_scale_max_value, get_scale_min_value, get_scale_template,
    get_scale_valid_values, get_score_label, is_valid_score, list_scale_templates,
    validate_scale,
)

def _opt(label, value, order):
    return WordingScaleOption(label=label, value=value, display_order=order)

def test_numeric_scale_validity():
    assert validate_scale(create_numeric_scale(1, 5, 0.5)).valid
    bad_order = validate_scale(create_numeric_scale(5, 1, 0.5))
    assert not bad_order.valid
    assert bad_order.error == "Minimum must be less than maximum"
    zero_step = validate_scale(create_numeric_scale(1, 5, 0))
    assert not zero_step.valid
    assert zero_step.error == "Increment must be greater than 0"

def test_numeric_increment_must_fit_inside_range():
    r = validate_scale(create_numeric_scale(1, 5, 4))
    assert not r.valid
    assert r.error == "Increment must be less than the scale range"

def test_strict_steps_flags_ragged_range():
    scale = create_numeric_scale(1, 5, 0.3)
    assert validate_scale(scale, strict_steps=False).valid
    r = validate_scale(scale, strict_steps=True)
    assert not r.valid
    assert "whole number of increments" in r.error
    assert validate_scale(create_numeric_scale(1, 5, 0.25), strict_steps=True).valid

def test_strict_steps_default_follows_config(monkeypatch):
    from cuplab_backend.app.config import manifest
    monkeypatch.setattr(manifest, "STRICT_SCALE_STEPS", True)
    assert not validate_scale(create_numeric_scale(0, 1, 0.3)).valid

def test_wording_scale_needs_an_option():
    r = validate_scale(WordingScale(options=[]))
    assert not r.valid
    assert r.error == "At least one option is required"
    assert validate_scale(WordingScale(options=[_opt("Good", 5, 0)])).valid

@pytest.mark.parametrize("options, error", [
    ([_opt("Good", 5, 0), _opt("good", 4, 1)], "Duplicate labels are not allowed"),
    ([_opt("Good", 5, 0), _opt("Fair", 5, 1)], "Duplicate values are not allowed"),
    ([_opt("Good", 5, 0), _opt("Fair", 4, 0)], "Duplicate display orders are not allowed"),
])
def test_wording_scale_duplicates(options, error):
    r = validate_scale(WordingScale(options=options))
    assert not r.valid
    assert r.error == error

def test_create_wording_scale_orders_by_position():
    s = create_wording_scale([("Outstanding", 10), ("Good", 7), ("Poor", 1)])
    assert [o.display_order for o in s.options] == [0, 1, 2]
    assert s.type == "wording"

def test_valid_values_and_bounds():
    num = create_numeric_scale(1, 2, 0.25)
    assert get_scale_valid_values(num) == [1.0, 1.25, 1.5, 1.75, 2.0]
    assert get_scale_min_value(num) == 1
    assert get_scale_max_value(num) == 2

    words = create_wording_scale([("Poor", 1), ("Outstanding", 10), ("Good", 7)])
    assert get_scale_valid_values(words) == [10, 7, 1]
    assert get_scale_min_value(words) == 1
    assert get_scale_max_value(words) == 10

def test_valid_values_tolerate_float_drift():
    # 0.1 steps accumulate float error; the last step must still be there
    vals = get_scale_valid_values(create_numeric_scale(0, 1, 0.1))
    assert len(vals) == 11
    assert vals[-1] == 1.0

def test_score_checks_and_labels():
    num = create_numeric_scale(1, 5, 0.5)
    assert is_valid_score(3.5, num)
    assert is_valid_score(3.504, num)
    assert not is_valid_score(3.6, num)
    assert not is_valid_score(5.5, num)
    assert get_score_label(3.5, num) == "3.5"

    words = create_wording_scale([("Soft", 8), ("Hard", 6)])
    assert get_score_label(6, words) == "Hard"
    assert get_score_label(7, words) is None
    assert get_label_value("Soft", words) == 8
    assert get_label_value("Rio", words) is None

def test_scale_catalog_contents():
    templates = list_scale_templates()
    assert [t.id for t in templates] == [
        "sca-numeric-10", "sca-wording-7", "brazil-flavor-10",
        "coe-numeric-5", "numeric-7", "numeric-5",
    ]
    for t in templates:
        assert t.is_system
        assert validate_scale(t.scale).valid, t.id

    brazil = get_scale_template("brazil-flavor-10")
    assert isinstance(brazil.scale, WordingScale)
    assert len(brazil.scale.options) == 10
    assert isinstance(get_scale_template("sca-numeric-10").scale, NumericScale)
    assert get_scale_template("nope") is None

def test_catalog_lookups_hand_out_copies():
    t = get_scale_template("sca-wording-7")
    t.scale.options.clear()
    t.name = "edited"
    again = get_scale_template("sca-wording-7")
    assert again.name == "SCA 7-Level Wording"
    assert len(again.scale.options) == 7

def test_clone_scale_template():
    src = get_scale_template("coe-numeric-5")
    clone = clone_scale_template(src, "Lab COE")
    assert clone.id.startswith("custom-")
    assert clone.name == "Lab COE"
    assert clone.description == src.description
    assert clone.category == ScaleTemplateCategory.CUSTOM
    assert clone.is_system is False
    assert clone.scale == src.scale
    assert clone_scale_template(src, "x", "own words").description == "own words"

def test_score_check_on_wide_scale():
    # steps are not enumerated; a multi-million-step range answers immediately
    wide = create_numeric_scale(0, 5_000_000, 0.5)
    assert validate_scale(wide).valid
    assert is_valid_score(2.5, wide)
    assert is_valid_score(4_999_999.5, wide)
    assert is_valid_score(5_000_000, wide)
    assert not is_valid_score(2.3, wide)
    assert not is_valid_score(5_000_000.5, wide)
    assert not is_valid_score(-0.5, wide)

    huge = create_numeric_scale(0, 1e12, 0.25)
    assert is_valid_score(1e12 - 0.25, huge)
    assert not is_valid_score(0.1, huge)

def test_score_check_edges_follow_tolerance():
    num = create_numeric_scale(1, 5, 0.5)
    assert is_valid_score(5.004, num)
    assert is_valid_score(0.995, num)
    assert not is_valid_score(5.02, num)
    # the last reachable step, not max, caps a ragged range
    ragged = create_numeric_scale(1, 5, 0.3)
    assert is_valid_score(4.9, ragged)
    assert not is_valid_score(5, ragged)
