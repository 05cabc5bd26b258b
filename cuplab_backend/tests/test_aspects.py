# tests/test_aspects.py
# Purpose:
# Green/roast aspect wording configurations and their template catalog.
import pytest

from cuplab_backend.app.quality.aspects import (
    AspectConfiguration, AspectKind, AspectValidation,
    create_aspect_wording, create_empty_aspect_configuration,
    get_aspect_template, list_aspect_templates, validate_aspect_configuration,
)

def _wordings(*pairs):
    return [create_aspect_wording(label, value, i) for i, (label, value) in enumerate(pairs)]

def test_wording_factory():
    w = create_aspect_wording("Greenish", 6, 5, "Light green beans")
    assert w.id.startswith("aspect_")
    assert (w.label, w.value, w.display_order) == ("Greenish", 6, 5)

def test_valid_configuration():
    cfg = AspectConfiguration(
        wordings=_wordings(("Poor", 1), ("Good", 5), ("Excellent", 9)),
        validation=AspectValidation(min_acceptable_value=5, validation_message="Good or better"),
    )
    assert validate_aspect_configuration(cfg).valid

@pytest.mark.parametrize("config, error", [
    (create_empty_aspect_configuration(), "At least one wording option is required"),
    (AspectConfiguration(wordings=_wordings(("Good", 5), (" good ", 6))),
     "Duplicate wording labels are not allowed"),
    (AspectConfiguration(wordings=_wordings(("Good", 5), ("Fine", 5))),
     "Duplicate values are not allowed"),
    (AspectConfiguration(
        wordings=_wordings(("Poor", 1), ("Good", 5)),
        validation=AspectValidation(min_acceptable_value=3),
    ), "Minimum acceptable value must match one of the wording values"),
])
def test_configuration_problems(config, error):
    r = validate_aspect_configuration(config)
    assert not r.valid
    assert r.error == error

def test_templates_by_kind():
    assert [t.id for t in list_aspect_templates(AspectKind.GREEN)] == ["green-standard", "green-simplified"]
    assert [t.id for t in list_aspect_templates(AspectKind.ROAST)] == ["roast-standard", "roast-detailed"]
    assert len(list_aspect_templates()) == 4
    for t in list_aspect_templates():
        assert validate_aspect_configuration(t.configuration).valid, t.id

def test_template_lookup():
    t = get_aspect_template("roast-detailed")
    assert t.kind == AspectKind.ROAST
    assert [w.value for w in t.configuration.wordings][:3] == [1, 2.5, 4]
    assert get_aspect_template("missing") is None
