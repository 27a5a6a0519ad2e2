"""Tests for the structure validator."""

import json

import pytest
from returns.result import Failure, Success

from surface_agent.surface import (
    ComponentKind,
    ComponentWhitelist,
    StructureValidator,
    SurfaceErrorCode,
    parse_surface,
)


def failure_of(result):
    assert isinstance(result, Failure), f"expected failure, got {result}"
    return result.failure()


def parse(document, **kwargs):
    return StructureValidator(**kwargs).parse(json.dumps(document))


# ============================================================================
# Catalog
# ============================================================================

@pytest.mark.unit
def test_whitelist_has_seven_kinds():
    """Test the catalog exposes exactly the seven component kinds."""
    assert ComponentWhitelist.kinds() == [
        "TextInput", "Select", "Checkbox", "Text", "Alert", "Table", "Button"
    ]
    assert ComponentWhitelist.is_allowed("Button")
    assert not ComponentWhitelist.is_allowed("button")


@pytest.mark.unit
def test_reference_fields_include_generic_ref():
    """Test Button.child and the generic ref field are reference-bearing."""
    assert ComponentWhitelist.reference_fields(ComponentKind.BUTTON) == ("child", "ref")
    assert ComponentWhitelist.reference_fields("Alert") == ("ref",)


@pytest.mark.unit
def test_contract_for_unknown_kind_raises():
    """Test unknown kinds have no contract."""
    with pytest.raises((KeyError, ValueError)):
        ComponentWhitelist.contract_for("Bogus")


# ============================================================================
# Successful parsing
# ============================================================================

@pytest.mark.unit
def test_parse_valid_surface(sample_surface):
    """Test a complete form surface validates."""
    result = parse(sample_surface)

    assert isinstance(result, Success)
    surface = result.unwrap()
    assert surface.surface_id == "create-instance-form"
    assert [node.id for node in surface.components] == ["title", "name", "type", "submit", "submit-label"]
    assert surface.get("submit").kind is ComponentKind.BUTTON


@pytest.mark.unit
def test_forward_reference_accepted(sample_surface):
    """Test a Button may reference a Text declared later in the list."""
    ids = [c["id"] for c in sample_surface["surfaceUpdate"]["components"]]
    assert ids.index("submit") < ids.index("submit-label")

    assert isinstance(parse(sample_surface), Success)


@pytest.mark.unit
def test_empty_component_list_is_valid(surface_factory):
    """Test a surface with no components validates."""
    result = parse(surface_factory("empty", []))
    assert result.unwrap().components == []


@pytest.mark.unit
def test_parse_surface_helper_accepts_bytes(surface_factory):
    """Test the convenience function accepts raw bytes."""
    raw = json.dumps(surface_factory()).encode("utf-8")
    assert isinstance(parse_surface(raw), Success)


@pytest.mark.unit
def test_to_wire_matches_input(sample_surface):
    """Test a validated surface encodes back to its wire form."""
    surface = parse(sample_surface).unwrap()
    assert surface.to_wire() == sample_surface


# ============================================================================
# JSON_SYNTAX / SCHEMA_INVALID
# ============================================================================

@pytest.mark.unit
def test_malformed_json_reports_position():
    """Test malformed input fails with JSON_SYNTAX and a position."""
    failure = failure_of(StructureValidator().parse('{"surfaceUpdate": '))

    assert failure.code is SurfaceErrorCode.JSON_SYNTAX
    assert isinstance(failure.details["position"], int)


@pytest.mark.unit
@pytest.mark.parametrize(
    "document, missing, path",
    [
        ([], "surfaceUpdate", "root"),
        ({}, "surfaceUpdate", "root"),
        ({"surfaceUpdate": {"components": []}}, "surfaceId", "surfaceUpdate"),
        ({"surfaceUpdate": {"surfaceId": 7, "components": []}}, "surfaceId", "surfaceUpdate"),
        ({"surfaceUpdate": {"surfaceId": "s1"}}, "components", "surfaceUpdate"),
        ({"surfaceUpdate": {"surfaceId": "s1", "components": {}}}, "components", "surfaceUpdate"),
    ],
)
def test_shape_check(document, missing, path):
    """Test missing top-level fields fail with SCHEMA_INVALID."""
    failure = failure_of(parse(document))

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["missingField"] == missing
    assert failure.details["path"] == path


@pytest.mark.unit
def test_duplicate_id_rejected(surface_factory):
    """Test two entries sharing an id fail with SCHEMA_INVALID."""
    text = {"Text": {"text": {"literalString": "x"}}}
    failure = failure_of(
        parse(surface_factory("s1", [{"id": "a", "component": text}, {"id": "a", "component": text}]))
    )

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["duplicate"] == "a"


@pytest.mark.unit
@pytest.mark.parametrize(
    "entry",
    [
        "not-an-object",
        {"component": {"Text": {}}},
        {"id": "", "component": {"Text": {}}},
        {"id": "a"},
        {"id": "a", "component": {}},
        {"id": "a", "component": {"Text": {}, "Alert": {}}},
        {"id": "a", "component": {"Text": "plain"}},
    ],
)
def test_malformed_entries_rejected(surface_factory, entry):
    """Test entries without id, or without a single-key component, are rejected."""
    failure = failure_of(parse(surface_factory("s1", [entry])))
    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID


@pytest.mark.unit
def test_null_properties_normalized(surface_factory):
    """Test null properties become an empty map outside strict mode."""
    surface = parse(surface_factory("s1", [{"id": "a", "component": {"Checkbox": None}}])).unwrap()
    assert surface.components[0].properties == {}


@pytest.mark.unit
def test_size_limit(surface_factory):
    """Test oversized input fails before decoding."""
    failure = failure_of(parse(surface_factory(), max_size=32))

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["maxSize"] == 32
    assert failure.details["size"] > 32


@pytest.mark.unit
def test_depth_limit(surface_factory):
    """Test excessive nesting fails with SCHEMA_INVALID."""
    nested = {"literalString": "deep"}
    for _ in range(10):
        nested = {"inner": nested}
    document = surface_factory("s1", [{"id": "a", "component": {"Text": {"text": nested}}}])

    failure = failure_of(parse(document, max_depth=5))

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["maxDepth"] == 5


@pytest.mark.unit
def test_size_measured_on_compact_encoding(surface_factory):
    """Test a decoded document is measured by its compact encoding."""
    document = surface_factory("s1", [{"id": "a", "component": {"Alert": {"type": "info", "message": "m" * 50}}}])
    compact = json.dumps(document, separators=(",", ":"))
    validator = StructureValidator(max_size=len(compact))

    assert isinstance(validator.parse(compact), Success)
    assert isinstance(validator.validate(document), Success)

    failure = failure_of(StructureValidator(max_size=len(compact) - 1).validate(document))
    assert failure.details == {"size": len(compact), "maxSize": len(compact) - 1}


@pytest.mark.unit
def test_lone_surrogate_is_syntax_error():
    """Test text that cannot be encoded as UTF-8 fails instead of raising."""
    failure = failure_of(StructureValidator().parse('{"surfaceUpdate":{"surfaceId":"\ud800","components":[]}}'))

    assert failure.code is SurfaceErrorCode.JSON_SYNTAX
    assert failure.details["position"] == 31


@pytest.mark.unit
@pytest.mark.parametrize("literal", ["123456789012345678901234567890", "-9223372036854775809", "18446744073709551616"])
def test_integer_wider_than_64_bits_rejected(literal):
    """Test integers that would decode as lossy floats are rejected."""
    raw = '{"surfaceUpdate":{"surfaceId":"s1","components":[{"id":"a","component":{"Text":{"n":%s}}}]}}' % literal

    failure = failure_of(StructureValidator().parse(raw))

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["reason"] == "integerOverflow"


@pytest.mark.unit
@pytest.mark.parametrize("literal", ["18446744073709551615", "-9223372036854775808", "1e30"])
def test_64_bit_integers_and_large_floats_accepted(literal):
    raw = '{"surfaceUpdate":{"surfaceId":"s1","components":[{"id":"a","component":{"Text":{"n":%s}}}]}}' % literal
    assert isinstance(StructureValidator().parse(raw), Success)


# ============================================================================
# UNKNOWN_COMPONENT
# ============================================================================

@pytest.mark.unit
def test_unknown_component_scenario():
    """Test the Bogus kind is rejected with the full whitelist."""
    raw = '{"surfaceUpdate":{"surfaceId":"s1","components":[{"id":"a","component":{"Bogus":{}}}]}}'
    failure = failure_of(StructureValidator().parse(raw))

    assert failure.code is SurfaceErrorCode.UNKNOWN_COMPONENT
    assert failure.details["kind"] == "Bogus"
    assert len(failure.details["allowedKinds"]) == 7


@pytest.mark.unit
def test_unknown_component_among_valid_ones(sample_surface):
    """Test one unknown kind rejects an otherwise valid surface."""
    sample_surface["surfaceUpdate"]["components"].append({"id": "x", "component": {"Iframe": {"src": "a"}}})
    assert failure_of(parse(sample_surface)).code is SurfaceErrorCode.UNKNOWN_COMPONENT


# ============================================================================
# INVALID_REFERENCE
# ============================================================================

@pytest.mark.unit
def test_dangling_child_rejected(surface_factory):
    """Test a Button child that names no component is rejected."""
    document = surface_factory(
        "s1", [{"id": "btn", "component": {"Button": {"child": "x", "action": {"name": "go"}}}}]
    )
    failure = failure_of(parse(document))

    assert failure.code is SurfaceErrorCode.INVALID_REFERENCE
    assert failure.details["sourceId"] == "btn"
    assert failure.details["targetId"] == "x"


@pytest.mark.unit
def test_generic_ref_field_checked(surface_factory):
    """Test the generic ref field must resolve on any kind."""
    document = surface_factory(
        "s1", [{"id": "alert", "component": {"Alert": {"type": "info", "message": "m", "ref": "ghost"}}}]
    )
    failure = failure_of(parse(document))

    assert failure.code is SurfaceErrorCode.INVALID_REFERENCE
    assert failure.details["field"] == "ref"


@pytest.mark.unit
def test_button_child_kind_only_checked_in_strict_mode(surface_factory):
    """Test a Button child pointing at a non-Text is allowed unless strict."""
    document = surface_factory(
        "s1",
        [
            {"id": "btn", "component": {"Button": {"child": "warn", "action": {"name": "go"}}}},
            {"id": "warn", "component": {"Alert": {"type": "warning", "message": "careful"}}},
        ],
    )

    assert isinstance(parse(document), Success)
    assert failure_of(parse(document, strict=True)).code is SurfaceErrorCode.INVALID_REFERENCE


# ============================================================================
# Strict contracts
# ============================================================================

@pytest.mark.unit
def test_strict_mode_requires_contract_properties(surface_factory):
    """Test strict mode rejects an Alert without a message."""
    document = surface_factory("s1", [{"id": "a", "component": {"Alert": {"type": "error"}}}])

    assert isinstance(parse(document), Success)
    failure = failure_of(parse(document, strict=True))
    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert failure.details["missingField"] == "message"


@pytest.mark.unit
def test_strict_mode_checks_choices(surface_factory):
    """Test strict mode rejects values outside enumerated choices."""
    document = surface_factory(
        "s1", [{"id": "t", "component": {"Text": {"text": {"literalString": "x"}, "usageHint": "h7"}}}]
    )
    failure = failure_of(parse(document, strict=True))

    assert failure.code is SurfaceErrorCode.SCHEMA_INVALID
    assert "h1" in failure.details["allowed"]


@pytest.mark.unit
def test_strict_mode_accepts_sample(sample_surface):
    """Test the sample form satisfies every contract."""
    assert isinstance(parse(sample_surface, strict=True), Success)


# ============================================================================
# Ordering
# ============================================================================

@pytest.mark.unit
def test_first_violation_wins(surface_factory):
    """Test the security scan runs before per-component checks."""
    document = surface_factory(
        "s1",
        [
            {"id": "a", "component": {"Bogus": {}}},
            {"id": "b", "component": {"Text": {"text": {"literalString": "<script>alert(1)</script>"}}}},
        ],
    )
    assert failure_of(parse(document)).code is SurfaceErrorCode.SECURITY_VIOLATION


@pytest.mark.unit
def test_duplicate_detected_before_unknown_kind(surface_factory):
    """Test entries are checked in list order."""
    document = surface_factory(
        "s1",
        [
            {"id": "a", "component": {"Text": {"text": {"literalString": "x"}}}},
            {"id": "a", "component": {"Bogus": {}}},
        ],
    )
    assert failure_of(parse(document)).code is SurfaceErrorCode.SCHEMA_INVALID
