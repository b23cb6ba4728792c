"""Tests for the scene document schemas and their runtime conversion."""

import pytest
from pydantic import ValidationError

from protoplay.models.enums import EasingType, FillType, LayoutMode, NodeType, TransitionType, TriggerType
from protoplay.schemas.scene import NodeSchema, ReactionSchema, ResolvedInstanceSchema, SceneDocument


def test_camel_case_aliases():
    node = NodeSchema.model_validate({
        "id": "1:1",
        "name": "Card",
        "type": "FRAME",
        "width": 100,
        "height": 50,
        "cornerRadius": 8,
        "layoutMode": "HORIZONTAL",
        "primaryAxisAlignItems": "CENTER",
        "paddingLeft": 4,
        "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}, "opacity": 0.5}],
        "vectorPaths": [{"data": "M0 0", "windingRule": "NONZERO"}],
    }).to_snapshot()

    assert node.corner_radius == 8
    assert node.layout_mode == LayoutMode.HORIZONTAL
    assert node.padding_left == 4
    assert node.fills[0].type == FillType.SOLID
    assert node.fills[0].color.r == 1
    assert node.vector_paths[0].winding_rule == "NONZERO"


def test_snake_case_is_accepted():
    node = NodeSchema.model_validate({"id": "1:1", "name": "Card", "corner_radius": 4}).to_snapshot()
    assert node.corner_radius == 4
    assert node.type == NodeType.FRAME


def test_nested_children_and_unknown_fields():
    node = NodeSchema.model_validate({
        "id": "1:1",
        "name": "Card",
        "pluginData": {"ignored": True},
        "children": [{"id": "1:2", "name": "Title", "children": [{"id": "1:3", "name": "Label"}]}],
    }).to_snapshot()

    assert [n.id for n in node.iter_descendants()] == ["1:2", "1:3"]


def test_unknown_names_fall_back():
    node = NodeSchema.model_validate({"id": "1:1", "name": "Star", "type": "WASHI_TAPE"}).to_snapshot()
    assert node.type == NodeType.UNKNOWN

    reaction = ReactionSchema.model_validate({
        "trigger": {"type": "ON_CLICK"},
        "action": {
            "destinationId": "1:2",
            "transition": {"type": "MAGIC_MOVE", "duration": 0.2, "easing": {"type": "SPRINGY"}},
        },
    }).to_model()

    assert reaction.action.transition.type == TransitionType.INSTANT
    assert reaction.action.transition.easing == EasingType.GENTLE


def test_reaction_conversion():
    reaction = ReactionSchema.model_validate({
        "trigger": {"type": "AFTER_TIMEOUT", "timeout": 2},
        "action": {
            "type": "NODE",
            "destinationId": "1:2",
            "transition": {"type": "dissolve", "duration": 0.5, "easing": {"type": "GENTLE"}},
        },
    }).to_model()

    assert reaction.trigger.type == TriggerType.AFTER_TIMEOUT
    assert reaction.trigger.timeout == 2
    assert reaction.action.destination_id == "1:2"
    assert reaction.action.transition.type == TransitionType.DISSOLVE
    assert reaction.action.transition.duration == 0.5


def test_transition_without_duration_or_easing():
    reaction = ReactionSchema.model_validate({
        "trigger": {"type": "ON_CLICK"},
        "action": {"destinationId": "1:2", "transition": {"type": "SMART_ANIMATE"}},
    }).to_model()

    assert reaction.action.transition.duration is None
    assert reaction.action.transition.easing is None


@pytest.mark.parametrize("payload", [
    {"id": "", "name": "Empty id"},
    {"id": "1:1", "name": "Negative", "width": -1},
    {"id": "1:1", "name": "Opaque", "opacity": 1.5},
    {"id": "1:1"},
])
def test_shape_errors(payload):
    with pytest.raises(ValidationError):
        NodeSchema.model_validate(payload)


def test_unsupported_trigger_is_rejected():
    with pytest.raises(ValidationError):
        ReactionSchema.model_validate({"trigger": {"type": "ON_HOVER"}, "action": {"destinationId": "1:2"}})


def test_resolved_instance_requires_variants():
    with pytest.raises(ValidationError):
        ResolvedInstanceSchema.model_validate({
            "instance": {"id": "3:1", "name": "Toggle", "type": "INSTANCE"},
            "activeVariant": {"id": "1:1", "name": "State=Off"},
            "variants": [],
        })


def test_scene_document_to_models():
    roots, resolved = SceneDocument.model_validate({
        "nodes": [{"id": "0:1", "name": "Page", "children": [{"id": "3:1", "name": "Toggle", "type": "INSTANCE"}]}],
        "resolvedInstances": [{
            "instance": {"id": "3:1", "name": "Toggle", "type": "INSTANCE"},
            "activeVariant": {"id": "1:1", "name": "State=Off", "type": "COMPONENT"},
            "variants": [
                {"id": "1:1", "name": "State=Off", "type": "COMPONENT"},
                {"id": "1:2", "name": "State=On", "type": "COMPONENT"},
            ],
        }],
    }).to_models()

    assert [r.id for r in roots] == ["0:1"]
    (record,) = resolved
    assert record.instance.id == "3:1"
    assert record.active_variant.id == "1:1"
    assert [v.id for v in record.variants] == ["1:1", "1:2"]
    assert record.component_set is None
