"""
Tests for scene loading and bootstrap: parsing, element building,
variant families, initial visibility and initial reactions.
"""

import pytest
import yaml
from builders import node, reaction, scene_document, toggle_scene

from protoplay.dom.element import COMPONENT_SET_ATTRIBUTE, ID_ATTRIBUTE, NAME_ATTRIBUTE, TYPE_ATTRIBUTE, VARIANT_ATTRIBUTE
from protoplay.engine.animation_system import AnimationSystem
from protoplay.models.enums import NodeType, TransitionType, TriggerType
from protoplay.models.snapshot import ResolvedInstance
from protoplay.runtime.bootstrap import (
    INSTANCE_ATTRIBUTE,
    PAGE_ATTRIBUTE,
    SceneBootstrap,
    bootstrap_scene,
    load_scene,
    parse_scene,
)
from protoplay.utils.validation import ValidationError


class TestParsing:

    def test_parse_scene(self):
        roots, resolved = parse_scene(scene_document())

        assert [r.id for r in roots] == ["0:1"]
        splash = roots[0].find("2:1")
        assert splash.reactions[0].trigger.type == TriggerType.AFTER_TIMEOUT
        assert splash.reactions[0].action.transition.type == TransitionType.DISSOLVE
        assert resolved[0].active_variant.id == "1:1"

    def test_non_mapping_document(self):
        with pytest.raises(ValidationError) as ex:
            parse_scene(["not", "a", "scene"])
        assert ex.value.field == "nodes"

    def test_shape_error_is_wrapped(self):
        with pytest.raises(ValidationError) as ex:
            parse_scene({"nodes": [{"id": "1:1"}]})
        assert ex.value.field == "nodes.0.name"
        assert "field: nodes.0.name" in str(ex.value)

    def test_timeout_reaction_requires_timeout(self):
        document = scene_document()
        del document["nodes"][0]["children"][0]["reactions"][0]["trigger"]["timeout"]

        with pytest.raises(ValidationError) as ex:
            parse_scene(document)
        assert ex.value.field == "timeout"

    def test_reaction_requires_destination(self):
        document = scene_document()
        del document["nodes"][0]["children"][0]["reactions"][0]["action"]["destinationId"]

        with pytest.raises(ValidationError) as ex:
            parse_scene(document)
        assert ex.value.field == "destinationId"

    def test_active_variant_must_be_a_member(self):
        document = scene_document()
        document["resolvedInstances"][0]["variants"] = document["resolvedInstances"][0]["variants"][1:]

        with pytest.raises(ValidationError) as ex:
            parse_scene(document)
        assert ex.value.field == "activeVariant"

    def test_load_scene_from_yaml(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(yaml.safe_dump(scene_document()), encoding="utf-8")

        roots, resolved = load_scene(path)

        assert roots[0].find("2:2").type == NodeType.TEXT
        assert len(resolved) == 1

    def test_load_scene_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("nodes: [\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_scene(path)

    def test_load_scene_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_scene(tmp_path / "missing.yaml")


class TestElementBuilding:

    def setup_method(self):
        self.bootstrap = SceneBootstrap(AnimationSystem())

    def test_attributes_and_tags(self):
        roots, _ = parse_scene(scene_document())
        page = self.bootstrap.build_element(roots[0])
        splash = page.query_descendant_by_id("2:1")
        title = page.query_descendant_by_id("2:2")

        assert splash.tag_name == "div"
        assert splash.get_attribute(NAME_ATTRIBUTE) == "Splash"
        assert splash.get_attribute(TYPE_ATTRIBUTE) == "FRAME"
        assert title.tag_name == "span"

    def test_boxes_are_absolute(self):
        roots, _ = parse_scene(scene_document())
        page = self.bootstrap.build_element(roots[0])
        box = page.query_descendant_by_id("2:2").bounding_box()

        assert (box.x, box.y, box.width, box.height) == (15, 15, 50, 10)

    def test_base_style(self):
        roots, _ = parse_scene(scene_document())
        splash = self.bootstrap.build_element(roots[0]).query_descendant_by_id("2:1")

        assert splash.style["width"] == "100px"
        assert splash.style["background-color"] == "rgba(0, 0, 255, 1)"
        assert "opacity" not in splash.style

    def test_component_markers(self):
        component_set = self.bootstrap.build_element(node("5:1", "Buttons", type=NodeType.COMPONENT_SET, children=[
            node("5:2", "State=Default", type=NodeType.COMPONENT),
        ]))

        assert component_set.get_attribute(COMPONENT_SET_ATTRIBUTE) == "true"
        assert component_set.query_descendant_by_id("5:2").get_attribute(VARIANT_ATTRIBUTE) == "true"

    def test_vector_renders_svg_paths(self):
        document = {"nodes": [{
            "id": "6:1", "name": "Arrow", "type": "VECTOR", "width": 8, "height": 8,
            "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}],
            "vectorPaths": [{"data": "M0 0L8 8", "windingRule": "EVENODD"}, {"data": "M8 0L0 8"}],
        }]}
        roots, _ = parse_scene(document)
        svg = self.bootstrap.build_element(roots[0])

        assert svg.tag_name == "svg"
        assert "background-color" not in svg.style
        paths = svg.children[0].children
        assert [p.get_attribute("d") for p in paths] == ["M0 0L8 8", "M8 0L0 8"]
        assert paths[0].get_attribute("fill-rule") == "evenodd"
        assert paths[1].style["fill"] == "rgba(255, 0, 0, 1)"


class TestBootstrap:

    @pytest.mark.asyncio
    async def test_registers_every_node(self, system):
        scene = bootstrap_scene(scene_document(), system)

        assert scene.page.get_attribute(PAGE_ATTRIBUTE) == "true"
        for node_id in ("0:1", "2:1", "2:2", "3:1", "I3:1;1:2", "1:1", "1:2", "1:3", "1:4"):
            assert scene.element(node_id).get_attribute(ID_ATTRIBUTE) == node_id

    @pytest.mark.asyncio
    async def test_variant_wrapper_sits_at_instance(self, system):
        scene = bootstrap_scene(scene_document(), system)

        wrapper = scene.element("1:1").parent
        assert wrapper.get_attribute(INSTANCE_ATTRIBUTE) == "3:1"
        assert wrapper.get_attribute(COMPONENT_SET_ATTRIBUTE) == "true"
        assert wrapper.parent is scene.element("0:1")
        assert scene.element("1:1").bounding_box().y == 150
        assert scene.element("1:4").bounding_box().x == 80

    @pytest.mark.asyncio
    async def test_variants_on_page_are_reused(self, system):
        off = node("1:1", "State=Off", type=NodeType.COMPONENT)
        on = node("1:3", "State=On", type=NodeType.COMPONENT)
        component_set = node("5:1", "Toggle", type=NodeType.COMPONENT_SET, children=[off, on])
        instance = node("3:1", "Toggle", type=NodeType.INSTANCE)
        roots = [node("0:1", "Page", children=[component_set, instance])]
        resolved = [ResolvedInstance(instance=instance, active_variant=off, variants=(off, on))]

        scene = SceneBootstrap(system).build(roots, resolved)

        assert scene.element("1:1").parent is scene.element("5:1")
        assert not any(el.has_attribute(INSTANCE_ATTRIBUTE) for el in scene.page.iter_descendants())

    @pytest.mark.asyncio
    async def test_initial_visibility(self, system):
        scene = bootstrap_scene(scene_document(), system)

        assert scene.element("3:1").style["display"] == "none"
        assert scene.element("1:1").style["display"] == "block"
        assert scene.element("1:1").style["opacity"] == "1"
        assert scene.element("1:3").style["display"] == "none"
        assert scene.element("1:3").style["opacity"] == "0"
        (instance,) = scene.instances
        assert (instance.variants, instance.active_variant, instance.current_index) == (["1:1", "1:3"], "1:1", 0)

    @pytest.mark.asyncio
    async def test_initial_reactions(self, system):
        scene = bootstrap_scene(scene_document(), system)

        assert scene.timeouts == 1
        assert scene.clicks == 1
        assert scene.element("1:1").listener_count("click") == 1
        assert scene.element("3:1").listener_count("click") == 0
        assert scene.element("1:3").listener_count("click") == 0

    @pytest.mark.asyncio
    async def test_instance_reaction_is_redirected_once(self, system):
        scene = toggle_scene(system)
        assert scene.clicks == 1
        assert scene.element("1:1").listener_count("click") == 1

    @pytest.mark.asyncio
    async def test_hidden_subtrees_are_skipped(self, system):
        off = node("1:1", "State=Off", type=NodeType.COMPONENT)
        on = node("1:3", "State=On", type=NodeType.COMPONENT, children=[
            node("1:4", "Knob", reactions=(reaction("1:1"),)),
        ])
        instance = node("3:1", "Toggle", type=NodeType.INSTANCE)
        resolved = [ResolvedInstance(instance=instance, active_variant=off, variants=(off, on))]

        scene = SceneBootstrap(system).build([node("0:1", "Page", children=[instance])], resolved)

        assert scene.clicks == 0
        assert scene.element("1:4").listener_count("click") == 0


class TestAnimationChain:

    @pytest.mark.asyncio
    async def test_timeout_chain_links(self, system):
        scene = bootstrap_scene(scene_document(), system)

        assert scene.validate_chain(["2:1", "3:1"])
        assert scene.validate_chain(["1:1", "1:3"])
        assert scene.validate_chain(["2:1"]) is False

    @pytest.mark.asyncio
    async def test_broken_chains(self, system):
        scene = bootstrap_scene(scene_document(), system)

        with pytest.raises(ValidationError, match="missing node: 9:9"):
            scene.validate_chain(["2:1", "9:9"])
        with pytest.raises(ValidationError, match="1:3 in chain has no reactions"):
            scene.validate_chain(["1:1", "1:3", "1:1"])
        with pytest.raises(ValidationError, match="No reaction found from 2:1 to 1:1"):
            scene.validate_chain(["2:1", "1:1"])
