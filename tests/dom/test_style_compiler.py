"""
Tests for DomManipulator: change -> style mutation mapping, lookup
fallback, state capture/restore, layout flattening and switches.
"""

from builders import node, render, solid

from protoplay.dom.element import (
    COMPONENT_SET_ATTRIBUTE,
    ID_ATTRIBUTE,
    IMPORTANT,
    NAME_ATTRIBUTE,
    VARIANT_ATTRIBUTE,
    BoundingBox,
    VirtualElement,
)
from protoplay.dom.style_compiler import DomManipulator
from protoplay.models.change import Change, LayoutProperties, Position, Size, Sizing
from protoplay.models.enums import ChangeProperty, FillType, LayoutSizing, NodeType, StyleChangeType
from protoplay.models.snapshot import RGBA, Fill, VectorPath


def card():
    return render(node("1:1", "Card", width=100, height=50, children=[
        node("1:2", "Title", x=10, y=10, width=50, height=20),
        node("1:3", "Arrow", type=NodeType.VECTOR, width=8, height=8,
             fills=(solid(0, 0, 0),), vector_paths=(VectorPath("M0 0L8 8"),)),
    ]))


class TestRootMapping:

    def setup_method(self):
        self.dom = DomManipulator()
        self.element = VirtualElement("div", {ID_ATTRIBUTE: "1:1"})

    def test_size(self):
        change = Change(ChangeProperty.SIZE, Size(100, 50), Size(200, 50.5))
        style_change = self.dom.prepare_change(self.element, change)

        assert style_change.type == StyleChangeType.SIZE
        assert (style_change.width, style_change.height) == ("200px", "50.5px")
        assert self.element.style["width"] == ""  # nothing written yet

        self.dom.apply_style_change(style_change)
        assert self.element.style["width"] == "200px"
        assert self.element.style["height"] == "50.5px"

    def test_opacity(self):
        assert self.dom.apply_change(self.element, Change(ChangeProperty.OPACITY, 1.0, 0.5))
        assert self.element.style["opacity"] == "0.5"

        self.dom.apply_change(self.element, Change(ChangeProperty.OPACITY, 0.5, 1.0))
        assert self.element.style["opacity"] == "1"

    def test_background_uses_first_solid_fill(self):
        fills = (Fill(FillType.SOLID, RGBA(1, 0.5, 0), 0.25), solid(0, 0, 1))
        self.dom.apply_change(self.element, Change(ChangeProperty.BACKGROUND, None, fills))
        assert self.element.style["background-color"] == "rgba(255, 128, 0, 0.25)"

    def test_background_alpha_defaults_to_one(self):
        self.dom.apply_change(self.element, Change(ChangeProperty.BACKGROUND, None, (solid(0, 0, 0),)))
        assert self.element.style["background-color"] == "rgba(0, 0, 0, 1)"

    def test_background_without_solid_fill_is_skipped(self):
        gradient = (Fill(FillType.GRADIENT_LINEAR, RGBA(1, 0, 0)),)
        assert self.dom.prepare_change(self.element, Change(ChangeProperty.BACKGROUND, None, gradient)) is None
        assert self.dom.prepare_change(self.element, Change(ChangeProperty.BACKGROUND, None, ())) is None

    def test_border_radius(self):
        self.dom.apply_change(self.element, Change(ChangeProperty.BORDER_RADIUS, 0, 12))
        assert self.element.style["border-radius"] == "12px"

    def test_sizing(self):
        change = Change(
            ChangeProperty.SIZING,
            Sizing(LayoutSizing.FIXED, LayoutSizing.FIXED),
            Sizing(LayoutSizing.FILL, LayoutSizing.HUG),
        )
        self.dom.apply_change(self.element, change)

        assert self.element.style["width"] == "100%"
        assert self.element.style["height"] == "fit-content"

    def test_fixed_sizing_is_a_no_op(self):
        self.element.style["height"] = "40px"
        change = Change(ChangeProperty.SIZING, Sizing(), Sizing(LayoutSizing.FILL, LayoutSizing.FIXED))
        self.dom.apply_change(self.element, change)

        assert self.element.style["width"] == "100%"
        assert self.element.style["height"] == "40px"
        assert self.dom.prepare_change(self.element, Change(ChangeProperty.SIZING, Sizing(), Sizing(LayoutSizing.FIXED))) is None

    def test_layout_has_no_mutation(self):
        change = Change(ChangeProperty.LAYOUT, LayoutProperties(), LayoutProperties())
        assert not self.dom.apply_change(self.element, change)


class TestChildMapping:

    def setup_method(self):
        self.dom = DomManipulator()
        self.root = card()
        self.title = self.root.query_descendant_by_id("1:2")

    def test_child_position_is_a_relative_translate(self):
        change = Change(ChangeProperty.CHILD_POSITION, Position(10, 10), Position(25, 5), "Title", "1:2")
        self.dom.apply_change(self.root, change)
        assert self.title.style["transform"] == "translate(15px, -5px)"

    def test_lookup_falls_back_to_leaf_name(self):
        change = Change(ChangeProperty.CHILD_OPACITY, 1.0, 0.0, "Header/Title", "9:99")
        style_change = self.dom.prepare_change(self.root, change)

        assert style_change.target is self.title
        assert style_change.value == "0"

    def test_child_size_and_background(self):
        self.dom.apply_change(self.root, Change(ChangeProperty.CHILD_SIZE, Size(50, 20), Size(60, 20), "Title", "1:2"))
        self.dom.apply_change(self.root, Change(ChangeProperty.CHILD_BACKGROUND, None, (solid(1, 1, 1),), "Title", "1:2"))

        assert self.title.style["width"] == "60px"
        assert self.title.style["background-color"] == "rgba(255, 255, 255, 1)"

    def test_child_fill_targets_nested_path(self):
        change = Change(ChangeProperty.CHILD_FILL, None, (solid(1, 0, 0),), "Arrow", "1:3")
        style_change = self.dom.prepare_change(self.root, change)

        assert style_change.type == StyleChangeType.FILL
        assert style_change.target.tag_name == "path"
        self.dom.apply_style_change(style_change)
        assert style_change.target.style["fill"] == "rgba(255, 0, 0, 1)"
        assert self.root.query_descendant_by_id("1:3").style["fill"] == ""

    def test_missing_child_is_skipped_without_blocking_batch(self):
        changes = [
            Change(ChangeProperty.CHILD_OPACITY, 1.0, 0.5, "Ghost", "0:0"),
            Change(ChangeProperty.CHILD_OPACITY, 1.0, 0.5, "Title", "1:2"),
        ]
        batch = self.dom.prepare_changes(self.root, changes)

        assert len(batch) == 1
        self.dom.apply_style_changes(batch)
        assert self.title.style["opacity"] == "0.5"

    def test_vector_paths_have_no_mutation(self):
        change = Change(ChangeProperty.VECTOR_PATHS, None, (VectorPath("M1 1"),), "Arrow", "1:3")
        assert self.dom.prepare_change(self.root, change) is None


class TestStateAndLayout:

    def setup_method(self):
        self.dom = DomManipulator()

    def test_capture_and_restore_subtree(self):
        root = card()
        title = root.query_descendant_by_id("1:2")
        title.style.set_property("opacity", "0.8", IMPORTANT)

        captured = self.dom.capture_state(root)
        root.style["transition"] = "opacity 1s linear"
        title.style["opacity"] = "0"
        title.style["transform"] = "translate(4px, 0px)"

        self.dom.restore_state(captured)

        assert root.style["transition"] == ""
        assert title.style["opacity"] == "0.8"
        assert title.style.get_property_priority("opacity") == IMPORTANT
        assert title.style["transform"] == ""
        assert len(captured) == len(list(root.iter_descendants())) + 1

    def test_flex_parent_is_flattened(self):
        parent = VirtualElement("div", box=BoundingBox(100, 100, 300, 50))
        parent.style["display"] = "flex"
        first = parent.append_child(VirtualElement("div", box=BoundingBox(110, 105, 80, 40)))
        second = parent.append_child(VirtualElement("div", box=BoundingBox(200, 105, 80, 40)))

        assert self.dom.apply_layout_flattening(first)

        assert parent.style["display"] == "block"
        assert second.style["position"] == "absolute"
        assert (second.style["left"], second.style["top"]) == ("100px", "5px")
        assert (second.style["width"], second.style["height"]) == ("80px", "40px")

    def test_non_flex_parent_is_left_alone(self):
        parent = VirtualElement("div")
        child = parent.append_child(VirtualElement("div"))
        assert not self.dom.apply_layout_flattening(child)
        assert "position" not in child.style

    def test_show_element_important(self):
        element = VirtualElement()
        element.style["transform"] = "scale(2)"
        self.dom.show_element(element, "block", important=True)

        assert element.style["display"] == "block"
        assert element.style.get_property_priority("display") == IMPORTANT
        assert element.style.get_property_priority("opacity") == IMPORTANT
        assert element.style["transform"] == ""

    def test_element_switch_hides_component_set_variants(self):
        component_set = VirtualElement("div", {COMPONENT_SET_ATTRIBUTE: "true"})
        a = component_set.append_child(VirtualElement("div", {VARIANT_ATTRIBUTE: "true", NAME_ATTRIBUTE: "A"}))
        b = component_set.append_child(VirtualElement("div", {VARIANT_ATTRIBUTE: "true", NAME_ATTRIBUTE: "B"}))
        b.style["display"] = "none"
        b.style["opacity"] = "0"

        self.dom.perform_element_switch(a, b)

        assert a.style["display"] == "none"
        assert b.style["display"] == ""
        assert b.style["opacity"] == "1"
