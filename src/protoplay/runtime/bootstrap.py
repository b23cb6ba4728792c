"""
Scene Bootstrap - Builds and wires a scene for the animation system

Python form of the page's initialization script:
1. Build a VirtualElement tree per exported root (and per variant family)
2. Register every node of every subtree with the AnimationSystem
3. Register the variant instance records
4. Apply initial visibility (template hidden, active variant shown)
5. Install the initial timeout and click reactions

Scene documents are YAML or JSON (JSON is valid YAML) and are validated
by the pydantic schemas before any element is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

import pydantic
import yaml

from protoplay.dom.element import (
    COMPONENT_SET_ATTRIBUTE,
    ID_ATTRIBUTE,
    NAME_ATTRIBUTE,
    TYPE_ATTRIBUTE,
    VARIANT_ATTRIBUTE,
    BoundingBox,
    VirtualElement,
)
from protoplay.engine.animation_system import AnimationSystem
from protoplay.models.enums import LogCategory, NodeType
from protoplay.models.snapshot import ResolvedInstance, Snapshot
from protoplay.models.variant import VariantInstance
from protoplay.schemas.scene import SceneDocument
from protoplay.utils.css import first_fill_rgba, px
from protoplay.utils.logger import get_category_logger
from protoplay.utils.validation import (
    ValidationError,
    validate_animation_chain,
    validate_resolved_instance,
    validate_tree,
)

log = get_category_logger(LogCategory.SCENE)

INSTANCE_ATTRIBUTE = "data-instance-id"
PAGE_ATTRIBUTE = "data-page"

TAG_BY_TYPE = {
    NodeType.TEXT: "span",
    NodeType.VECTOR: "svg",
}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_scene(data: Any) -> Tuple[List[Snapshot], List[ResolvedInstance]]:
    """
    Validate a scene document and convert it to runtime models.

    Raises:
        ValidationError: shape errors (wrapped from pydantic) and semantic
            errors (reactions, component sets, variant membership)
    """
    if not isinstance(data, dict):
        raise ValidationError("Scene document must be a mapping", "nodes")

    try:
        document = SceneDocument.model_validate(data)
    except pydantic.ValidationError as ex:
        first = ex.errors()[0] if ex.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(f"Invalid scene document: {first.get('msg', ex)}", location) from ex

    roots, resolved = document.to_models()
    for root in roots:
        validate_tree(root)
    for record in resolved:
        validate_resolved_instance(record)
        for variant in record.variants:
            validate_tree(variant)

    log.info("Scene parsed", roots=len(roots), instances=len(resolved))
    return roots, resolved


def load_scene(path: Union[str, Path]) -> Tuple[List[Snapshot], List[ResolvedInstance]]:
    """Read a YAML/JSON scene file and parse it."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as ex:
        raise ValidationError(f"Scene file {path.name} is not valid YAML/JSON: {ex}") from ex

    log.info("Scene file loaded", path=str(path))
    return parse_scene(data)


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

@dataclass
class Scene:
    """Result of a bootstrap: the page tree and what was wired onto it"""
    page: VirtualElement
    system: AnimationSystem
    instances: List[VariantInstance] = field(default_factory=list)
    timeouts: int = 0
    clicks: int = 0

    def element(self, node_id: str) -> Optional[VirtualElement]:
        return self.system.get_element(node_id)  # type: ignore[return-value]

    def validate_chain(self, chain: Sequence[str]) -> bool:
        """
        Check that the registered nodes of `chain` link by reactions, in order.

        Raises:
            ValidationError: a node is not part of the scene or a link is missing
        """
        nodes = [self.system.get_node(node_id) for node_id in chain]
        valid = validate_animation_chain(chain, [n for n in nodes if n is not None])
        log.debug("Animation chain checked", chain=" -> ".join(chain), valid=valid)
        return valid


class SceneBootstrap:
    """
    Builds the element tree of a scene and wires it into an AnimationSystem.

    Example:
        system = AnimationSystem(config)
        roots, resolved = load_scene("scene.yaml")
        scene = SceneBootstrap(system).build(roots, resolved)
        scene.element("1:1").click()
    """

    def __init__(self, system: AnimationSystem):
        self.system = system
        self._built: Dict[str, VirtualElement] = {}

    # === Element building ===

    def build_element(self, node: Snapshot, origin: Tuple[float, float] = (0.0, 0.0)) -> VirtualElement:
        """
        Build the element subtree of a snapshot.

        Args:
            node: Snapshot to render
            origin: Absolute page position of the parent

        Returns:
            Root element of the subtree (boxes in page coordinates)
        """
        x, y = origin[0] + node.x, origin[1] + node.y

        attributes = {
            ID_ATTRIBUTE: node.id,
            NAME_ATTRIBUTE: node.name,
            TYPE_ATTRIBUTE: node.type.value,
        }
        if node.type == NodeType.COMPONENT_SET:
            attributes[COMPONENT_SET_ATTRIBUTE] = "true"
        elif node.type == NodeType.COMPONENT:
            attributes[VARIANT_ATTRIBUTE] = "true"

        element = VirtualElement(
            TAG_BY_TYPE.get(node.type, "div"),
            attributes,
            BoundingBox(x, y, node.width, node.height),
        )
        self._apply_base_style(element, node)
        self._built[node.id] = element

        if node.type == NodeType.VECTOR:
            self._build_vector(element, node, x, y)
            return element

        for child in node.children:
            element.append_child(self.build_element(child, (x, y)))
        return element

    def _apply_base_style(self, element: VirtualElement, node: Snapshot) -> None:
        element.style.set_property("width", px(node.width))
        element.style.set_property("height", px(node.height))
        if node.has_auto_layout:
            element.style.set_property("display", "flex")
        if node.opacity is not None and node.opacity != 1:
            element.style.set_property("opacity", str(node.opacity))
        if node.type != NodeType.VECTOR:
            background = first_fill_rgba(node.fills)
            if background:
                element.style.set_property("background-color", background)
        if node.corner_radius:
            element.style.set_property("border-radius", px(node.corner_radius))

    def _build_vector(self, element: VirtualElement, node: Snapshot, x: float, y: float) -> None:
        group = element.append_child(VirtualElement("g", box=BoundingBox(x, y, node.width, node.height)))
        paths = node.vector_paths or ()
        fill = first_fill_rgba(node.fills)
        for vector_path in paths or (None,):
            path = group.append_child(VirtualElement("path", box=BoundingBox(x, y, node.width, node.height)))
            if vector_path is not None:
                path.set_attribute("d", vector_path.data)
                if vector_path.winding_rule:
                    path.set_attribute("fill-rule", vector_path.winding_rule.lower())
            if fill:
                path.style.set_property("fill", fill)

    # === Scene ===

    def build(self, roots: Sequence[Snapshot], resolved: Sequence[ResolvedInstance] = ()) -> Scene:
        """
        Build the page, register everything and install initial reactions.

        Returns:
            The wired Scene
        """
        page = VirtualElement("div", {PAGE_ATTRIBUTE: "true"})
        self._built.clear()

        for root in roots:
            page.append_child(self.build_element(root))
            self._register_tree(root)

        for record in resolved:
            self._build_variant_family(page, record)

        instances = self.create_variant_instances(resolved)
        self.system.register_variant_instances(instances)
        self.apply_initial_visibility(instances)

        timeouts, clicks = self.install_initial_reactions(roots, resolved)

        log.info(
            "Scene bootstrapped",
            elements=self.system.element_count,
            instances=len(instances),
            timeouts=timeouts,
            clicks=clicks,
        )
        return Scene(page, self.system, instances, timeouts, clicks)

    def _register_tree(self, root: Snapshot) -> None:
        for node in [root, *root.iter_descendants()]:
            element = self._built.get(node.id)
            if element is not None:
                self.system.register_element(node.id, element, node)

    def _build_variant_family(self, page: VirtualElement, record: ResolvedInstance) -> None:
        """
        Make every variant of an instance addressable.

        Variants already on the page (inside an exported component set)
        are reused; the rest are rendered in a component-set wrapper
        placed where the instance is.
        """
        instance_element = self._built.get(record.instance.id)
        box = instance_element.bounding_box() if instance_element is not None else BoundingBox()
        container = instance_element.parent if instance_element is not None and instance_element.parent else page

        wrapper: Optional[VirtualElement] = None
        for variant in record.variants:
            if variant.id not in self._built:
                if wrapper is None:
                    wrapper = container.append_child(VirtualElement(
                        "div",
                        {COMPONENT_SET_ATTRIBUTE: "true", INSTANCE_ATTRIBUTE: record.instance.id},
                        box,
                    ))
                wrapper.append_child(self.build_element(variant, (box.x - variant.x, box.y - variant.y)))
            self._register_tree(variant)

        if instance_element is None:
            log.warn("Instance element not on page", instance=record.instance.id)

    def create_variant_instances(self, resolved: Iterable[ResolvedInstance]) -> List[VariantInstance]:
        instances = []
        for record in resolved:
            variant_ids = [variant.id for variant in record.variants]
            active_id = record.active_variant.id
            instances.append(VariantInstance(
                instance_id=record.instance.id,
                variants=variant_ids,
                active_variant=active_id,
                current_index=variant_ids.index(active_id) if active_id in variant_ids else 0,
            ))
        return instances

    def apply_initial_visibility(self, instances: Iterable[VariantInstance]) -> None:
        """Hide each instance template; show only its active variant."""
        for instance in instances:
            instance_element = self.system.get_element(instance.instance_id)
            if instance_element is not None:
                instance_element.style.set_property("display", "none")

            for variant_id in instance.variants:
                element = self.system.get_element(variant_id)
                if element is None:
                    continue
                if variant_id == instance.active_variant:
                    element.style.set_property("display", "block")
                    element.style.set_property("opacity", "1")
                else:
                    element.style.set_property("display", "none")
                    element.style.set_property("opacity", "0")

    def install_initial_reactions(
        self,
        roots: Sequence[Snapshot],
        resolved: Sequence[ResolvedInstance] = ()
    ) -> Tuple[int, int]:
        """
        Install timeout and click reactions of everything initially shown.

        A resolved instance is redirected to its active variant. Hidden
        subtrees (instance templates, inactive variants) are skipped.

        Returns:
            (timeouts scheduled, click listeners attached)
        """
        active_by_instance = {record.instance.id: record.active_variant for record in resolved}

        hidden: Set[str] = set()
        for record in resolved:
            hidden.update(node.id for node in record.instance.iter_descendants())
            for variant in record.variants:
                if variant.id != record.active_variant.id:
                    hidden.add(variant.id)
                    hidden.update(node.id for node in variant.iter_descendants())

        candidates: List[Snapshot] = []
        for root in roots:
            candidates.extend([root, *root.iter_descendants()])
        for record in resolved:
            candidates.extend([record.active_variant, *record.active_variant.iter_descendants()])

        installed: Set[str] = set()
        timeouts = clicks = 0
        for node in candidates:
            if node.id in hidden:
                continue
            node_id = active_by_instance[node.id].id if node.id in active_by_instance else node.id
            if node_id in installed:
                continue
            installed.add(node_id)
            timeouts += self.system.setup_timeout_reactions(node_id)
            clicks += self.system.setup_click_reactions(node_id)

        return timeouts, clicks


def bootstrap_scene(
    source: Union[str, Path, Dict[str, Any]],
    system: Optional[AnimationSystem] = None
) -> Scene:
    """Load (path) or parse (dict) a scene and bootstrap it."""
    roots, resolved = parse_scene(source) if isinstance(source, dict) else load_scene(source)
    return SceneBootstrap(system or AnimationSystem()).build(roots, resolved)
