"""
Scene validation

Semantic checks on ingested snapshots. Shape errors are caught earlier by
the pydantic schemas; everything here raises ValidationError.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from protoplay.models.enums import NodeType, TriggerType
from protoplay.models.snapshot import Reaction, ResolvedInstance, Snapshot

SUPPORTED_TRIGGERS = frozenset({
    TriggerType.ON_CLICK,
    TriggerType.ON_PRESS,
    TriggerType.AFTER_TIMEOUT,
    TriggerType.ON_DRAG,
})


class ValidationError(ValueError):
    """
    Invalid scene data

    Args:
        message: Human readable description
        field: Offending field name, when one can be named
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def __str__(self):
        message = super().__str__()
        return f"{message} (field: {self.field})" if self.field else message


def validate_node(node: Snapshot) -> Snapshot:
    """Check identity and geometry of one node (children not included)."""
    if not node.id:
        raise ValidationError("Node must have a valid id", "id")
    if not node.name:
        raise ValidationError(f"Node {node.id} must have a valid name", "name")
    if node.width < 0 or node.height < 0:
        raise ValidationError(f"Node {node.id} must have valid positive dimensions", "dimensions")
    return node


def validate_reactions(reactions: Sequence[Reaction], node_id: str = "") -> List[Reaction]:
    """
    Check reaction wiring.

    Raises:
        ValidationError: unsupported trigger, AFTER_TIMEOUT without a
            timeout, or a missing destination
    """
    prefix = f"Node {node_id}: " if node_id else ""
    for index, reaction in enumerate(reactions):
        trigger = reaction.trigger
        if trigger.type not in SUPPORTED_TRIGGERS:
            raise ValidationError(f"{prefix}Reaction {index} has invalid trigger type", "trigger")
        if trigger.type == TriggerType.AFTER_TIMEOUT and trigger.timeout is None:
            raise ValidationError(f"{prefix}Timeout reaction {index} must have numeric timeout value", "timeout")
        if not reaction.action.destination_id:
            raise ValidationError(f"{prefix}Reaction {index} must have destinationId", "destinationId")
    return list(reactions)


def validate_tree(root: Snapshot) -> Snapshot:
    """Validate a node, its reactions and every descendant."""
    for node in [root, *root.iter_descendants()]:
        validate_node(node)
        validate_reactions(node.reactions, node.id)
    return root


def validate_component_set(component_set: Snapshot) -> None:
    """
    Check a COMPONENT_SET and its variants.

    Raises:
        ValidationError: wrong type, no COMPONENT variants, or a variant
            whose reaction points back at itself
    """
    if component_set.type != NodeType.COMPONENT_SET:
        raise ValidationError("Node must be a COMPONENT_SET", "type")
    if not component_set.children:
        raise ValidationError("Component set must have variants (children)", "children")

    variants = [child for child in component_set.children if child.type == NodeType.COMPONENT]
    if not variants:
        raise ValidationError("Component set must have at least one COMPONENT variant", "children")

    for variant in variants:
        for reaction in variant.reactions:
            if reaction.action.destination_id == variant.id:
                raise ValidationError(f"Variant {variant.name} has circular self-reference", "destinationId")


def validate_resolved_instance(resolved: ResolvedInstance) -> None:
    """The active variant must be one of the instance's variants."""
    variant_ids = [variant.id for variant in resolved.variants]
    if resolved.active_variant.id not in variant_ids:
        raise ValidationError(
            f"Instance {resolved.instance.id}: active variant {resolved.active_variant.id} is not among its variants",
            "activeVariant",
        )
    if resolved.component_set is not None:
        validate_component_set(resolved.component_set)


def validate_animation_chain(chain: Sequence[str], nodes: Iterable[Snapshot]) -> bool:
    """
    Check that each node of a chain has a reaction leading to the next.

    Returns:
        False for chains shorter than two nodes, True when valid

    Raises:
        ValidationError: a chain node is missing or a link has no reaction
    """
    if len(chain) < 2:
        return False

    by_id: Mapping[str, Snapshot] = {node.id: node for node in nodes}
    for node_id in chain:
        if node_id not in by_id:
            raise ValidationError(f"Animation chain references missing node: {node_id}")

    for current_id, next_id in zip(chain, chain[1:]):
        current = by_id[current_id]
        if not current.reactions:
            raise ValidationError(f"Node {current_id} in chain has no reactions")
        if not any(r.action.destination_id == next_id for r in current.reactions):
            raise ValidationError(f"No reaction found from {current_id} to {next_id}")

    return True
