from dataclasses import dataclass, field
from typing import List


@dataclass
class VariantInstance:
    """
    Runtime record of one component instance and its variant family.

    Only the variant handler mutates it, on a completed switch.
    """
    instance_id: str
    variants: List[str] = field(default_factory=list)
    active_variant: str = ""
    current_index: int = 0

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.variants

    def owns(self, node_id: str) -> bool:
        """True for the instance id itself or any member variant id"""
        return node_id == self.instance_id or node_id in self.variants

    def activate(self, variant_id: str) -> None:
        self.active_variant = variant_id
        self.current_index = self.variants.index(variant_id)
