"""
Rendering layer

Element handle contract, in-memory elements, style compilation and
transition declarations.
"""

from .element import ElementHandle, VirtualElement, StyleDeclaration, DomEvent, BoundingBox
from .style_compiler import DomManipulator, CapturedStyle
from .transitions import TransitionScheduler, get_transition_properties

__all__ = [
    "ElementHandle",
    "VirtualElement",
    "StyleDeclaration",
    "DomEvent",
    "BoundingBox",
    "DomManipulator",
    "CapturedStyle",
    "TransitionScheduler",
    "get_transition_properties",
]
