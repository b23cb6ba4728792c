"""
Animation Models

Defines how an animation is played: transition kind, duration and the
CSS timing function for each named easing of the design tool.
"""

from dataclasses import dataclass
from typing import Optional, Union

from protoplay.models.enums import EasingType, TransitionType
from protoplay.models.snapshot import Reaction, Snapshot


# === Easing curves ===
# CSS timing functions matching the design tool's named curves

EASING_CURVES = {
    EasingType.GENTLE: "cubic-bezier(0.25, 0.46, 0.45, 0.94)",
    EasingType.QUICK: "cubic-bezier(0.55, 0.06, 0.68, 0.19)",
    EasingType.BOUNCY: "cubic-bezier(0.68, -0.55, 0.265, 1.55)",
    EasingType.SLOW: "cubic-bezier(0.23, 1, 0.32, 1)",
    EasingType.LINEAR: "linear",
    EasingType.EASE_IN_AND_OUT_BACK: "cubic-bezier(0.68, -0.6, 0.32, 1.6)",
    EasingType.EASE_OUT: "cubic-bezier(0, 0, 0.2, 1)",
}

DEFAULT_EASING = EasingType.GENTLE

ANIMATED_TRANSITIONS = frozenset({TransitionType.SMART_ANIMATE, TransitionType.DISSOLVE})


def get_easing_function(easing: Union[EasingType, str, None]) -> str:
    """
    Map an easing to a CSS timing function.

    Args:
        easing: Named easing, or an already rendered CSS timing function

    Returns:
        CSS timing function; unknown names fall back to GENTLE
    """
    if isinstance(easing, str):
        try:
            easing = EasingType(easing)
        except ValueError:
            # Raw CSS value (e.g. "ease-out" from config)
            return easing
    return EASING_CURVES.get(easing, EASING_CURVES[DEFAULT_EASING])


@dataclass(frozen=True)
class AnimationOptions:
    """
    Playback parameters of one animation

    Attributes:
        transition_type: SMART_ANIMATE, DISSOLVE or any instant kind
        duration: Seconds (>= 0)
        easing: Named easing or a raw CSS timing function

    Examples:
        AnimationOptions(TransitionType.SMART_ANIMATE, 0.5, EasingType.EASE_OUT)
        AnimationOptions.instant()
    """
    transition_type: TransitionType = TransitionType.INSTANT
    duration: float = 0.0
    easing: Union[EasingType, str, None] = None

    @property
    def easing_function(self) -> str:
        return get_easing_function(self.easing)

    @property
    def is_animated(self) -> bool:
        return self.transition_type in ANIMATED_TRANSITIONS

    @classmethod
    def instant(cls) -> "AnimationOptions":
        return cls(TransitionType.INSTANT, 0.0, None)

    @classmethod
    def from_reaction(
        cls,
        reaction: Optional[Reaction],
        default_duration: float = 0.0,
        default_easing: Union[EasingType, str, None] = None
    ) -> "AnimationOptions":
        """
        Options of a reaction

        A missing reaction or a reaction without transition is an instant
        switch. Duration and easing absent from the transition take the
        given defaults.
        """
        if reaction is None or reaction.action.transition is None:
            return cls.instant()
        transition = reaction.action.transition
        duration = default_duration if transition.duration is None else transition.duration
        easing = default_easing if transition.easing is None else transition.easing
        return cls(transition.type, max(0.0, duration), easing)

    @classmethod
    def from_node(cls, node: Optional[Snapshot], **defaults) -> "AnimationOptions":
        """Options defined by the first reaction of a node."""
        if node is None or not node.reactions:
            return cls.instant()
        return cls.from_reaction(node.reactions[0], **defaults)

    def __repr__(self):
        return f"AnimationOptions({self.transition_type.name}, {self.duration}s, {self.easing_function})"
