"""
Enums for the prototype animation engine
"""

from enum import Enum, auto


class NodeType(Enum):
    """Scene node kinds as exported by the design tool"""
    FRAME = "FRAME"
    GROUP = "GROUP"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    TEXT = "TEXT"
    VECTOR = "VECTOR"
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    LINE = "LINE"
    STAR = "STAR"
    POLYGON = "POLYGON"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    SECTION = "SECTION"
    UNKNOWN = "UNKNOWN"


class LayoutMode(Enum):
    """Auto-layout direction of a container"""
    NONE = "NONE"
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


class AxisAlign(Enum):
    """Auto-layout alignment along an axis"""
    MIN = "MIN"
    CENTER = "CENTER"
    MAX = "MAX"
    SPACE_BETWEEN = "SPACE_BETWEEN"
    BASELINE = "BASELINE"


class LayoutSizing(Enum):
    """Per-axis sizing mode of a node inside auto-layout"""
    FIXED = "FIXED"
    FILL = "FILL"
    HUG = "HUG"


class FillType(Enum):
    SOLID = "SOLID"
    GRADIENT_LINEAR = "GRADIENT_LINEAR"
    GRADIENT_RADIAL = "GRADIENT_RADIAL"
    GRADIENT_ANGULAR = "GRADIENT_ANGULAR"
    GRADIENT_DIAMOND = "GRADIENT_DIAMOND"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class TriggerType(Enum):
    """What fires a reaction"""
    ON_CLICK = "ON_CLICK"
    ON_PRESS = "ON_PRESS"
    AFTER_TIMEOUT = "AFTER_TIMEOUT"
    ON_DRAG = "ON_DRAG"


class TransitionType(Enum):
    """
    Prototype transition kinds

    Only SMART_ANIMATE and DISSOLVE are animated; every other kind
    switches instantly.
    """
    SMART_ANIMATE = "SMART_ANIMATE"
    DISSOLVE = "DISSOLVE"
    INSTANT = "INSTANT"
    MOVE_IN = "MOVE_IN"
    MOVE_OUT = "MOVE_OUT"
    PUSH = "PUSH"
    SLIDE_IN = "SLIDE_IN"
    SLIDE_OUT = "SLIDE_OUT"
    SCROLL_ANIMATE = "SCROLL_ANIMATE"


class EasingType(Enum):
    """Named easing curves of the design tool"""
    GENTLE = "GENTLE"
    QUICK = "QUICK"
    BOUNCY = "BOUNCY"
    SLOW = "SLOW"
    LINEAR = "LINEAR"
    EASE_IN = "EASE_IN"
    EASE_OUT = "EASE_OUT"
    EASE_IN_AND_OUT = "EASE_IN_AND_OUT"
    EASE_IN_AND_OUT_BACK = "EASE_IN_AND_OUT_BACK"


class ChangeProperty(Enum):
    """
    Tags of detected changes

    Values are the tags used by the browser runtime, so a Change can be
    handed to it unchanged. `child*` tags address a descendant.
    """
    SIZE = "size"
    OPACITY = "opacity"
    BACKGROUND = "background"
    BORDER_RADIUS = "borderRadius"
    LAYOUT = "layout"
    SIZING = "sizing"
    CHILD_POSITION = "childPosition"
    CHILD_SIZE = "childSize"
    CHILD_OPACITY = "childOpacity"
    CHILD_BACKGROUND = "childBackground"
    CHILD_FILL = "childFill"
    VECTOR_PATHS = "vectorPaths"

    @property
    def is_child(self) -> bool:
        return self in CHILD_PROPERTIES


CHILD_PROPERTIES = frozenset({
    ChangeProperty.CHILD_POSITION,
    ChangeProperty.CHILD_SIZE,
    ChangeProperty.CHILD_OPACITY,
    ChangeProperty.CHILD_BACKGROUND,
    ChangeProperty.CHILD_FILL,
    ChangeProperty.VECTOR_PATHS,
})


class StyleChangeType(Enum):
    """Kinds of compiled style mutations"""
    TRANSFORM = "transform"
    SIZE = "size"
    OPACITY = "opacity"
    BACKGROUND_COLOR = "backgroundColor"
    FILL = "fill"
    BORDER_RADIUS = "borderRadius"
    CHILD_SIZE = "childSize"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    DETECTION = auto()   # Snapshot diffing
    LAYOUT = auto()      # Layout-driven position overrides
    DOM = auto()         # Style writes, element lookups
    TRANSITION = auto()  # Transition declarations
    VARIANT = auto()     # Variant registry and switches
    ANIMATION = auto()   # Animation start/stop
    REACTION = auto()    # Timeout and click reactions
    EVENT = auto()       # Event bus events and handling
    TASK = auto()        # Timers and tracked tasks
    SCENE = auto()       # Scene loading and bootstrap
    SYSTEM = auto()      # Startup, teardown

    GENERAL = auto()     # Default general category
