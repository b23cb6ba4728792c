"""
Scene schemas - Pydantic models for the exported scene document
Includes: fills, reactions, node trees and resolved component instances

Field names accept both the design tool's camelCase export keys and
snake_case. Each schema converts to its immutable runtime model.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from protoplay.models.enums import (
    AxisAlign,
    EasingType,
    FillType,
    LayoutMode,
    LayoutSizing,
    NodeType,
    TransitionType,
    TriggerType,
)
from protoplay.models.snapshot import (
    RGBA,
    Action,
    Fill,
    GradientStop,
    Reaction,
    ResolvedInstance,
    Snapshot,
    Transition,
    Trigger,
    VectorPath,
)
from protoplay.utils.enum_helper import EnumHelper

SCHEMA_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


class ColorSchema(BaseModel):
    """RGB(A) channels in 0.0-1.0"""
    model_config = SCHEMA_CONFIG

    r: float = Field(ge=0, le=1)
    g: float = Field(ge=0, le=1)
    b: float = Field(ge=0, le=1)
    a: Optional[float] = Field(None, ge=0, le=1)

    def to_model(self) -> RGBA:
        return RGBA(self.r, self.g, self.b, self.a)


class GradientStopSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    position: float
    color: ColorSchema

    def to_model(self) -> GradientStop:
        return GradientStop(self.position, self.color.to_model())


class FillSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    type: FillType
    color: Optional[ColorSchema] = None
    opacity: Optional[float] = Field(None, ge=0, le=1)
    gradient_stops: Optional[List[GradientStopSchema]] = Field(None, alias="gradientStops")
    visible: Optional[bool] = None

    def to_model(self) -> Fill:
        return Fill(
            type=self.type,
            color=self.color.to_model() if self.color else None,
            opacity=self.opacity,
            gradient_stops=tuple(s.to_model() for s in self.gradient_stops) if self.gradient_stops is not None else None,
            visible=self.visible,
        )


class VectorPathSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    data: str
    winding_rule: Optional[str] = Field(None, alias="windingRule")

    def to_model(self) -> VectorPath:
        return VectorPath(self.data, self.winding_rule)


class EasingSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    type: str = Field(description="Named easing, e.g. 'EASE_OUT'")


class TransitionSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    type: str = Field(description="SMART_ANIMATE, DISSOLVE, INSTANT, ...")
    duration: Optional[float] = Field(None, ge=0, description="Seconds")
    easing: Optional[EasingSchema] = None

    def to_model(self) -> Transition:
        easing = None
        if self.easing is not None:
            # Unknown curves render as the default curve
            easing = EnumHelper.from_string(EasingType, self.easing.type, default=EasingType.GENTLE)
        return Transition(
            type=EnumHelper.from_string(TransitionType, self.type, default=TransitionType.INSTANT),
            duration=self.duration,
            easing=easing,
        )


class TriggerSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    type: TriggerType
    timeout: Optional[float] = Field(None, ge=0, description="Seconds (AFTER_TIMEOUT only)")


class ActionSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    type: Optional[str] = None
    destination_id: Optional[str] = Field(None, alias="destinationId")
    transition: Optional[TransitionSchema] = None


class ReactionSchema(BaseModel):
    model_config = SCHEMA_CONFIG

    trigger: TriggerSchema
    action: ActionSchema

    def to_model(self) -> Reaction:
        return Reaction(
            trigger=Trigger(self.trigger.type, self.trigger.timeout),
            action=Action(
                destination_id=self.action.destination_id,
                type=self.action.type,
                transition=self.action.transition.to_model() if self.action.transition else None,
            ),
        )


class NodeSchema(BaseModel):
    """One exported node with its subtree"""
    model_config = SCHEMA_CONFIG

    id: str = Field(min_length=1)
    name: str
    type: str = Field("FRAME", description="Node type; unknown kinds map to UNKNOWN")
    x: float = 0.0
    y: float = 0.0
    width: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)
    opacity: Optional[float] = Field(None, ge=0, le=1)
    fills: Optional[List[FillSchema]] = None
    corner_radius: Optional[float] = Field(None, alias="cornerRadius")

    layout_mode: Optional[LayoutMode] = Field(None, alias="layoutMode")
    primary_axis_align_items: Optional[AxisAlign] = Field(None, alias="primaryAxisAlignItems")
    counter_axis_align_items: Optional[AxisAlign] = Field(None, alias="counterAxisAlignItems")
    item_spacing: Optional[float] = Field(None, alias="itemSpacing")
    padding_left: Optional[float] = Field(None, alias="paddingLeft")
    padding_right: Optional[float] = Field(None, alias="paddingRight")
    padding_top: Optional[float] = Field(None, alias="paddingTop")
    padding_bottom: Optional[float] = Field(None, alias="paddingBottom")
    layout_sizing_horizontal: Optional[LayoutSizing] = Field(None, alias="layoutSizingHorizontal")
    layout_sizing_vertical: Optional[LayoutSizing] = Field(None, alias="layoutSizingVertical")

    vector_paths: Optional[List[VectorPathSchema]] = Field(None, alias="vectorPaths")
    reactions: List[ReactionSchema] = Field(default_factory=list)
    children: List["NodeSchema"] = Field(default_factory=list)

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            id=self.id,
            name=self.name,
            type=EnumHelper.from_string(NodeType, self.type, default=NodeType.UNKNOWN),
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            opacity=self.opacity,
            fills=tuple(f.to_model() for f in self.fills) if self.fills is not None else None,
            corner_radius=self.corner_radius,
            layout_mode=self.layout_mode,
            primary_axis_align_items=self.primary_axis_align_items,
            counter_axis_align_items=self.counter_axis_align_items,
            item_spacing=self.item_spacing,
            padding_left=self.padding_left,
            padding_right=self.padding_right,
            padding_top=self.padding_top,
            padding_bottom=self.padding_bottom,
            layout_sizing_horizontal=self.layout_sizing_horizontal,
            layout_sizing_vertical=self.layout_sizing_vertical,
            vector_paths=tuple(p.to_model() for p in self.vector_paths) if self.vector_paths is not None else None,
            reactions=tuple(r.to_model() for r in self.reactions),
            children=tuple(c.to_snapshot() for c in self.children),
        )


NodeSchema.model_rebuild()


class ResolvedInstanceSchema(BaseModel):
    """Instance with its variant family, as resolved at export time"""
    model_config = SCHEMA_CONFIG

    instance: NodeSchema
    main_component: Optional[NodeSchema] = Field(None, alias="mainComponent")
    component_set: Optional[NodeSchema] = Field(None, alias="componentSet")
    variants: List[NodeSchema] = Field(default_factory=list)
    active_variant: NodeSchema = Field(alias="activeVariant")

    @model_validator(mode="after")
    def validate_variants(self):
        if not self.variants:
            raise ValueError(f"resolved instance {self.instance.id} has no variants")
        return self

    def to_model(self) -> ResolvedInstance:
        return ResolvedInstance(
            instance=self.instance.to_snapshot(),
            active_variant=self.active_variant.to_snapshot(),
            variants=tuple(v.to_snapshot() for v in self.variants),
            main_component=self.main_component.to_snapshot() if self.main_component else None,
            component_set=self.component_set.to_snapshot() if self.component_set else None,
        )


class SceneDocument(BaseModel):
    """Root of an exported scene"""
    model_config = SCHEMA_CONFIG

    nodes: List[NodeSchema] = Field(default_factory=list)
    resolved_instances: List[ResolvedInstanceSchema] = Field(default_factory=list, alias="resolvedInstances")

    def to_models(self):
        """Returns (root snapshots, resolved instances)"""
        return (
            [node.to_snapshot() for node in self.nodes],
            [resolved.to_model() for resolved in self.resolved_instances],
        )
