"""Pydantic schemas for scene documents"""

from .scene import SceneDocument, NodeSchema, ResolvedInstanceSchema, ReactionSchema, FillSchema

__all__ = ["SceneDocument", "NodeSchema", "ResolvedInstanceSchema", "ReactionSchema", "FillSchema"]
