"""Enum conversion utilities"""

from enum import Enum
from typing import Any, Optional, Type, TypeVar

# Generic type for any Enum subclass
E = TypeVar("E", bound=Enum)


class EnumHelper:
    """
    Parses exported names (node types, transitions, easings, log levels)
    back to enum members.
    """

    @staticmethod
    def from_string(enum_class: Type[E], name: Any, default: Optional[E] = None) -> E:
        """
        Parse an exported name to an enum member.

        Args:
            enum_class: Enum class to parse into
            name: Member name, matched ignoring case; a member passes through
            default: Returned for unknown names (None = raise)

        Returns:
            Enum member, or default if provided

        Raises:
            ValueError: unknown name and no default
        """
        if isinstance(name, enum_class):
            return name

        wanted = str(name).strip().upper()
        member = enum_class.__members__.get(wanted)
        if member is not None:
            return member

        if default is not None:
            return default
        raise ValueError(f"Invalid {enum_class.__name__} name: {name}")
