"""Core data models for the floor-plan editor."""

from .model import (
    ROOM_COLORS,
    ComponentInstance,
    ComponentTemplate,
    ConflictMatrixEntry,
    Document,
    Edge,
    Link,
    Point,
    ResolutionMode,
    Room,
    RoomColor,
    Side,
)

__all__ = [
    "ROOM_COLORS",
    "ComponentInstance",
    "ComponentTemplate",
    "ConflictMatrixEntry",
    "Document",
    "Edge",
    "Link",
    "Point",
    "ResolutionMode",
    "Room",
    "RoomColor",
    "Side",
]
