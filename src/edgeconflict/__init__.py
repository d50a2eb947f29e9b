"""Edge Conflict - geometry and wall color resolution for floor-plan editors."""

__version__ = "0.1.0"

from .core.model import ConflictMatrixEntry, Document, Edge, ResolutionMode, Room, RoomColor, Side

__all__ = ["ConflictMatrixEntry", "Document", "Edge", "ResolutionMode", "Room", "RoomColor", "Side"]
