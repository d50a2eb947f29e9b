"""Core data models for the floor-plan editor.

This module defines the fundamental data structures used to represent
an edited floor plan: rooms on the integer grid, the wall segments
derived from them, the settings that drive edge conflict resolution,
and the template/instance composition layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .. import config


class RoomColor(str, Enum):
    """The six room colors offered by the editor."""

    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    PINK = "pink"


ROOM_COLORS: Mapping[RoomColor, str] = {
    RoomColor.RED: "#E53E3E",
    RoomColor.YELLOW: "#F6E05E",
    RoomColor.BLUE: "#3182CE",
    RoomColor.GREEN: "#38A169",
    RoomColor.PURPLE: "#9F7AEA",
    RoomColor.PINK: "#ED64A6",
}

# Shown when an edge cannot be resolved (e.g. its room is gone)
DEFAULT_EDGE_COLOR = "#718096"


class Side(str, Enum):
    """Side of a room a wall segment belongs to."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def is_horizontal(self) -> bool:
        return self in (Side.NORTH, Side.SOUTH)


class ResolutionMode(str, Enum):
    """Policy used to pick one color among competing colors."""

    CHRONOLOGICAL = "chronological"
    PRIORITY = "priority"
    MATRIX = "matrix"


@dataclass(frozen=True)
class Point:
    """Represents a 2D point in grid space.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point.
    """

    x: float
    y: float


@dataclass(frozen=True)
class Room:
    """Represents an axis-aligned room on the integer grid.

    Attributes:
        id: Unique identifier for the room.
        name: Human-readable name of the room.
        x: Left coordinate, grid units.
        y: Top coordinate, grid units.
        width: Extent along x, grid units (> 0).
        height: Extent along y, grid units (> 0).
        color: Room color.
        created_at: Creation timestamp; never changes after creation.
        conditions: Free-form condition tags attached to the room.
    """

    id: str
    name: str
    x: int
    y: int
    width: int
    height: int
    color: RoomColor
    created_at: int
    conditions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Room '{self.id}' must have positive size, "
                f"got {self.width}x{self.height}"
            )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class Edge:
    """Represents one straight segment of one side of a room.

    Attributes:
        id: Segment identifier, ``{room_id}-{side}-{index}``.
        room_id: ID of the owning room.
        side: Which wall of the owning room this segment lies on.
        x1, y1, x2, y2: Segment endpoints in grid units.
        color_override: User-chosen color for this wall, if any.
        name: User-chosen label for this wall, if any.
    """

    id: str
    room_id: str
    side: Side
    x1: float
    y1: float
    x2: float
    y2: float
    color_override: Optional[RoomColor] = None
    name: Optional[str] = None

    @property
    def is_horizontal(self) -> bool:
        return self.side.is_horizontal

    @property
    def length(self) -> float:
        return abs(self.x2 - self.x1) + abs(self.y2 - self.y1)


@dataclass(frozen=True)
class ConflictMatrixEntry:
    """Explicit override: when ``underneath`` and ``on_top`` compete, ``result`` wins."""

    underneath: RoomColor
    on_top: RoomColor
    result: RoomColor


@dataclass(frozen=True)
class ComponentTemplate:
    """A named, reusable group of rooms.

    Attributes:
        id: Unique identifier for the template.
        name: Human-readable name.
        room_ids: Canonical rooms making up the template.
        origin_x: Anchor x used for placements, grid units.
        origin_y: Anchor y used for placements, grid units.
    """

    id: str
    name: str
    room_ids: tuple[str, ...]
    origin_x: int
    origin_y: int


@dataclass(frozen=True)
class ComponentInstance:
    """A placement of a template; (x, y) is where the template's min corner lands."""

    id: str
    template_id: str
    x: int
    y: int


@dataclass(frozen=True)
class Link:
    """A reference to another published file whose templates can be reused.

    Attributes:
        id: Unique identifier, ``link-N``.
        linked_file_id: ID of the published file.
        linked_file_name: Name of the published file when it was linked.
        imported_template_ids: Templates taken from the file, in import order.
        has_updates: Whether the published file changed since it was linked.
    """

    id: str
    linked_file_id: str
    linked_file_name: str
    imported_template_ids: tuple[str, ...] = ()
    has_updates: bool = False


@dataclass(frozen=True)
class TemplateEditSession:
    """Staged edit of a template.

    Attributes:
        template_id: Template being edited.
        instance_id: Instance the edit was started from, if any.
        rooms: Rooms before the edit started.
        edges: Edges before the edit started.
        templates: Templates before the edit started.
    """

    template_id: str
    instance_id: Optional[str]
    rooms: Mapping[str, Room]
    edges: Mapping[str, Edge]
    templates: Mapping[str, ComponentTemplate]


@dataclass(frozen=True)
class Document:
    """Represents the complete editing session.

    Attributes:
        rooms: Mapping of room ID to Room objects, in drawing order.
        edges: Mapping of edge ID to Edge objects, derived from rooms.
        mode: Active resolution policy.
        color_priority: Colors in use, highest precedence first.
        conflict_matrix: Explicit pairwise override rules.
        templates: Mapping of template ID to ComponentTemplate objects.
        instances: Mapping of instance ID to ComponentInstance objects.
        links: Mapping of link ID to Link objects.
        file_name: Project name.
        edit_session: Pending template edit, if any.
    """

    rooms: Mapping[str, Room] = field(default_factory=dict)
    edges: Mapping[str, Edge] = field(default_factory=dict)
    mode: ResolutionMode = ResolutionMode.CHRONOLOGICAL
    color_priority: tuple[RoomColor, ...] = ()
    conflict_matrix: tuple[ConflictMatrixEntry, ...] = ()
    templates: Mapping[str, ComponentTemplate] = field(default_factory=dict)
    instances: Mapping[str, ComponentInstance] = field(default_factory=dict)
    links: Mapping[str, Link] = field(default_factory=dict)
    file_name: str = config.DEFAULT_FILE_NAME
    edit_session: Optional[TemplateEditSession] = None

    @property
    def is_editing_template(self) -> bool:
        return self.edit_session is not None

    def room_list(self) -> list[Room]:
        return list(self.rooms.values())

    def edge_list(self) -> list[Edge]:
        return list(self.edges.values())
