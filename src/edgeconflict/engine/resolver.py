"""Edge conflict resolution.

When two rooms overlap, their walls occupy the same space and can only
be drawn in one color ("edge fighting"). This module works out which
rooms are present over a wall segment, the color each of them brings,
and which of those colors wins under the active resolution mode.

Everything here is a pure function of its arguments. Nothing is cached:
rooms, overrides and settings may change between two reads.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Sequence

from ..core.model import (
    DEFAULT_EDGE_COLOR,
    ROOM_COLORS,
    ConflictMatrixEntry,
    Document,
    Edge,
    ResolutionMode,
    Room,
    RoomColor,
)
from ..geom.primitives import rooms_overlap
from ..geom.segments import edge_intersects_room
from .components import instance_edges, instance_rooms, is_shadow_room


class OverrideLookup(str, Enum):
    """Where the owning room's color override is looked up.

    ``WALL``: an override on any segment of the same room side applies.
    ``SEGMENT``: only the override stored on the edge itself applies.
    """

    WALL = "wall"
    SEGMENT = "segment"


class CompetingColor(NamedTuple):
    """A color contributed by one room present over a segment."""

    color: RoomColor
    created_at: int
    room_id: str


def find_competing_rooms(edge: Edge, rooms: Iterable[Room]) -> List[Room]:
    """Find every room present at a segment's location.

    A room competes when the segment lies over its rectangle and it is
    either the owning room or shares interior space with the owning room.
    Rooms that merely touch the owner do not compete. Staged template
    copies only compete with each other, never with live rooms.

    Returns:
        Competing rooms, or an empty list if the owning room is missing.
    """
    staged = is_shadow_room(edge.room_id)
    rooms = [room for room in rooms if is_shadow_room(room.id) == staged]
    owner = next((r for r in rooms if r.id == edge.room_id), None)
    if owner is None:
        return []

    return [
        room
        for room in rooms
        if edge_intersects_room(edge, room)
        and (room.id == owner.id or rooms_overlap(owner, room))
    ]


def wall_override(
    edge: Edge,
    all_edges: Iterable[Edge] = (),
    lookup: OverrideLookup = OverrideLookup.WALL,
) -> Optional[RoomColor]:
    """Return the override that applies to a segment's own room, if any."""
    if edge.color_override is not None:
        return edge.color_override

    if lookup is OverrideLookup.WALL:
        for other in all_edges:
            if (
                other.room_id == edge.room_id
                and other.side == edge.side
                and other.color_override is not None
            ):
                return other.color_override

    return None


def competing_colors(
    edge: Edge,
    rooms: Iterable[Room],
    all_edges: Iterable[Edge] = (),
    lookup: OverrideLookup = OverrideLookup.WALL,
) -> List[CompetingColor]:
    """Derive the competing colors at a segment.

    The owning room brings its wall override when set, otherwise its room
    color. Every other room brings its plain room color. The result is
    ordered oldest room first so resolution never depends on list order.
    """
    override = wall_override(edge, all_edges, lookup)

    colors = []
    for room in find_competing_rooms(edge, rooms):
        color = room.color
        if room.id == edge.room_id and override is not None:
            color = override
        colors.append(CompetingColor(color, room.created_at, room.id))

    colors.sort(key=lambda c: (c.created_at, c.room_id))
    return colors


def resolve_chronological(colors: Sequence[CompetingColor]) -> RoomColor:
    """The most recently created room's color wins."""
    latest = colors[0]
    for current in colors[1:]:
        if current.created_at > latest.created_at:
            latest = current
    return latest.color


def resolve_priority(
    colors: Sequence[CompetingColor], color_priority: Sequence[RoomColor]
) -> RoomColor:
    """The first color of the priority list that is competing wins.

    Falls back to the first competing color when the priority list names
    none of them.
    """
    present = {c.color for c in colors}
    for color in color_priority:
        if color in present:
            return color
    return colors[0].color


def resolve_matrix(
    colors: Sequence[CompetingColor],
    conflict_matrix: Sequence[ConflictMatrixEntry],
    color_priority: Sequence[RoomColor],
) -> RoomColor:
    """Apply an explicit matrix rule for a pair of colors.

    Only two competing colors can match a rule. The older room's color is
    tried as ``underneath`` first, then the pair is tried the other way
    round. Without a matching rule (or with more than two colors) the
    priority list decides.
    """
    if len(colors) == 2:
        first, second = colors[0].color, colors[1].color
        for underneath, on_top in ((first, second), (second, first)):
            for entry in conflict_matrix:
                if entry.underneath == underneath and entry.on_top == on_top:
                    return entry.result

    return resolve_priority(colors, color_priority)


def resolve_competing_color(
    edge: Edge,
    rooms: Iterable[Room],
    mode: ResolutionMode,
    color_priority: Sequence[RoomColor] = (),
    conflict_matrix: Sequence[ConflictMatrixEntry] = (),
    all_edges: Iterable[Edge] = (),
    lookup: OverrideLookup = OverrideLookup.WALL,
) -> Optional[RoomColor]:
    """Resolve the winning color of a segment.

    Returns:
        The winning color, or None when the owning room does not exist.
    """
    rooms = list(rooms)
    colors = competing_colors(edge, rooms, all_edges, lookup)
    if not colors:
        return None

    if len(colors) == 1:
        return colors[0].color

    if mode == ResolutionMode.CHRONOLOGICAL:
        return resolve_chronological(colors)
    if mode == ResolutionMode.PRIORITY:
        return resolve_priority(colors, color_priority)
    if mode == ResolutionMode.MATRIX:
        return resolve_matrix(colors, conflict_matrix, color_priority)

    owner = next(r for r in rooms if r.id == edge.room_id)
    return owner.color


def resolve_edge_color(
    edge: Edge,
    rooms: Iterable[Room],
    mode: ResolutionMode,
    color_priority: Sequence[RoomColor] = (),
    conflict_matrix: Sequence[ConflictMatrixEntry] = (),
    all_edges: Iterable[Edge] = (),
    lookup: OverrideLookup = OverrideLookup.WALL,
) -> str:
    """Return the display color (hex string) of a wall segment.

    Args:
        edge: The segment to color.
        rooms: Every room of the document.
        mode: Active resolution mode.
        color_priority: Colors ordered highest precedence first.
        conflict_matrix: Explicit pairwise override rules.
        all_edges: Every segment of the document, used to find an override
            set on another segment of the same wall.
        lookup: Whether overrides apply per wall or per segment.

    Returns:
        A hex color. Never raises for missing data: a segment whose room
        is gone gets ``DEFAULT_EDGE_COLOR``.
    """
    color = resolve_competing_color(
        edge, rooms, mode, color_priority, conflict_matrix, all_edges, lookup
    )
    if color is None:
        return DEFAULT_EDGE_COLOR
    return ROOM_COLORS.get(color, DEFAULT_EDGE_COLOR)


def edge_colors(document: Document, lookup: OverrideLookup = OverrideLookup.WALL) -> dict[str, str]:
    """Resolve every segment of a document, keyed by edge id."""
    rooms = document.room_list()
    edges = document.edge_list()
    return {
        edge.id: resolve_edge_color(
            edge,
            rooms,
            document.mode,
            document.color_priority,
            document.conflict_matrix,
            edges,
            lookup,
        )
        for edge in edges
    }


def instance_edge_colors(
    document: Document, lookup: OverrideLookup = OverrideLookup.WALL
) -> dict[str, str]:
    """Resolve the virtual walls of every placed instance.

    Each instance is resolved on its own: its virtual rooms only compete
    with each other, so an instance looks the same wherever it is placed.

    Returns:
        Hex colors keyed by virtual edge id (``{instance_id}:{room_id}-{side}-{n}``).
    """
    colors: dict[str, str] = {}
    for instance in document.instances.values():
        rooms = instance_rooms(document, instance)
        edges = list(instance_edges(document, instance).values())
        for edge in edges:
            colors[edge.id] = resolve_edge_color(
                edge,
                rooms,
                document.mode,
                document.color_priority,
                document.conflict_matrix,
                edges,
                lookup,
            )
    return colors
