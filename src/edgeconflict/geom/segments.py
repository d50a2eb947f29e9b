"""Wall segmentation for rooms.

Each side of a room is split at every point where another room's
rectangle starts or stops covering that side's line. Within one
resulting segment the set of rooms lying over it is constant, so the
resolver can color a whole segment with a single flat fill.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from shapely.geometry import LineString, box
from shapely.geometry import Point as ShapelyPoint

from .. import config
from ..core.model import Edge, Point, Room, Side

SIDES = (Side.NORTH, Side.SOUTH, Side.EAST, Side.WEST)


def _clean_coord(value: float) -> float:
    """Collapse float noise from shapely back onto the integer grid."""
    nearest = round(value)
    if abs(value - nearest) < config.EPSILON:
        return int(nearest)
    return value


def wall_endpoints(room: Room, side: Side) -> Tuple[Point, Point]:
    """Return the two endpoints of a room's full wall on one side."""
    if side is Side.NORTH:
        return Point(room.x, room.y), Point(room.right, room.y)
    if side is Side.SOUTH:
        return Point(room.x, room.bottom), Point(room.right, room.bottom)
    if side is Side.EAST:
        return Point(room.right, room.y), Point(room.right, room.bottom)
    return Point(room.x, room.y), Point(room.x, room.bottom)


def _cut_points(room: Room, side: Side, all_rooms: Iterable[Room]) -> List[float]:
    """Collect sorted, deduplicated positions along the wall's primary axis."""
    start, end = wall_endpoints(room, side)
    wall = LineString([(start.x, start.y), (end.x, end.y)])
    horizontal = side.is_horizontal

    points = [start.x, end.x] if horizontal else [start.y, end.y]

    for other in all_rooms:
        if other.id == room.id:
            continue

        hit = wall.intersection(box(other.x, other.y, other.right, other.bottom))
        if hit.is_empty or hit.length <= config.EPSILON:
            continue

        min_x, min_y, max_x, max_y = hit.bounds
        if horizontal:
            points.extend((min_x, max_x))
        else:
            points.extend((min_y, max_y))

    points.sort()
    unique: List[float] = []
    for value in points:
        if not unique or abs(value - unique[-1]) > config.EPSILON:
            unique.append(value)

    return [_clean_coord(v) for v in unique]


def segment_room_edges(room: Room, all_rooms: Iterable[Room]) -> List[Edge]:
    """Decompose each wall of a room into segments with a uniform room cover.

    Args:
        room: The room whose walls are segmented.
        all_rooms: Every room of the document (the room itself is skipped).

    Returns:
        Edges for all four sides, ids ``{room_id}-{side}-{index}``. A wall
        that no other room crosses yields a single full-length edge.
    """
    all_rooms = list(all_rooms)
    edges: List[Edge] = []

    for side in SIDES:
        cuts = _cut_points(room, side, all_rooms)
        start, _ = wall_endpoints(room, side)

        index = 0
        for a, b in zip(cuts, cuts[1:]):
            if abs(b - a) <= config.EPSILON:
                continue

            if side.is_horizontal:
                x1, y1, x2, y2 = a, start.y, b, start.y
            else:
                x1, y1, x2, y2 = start.x, a, start.x, b

            edges.append(
                Edge(
                    id=f"{room.id}-{side.value}-{index}",
                    room_id=room.id,
                    side=side,
                    x1=x1,
                    y1=y1,
                    x2=x2,
                    y2=y2,
                )
            )
            index += 1

    return edges


def regenerate_edges(
    rooms: Iterable[Room], previous_edges: Iterable[Edge] = ()
) -> Dict[str, Edge]:
    """Recompute every room's segments, carrying user properties over.

    Segment ids are not stable across regeneration, so ``color_override``
    and ``name`` are matched back by ``room_id + side``. When a wall had
    several segments with different overrides, the last one seen wins
    for the whole wall.
    """
    rooms = list(rooms)

    preserved: Dict[Tuple[str, Side], Tuple] = {}
    for edge in previous_edges:
        if edge.color_override is not None or edge.name:
            preserved[(edge.room_id, edge.side)] = (edge.color_override, edge.name)

    edges: Dict[str, Edge] = {}
    for room in rooms:
        for edge in segment_room_edges(room, rooms):
            kept = preserved.get((edge.room_id, edge.side))
            if kept is not None:
                color_override, name = kept
                edge = replace(edge, color_override=color_override, name=name)
            edges[edge.id] = edge

    return edges


def edge_intersects_room(edge: Edge, room: Room) -> bool:
    """Check whether a segment lies over a room's closed rectangle.

    The perpendicular coordinate may sit on the room boundary; along the
    segment's own axis the overlap must have positive length.
    """
    if edge.is_horizontal:
        left, right = sorted((edge.x1, edge.x2))
        return room.y <= edge.y1 <= room.bottom and right > room.x and left < room.right

    top, bottom = sorted((edge.y1, edge.y2))
    return room.x <= edge.x1 <= room.right and bottom > room.y and top < room.bottom


def edge_distance(edge: Edge, x: float, y: float) -> float:
    """Distance from a grid coordinate to a segment."""
    return LineString([(edge.x1, edge.y1), (edge.x2, edge.y2)]).distance(
        ShapelyPoint(x, y)
    )

