"""Point and rectangle math on the room grid."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, NamedTuple, Tuple

from .. import config
from ..core.model import Point, Room


class Overlap(NamedTuple):
    """Overlap extents of two rectangles on each axis.

    Both extents are 0 when the rectangles are separated by a gap on
    either axis; ``separated`` tells that case apart from tangency.
    """

    x: float
    y: float
    separated: bool = False

    @property
    def is_overlapping(self) -> bool:
        """True overlap: both axes strictly positive (shared interior)."""
        return self.x > 0 and self.y > 0

    @property
    def is_touching(self) -> bool:
        """Tangent: zero on one axis, non-negative on the other."""
        return not self.separated and not self.is_overlapping


def snap_to_grid(point: Point, grid_size: float = config.GRID_SIZE) -> Point:
    """Round a continuous coordinate to the nearest grid line."""
    return Point(
        x=math.floor(point.x / grid_size + 0.5) * grid_size,
        y=math.floor(point.y / grid_size + 0.5) * grid_size,
    )


def grid_coordinates(point: Point, grid_size: float = config.GRID_SIZE) -> Point:
    """Return the grid cell containing a canvas coordinate."""
    return Point(x=math.floor(point.x / grid_size), y=math.floor(point.y / grid_size))


def point_in_room(point: Point, room: Room) -> bool:
    """Half-open containment test: [x, x+width) x [y, y+height)."""
    return room.x <= point.x < room.right and room.y <= point.y < room.bottom


def rectangles_overlap_area(r1: Room, r2: Room) -> Overlap:
    """Compute the overlap extents of two rooms.

    Each axis is clamped at zero, so two rooms that are far apart on x
    report ``x == 0`` rather than a negative gap. When the rooms are
    apart on either axis the other axis is reported as zero as well.
    """
    overlap_x = min(r1.right, r2.right) - max(r1.x, r2.x)
    overlap_y = min(r1.bottom, r2.bottom) - max(r1.y, r2.y)

    if overlap_x < 0 or overlap_y < 0:
        return Overlap(0, 0, separated=True)

    return Overlap(overlap_x, overlap_y)


def rooms_overlap(r1: Room, r2: Room) -> bool:
    """Check whether two rooms share interior space (not merely touch)."""
    return rectangles_overlap_area(r1, r2).is_overlapping


def bounding_box(rooms: Iterable[Room]) -> Tuple[int, int, int, int] | None:
    """Return (min_x, min_y, max_x, max_y) of a set of rooms, or None if empty."""
    rooms = list(rooms)
    if not rooms:
        return None

    return (
        min(r.x for r in rooms),
        min(r.y for r in rooms),
        max(r.right for r in rooms),
        max(r.bottom for r in rooms),
    )


def translate_room(room: Room, dx: int, dy: int, room_id: str | None = None) -> Room:
    """Return a copy of the room shifted by (dx, dy), optionally re-identified."""
    return replace(room, id=room_id or room.id, x=room.x + dx, y=room.y + dy)
