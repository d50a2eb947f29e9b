"""Placement validation for rooms and room groups.

Rooms may share a wall: an overlap of up to ``config.MAX_WALL_OVERLAP``
grid units on the overlapping axis is legal, anything deeper is not.
These checks never raise; an illegal placement is reported as ``False``
and callers either refuse the edit or search for a nearby legal spot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Union

from .. import config
from ..core.model import Room
from ..geom.primitives import rectangles_overlap_area, translate_room


class InvalidOperation(Exception):
    """Raised when an operation cannot be applied to the document."""

    pass


@dataclass(frozen=True)
class Found:
    """A legal position was found."""

    x: int
    y: int


@dataclass(frozen=True)
class NotFound:
    """No legal position exists within the search radius."""


PositionSearch = Union[Found, NotFound]


def _pokes_past(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """True when neither interval contains the other."""
    a_contains_b = a_start <= b_start and b_end <= a_end
    b_contains_a = b_start <= a_start and a_end <= b_end
    return not a_contains_b and not b_contains_a


def is_valid_overlap(room1: Room, room2: Room, max_overlap: int = config.MAX_WALL_OVERLAP) -> bool:
    """Check whether two rooms overlap by no more than a shared wall.

    The shared region must be a strip at most ``max_overlap`` thick. When
    the rooms overlap corner to corner (each one sticks out past the other
    on both axes) the shared region must fit in ``max_overlap`` on both axes.
    """
    # Completely separate or tangent rooms are always fine
    if (
        room1.right <= room2.x
        or room2.right <= room1.x
        or room1.bottom <= room2.y
        or room2.bottom <= room1.y
    ):
        return True

    overlap = rectangles_overlap_area(room1, room2)

    if min(overlap.x, overlap.y) > max_overlap:
        return False

    corner = _pokes_past(room1.x, room1.right, room2.x, room2.right) and _pokes_past(
        room1.y, room1.bottom, room2.y, room2.bottom
    )
    if corner:
        return overlap.x <= max_overlap and overlap.y <= max_overlap

    return True


def is_valid_placement(candidate: Room, existing_rooms: Iterable[Room]) -> bool:
    """Check a candidate room against every existing room.

    Args:
        candidate: The room at its proposed position.
        existing_rooms: Rooms already in the document. The candidate itself
            must not be in this collection.

    Returns:
        True if every pairwise overlap is legal.
    """
    return all(is_valid_overlap(candidate, other) for other in existing_rooms)


def is_valid_room_move(room: Room, new_x: int, new_y: int, all_rooms: Iterable[Room]) -> bool:
    """Check whether a room may be moved to (new_x, new_y)."""
    moved = translate_room(room, new_x - room.x, new_y - room.y)
    others = [r for r in all_rooms if r.id != room.id]
    return is_valid_placement(moved, others)


# Drag previews and keyboard nudges use the exact same rule as a move;
# the arrow-key path just never falls back to a position search.
is_valid_preview_position = is_valid_room_move
is_valid_arrow_key_move = is_valid_room_move


def search_nearest(
    target_x: int,
    target_y: int,
    is_legal: Callable[[int, int], bool],
    search_radius: int = config.SEARCH_RADIUS,
) -> PositionSearch:
    """Find the legal grid cell closest (Manhattan) to a target.

    Cells are scanned row by row (ascending y, then ascending x) over the
    square of side ``2 * search_radius + 1`` centred on the target. Cells
    with a negative coordinate are skipped. Among cells at the same
    distance, the first one in scan order wins.
    """
    best: PositionSearch = NotFound()
    best_distance = None

    for dy in range(-search_radius, search_radius + 1):
        for dx in range(-search_radius, search_radius + 1):
            x = target_x + dx
            y = target_y + dy
            if x < 0 or y < 0:
                continue

            distance = abs(dx) + abs(dy)
            if best_distance is not None and distance >= best_distance:
                continue

            if is_legal(x, y):
                best = Found(x, y)
                best_distance = distance

    return best


def get_nearest_valid_position(
    room: Room,
    target_x: int,
    target_y: int,
    existing_rooms: Iterable[Room],
    search_radius: int = config.SEARCH_RADIUS,
) -> PositionSearch:
    """Find the closest legal position for a room near a target cell.

    Args:
        room: The room to place; only its size matters.
        target_x: Desired x, grid units.
        target_y: Desired y, grid units.
        existing_rooms: Rooms to validate against (excluding ``room``).
        search_radius: Half-size of the scanned square.

    Returns:
        ``Found(x, y)`` for the closest legal cell (the target itself when
        it is already legal) or ``NotFound()``.
    """
    existing: List[Room] = [r for r in existing_rooms if r.id != room.id]

    def is_legal(x: int, y: int) -> bool:
        return is_valid_placement(translate_room(room, x - room.x, y - room.y), existing)

    return search_nearest(target_x, target_y, is_legal, search_radius)


def find_invalid_pairs(rooms: Iterable[Room]) -> List[tuple[str, str]]:
    """List every pair of rooms whose overlap exceeds a shared wall."""
    rooms = list(rooms)
    invalid = []
    for i, room in enumerate(rooms):
        for other in rooms[i + 1 :]:
            if not is_valid_overlap(room, other):
                invalid.append((room.id, other.id))
    return invalid
