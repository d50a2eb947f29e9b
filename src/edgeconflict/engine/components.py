"""Template and instance composition.

A template is a set of canonical rooms. Each instance is a virtual copy
of those rooms translated so that the template's bounding-box minimum
corner lands on the instance position. Virtual rooms are never stored;
they are rebuilt from the template on demand and fed to the same
validator and segmenter as real rooms.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .. import config
from ..core.model import ComponentInstance, ComponentTemplate, Document, Edge, Room
from ..geom.primitives import bounding_box, translate_room
from ..geom.segments import segment_room_edges
from .validators import PositionSearch, is_valid_placement, search_nearest


def is_shadow_room(room_id: str) -> bool:
    """Check whether a room is a staged copy made for template editing."""
    return room_id.startswith(config.EDITING_PREFIX)


def shadow_room_id(room_id: str) -> str:
    return f"{config.EDITING_PREFIX}{room_id}"


def template_rooms(document: Document, template: ComponentTemplate) -> List[Room]:
    """Canonical rooms of a template that still exist."""
    return [document.rooms[rid] for rid in template.room_ids if rid in document.rooms]


def template_room_ids(document: Document) -> Set[str]:
    """IDs of every room that belongs to some template."""
    ids: Set[str] = set()
    for template in document.templates.values():
        ids.update(template.room_ids)
    return ids


def template_corner(document: Document, template: ComponentTemplate) -> Optional[Tuple[int, int]]:
    """Minimum corner of a template's bounding box."""
    bounds = bounding_box(template_rooms(document, template))
    if bounds is None:
        return None
    return bounds[0], bounds[1]


def default_origin(rooms: Iterable[Room]) -> Optional[Tuple[int, int]]:
    """Floored center of the rooms' bounding box."""
    bounds = bounding_box(rooms)
    if bounds is None:
        return None
    min_x, min_y, max_x, max_y = bounds
    return math.floor((min_x + max_x) / 2), math.floor((min_y + max_y) / 2)


def placed_rooms(
    document: Document, template: ComponentTemplate, x: int, y: int, prefix: str
) -> List[Room]:
    """Translate a template's rooms so its minimum corner lands on (x, y)."""
    corner = template_corner(document, template)
    if corner is None:
        return []

    dx = x - corner[0]
    dy = y - corner[1]
    return [
        translate_room(room, dx, dy, room_id=f"{prefix}:{room.id}")
        for room in template_rooms(document, template)
    ]


def instance_rooms(document: Document, instance: ComponentInstance) -> List[Room]:
    """Virtual rooms of an instance, ids ``{instance_id}:{room_id}``."""
    template = document.templates.get(instance.template_id)
    if template is None:
        return []
    return placed_rooms(document, template, instance.x, instance.y, instance.id)


def instance_edges(document: Document, instance: ComponentInstance) -> Dict[str, Edge]:
    """Segment an instance's virtual rooms against each other."""
    rooms = instance_rooms(document, instance)
    edges: Dict[str, Edge] = {}
    for room in rooms:
        for edge in segment_room_edges(room, rooms):
            edges[edge.id] = edge
    return edges


def instance_obstacles(document: Document, exclude_instance_id: Optional[str] = None) -> List[Room]:
    """Rooms an instance must not collide with.

    Regular rooms (not part of any template, not staged edit copies) plus
    the virtual rooms of every other instance.
    """
    in_templates = template_room_ids(document)
    obstacles = [
        room
        for room in document.rooms.values()
        if room.id not in in_templates and not is_shadow_room(room.id)
    ]
    for instance in document.instances.values():
        if instance.id == exclude_instance_id:
            continue
        obstacles.extend(instance_rooms(document, instance))
    return obstacles


def room_obstacles(document: Document, room_id: str) -> List[Room]:
    """Virtual instance rooms a regular room must not collide with.

    Instances of a template the room belongs to are skipped, since they are
    copies of the room itself.
    """
    own = {tid for tid, t in document.templates.items() if room_id in t.room_ids}
    obstacles: List[Room] = []
    for instance in document.instances.values():
        if instance.template_id not in own:
            obstacles.extend(instance_rooms(document, instance))
    return obstacles


def nearest_valid_instance_position(
    document: Document,
    template: ComponentTemplate,
    target_x: int,
    target_y: int,
    exclude_instance_id: Optional[str] = None,
    search_radius: int = config.SEARCH_RADIUS,
) -> PositionSearch:
    """Find the closest legal position for a template moved as a rigid body."""
    obstacles = instance_obstacles(document, exclude_instance_id)
    base = placed_rooms(document, template, 0, 0, "candidate")

    def is_legal(x: int, y: int) -> bool:
        return _group_fits([translate_room(room, x, y) for room in base], obstacles)

    return search_nearest(target_x, target_y, is_legal, search_radius)


def _group_fits(rooms: List[Room], obstacles: List[Room]) -> bool:
    return all(is_valid_placement(room, obstacles) for room in rooms)


def instance_size(document: Document, instance: ComponentInstance) -> Optional[Tuple[int, int]]:
    template = document.templates.get(instance.template_id)
    if template is None:
        return None
    bounds = bounding_box(template_rooms(document, template))
    if bounds is None:
        return None
    return bounds[2] - bounds[0], bounds[3] - bounds[1]


def instance_at(document: Document, x: float, y: float) -> Optional[ComponentInstance]:
    """Return the first instance whose bounding box contains (x, y), edges included."""
    for instance in document.instances.values():
        size = instance_size(document, instance)
        if size is None:
            continue
        width, height = size
        if instance.x <= x <= instance.x + width and instance.y <= y <= instance.y + height:
            return instance
    return None
