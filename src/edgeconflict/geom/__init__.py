"""Geometry utilities for the floor-plan editor.

This module provides rectangle math on the room grid and the
decomposition of room walls into uniformly covered segments.
"""

from .primitives import (
    Overlap,
    bounding_box,
    grid_coordinates,
    point_in_room,
    rectangles_overlap_area,
    rooms_overlap,
    snap_to_grid,
    translate_room,
)
from .segments import (
    edge_intersects_room,
    regenerate_edges,
    segment_room_edges,
    wall_endpoints,
)

__all__ = [
    "Overlap",
    "bounding_box",
    "edge_intersects_room",
    "grid_coordinates",
    "point_in_room",
    "rectangles_overlap_area",
    "regenerate_edges",
    "rooms_overlap",
    "segment_room_edges",
    "snap_to_grid",
    "translate_room",
    "wall_endpoints",
]
