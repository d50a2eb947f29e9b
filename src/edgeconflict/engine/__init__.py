"""Engine module for floor-plan editing.

This module provides the core API for applying operations, validating
placements and resolving edge conflicts.
"""

from .api import (
    apply,
    apply_operations,
    edge_at,
    edge_colors,
    instance_at,
    instance_edge_colors,
    room_at,
)
from .resolver import OverrideLookup, resolve_edge_color
from .validators import Found, InvalidOperation, NotFound

__all__ = [
    "Found",
    "InvalidOperation",
    "NotFound",
    "OverrideLookup",
    "apply",
    "apply_operations",
    "edge_at",
    "edge_colors",
    "instance_at",
    "instance_edge_colors",
    "resolve_edge_color",
    "room_at",
]
