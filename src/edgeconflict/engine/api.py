"""Core API for floor-plan editing.

This module provides the main interface for applying operations to a
document and for querying what sits under a grid coordinate.
"""

from __future__ import annotations

import logging
from typing import Optional

from .. import config
from ..core.model import ComponentInstance, Document, Edge, Point, Room
from ..geom.primitives import point_in_room
from ..geom.segments import edge_distance
from .components import instance_at as _instance_at
from .components import is_shadow_room
from .ops import get_operation
from .resolver import OverrideLookup
from .resolver import edge_colors as _edge_colors
from .resolver import instance_edge_colors as _instance_edge_colors
from .validators import InvalidOperation, find_invalid_pairs

LOGGER = logging.getLogger(__name__)


def apply(document: Document, operation: dict) -> Document:
    """Apply an operation to a document and return the modified document.

    Args:
        document: The document to modify.
        operation: Dictionary describing the operation, e.g.
            ``{"op": "move_room", "room": "room-1", "x": 4, "y": 2}``.

    Returns:
        A new Document with the operation applied. The input is untouched.

    Raises:
        ValueError: If the operation type is not recognized or a parameter
            is invalid.
        InvalidOperation: If the operation cannot be applied in the
            current document state.
    """
    operation_type = operation.get("op") or operation.get("type")

    if operation_type is None:
        raise ValueError("Operation must have an 'op' or 'type' field")

    try:
        op = get_operation(operation_type)
    except KeyError:
        raise ValueError(f"Unknown operation type: {operation_type}") from None

    # Extract operation parameters (exclude 'op' and 'type' fields)
    params = {k: v for k, v in operation.items() if k not in ["op", "type"]}

    try:
        op.precheck(document, **params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for '{operation_type}': {e}") from e

    LOGGER.debug("Applying %s %s", operation_type, params)
    return op.apply(document, **params)


def apply_operations(
    document: Document, operations: list, sequential: bool = True
) -> tuple[Document, list[dict]]:
    """Apply a list of operations, recording the outcome of each.

    A failing operation never aborts the run; it is reported and the
    document it was applied to is carried on unchanged.

    Args:
        document: The document to modify.
        operations: List of operation dictionaries to apply.
        sequential: If True, apply operations sequentially (each builds on
            the previous). If False, apply each operation to the original
            document.

    Returns:
        A tuple containing:
        - The final document (the original if ``sequential=False``)
        - List of results for each operation, containing:
          - operation_index: Position in the input list
          - operation: The operation that was applied
          - success: Whether the operation was applied
          - changed: Whether the document differs afterwards
          - invalid_pairs: Room pairs overlapping beyond a shared wall
          - error: Error message if the operation failed (optional)
    """
    current = document
    results = []

    for i, operation in enumerate(operations):
        base = current if sequential else document
        try:
            modified = apply(base, operation)
        except (ValueError, InvalidOperation) as e:
            LOGGER.warning("Operation %d (%s) failed: %s", i, operation.get("op"), e)
            results.append(
                {
                    "operation_index": i,
                    "operation": operation,
                    "success": False,
                    "changed": False,
                    "error": str(e),
                }
            )
            continue

        results.append(
            {
                "operation_index": i,
                "operation": operation,
                "success": True,
                "changed": modified != base,
                "invalid_pairs": find_invalid_pairs(modified.room_list()),
            }
        )

        if sequential:
            current = modified

    final = current if sequential else document
    return final, results


def _selectable(document: Document, room_id: str) -> bool:
    # While a template is being edited only its staged copies can be picked
    return is_shadow_room(room_id) == document.is_editing_template


def room_at(document: Document, x: float, y: float) -> Optional[Room]:
    """Return the first room, in drawing order, containing (x, y)."""
    point = Point(x, y)
    for room in document.rooms.values():
        if _selectable(document, room.id) and point_in_room(point, room):
            return room
    return None


def edge_at(
    document: Document, x: float, y: float, tolerance: float = config.EDGE_PICK_TOLERANCE
) -> Optional[Edge]:
    """Return the first segment closer than ``tolerance`` to (x, y)."""
    for edge in document.edges.values():
        if _selectable(document, edge.room_id) and edge_distance(edge, x, y) < tolerance:
            return edge
    return None


def instance_at(document: Document, x: float, y: float) -> Optional[ComponentInstance]:
    """Return the first instance whose footprint contains (x, y)."""
    return _instance_at(document, x, y)


def edge_colors(document: Document, lookup: OverrideLookup = OverrideLookup.WALL) -> dict[str, str]:
    """Resolve the display color of every segment."""
    return _edge_colors(document, lookup)


def instance_edge_colors(
    document: Document, lookup: OverrideLookup = OverrideLookup.WALL
) -> dict[str, str]:
    """Resolve the display color of every instance wall, keyed by virtual edge id."""
    return _instance_edge_colors(document, lookup)
