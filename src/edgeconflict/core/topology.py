"""Topology analysis for floor plans.

This module builds the graph of rooms whose walls can fight over a
color: rooms that share interior space or sit side by side on a
shared wall line.
"""

from __future__ import annotations

from typing import List, Set

import networkx as nx

from ..geom.primitives import rectangles_overlap_area
from .model import Document


def build_conflict_graph(document: Document) -> nx.Graph:
    """Build a graph of rooms that interact along their walls.

    Creates a NetworkX graph where nodes are rooms and edges join rooms
    that either truly overlap (``relation="overlap"``) or touch along a
    stretch of wall of positive length (``relation="shared_wall"``).
    Rooms that only meet at a corner point are not joined.

    Args:
        document: Document containing the rooms.

    Returns:
        NetworkX Graph of room interactions.
    """
    G = nx.Graph()

    rooms = document.room_list()
    for room in rooms:
        G.add_node(room.id, name=room.name, color=room.color.value)

    for i, room in enumerate(rooms):
        for other in rooms[i + 1 :]:
            overlap = rectangles_overlap_area(room, other)
            if overlap.is_overlapping:
                G.add_edge(room.id, other.id, relation="overlap", area=overlap.x * overlap.y)
            elif overlap.is_touching and max(overlap.x, overlap.y) > 0:
                G.add_edge(room.id, other.id, relation="shared_wall", area=0)

    return G


def conflict_groups(document: Document) -> List[Set[str]]:
    """List groups of interacting rooms (connected components of size > 1)."""
    G = build_conflict_graph(document)
    groups = [set(component) for component in nx.connected_components(G) if len(component) > 1]
    groups.sort(key=lambda group: sorted(group))
    return groups
