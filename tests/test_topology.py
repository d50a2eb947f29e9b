"""Tests for the room conflict graph."""

import unittest

from edgeconflict.core.model import Document, Room, RoomColor
from edgeconflict.core.topology import build_conflict_graph, conflict_groups


def make_document(*rooms):
    return Document(rooms={r.id: r for r in rooms})


def make_room(room_id, x, y, width=4, height=4):
    return Room(room_id, room_id, x, y, width, height, RoomColor.GREEN, 0)


class TestConflictGraph(unittest.TestCase):
    """Tests for graph construction."""

    def test_overlap_relation(self):
        graph = build_conflict_graph(make_document(make_room("a", 0, 0), make_room("b", 3, 0)))
        assert graph.edges["a", "b"]["relation"] == "overlap"
        assert graph.edges["a", "b"]["area"] == 4

    def test_shared_wall_relation(self):
        graph = build_conflict_graph(make_document(make_room("a", 0, 0), make_room("b", 4, 0)))
        assert graph.edges["a", "b"]["relation"] == "shared_wall"

    def test_corner_contact_is_not_joined(self):
        graph = build_conflict_graph(make_document(make_room("a", 0, 0), make_room("b", 4, 4)))
        assert not graph.has_edge("a", "b")

    def test_nodes_carry_room_data(self):
        graph = build_conflict_graph(make_document(make_room("a", 0, 0)))
        assert graph.nodes["a"]["color"] == "green"


class TestConflictGroups(unittest.TestCase):
    """Tests for connected groups."""

    def test_groups_skip_isolated_rooms(self):
        document = make_document(
            make_room("a", 0, 0),
            make_room("b", 4, 0),
            make_room("c", 7, 0),
            make_room("lonely", 50, 50),
            make_room("x", 20, 0),
            make_room("y", 20, 4),
        )
        assert conflict_groups(document) == [{"a", "b", "c"}, {"x", "y"}]
