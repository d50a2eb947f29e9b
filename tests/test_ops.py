"""Tests for document operations and queries."""

import unittest

from edgeconflict.core.model import ConflictMatrixEntry, Document, ResolutionMode, RoomColor
from edgeconflict.engine.api import apply, apply_operations, edge_at, room_at
from edgeconflict.engine.ops import get_operation, list_operations, next_id, sync_color_priority
from edgeconflict.engine.validators import InvalidOperation


def add_room(document, x, y, width=4, height=4, color="red", created_at=None):
    op = {"op": "add_room", "x": x, "y": y, "width": width, "height": height, "color": color}
    if created_at is not None:
        op["created_at"] = created_at
    return apply(document, op)


class TwoRoomsTestCase(unittest.TestCase):
    """room-1 (red) at (0, 0) and room-2 (blue) at (3, 0), sharing a wall strip."""

    def setUp(self):
        document = add_room(Document(), 0, 0, color="red", created_at=1)
        self.document = add_room(document, 3, 0, color="blue", created_at=2)


class TestRegistry(unittest.TestCase):
    """Tests for the operation registry."""

    def test_all_operations_registered(self):
        names = set(list_operations())
        for name in (
            "add_room", "move_room", "nudge_room", "update_room", "delete_room",
            "update_edge", "set_mode", "set_color_priority", "set_conflict_matrix",
            "set_file_name", "create_template", "delete_template", "place_instance",
            "move_instance", "duplicate_instance", "delete_instance",
            "enter_template_edit", "save_template_edits", "discard_template_edits",
            "add_link", "remove_link", "import_templates_from_link", "update_link_status",
        ):
            assert name in names

    def test_unknown_operation(self):
        with self.assertRaises(KeyError):
            get_operation("teleport_room")
        with self.assertRaises(ValueError):
            apply(Document(), {"op": "teleport_room"})

    def test_missing_op_field(self):
        with self.assertRaises(ValueError):
            apply(Document(), {"x": 1})

    def test_missing_parameter(self):
        with self.assertRaises(ValueError):
            apply(Document(), {"op": "add_room", "x": 0, "y": 0})

    def test_next_id(self):
        assert next_id([], "room") == "room-1"
        assert next_id(["room-2", "room-7", "other"], "room") == "room-8"


class TestAddRoom(unittest.TestCase):
    """Tests for drawing rooms."""

    def test_first_room(self):
        document = add_room(Document(), 2, 3, color="green", created_at=10)
        room = document.rooms["room-1"]

        assert room.name == "Room 1"
        assert (room.x, room.y, room.width, room.height) == (2, 3, 4, 4)
        assert room.color is RoomColor.GREEN
        assert len(document.edges) == 4
        assert document.color_priority == (RoomColor.GREEN,)

    def test_default_color(self):
        document = apply(Document(), {"op": "add_room", "x": 0, "y": 0, "width": 2, "height": 2})
        assert document.rooms["room-1"].color is RoomColor.BLUE

    def test_created_at_strictly_increases(self):
        document = add_room(Document(), 0, 0)
        document = add_room(document, 10, 0)
        first, second = document.rooms["room-1"], document.rooms["room-2"]
        assert second.created_at > first.created_at

    def test_illegal_target_is_redirected(self):
        document = add_room(Document(), 0, 0)
        document = add_room(document, 1, 0)
        room = document.rooms["room-2"]
        assert (room.x, room.y) == (3, 0)

    def test_refused_when_no_position_found(self):
        document = add_room(Document(), 0, 0, width=100, height=100)
        with self.assertRaises(InvalidOperation):
            add_room(document, 50, 50)

    def test_input_document_is_untouched(self):
        document = Document()
        add_room(document, 0, 0)
        assert document.rooms == {}

    def test_unknown_color(self):
        with self.assertRaises(ValueError):
            add_room(Document(), 0, 0, color="orange")


class TestMoveRoom(TwoRoomsTestCase):
    """Tests for dragging and nudging rooms."""

    def test_move_to_legal_target(self):
        document = apply(self.document, {"op": "move_room", "room": "room-2", "x": 10, "y": 10})
        room = document.rooms["room-2"]
        assert (room.x, room.y) == (10, 10)

    def test_move_regenerates_edges(self):
        document = apply(self.document, {"op": "move_room", "room": "room-2", "x": 20, "y": 0})
        assert all(e.x1 >= 20 for e in document.edges.values() if e.room_id == "room-2")

    def test_move_redirects_illegal_target(self):
        document = apply(self.document, {"op": "move_room", "room": "room-2", "x": 1, "y": 0})
        room = document.rooms["room-2"]
        assert (room.x, room.y) == (3, 0)

    def test_move_without_legal_position_is_refused(self):
        document = add_room(self.document, 20, 0, width=100, height=100)
        moved = apply(document, {"op": "move_room", "room": "room-1", "x": 60, "y": 50})
        assert moved is document

    def test_move_unknown_room(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "move_room", "room": "room-9", "x": 1, "y": 1})

    def test_nudge_into_illegal_overlap_is_ignored(self):
        document = apply(self.document, {"op": "nudge_room", "room": "room-2", "dx": -1})
        assert document is self.document

    def test_nudge_to_legal_position(self):
        document = apply(self.document, {"op": "nudge_room", "room": "room-2", "dx": 1})
        assert document.rooms["room-2"].x == 4

    def test_nudge_below_zero_is_ignored(self):
        document = apply(self.document, {"op": "nudge_room", "room": "room-1", "dy": -1})
        assert document is self.document


class TestUpdateRoom(TwoRoomsTestCase):
    """Tests for editing room properties."""

    def test_color_change_syncs_priority(self):
        assert self.document.color_priority == (RoomColor.RED, RoomColor.BLUE)
        document = apply(self.document, {"op": "update_room", "room": "room-1", "color": "green"})

        assert document.rooms["room-1"].color is RoomColor.GREEN
        assert document.color_priority == (RoomColor.BLUE, RoomColor.GREEN)

    def test_rename_and_conditions(self):
        document = apply(
            self.document,
            {"op": "update_room", "room": "room-1", "name": "Kitchen", "conditions": ["wet"]},
        )
        room = document.rooms["room-1"]
        assert room.name == "Kitchen"
        assert room.conditions == ("wet",)

    def test_id_and_created_at_are_immutable(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "update_room", "room": "room-1", "id": "x"})
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "update_room", "room": "room-1", "created_at": 5})

    def test_illegal_resize_is_rejected(self):
        with self.assertRaises(InvalidOperation):
            apply(self.document, {"op": "update_room", "room": "room-1", "width": 6})

    def test_legal_resize(self):
        document = apply(self.document, {"op": "update_room", "room": "room-1", "height": 8})
        assert document.rooms["room-1"].height == 8


class TestDeleteRoom(TwoRoomsTestCase):
    """Tests for deleting rooms."""

    def test_delete_removes_edges_and_color(self):
        document = apply(self.document, {"op": "delete_room", "room": "room-2"})

        assert list(document.rooms) == ["room-1"]
        assert all(e.room_id == "room-1" for e in document.edges.values())
        assert document.color_priority == (RoomColor.RED,)


class TestEdgeOverrides(TwoRoomsTestCase):
    """Tests for wall overrides."""

    def test_override_adds_color_to_priority(self):
        document = apply(
            self.document, {"op": "update_edge", "edge": "room-1-north-0", "color_override": "pink"}
        )
        assert document.edges["room-1-north-0"].color_override is RoomColor.PINK
        assert RoomColor.PINK in document.color_priority

    def test_override_survives_regeneration(self):
        document = apply(
            self.document, {"op": "update_edge", "edge": "room-1-west-0", "color_override": "pink"}
        )
        document = apply(document, {"op": "move_room", "room": "room-2", "x": 20, "y": 20})
        west = [e for e in document.edges.values() if e.room_id == "room-1" and e.side.value == "west"]
        assert [e.color_override for e in west] == [RoomColor.PINK]

    def test_clear_override(self):
        document = apply(
            self.document, {"op": "update_edge", "edge": "room-1-north-0", "color_override": "pink"}
        )
        document = apply(
            document, {"op": "update_edge", "edge": "room-1-north-0", "color_override": None}
        )
        assert document.edges["room-1-north-0"].color_override is None
        assert RoomColor.PINK not in document.color_priority

    def test_unknown_edge(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "update_edge", "edge": "nope", "name": "x"})


class TestSettings(TwoRoomsTestCase):
    """Tests for resolution settings."""

    def test_set_mode(self):
        document = apply(self.document, {"op": "set_mode", "mode": "matrix"})
        assert document.mode is ResolutionMode.MATRIX

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "set_mode", "mode": "random"})

    def test_priority_is_synced_with_used_colors(self):
        document = apply(
            self.document, {"op": "set_color_priority", "priority": ["yellow", "blue"]}
        )
        assert document.color_priority == (RoomColor.BLUE, RoomColor.RED)

    def test_set_conflict_matrix(self):
        document = apply(
            self.document,
            {
                "op": "set_conflict_matrix",
                "matrix": [{"underneath": "red", "onTop": "blue", "result": "green"}],
            },
        )
        assert document.conflict_matrix == (
            ConflictMatrixEntry(RoomColor.RED, RoomColor.BLUE, RoomColor.GREEN),
        )

    def test_bad_matrix_entry(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "set_conflict_matrix", "matrix": [{"underneath": "red"}]})

    def test_set_file_name(self):
        document = apply(self.document, {"op": "set_file_name", "name": "  Block A "})
        assert document.file_name == "Block A"

    def test_sync_color_priority(self):
        priority = sync_color_priority(
            (RoomColor.GREEN, RoomColor.BLUE), self.document.rooms.values()
        )
        assert priority == (RoomColor.BLUE, RoomColor.RED)


class TestApplyOperations(TwoRoomsTestCase):
    """Tests for applying operation lists."""

    def test_sequential_run_reports_each_step(self):
        operations = [
            {"op": "move_room", "room": "room-2", "x": 10, "y": 0},
            {"op": "delete_room", "room": "room-9"},
            {"op": "set_mode", "mode": "priority"},
        ]
        final, results = apply_operations(self.document, operations)

        assert [r["success"] for r in results] == [True, False, True]
        assert "room-9" in results[1]["error"]
        assert final.rooms["room-2"].x == 10
        assert final.mode is ResolutionMode.PRIORITY
        assert results[0]["invalid_pairs"] == []

    def test_independent_run_keeps_original(self):
        operations = [{"op": "set_mode", "mode": "priority"}]
        final, results = apply_operations(self.document, operations, sequential=False)

        assert final is self.document
        assert results[0]["changed"]


class TestQueries(TwoRoomsTestCase):
    """Tests for picking rooms and edges."""

    def test_room_at(self):
        assert room_at(self.document, 1, 1).id == "room-1"
        assert room_at(self.document, 6, 1).id == "room-2"
        assert room_at(self.document, 50, 50) is None

    def test_room_at_prefers_drawing_order(self):
        assert room_at(self.document, 3.5, 1).id == "room-1"

    def test_edge_at(self):
        edge = edge_at(self.document, 1, 0.2)
        assert edge is not None
        assert edge.room_id == "room-1"
        assert edge.side.value == "north"
        assert edge_at(self.document, 1, 2) is None


class TestLinks(unittest.TestCase):
    """Tests for links to published files."""

    def setUp(self):
        self.document = apply(
            Document(), {"op": "add_link", "linked_file_id": "f-1", "linked_file_name": "Block A"}
        )

    def test_add_link(self):
        link = self.document.links["link-1"]
        assert (link.linked_file_id, link.linked_file_name) == ("f-1", "Block A")
        assert link.imported_template_ids == ()
        assert not link.has_updates

    def test_file_is_linked_once(self):
        with self.assertRaises(InvalidOperation):
            apply(self.document, {"op": "add_link", "linked_file_id": "f-1", "linked_file_name": "Again"})

    def test_link_ids_keep_counting(self):
        document = apply(
            self.document, {"op": "add_link", "linked_file_id": "f-2", "linked_file_name": "Block B"}
        )
        assert set(document.links) == {"link-1", "link-2"}

    def test_import_merges_template_ids(self):
        document = apply(
            self.document,
            {"op": "import_templates_from_link", "link": "link-1", "templates": ["template-2", "template-1"]},
        )
        document = apply(
            document,
            {"op": "import_templates_from_link", "link": "link-1", "templates": ["template-1", "template-3"]},
        )
        assert document.links["link-1"].imported_template_ids == ("template-2", "template-1", "template-3")

    def test_update_status(self):
        document = apply(self.document, {"op": "update_link_status", "link": "link-1", "has_updates": True})
        assert document.links["link-1"].has_updates

    def test_remove_link(self):
        document = apply(self.document, {"op": "remove_link", "link": "link-1"})
        assert document.links == {}

    def test_unknown_link(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "remove_link", "link": "link-9"})
