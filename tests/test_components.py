"""Tests for templates, instances and staged template editing."""

import unittest

from edgeconflict.core.model import ROOM_COLORS, Document, RoomColor
from edgeconflict.engine.api import (
    apply,
    edge_colors,
    instance_at,
    instance_edge_colors,
    room_at,
)
from edgeconflict.engine.components import (
    default_origin,
    instance_edges,
    instance_obstacles,
    instance_rooms,
)
from edgeconflict.engine.validators import InvalidOperation, find_invalid_pairs


class TemplateTestCase(unittest.TestCase):
    """Two side-by-side 4x4 rooms turned into template-1 with instance-1 at (0, 0)."""

    def setUp(self):
        document = Document()
        for x, color in ((0, "red"), (4, "blue")):
            document = apply(
                document,
                {"op": "add_room", "x": x, "y": 0, "width": 4, "height": 4, "color": color},
            )
        self.document = apply(
            document, {"op": "create_template", "name": "Unit", "rooms": ["room-1", "room-2"]}
        )
        self.template = self.document.templates["template-1"]

    def place(self, document, x, y):
        return apply(document, {"op": "place_instance", "template": "template-1", "x": x, "y": y})

    def all_virtual_rooms(self, document):
        rooms = []
        for instance in document.instances.values():
            rooms.extend(instance_rooms(document, instance))
        return rooms


class TestCreateTemplate(TemplateTestCase):
    """Tests for creating templates."""

    def test_template_fields(self):
        assert self.template.name == "Unit"
        assert self.template.room_ids == ("room-1", "room-2")
        assert (self.template.origin_x, self.template.origin_y) == (4, 2)

    def test_first_instance_sits_on_the_rooms(self):
        instance = self.document.instances["instance-1"]
        assert (instance.template_id, instance.x, instance.y) == ("template-1", 0, 0)

    def test_explicit_origin(self):
        document = apply(
            self.document,
            {"op": "create_template", "name": "Half", "rooms": ["room-2"], "origin_x": 5, "origin_y": 1},
        )
        template = document.templates["template-2"]
        assert (template.origin_x, template.origin_y) == (5, 1)

    def test_default_origin_is_floored_center(self):
        rooms = list(self.document.rooms.values())
        assert default_origin(rooms) == (4, 2)

    def test_unknown_room(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "create_template", "name": "X", "rooms": ["room-9"]})

    def test_empty_room_list(self):
        with self.assertRaises(ValueError):
            apply(self.document, {"op": "create_template", "name": "X", "rooms": []})


class TestInstances(TemplateTestCase):
    """Tests for placing and moving instances."""

    def test_virtual_room_ids_and_positions(self):
        document = self.place(self.document, 20, 10)
        instance = document.instances["instance-2"]
        rooms = {r.id: r for r in instance_rooms(document, instance)}

        assert set(rooms) == {"instance-2:room-1", "instance-2:room-2"}
        assert (rooms["instance-2:room-1"].x, rooms["instance-2:room-1"].y) == (20, 10)
        assert (rooms["instance-2:room-2"].x, rooms["instance-2:room-2"].y) == (24, 10)

    def test_instance_edges_are_segmented(self):
        instance = self.document.instances["instance-1"]
        edges = instance_edges(self.document, instance)
        assert len(edges) == 8
        assert all(e.room_id.startswith("instance-1:") for e in edges.values())

    def test_colliding_instance_is_redirected(self):
        document = self.place(self.document, 1, 0)
        instance = document.instances["instance-2"]

        assert (instance.x, instance.y) == (0, 3)
        assert find_invalid_pairs(self.all_virtual_rooms(document)) == []

    def test_redirected_position_clears_obstacles(self):
        document = self.place(self.document, 1, 0)
        placed = instance_rooms(document, document.instances["instance-2"])
        obstacles = instance_obstacles(document, exclude_instance_id="instance-2")
        assert find_invalid_pairs(placed + obstacles) == []

    def test_no_legal_position(self):
        document = apply(
            self.document,
            {"op": "add_room", "x": 30, "y": 30, "width": 100, "height": 100, "color": "green"},
        )
        with self.assertRaises(InvalidOperation):
            self.place(document, 60, 60)

    def test_duplicate_offsets_diagonally(self):
        document = apply(self.document, {"op": "duplicate_instance", "instance": "instance-1"})
        copy = document.instances["instance-2"]
        assert (copy.template_id, copy.x, copy.y) == ("template-1", 5, 5)

    def test_move_instance(self):
        document = self.place(self.document, 20, 0)
        document = apply(document, {"op": "move_instance", "instance": "instance-2", "x": 40, "y": 8})
        instance = document.instances["instance-2"]
        assert (instance.x, instance.y) == (40, 8)

    def test_move_instance_ignores_itself(self):
        document = apply(self.document, {"op": "move_instance", "instance": "instance-1", "x": 1, "y": 0})
        instance = document.instances["instance-1"]
        assert (instance.x, instance.y) == (1, 0)

    def test_delete_instance(self):
        document = apply(self.document, {"op": "delete_instance", "instance": "instance-1"})
        assert document.instances == {}
        assert "template-1" in document.templates

    def test_instance_at_includes_border(self):
        assert instance_at(self.document, 8, 4).id == "instance-1"
        assert instance_at(self.document, 8.5, 4) is None


class TestDeletion(TemplateTestCase):
    """Tests for template cleanup."""

    def test_delete_template_removes_instances(self):
        document = apply(self.document, {"op": "delete_template", "template": "template-1"})
        assert document.templates == {}
        assert document.instances == {}
        assert len(document.rooms) == 2

    def test_deleting_rooms_prunes_template(self):
        document = apply(self.document, {"op": "delete_room", "room": "room-1"})
        assert document.templates["template-1"].room_ids == ("room-2",)

        document = apply(document, {"op": "delete_room", "room": "room-2"})
        assert document.templates == {}
        assert document.instances == {}


class TestTemplateEditing(TemplateTestCase):
    """Tests for staged template edits."""

    def setUp(self):
        super().setUp()
        self.editing = apply(
            self.document,
            {"op": "enter_template_edit", "template": "template-1", "instance": "instance-1"},
        )

    def test_staged_copies_are_created(self):
        assert self.editing.is_editing_template
        assert "editing-room-1" in self.editing.rooms
        assert "editing-room-2" in self.editing.rooms
        assert any(e.room_id == "editing-room-1" for e in self.editing.edges.values())

    def test_only_staged_copies_are_picked(self):
        assert room_at(self.editing, 1, 1).id == "editing-room-1"

    def test_save_copies_properties_back(self):
        document = apply(self.editing, {"op": "update_room", "room": "editing-room-1", "color": "pink"})
        document = apply(document, {"op": "update_room", "room": "editing-room-2", "name": "Bath"})
        document = apply(document, {"op": "save_template_edits"})

        assert not document.is_editing_template
        assert not any(rid.startswith("editing-") for rid in document.rooms)
        assert document.rooms["room-1"].color is RoomColor.PINK
        assert document.rooms["room-2"].name == "Bath"
        assert (document.rooms["room-1"].x, document.rooms["room-1"].y) == (0, 0)
        assert RoomColor.PINK in document.color_priority

    def test_discard_restores_snapshot(self):
        document = apply(self.editing, {"op": "update_room", "room": "editing-room-1", "color": "pink"})
        document = apply(document, {"op": "discard_template_edits"})

        assert not document.is_editing_template
        assert document.rooms == self.document.rooms
        assert document.edges == self.document.edges

    def test_template_changes_blocked_while_editing(self):
        with self.assertRaises(InvalidOperation):
            apply(self.editing, {"op": "create_template", "name": "X", "rooms": ["room-1"]})
        with self.assertRaises(InvalidOperation):
            apply(self.editing, {"op": "enter_template_edit", "template": "template-1"})

    def test_staged_recolor_leaves_live_walls_alone(self):
        before = edge_colors(self.document)
        document = apply(self.editing, {"op": "update_room", "room": "editing-room-1", "color": "green"})
        after = edge_colors(document)

        assert {edge_id: after[edge_id] for edge_id in before} == before
        assert after["editing-room-1-west-0"] == ROOM_COLORS[RoomColor.GREEN]

    def test_save_without_session(self):
        with self.assertRaises(InvalidOperation):
            apply(self.document, {"op": "save_template_edits"})


class TestRoomsAroundInstances(TemplateTestCase):
    """Tests for regular rooms placed next to instances."""

    def setUp(self):
        super().setUp()
        self.document = self.place(self.document, 20, 0)

    def test_new_room_is_kept_off_an_instance(self):
        document = apply(
            self.document,
            {"op": "add_room", "x": 20, "y": 0, "width": 4, "height": 4, "color": "green"},
        )
        room = document.rooms["room-3"]

        assert (room.x, room.y) != (20, 0)
        assert find_invalid_pairs([room, *self.all_virtual_rooms(document)]) == []

    def test_moved_room_is_kept_off_an_instance(self):
        document = apply(
            self.document,
            {"op": "add_room", "x": 40, "y": 0, "width": 4, "height": 4, "color": "green"},
        )
        document = apply(document, {"op": "move_room", "room": "room-3", "x": 21, "y": 0})
        room = document.rooms["room-3"]

        assert find_invalid_pairs([room, *self.all_virtual_rooms(document)]) == []

    def test_room_may_share_a_wall_with_an_instance(self):
        document = apply(
            self.document,
            {"op": "add_room", "x": 28, "y": 0, "width": 4, "height": 4, "color": "green"},
        )
        room = document.rooms["room-3"]
        assert (room.x, room.y) == (28, 0)

    def test_template_room_ignores_its_own_instances(self):
        document = apply(self.document, {"op": "nudge_room", "room": "room-2", "dy": 1})
        assert document.rooms["room-2"].y == 1


class TestInstanceEdgeColors(TemplateTestCase):
    """Tests for resolving instance walls."""

    def test_every_instance_wall_is_resolved(self):
        document = self.place(self.document, 20, 0)
        colors = instance_edge_colors(document)

        expected = set(instance_edges(document, document.instances["instance-1"]))
        expected |= set(instance_edges(document, document.instances["instance-2"]))
        assert set(colors) == expected

    def test_instance_walls_match_the_template_rooms(self):
        document = self.place(self.document, 20, 0)
        colors = instance_edge_colors(document)

        assert colors["instance-2:room-1-west-0"] == ROOM_COLORS[RoomColor.RED]
        assert colors["instance-2:room-2-east-0"] == ROOM_COLORS[RoomColor.BLUE]
