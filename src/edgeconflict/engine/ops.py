"""Operations engine for the floor-plan editor.

This module provides the edits that can be applied to a document:
drawing, moving and deleting rooms, wall overrides, resolution
settings, templates and their instances, staged template editing and
links to other published files.

Every operation returns a new Document. Whenever the room set changes,
the edges of every room are regenerated and the color priority list is
brought back in line with the colors in use, so an edit either lands
completely or not at all.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from .. import config
from ..core.model import (
    ComponentInstance,
    ComponentTemplate,
    ConflictMatrixEntry,
    Document,
    Edge,
    Link,
    ResolutionMode,
    Room,
    RoomColor,
    TemplateEditSession,
)
from ..geom.primitives import bounding_box, translate_room
from ..geom.segments import regenerate_edges
from .components import (
    default_origin,
    is_shadow_room,
    nearest_valid_instance_position,
    room_obstacles,
    shadow_room_id,
    template_rooms,
)
from .validators import (
    Found,
    InvalidOperation,
    get_nearest_valid_position,
    is_valid_arrow_key_move,
    is_valid_placement,
)

LOGGER = logging.getLogger(__name__)

ROOM_FIELDS = ("name", "color", "x", "y", "width", "height", "conditions")


class Operation(Protocol):
    """Protocol for document operations.

    All operations must implement this interface to be compatible
    with the operation registry and execution engine.
    """

    def precheck(self, document: Document, **kwargs: Any) -> bool:
        """Validate that the operation can be applied to the document.

        Raises:
            ValueError: If a referenced entity does not exist or a
                parameter is malformed.
            InvalidOperation: If the document state forbids the operation.
        """
        ...

    def apply(self, document: Document, **kwargs: Any) -> Document:
        """Apply the operation and return the new document."""
        ...


def _now_ms() -> int:
    return int(time.time() * 1000)


def _color(value: Any) -> RoomColor:
    try:
        return RoomColor(value)
    except ValueError:
        raise ValueError(f"Unknown room color: {value!r}") from None


def next_id(existing: Iterable[str], prefix: str) -> str:
    """Return ``{prefix}-N`` with N one past the highest number in use."""
    pattern = re.compile(rf"{re.escape(prefix)}-(\d+)$")
    highest = 0
    for item in existing:
        match = pattern.match(item)
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}-{highest + 1}"


def sync_color_priority(
    priority: Sequence[RoomColor], rooms: Iterable[Room], edges: Iterable[Edge] = ()
) -> tuple[RoomColor, ...]:
    """Keep the priority list equal to the set of colors in use.

    Colors no longer used by any room or edge override are dropped; newly
    used colors are appended in order of first use.
    """
    used: List[RoomColor] = []
    for room in rooms:
        if room.color not in used:
            used.append(room.color)
    for edge in edges:
        if edge.color_override is not None and edge.color_override not in used:
            used.append(edge.color_override)

    kept = [color for color in priority if color in used]
    kept.extend(color for color in used if color not in kept)
    return tuple(kept)


def _regenerate(rooms: Mapping[str, Room], previous: Iterable[Edge]) -> Dict[str, Edge]:
    """Regenerate edges, keeping staged template copies on their own layer."""
    live = [room for room in rooms.values() if not is_shadow_room(room.id)]
    staged = [room for room in rooms.values() if is_shadow_room(room.id)]
    previous = list(previous)

    edges = regenerate_edges(live, previous)
    if staged:
        edges.update(regenerate_edges(staged, previous))
    return edges


def commit_rooms(document: Document, rooms: Mapping[str, Room], **changes: Any) -> Document:
    """Replace the room set and everything derived from it."""
    rooms = dict(rooms)
    edges = _regenerate(rooms, document.edges.values())
    priority = sync_color_priority(document.color_priority, rooms.values(), edges.values())
    return replace(document, rooms=rooms, edges=edges, color_priority=priority, **changes)


def _get_room(document: Document, room_id: str) -> Room:
    if room_id not in document.rooms:
        raise ValueError(f"Room '{room_id}' does not exist")
    return document.rooms[room_id]


def _peers(document: Document, room_id: str) -> List[Room]:
    """Rooms a room is validated against: same layer, excluding itself.

    Live rooms are also checked against the virtual rooms of placed instances.
    """
    staged = is_shadow_room(room_id)
    peers = [
        room
        for room in document.rooms.values()
        if room.id != room_id and is_shadow_room(room.id) == staged
    ]
    if not staged:
        peers.extend(room_obstacles(document, room_id))
    return peers


def _with_room(document: Document, room: Room) -> Document:
    rooms = dict(document.rooms)
    rooms[room.id] = room
    return commit_rooms(document, rooms)


class AddRoomOp:
    """Operation to draw a new room.

    An illegal target is moved to the nearest legal position. The room is
    refused when no legal position exists within the search radius.
    """

    def precheck(
        self, document: Document, x: int, y: int, width: int, height: int, **kwargs: Any
    ) -> bool:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Room size must be positive, got {width}x{height}")
        if "color" in kwargs and kwargs["color"] is not None:
            _color(kwargs["color"])
        return True

    def apply(
        self,
        document: Document,
        x: int,
        y: int,
        width: int,
        height: int,
        color: Optional[str] = None,
        name: Optional[str] = None,
        created_at: Optional[int] = None,
        conditions: Sequence[str] = (),
        **kwargs: Any,
    ) -> Document:
        room_id = next_id(document.rooms, "room")
        number = room_id.split("-")[-1]

        latest = max((r.created_at for r in document.rooms.values()), default=0)
        if created_at is None:
            created_at = max(_now_ms(), latest + 1)

        room = Room(
            id=room_id,
            name=name or f"Room {number}",
            x=int(x),
            y=int(y),
            width=int(width),
            height=int(height),
            color=_color(color or config.DEFAULT_ROOM_COLOR),
            created_at=int(created_at),
            conditions=tuple(conditions),
        )

        existing = _peers(document, room.id)
        if not is_valid_placement(room, existing):
            result = get_nearest_valid_position(room, room.x, room.y, existing)
            if not isinstance(result, Found):
                raise InvalidOperation(
                    f"No legal position for a {room.width}x{room.height} room near ({room.x}, {room.y})"
                )
            LOGGER.debug("Room %s redirected from (%s, %s) to (%s, %s)", room.id, room.x, room.y, result.x, result.y)
            room = replace(room, x=result.x, y=result.y)

        return _with_room(document, room)


class MoveRoomOp:
    """Operation to drag a room to a new position.

    The room lands on the nearest legal position to the target, which is
    the target itself when legal. When nothing legal is found the document
    is returned unchanged.
    """

    def precheck(self, document: Document, room: str, x: int, y: int, **kwargs: Any) -> bool:
        _get_room(document, room)
        return True

    def apply(self, document: Document, room: str, x: int, y: int, **kwargs: Any) -> Document:
        current = _get_room(document, room)
        result = get_nearest_valid_position(current, int(x), int(y), _peers(document, room))

        if not isinstance(result, Found):
            LOGGER.info("Move of %s to (%s, %s) refused: no legal position", room, x, y)
            return document

        if (result.x, result.y) == (current.x, current.y):
            return document

        return _with_room(document, replace(current, x=result.x, y=result.y))


class NudgeRoomOp:
    """Operation to move a room by a keyboard step.

    Only the exact target is considered; an illegal step leaves the
    document unchanged.
    """

    def precheck(self, document: Document, room: str, dx: int = 0, dy: int = 0, **kwargs: Any) -> bool:
        _get_room(document, room)
        return True

    def apply(self, document: Document, room: str, dx: int = 0, dy: int = 0, **kwargs: Any) -> Document:
        current = _get_room(document, room)
        new_x = current.x + int(dx)
        new_y = current.y + int(dy)

        if new_x < 0 or new_y < 0:
            return document
        if not is_valid_arrow_key_move(current, new_x, new_y, [current, *_peers(document, room)]):
            return document

        return _with_room(document, replace(current, x=new_x, y=new_y))


class UpdateRoomOp:
    """Operation to change a room's properties.

    ``id`` and ``created_at`` cannot be changed. Changes to position or
    size must leave the room in a legal placement.
    """

    def precheck(self, document: Document, room: str, **changes: Any) -> bool:
        _get_room(document, room)
        for key in changes:
            if key in ("id", "created_at", "createdAt"):
                raise ValueError(f"Room field '{key}' cannot be changed")
            if key not in ROOM_FIELDS:
                raise ValueError(f"Unknown room field '{key}'")
        if "color" in changes:
            _color(changes["color"])
        return True

    def apply(self, document: Document, room: str, **changes: Any) -> Document:
        current = _get_room(document, room)

        values: Dict[str, Any] = {}
        for key, value in changes.items():
            if key == "color":
                values[key] = _color(value)
            elif key == "conditions":
                values[key] = tuple(value)
            elif key == "name":
                values[key] = str(value)
            else:
                values[key] = int(value)

        updated = replace(current, **values)

        geometry = ("x", "y", "width", "height")
        if any(getattr(updated, k) != getattr(current, k) for k in geometry):
            if not is_valid_placement(updated, _peers(document, room)):
                raise InvalidOperation(f"Room '{room}' would overlap another room by more than a wall")

        return _with_room(document, updated)


class DeleteRoomOp:
    """Operation to delete a room.

    The room is removed from any template; a template left without rooms
    is deleted together with its instances.
    """

    def precheck(self, document: Document, room: str, **kwargs: Any) -> bool:
        _get_room(document, room)
        return True

    def apply(self, document: Document, room: str, **kwargs: Any) -> Document:
        _get_room(document, room)
        rooms = {rid: r for rid, r in document.rooms.items() if rid != room}

        templates = {}
        dropped = set()
        for template_id, template in document.templates.items():
            room_ids = tuple(rid for rid in template.room_ids if rid != room)
            if not room_ids:
                dropped.add(template_id)
                continue
            templates[template_id] = replace(template, room_ids=room_ids)

        instances = {
            iid: inst for iid, inst in document.instances.items() if inst.template_id not in dropped
        }

        return commit_rooms(document, rooms, templates=templates, instances=instances)


class UpdateEdgeOp:
    """Operation to set or clear a wall segment's override color or name."""

    def precheck(self, document: Document, edge: str, **changes: Any) -> bool:
        if edge not in document.edges:
            raise ValueError(f"Edge '{edge}' does not exist")
        for key in changes:
            if key not in ("color_override", "name"):
                raise ValueError(f"Unknown edge field '{key}'")
        if changes.get("color_override") is not None:
            _color(changes["color_override"])
        return True

    def apply(self, document: Document, edge: str, **changes: Any) -> Document:
        current = document.edges[edge]

        values: Dict[str, Any] = {}
        if "color_override" in changes:
            override = changes["color_override"]
            values["color_override"] = _color(override) if override is not None else None
        if "name" in changes:
            values["name"] = changes["name"] or None

        edges = dict(document.edges)
        edges[edge] = replace(current, **values)
        priority = sync_color_priority(document.color_priority, document.rooms.values(), edges.values())
        return replace(document, edges=edges, color_priority=priority)


class SetModeOp:
    """Operation to switch the resolution mode."""

    def precheck(self, document: Document, mode: str, **kwargs: Any) -> bool:
        try:
            ResolutionMode(mode)
        except ValueError:
            raise ValueError(f"Unknown resolution mode: {mode!r}") from None
        return True

    def apply(self, document: Document, mode: str, **kwargs: Any) -> Document:
        return replace(document, mode=ResolutionMode(mode))


class SetColorPriorityOp:
    """Operation to reorder the color priority list.

    The result is synced with the colors in use, so listing an unused color
    has no effect and a used color left out is appended at the end.
    """

    def precheck(self, document: Document, priority: Sequence[str], **kwargs: Any) -> bool:
        for color in priority:
            _color(color)
        return True

    def apply(self, document: Document, priority: Sequence[str], **kwargs: Any) -> Document:
        ordered: List[RoomColor] = []
        for color in priority:
            color = _color(color)
            if color not in ordered:
                ordered.append(color)
        synced = sync_color_priority(ordered, document.rooms.values(), document.edges.values())
        return replace(document, color_priority=synced)


class SetConflictMatrixOp:
    """Operation to replace the conflict matrix.

    Each entry is a ConflictMatrixEntry or a mapping with ``underneath``,
    ``on_top`` (or ``onTop``) and ``result``.
    """

    def precheck(self, document: Document, matrix: Sequence[Any], **kwargs: Any) -> bool:
        self._entries(matrix)
        return True

    def apply(self, document: Document, matrix: Sequence[Any], **kwargs: Any) -> Document:
        return replace(document, conflict_matrix=self._entries(matrix))

    @staticmethod
    def _entries(matrix: Sequence[Any]) -> tuple[ConflictMatrixEntry, ...]:
        entries = []
        for item in matrix:
            if isinstance(item, ConflictMatrixEntry):
                entries.append(item)
                continue
            try:
                on_top = item["on_top"] if "on_top" in item else item["onTop"]
                entries.append(
                    ConflictMatrixEntry(
                        underneath=_color(item["underneath"]),
                        on_top=_color(on_top),
                        result=_color(item["result"]),
                    )
                )
            except (KeyError, TypeError) as e:
                raise ValueError(f"Invalid conflict matrix entry {item!r}: {e}") from e
        return tuple(entries)


class SetFileNameOp:
    """Operation to rename the project."""

    def precheck(self, document: Document, name: str, **kwargs: Any) -> bool:
        if not str(name).strip():
            raise ValueError("File name cannot be empty")
        return True

    def apply(self, document: Document, name: str, **kwargs: Any) -> Document:
        return replace(document, file_name=str(name).strip())


def _require_not_editing(document: Document) -> None:
    if document.is_editing_template:
        raise InvalidOperation("Not allowed while a template is being edited")


def _get_template(document: Document, template_id: str) -> ComponentTemplate:
    if template_id not in document.templates:
        raise ValueError(f"Template '{template_id}' does not exist")
    return document.templates[template_id]


def _get_instance(document: Document, instance_id: str) -> ComponentInstance:
    if instance_id not in document.instances:
        raise ValueError(f"Instance '{instance_id}' does not exist")
    return document.instances[instance_id]


class CreateTemplateOp:
    """Operation to turn a set of rooms into a template.

    The template is anchored at the given origin, or at the floored center
    of the rooms' bounding box. Its first instance is always created at
    the bounding box minimum corner, on top of the rooms themselves.
    """

    def precheck(
        self, document: Document, name: str, rooms: Sequence[str], **kwargs: Any
    ) -> bool:
        _require_not_editing(document)
        if not rooms:
            raise ValueError("A template needs at least one room")
        for room_id in rooms:
            _get_room(document, room_id)
        return True

    def apply(
        self,
        document: Document,
        name: str,
        rooms: Sequence[str],
        origin_x: Optional[int] = None,
        origin_y: Optional[int] = None,
        **kwargs: Any,
    ) -> Document:
        members = [_get_room(document, room_id) for room_id in rooms]

        if origin_x is None or origin_y is None:
            origin_x, origin_y = default_origin(members)

        template = ComponentTemplate(
            id=next_id(document.templates, "template"),
            name=name,
            room_ids=tuple(dict.fromkeys(rooms)),
            origin_x=int(origin_x),
            origin_y=int(origin_y),
        )

        min_x, min_y, _, _ = bounding_box(members)
        instance = ComponentInstance(
            id=next_id(document.instances, "instance"),
            template_id=template.id,
            x=min_x,
            y=min_y,
        )

        templates = {**document.templates, template.id: template}
        instances = {**document.instances, instance.id: instance}
        return replace(document, templates=templates, instances=instances)


class UpdateTemplateOp:
    """Operation to rename a template or move its origin."""

    def precheck(self, document: Document, template: str, **changes: Any) -> bool:
        _get_template(document, template)
        for key in changes:
            if key not in ("name", "origin_x", "origin_y"):
                raise ValueError(f"Unknown template field '{key}'")
        return True

    def apply(self, document: Document, template: str, **changes: Any) -> Document:
        current = _get_template(document, template)
        values = {k: (int(v) if k != "name" else str(v)) for k, v in changes.items()}
        templates = {**document.templates, template: replace(current, **values)}
        return replace(document, templates=templates)


class DeleteTemplateOp:
    """Operation to delete a template and all of its instances (rooms stay)."""

    def precheck(self, document: Document, template: str, **kwargs: Any) -> bool:
        _require_not_editing(document)
        _get_template(document, template)
        return True

    def apply(self, document: Document, template: str, **kwargs: Any) -> Document:
        templates = {tid: t for tid, t in document.templates.items() if tid != template}
        instances = {
            iid: inst for iid, inst in document.instances.items() if inst.template_id != template
        }
        return replace(document, templates=templates, instances=instances)


def _add_instance(document: Document, template: ComponentTemplate, x: int, y: int) -> Document:
    result = nearest_valid_instance_position(document, template, x, y)
    if not isinstance(result, Found):
        raise InvalidOperation(f"No legal position for template '{template.id}' near ({x}, {y})")

    instance = ComponentInstance(
        id=next_id(document.instances, "instance"),
        template_id=template.id,
        x=result.x,
        y=result.y,
    )
    return replace(document, instances={**document.instances, instance.id: instance})


class PlaceInstanceOp:
    """Operation to place a new instance of a template.

    An illegal target is moved to the nearest legal offset; the placement
    is refused when none exists within the search radius.
    """

    def precheck(self, document: Document, template: str, x: int, y: int, **kwargs: Any) -> bool:
        _require_not_editing(document)
        if not template_rooms(document, _get_template(document, template)):
            raise InvalidOperation(f"Template '{template}' has no rooms")
        return True

    def apply(self, document: Document, template: str, x: int, y: int, **kwargs: Any) -> Document:
        return _add_instance(document, _get_template(document, template), int(x), int(y))


class MoveInstanceOp:
    """Operation to move an instance as a rigid body.

    When no legal position is found the instance stays where it is.
    """

    def precheck(self, document: Document, instance: str, x: int, y: int, **kwargs: Any) -> bool:
        _get_instance(document, instance)
        return True

    def apply(self, document: Document, instance: str, x: int, y: int, **kwargs: Any) -> Document:
        current = _get_instance(document, instance)
        template = _get_template(document, current.template_id)

        result = nearest_valid_instance_position(
            document, template, max(0, int(x)), max(0, int(y)), exclude_instance_id=instance
        )
        if not isinstance(result, Found):
            LOGGER.info("Move of %s to (%s, %s) refused: no legal position", instance, x, y)
            return document

        moved = replace(current, x=result.x, y=result.y)
        return replace(document, instances={**document.instances, instance: moved})


class DuplicateInstanceOp:
    """Operation to copy an instance, offset diagonally by ``config.DUPLICATE_OFFSET``."""

    def precheck(self, document: Document, instance: str, **kwargs: Any) -> bool:
        _require_not_editing(document)
        _get_instance(document, instance)
        return True

    def apply(self, document: Document, instance: str, **kwargs: Any) -> Document:
        current = _get_instance(document, instance)
        template = _get_template(document, current.template_id)
        offset = config.DUPLICATE_OFFSET
        return _add_instance(document, template, current.x + offset, current.y + offset)


class DeleteInstanceOp:
    """Operation to remove an instance."""

    def precheck(self, document: Document, instance: str, **kwargs: Any) -> bool:
        _get_instance(document, instance)
        return True

    def apply(self, document: Document, instance: str, **kwargs: Any) -> Document:
        instances = {iid: inst for iid, inst in document.instances.items() if iid != instance}
        return replace(document, instances=instances)


class EnterTemplateEditOp:
    """Operation to start a staged edit of a template.

    The current rooms, edges and templates are snapshotted. Each template
    room gets a staged copy (``config.EDITING_PREFIX`` + id) at the same
    position; edits go to the copies until they are saved or discarded.
    """

    def precheck(self, document: Document, template: str, **kwargs: Any) -> bool:
        _require_not_editing(document)
        _get_template(document, template)
        instance = kwargs.get("instance")
        if instance is not None:
            _get_instance(document, instance)
        return True

    def apply(
        self, document: Document, template: str, instance: Optional[str] = None, **kwargs: Any
    ) -> Document:
        current = _get_template(document, template)

        session = TemplateEditSession(
            template_id=template,
            instance_id=instance,
            rooms=dict(document.rooms),
            edges=dict(document.edges),
            templates=dict(document.templates),
        )

        rooms = dict(document.rooms)
        for room in template_rooms(document, current):
            copy = translate_room(room, 0, 0, room_id=shadow_room_id(room.id))
            rooms[copy.id] = copy

        return commit_rooms(document, rooms, edit_session=session)


class SaveTemplateEditsOp:
    """Operation to write staged template edits back to the template rooms.

    Name, color, size and conditions are copied from each staged copy onto
    its canonical room; the canonical room keeps its id, position and
    creation time.
    """

    def precheck(self, document: Document, **kwargs: Any) -> bool:
        if not document.is_editing_template:
            raise InvalidOperation("No template is being edited")
        return True

    def apply(self, document: Document, **kwargs: Any) -> Document:
        session = document.edit_session
        template = document.templates.get(session.template_id)
        member_ids = set(template.room_ids) if template else set()

        rooms: Dict[str, Room] = {}
        for room_id, room in document.rooms.items():
            if is_shadow_room(room_id):
                continue
            staged = document.rooms.get(shadow_room_id(room_id))
            if room_id in member_ids and staged is not None:
                room = replace(
                    room,
                    name=staged.name,
                    color=staged.color,
                    width=staged.width,
                    height=staged.height,
                    conditions=staged.conditions,
                )
            rooms[room_id] = room

        return commit_rooms(document, rooms, edit_session=None)


class DiscardTemplateEditsOp:
    """Operation to drop staged template edits and restore the snapshot."""

    def precheck(self, document: Document, **kwargs: Any) -> bool:
        if not document.is_editing_template:
            raise InvalidOperation("No template is being edited")
        return True

    def apply(self, document: Document, **kwargs: Any) -> Document:
        session = document.edit_session
        priority = sync_color_priority(
            document.color_priority, session.rooms.values(), session.edges.values()
        )
        return replace(
            document,
            rooms=dict(session.rooms),
            edges=dict(session.edges),
            templates=dict(session.templates),
            color_priority=priority,
            edit_session=None,
        )


def _get_link(document: Document, link_id: str) -> Link:
    if link_id not in document.links:
        raise ValueError(f"Link '{link_id}' does not exist")
    return document.links[link_id]


class AddLinkOp:
    """Operation to link a published file. A file can only be linked once."""

    def precheck(
        self, document: Document, linked_file_id: str, linked_file_name: str, **kwargs: Any
    ) -> bool:
        if not str(linked_file_id).strip():
            raise ValueError("A link needs the published file's id")
        if any(link.linked_file_id == linked_file_id for link in document.links.values()):
            raise InvalidOperation(f"File '{linked_file_id}' is already linked")
        return True

    def apply(
        self, document: Document, linked_file_id: str, linked_file_name: str, **kwargs: Any
    ) -> Document:
        link = Link(
            id=next_id(document.links, "link"),
            linked_file_id=str(linked_file_id),
            linked_file_name=str(linked_file_name),
        )
        return replace(document, links={**document.links, link.id: link})


class RemoveLinkOp:
    """Operation to drop a link. Templates already imported stay."""

    def precheck(self, document: Document, link: str, **kwargs: Any) -> bool:
        _get_link(document, link)
        return True

    def apply(self, document: Document, link: str, **kwargs: Any) -> Document:
        links = {lid: item for lid, item in document.links.items() if lid != link}
        return replace(document, links=links)


class ImportTemplatesFromLinkOp:
    """Operation to record templates taken from a linked file.

    Template ids are merged into the link's list; ids already recorded
    keep their place.
    """

    def precheck(self, document: Document, link: str, templates: Sequence[str], **kwargs: Any) -> bool:
        _get_link(document, link)
        if isinstance(templates, str):
            raise ValueError("Template ids must be given as a list")
        return True

    def apply(self, document: Document, link: str, templates: Sequence[str], **kwargs: Any) -> Document:
        current = _get_link(document, link)
        merged = tuple(dict.fromkeys([*current.imported_template_ids, *map(str, templates)]))
        links = {**document.links, link: replace(current, imported_template_ids=merged)}
        return replace(document, links=links)


class UpdateLinkStatusOp:
    """Operation to flag whether a linked file has changed."""

    def precheck(self, document: Document, link: str, has_updates: bool, **kwargs: Any) -> bool:
        _get_link(document, link)
        return True

    def apply(self, document: Document, link: str, has_updates: bool, **kwargs: Any) -> Document:
        current = _get_link(document, link)
        links = {**document.links, link: replace(current, has_updates=bool(has_updates))}
        return replace(document, links=links)


# Operation registry
_OPERATIONS: Dict[str, Operation] = {
    "add_room": AddRoomOp(),
    "move_room": MoveRoomOp(),
    "nudge_room": NudgeRoomOp(),
    "update_room": UpdateRoomOp(),
    "delete_room": DeleteRoomOp(),
    "update_edge": UpdateEdgeOp(),
    "set_mode": SetModeOp(),
    "set_color_priority": SetColorPriorityOp(),
    "set_conflict_matrix": SetConflictMatrixOp(),
    "set_file_name": SetFileNameOp(),
    "create_template": CreateTemplateOp(),
    "update_template": UpdateTemplateOp(),
    "delete_template": DeleteTemplateOp(),
    "place_instance": PlaceInstanceOp(),
    "move_instance": MoveInstanceOp(),
    "duplicate_instance": DuplicateInstanceOp(),
    "delete_instance": DeleteInstanceOp(),
    "enter_template_edit": EnterTemplateEditOp(),
    "save_template_edits": SaveTemplateEditsOp(),
    "discard_template_edits": DiscardTemplateEditsOp(),
    "add_link": AddLinkOp(),
    "remove_link": RemoveLinkOp(),
    "import_templates_from_link": ImportTemplatesFromLinkOp(),
    "update_link_status": UpdateLinkStatusOp(),
}


def register_operation(name: str, operation: Operation) -> None:
    """Register a new operation in the registry.

    Args:
        name: Name of the operation.
        operation: Operation instance to register.
    """
    _OPERATIONS[name] = operation


def get_operation(name: str) -> Operation:
    """Get an operation by name.

    Raises:
        KeyError: If the operation is not registered.
    """
    if name not in _OPERATIONS:
        raise KeyError(f"Operation '{name}' is not registered")
    return _OPERATIONS[name]


def list_operations() -> list[str]:
    """List all registered operations."""
    return list(_OPERATIONS.keys())
