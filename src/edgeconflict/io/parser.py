"""Parser for floor-plan project JSON files.

This module converts between Document objects and the JSON shape used
for import/export and for published files:

    {
        "rooms": [...], "edges": [...], "mode": "chronological",
        "colorPriority": [...], "conflictMatrix": [...],
        "componentTemplates": [...], "componentInstances": [...],
        "links": [...], "fileName": "...", "exportedAt": "2024-01-01T00:00:00+00:00"
    }

Parsing is lenient: unknown keys are ignored, missing keys take their
defaults and numbers given as strings are coerced. A malformed record
still fails the whole import with ``ValueError("Invalid data format: ...")``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

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
    Side,
)
from ..geom.segments import regenerate_edges

LOGGER = logging.getLogger(__name__)


def _number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    number = float(value)
    return int(number) if number.is_integer() else number


def _integer(value: Any) -> int:
    number = _number(value)
    if not float(number).is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(number)


def _optional_color(value: Any) -> RoomColor | None:
    if value is None or value == "":
        return None
    return RoomColor(value)


def _parse_room(data: dict) -> Room:
    return Room(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        x=_integer(data["x"]),
        y=_integer(data["y"]),
        width=_integer(data["width"]),
        height=_integer(data["height"]),
        color=RoomColor(data["color"]),
        created_at=_integer(data.get("createdAt", 0)),
        conditions=tuple(str(c) for c in data.get("conditions") or ()),
    )


def _parse_edge(data: dict) -> Edge:
    return Edge(
        id=str(data["id"]),
        room_id=str(data["roomId"]),
        side=Side(data["side"]),
        x1=_number(data["x1"]),
        y1=_number(data["y1"]),
        x2=_number(data["x2"]),
        y2=_number(data["y2"]),
        color_override=_optional_color(data.get("colorOverride")),
        name=data.get("name") or None,
    )


def _parse_matrix_entry(data: dict) -> ConflictMatrixEntry:
    return ConflictMatrixEntry(
        underneath=RoomColor(data["underneath"]),
        on_top=RoomColor(data["onTop"]),
        result=RoomColor(data["result"]),
    )


def _parse_template(data: dict) -> ComponentTemplate:
    return ComponentTemplate(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        room_ids=tuple(str(r) for r in data.get("roomIds") or ()),
        origin_x=_integer(data.get("originX", 0)),
        origin_y=_integer(data.get("originY", 0)),
    )


def _parse_instance(data: dict) -> ComponentInstance:
    return ComponentInstance(
        id=str(data["id"]),
        template_id=str(data["templateId"]),
        x=_integer(data["x"]),
        y=_integer(data["y"]),
    )


def _parse_link(data: dict) -> Link:
    return Link(
        id=str(data["id"]),
        linked_file_id=str(data["linkedFileId"]),
        linked_file_name=str(data.get("linkedFileName", data["linkedFileId"])),
        imported_template_ids=tuple(str(t) for t in data.get("importedTemplateIds") or ()),
        has_updates=bool(data.get("hasUpdates", False)),
    )


def _records(data: dict, key: str, parse) -> list:
    records = data.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        raise ValueError(f"'{key}' must be a list")

    parsed = []
    for index, record in enumerate(records):
        try:
            parsed.append(parse(record))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid data format: {key}[{index}]: {e}") from e
    return parsed


def parse_document(data: Any) -> Document:
    """Build a Document from decoded JSON data.

    Args:
        data: The decoded JSON object.

    Returns:
        A new Document. When the data carries no ``edges`` key the edges
        are regenerated from the rooms.

    Raises:
        ValueError: If any record is malformed. Nothing is returned in that
            case, so callers never see a partially imported document.
    """
    if not isinstance(data, dict):
        raise ValueError("Invalid data format: expected a JSON object")

    try:
        rooms = _records(data, "rooms", _parse_room)
        edges = _records(data, "edges", _parse_edge)
        matrix = _records(data, "conflictMatrix", _parse_matrix_entry)
        templates = _records(data, "componentTemplates", _parse_template)
        instances = _records(data, "componentInstances", _parse_instance)
        links = _records(data, "links", _parse_link)

        mode = ResolutionMode(data["mode"]) if data.get("mode") else ResolutionMode.CHRONOLOGICAL
        priority = tuple(_records(data, "colorPriority", RoomColor))
        file_name = str(data.get("fileName") or config.DEFAULT_FILE_NAME)
    except (TypeError, ValueError) as e:
        message = str(e)
        if not message.startswith("Invalid data format"):
            message = f"Invalid data format: {message}"
        raise ValueError(message) from e

    if "edges" in data:
        edge_map = {edge.id: edge for edge in edges}
    else:
        LOGGER.debug("No edges in imported data, regenerating from %d rooms", len(rooms))
        edge_map = regenerate_edges(rooms)

    return Document(
        rooms={room.id: room for room in rooms},
        edges=edge_map,
        mode=mode,
        color_priority=priority,
        conflict_matrix=tuple(matrix),
        templates={t.id: t for t in templates},
        instances={i.id: i for i in instances},
        links={link.id: link for link in links},
        file_name=file_name,
    )


def _room_to_dict(room: Room) -> Dict[str, Any]:
    data = {
        "id": room.id,
        "name": room.name,
        "x": room.x,
        "y": room.y,
        "width": room.width,
        "height": room.height,
        "color": room.color.value,
        "createdAt": room.created_at,
    }
    if room.conditions:
        data["conditions"] = list(room.conditions)
    return data


def _edge_to_dict(edge: Edge) -> Dict[str, Any]:
    data = {
        "id": edge.id,
        "roomId": edge.room_id,
        "side": edge.side.value,
        "x1": edge.x1,
        "y1": edge.y1,
        "x2": edge.x2,
        "y2": edge.y2,
    }
    if edge.color_override is not None:
        data["colorOverride"] = edge.color_override.value
    if edge.name:
        data["name"] = edge.name
    return data


def document_to_dict(document: Document, exported_at: datetime | None = None) -> Dict[str, Any]:
    """Serialize a Document to JSON-compatible data.

    A document with a pending template edit is written in its committed
    state: the snapshot taken when the edit started.
    """
    rooms = document.rooms
    edges = document.edges
    templates = document.templates
    if document.edit_session is not None:
        rooms = document.edit_session.rooms
        edges = document.edit_session.edges
        templates = document.edit_session.templates

    exported_at = exported_at or datetime.now(timezone.utc)

    return {
        "rooms": [_room_to_dict(r) for r in rooms.values()],
        "edges": [_edge_to_dict(e) for e in edges.values()],
        "mode": document.mode.value,
        "colorPriority": [c.value for c in document.color_priority],
        "conflictMatrix": [
            {"underneath": e.underneath.value, "onTop": e.on_top.value, "result": e.result.value}
            for e in document.conflict_matrix
        ],
        "componentTemplates": [
            {
                "id": t.id,
                "name": t.name,
                "roomIds": list(t.room_ids),
                "originX": t.origin_x,
                "originY": t.origin_y,
            }
            for t in templates.values()
        ],
        "componentInstances": [
            {"id": i.id, "templateId": i.template_id, "x": i.x, "y": i.y}
            for i in document.instances.values()
        ],
        "links": [
            {
                "id": link.id,
                "linkedFileId": link.linked_file_id,
                "linkedFileName": link.linked_file_name,
                "importedTemplateIds": list(link.imported_template_ids),
                "hasUpdates": link.has_updates,
            }
            for link in document.links.values()
        ],
        "fileName": document.file_name,
        "exportedAt": exported_at.isoformat(),
    }


def loads(text: str) -> Document:
    """Parse a Document from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid data format: {e}") from e
    return parse_document(data)


def dumps(document: Document, indent: int | None = 2) -> str:
    """Serialize a Document to a JSON string."""
    return json.dumps(document_to_dict(document), indent=indent)


def load_document(path: str | Path) -> Document:
    """Load a floor-plan project from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Document object representing the project.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        return loads(f.read())


def save_document(document: Document, path: str | Path) -> Path:
    """Write a Document to a JSON file and return the path written."""
    file_path = Path(path)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(dumps(document))
    LOGGER.info("Saved %s to %s", document.file_name, file_path)
    return file_path


def export_file_name(document: Document) -> str:
    """Suggested file name for an export: lowercased, spaces as dashes."""
    return "-".join(document.file_name.lower().split()) + ".json"
