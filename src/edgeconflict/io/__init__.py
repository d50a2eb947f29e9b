"""Import/export and publishing of floor-plan projects."""

from .parser import document_to_dict, dumps, load_document, loads, parse_document, save_document
from .store import FileStore, PublishedFile, publish_document

__all__ = [
    "FileStore",
    "PublishedFile",
    "document_to_dict",
    "dumps",
    "load_document",
    "loads",
    "parse_document",
    "publish_document",
    "save_document",
]
