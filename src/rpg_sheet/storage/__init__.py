"""Storage module for source documents.

Provides the FieldReader interface consumed by the engine and two
reference document stores.
"""

from rpg_sheet.storage.documents import (
    FieldReader,
    InMemoryDocumentStore,
    JsonDocumentStore,
    active_feature_blocks,
    flatten_blocks,
    level_gate,
    normalize_path,
)

__all__ = [
    "FieldReader",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    "active_feature_blocks",
    "flatten_blocks",
    "level_gate",
    "normalize_path",
]
