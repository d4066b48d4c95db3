# zcatalog/__init__.py
"""
Public package API.
Use only relative imports here to avoid circular imports.
"""
from .catalog import Catalog, price_rollup_pipeline, shortname_for
from .config import Settings, open_store
from .documents import Document, Value, to_document, to_stored, to_value
from .errors import (
    CyclicReferenceError,
    InvalidReferenceError,
    NotFoundError,
    StoreError,
    UnsupportedOperationError,
    ZCatalogError,
)
from .references import (
    REFERENCE_TAG,
    CollectionKind,
    Reference,
    decode,
    encode,
    encode_group,
    is_reference,
)
from .renderer import dump_collection, render
from .safe_result import SafeResult
from .zmemory import ZMemoryStore
from .zstore import ZMongoStore, ZStore

__all__ = [
    "Catalog",
    "CollectionKind",
    "CyclicReferenceError",
    "Document",
    "InvalidReferenceError",
    "NotFoundError",
    "REFERENCE_TAG",
    "Reference",
    "SafeResult",
    "Settings",
    "StoreError",
    "UnsupportedOperationError",
    "Value",
    "ZCatalogError",
    "ZMemoryStore",
    "ZMongoStore",
    "ZStore",
    "decode",
    "dump_collection",
    "encode",
    "encode_group",
    "is_reference",
    "open_store",
    "price_rollup_pipeline",
    "render",
    "shortname_for",
    "to_document",
    "to_stored",
    "to_value",
]
