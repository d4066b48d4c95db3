# zcatalog/documents.py
"""
Document value model shared by the seed builder and the renderer.

A document maps field names to values, and a value is a scalar, a nested
document, a list of values or a :class:`~zcatalog.references.Reference`.
Stored documents are converted to this model on read with :func:`to_document`
and back with :func:`to_stored` on write.
"""
from typing import Any, Dict, List, Mapping, Optional, Union

from bson.dbref import DBRef

from zcatalog.references import Reference, is_reference

Scalar = Union[str, int, float, bool, None]
Value = Union[Scalar, "Document", List["Value"], Reference]
Document = Dict[str, Value]

ID_FIELD = "_id"
NAME_FIELD = "name"


def to_value(raw: Any, field_name: Optional[str] = None) -> Value:
    """Convert one stored value, using ``field_name`` to type legacy reference strings."""
    if isinstance(raw, Reference):
        return raw
    if isinstance(raw, DBRef):
        return Reference.from_dbref(raw)
    if is_reference(raw):
        return Reference.parse(raw, field_name)
    if isinstance(raw, Mapping):
        return to_document(raw)
    if isinstance(raw, (list, tuple)):
        # items of a list share the field's target collection
        return [to_value(item, field_name) for item in raw]
    return raw


def to_document(raw: Mapping[str, Any]) -> Document:
    """Convert a stored mapping, keeping its natural key order."""
    return {key: to_value(value, key) for key, value in raw.items()}


def to_stored(value: Any) -> Any:
    """Convert typed values into what is written to the store."""
    if isinstance(value, Reference):
        return value.to_dbref()
    if isinstance(value, Mapping):
        return {key: to_stored(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_stored(v) for v in value]
    return value


def is_composite(value: Value) -> bool:
    """True for nested documents and lists, which render as a heading plus a block."""
    return isinstance(value, (Mapping, list, tuple))
