# zcatalog/renderer.py
"""
Indented, depth-first text rendering of catalog documents.

References are followed as they are met, so the output reads as though the
referenced documents were written inline:

- a manufacturer reference renders as ``manufacturer: <name>``;
- a component reference renders the component's name as a heading and then
  the component's own fields one level deeper.

Each level of nesting adds one tab.
"""
import logging
import sys
from typing import Any, Iterable, Mapping, Optional, TextIO, Tuple

from bson.dbref import DBRef
from bson.objectid import ObjectId

from zcatalog.documents import ID_FIELD, NAME_FIELD, Value, is_composite, to_value
from zcatalog.errors import CyclicReferenceError, InvalidReferenceError
from zcatalog.references import MANUFACTURER_FIELD, CollectionKind, Reference
from zcatalog.zstore import JsonDict, ZStore

logger = logging.getLogger(__name__)

INDENT = "\t"
COMPONENT_PLACEHOLDER = "<component>"
MANUFACTURER_PLACEHOLDER = "<manufacturer>"
SKIPPED_FIELDS = (ID_FIELD, NAME_FIELD)

# a reference that cannot be followed, rendered as a placeholder heading
_UNRESOLVABLE = object()


def format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def placeholder_for(kind: CollectionKind) -> str:
    if kind is CollectionKind.MANUFACTURERS:
        return MANUFACTURER_PLACEHOLDER
    return COMPONENT_PLACEHOLDER


def _lookup(store: ZStore, kind: CollectionKind, identifier: ObjectId) -> Optional[JsonDict]:
    result = store.find_one(kind.collection, {ID_FIELD: identifier})
    if not result.success:
        logger.error("Lookup of %s %s failed: %s", kind.collection, identifier, result.error)
        return None
    if result.data is None:
        logger.warning("Dangling reference to %s %s", kind.collection, identifier)
    return result.data


def _typed(raw: Any, field_name: Optional[str]) -> Any:
    """
    Type one field value for rendering.

    Composites are left as they are and typed field by field when rendered.
    Unreadable references degrade: a ``DBRef`` to an unknown collection becomes
    a placeholder, a malformed tagged string stays a plain string.
    """
    if is_composite(raw):
        return raw
    try:
        return to_value(raw, field_name)
    except InvalidReferenceError as e:
        logger.warning("Unreadable reference in field '%s': %s", field_name, e)
        if isinstance(raw, DBRef):
            return _UNRESOLVABLE
        return raw


def _fields(container: Any, field_name: Optional[str]) -> Iterable[Tuple[Any, Value]]:
    if isinstance(container, Mapping):
        return ((k, _typed(v, k)) for k, v in container.items() if k not in SKIPPED_FIELDS)
    # list items are typed by the field holding the list
    return ((i, _typed(v, field_name)) for i, v in enumerate(container))


def _emit(out: TextIO, depth: int, text: str) -> None:
    print(f"{INDENT * (depth + 1)}{text}", file=out)


def render(
    store: ZStore,
    document: Any,
    depth: int = 1,
    out: Optional[TextIO] = None,
    *,
    _field: Optional[str] = None,
    _path: Tuple[ObjectId, ...] = (),
) -> None:
    """
    Write the fields of ``document`` to ``out``, one per line, at ``depth + 1`` tabs.

    ``document`` may be a stored document, a typed document or a list. ``_path``
    holds the ids of the documents being rendered above this one.

    Raises:
        CyclicReferenceError: if a component reference points back at one of
            the documents on the current path.
    """
    out = out if out is not None else sys.stdout
    if isinstance(document, Mapping) and document.get(ID_FIELD) is not None:
        _path = _path + (document[ID_FIELD],)

    for key, value in _fields(document, _field):
        if is_composite(value):
            _emit(out, depth, f"{key}:")
            render(store, value, depth + 1, out, _field=key if isinstance(key, str) else _field, _path=_path)
        elif value is _UNRESOLVABLE:
            _emit(out, depth, COMPONENT_PLACEHOLDER)
        elif isinstance(value, Reference) and (
            key == MANUFACTURER_FIELD or value.kind is CollectionKind.MANUFACTURERS
        ):
            manufacturer = _lookup(store, CollectionKind.MANUFACTURERS, value.identifier)
            label = (manufacturer or {}).get(NAME_FIELD, MANUFACTURER_PLACEHOLDER)
            _emit(out, depth, f"{key}: {label}")
        elif isinstance(value, Reference):
            if value.identifier in _path:
                raise CyclicReferenceError(value.identifier)
            component = _lookup(store, CollectionKind.COMPONENTS, value.identifier)
            _emit(out, depth, (component or {}).get(NAME_FIELD, COMPONENT_PLACEHOLDER))
            if component is not None:
                render(store, component, depth + 1, out, _path=_path)
        else:
            _emit(out, depth, f"{key}: {format_scalar(value)}")


def dump_collection(
    store: ZStore,
    kind: CollectionKind,
    query: Optional[JsonDict] = None,
    out: Optional[TextIO] = None,
) -> None:
    """Render every document of ``kind`` matching ``query`` under its name."""
    out = out if out is not None else sys.stdout
    for document in store.find(kind.collection, query).unwrap():
        print(f"{INDENT}{document.get(NAME_FIELD, placeholder_for(kind))}", file=out)
        render(store, document, 1, out)
