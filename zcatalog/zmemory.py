# zcatalog/zmemory.py
"""
zcatalog.zmemory
================

An in-memory :class:`~zcatalog.zstore.ZStore` for tests and for running the
demo without a MongoDB server. Collections are ordered dicts keyed by
``_id``; documents are deep-copied on the way in and on the way out, so
callers never share state with the store.

Only the query and pipeline operators this project uses are implemented:

- queries: field equality (dotted paths allowed), ``$eq``, ``$ne``,
  ``$exists``, ``$in``, ``$and``, ``$or``;
- pipeline stages: ``$match``, ``$project``, ``$group`` with ``$sum``.

Anything else raises :class:`~zcatalog.errors.UnsupportedOperationError`,
which the store methods turn into a failed :class:`SafeResult`.
"""
import copy
import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson.objectid import ObjectId

from zcatalog.documents import ID_FIELD, to_stored
from zcatalog.errors import UnsupportedOperationError, ZCatalogError
from zcatalog.safe_result import SafeResult
from zcatalog.zstore import JsonDict, Pipeline, ZStore

logger = logging.getLogger(__name__)

_MISSING = object()


def get_path(doc: Any, path: str) -> Any:
    """Value at a dotted ``path`` inside ``doc``, or ``_MISSING``."""
    current = doc
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return _MISSING
    return current


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _match_operators(value: Any, conditions: Dict[str, Any]) -> bool:
    for op, arg in conditions.items():
        if op == "$exists":
            if (value is not _MISSING) != bool(arg):
                return False
        elif op == "$eq":
            if not _equals(value, arg):
                return False
        elif op == "$ne":
            if _equals(value, arg):
                return False
        elif op == "$in":
            if not any(_equals(value, candidate) for candidate in arg):
                return False
        else:
            raise UnsupportedOperationError(op)
    return True


def _is_operator_dict(cond: Any) -> bool:
    return isinstance(cond, dict) and bool(cond) and all(k.startswith("$") for k in cond)


def matches(doc: JsonDict, query: Optional[JsonDict]) -> bool:
    """True if ``doc`` satisfies ``query``."""
    for key, cond in (query or {}).items():
        if key == "$and":
            if not all(matches(doc, sub) for sub in cond):
                return False
        elif key == "$or":
            if not any(matches(doc, sub) for sub in cond):
                return False
        elif key.startswith("$"):
            raise UnsupportedOperationError(key)
        elif _is_operator_dict(cond):
            if not _match_operators(get_path(doc, key), cond):
                return False
        elif not _equals(get_path(doc, key), cond):
            return False
    return True


def _evaluate(doc: JsonDict, expr: Any) -> Any:
    """Evaluate a ``"$field.path"`` expression; literals pass through."""
    if isinstance(expr, str) and expr.startswith("$"):
        return get_path(doc, expr[1:])
    if isinstance(expr, dict):
        raise UnsupportedOperationError(next(iter(expr), "{}"))
    return expr


def _project(docs: Iterable[JsonDict], spec: JsonDict) -> List[JsonDict]:
    results = []
    for doc in docs:
        out: JsonDict = {}
        if spec.get(ID_FIELD, 1) and ID_FIELD in doc:
            out[ID_FIELD] = doc[ID_FIELD]
        for field, expr in spec.items():
            if field == ID_FIELD:
                continue
            if expr is True or expr == 1:
                value = get_path(doc, field)
            elif expr is False or expr == 0:
                raise UnsupportedOperationError(f"$project exclusion of '{field}'")
            else:
                value = _evaluate(doc, expr)
            if value is not _MISSING:
                out[field] = value
        results.append(out)
    return results


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _group(docs: Iterable[JsonDict], spec: JsonDict) -> List[JsonDict]:
    if ID_FIELD not in spec:
        raise UnsupportedOperationError("$group without _id")
    key_expr = spec[ID_FIELD]
    accumulators: List[Tuple[str, Any]] = []
    for field, acc in spec.items():
        if field == ID_FIELD:
            continue
        if not isinstance(acc, dict) or list(acc) != ["$sum"]:
            raise UnsupportedOperationError(str(acc))
        accumulators.append((field, acc["$sum"]))

    groups: "OrderedDict[Any, JsonDict]" = OrderedDict()
    for doc in docs:
        key = _evaluate(doc, key_expr)
        if key is _MISSING:
            key = None
        group_key = repr(key)
        if group_key not in groups:
            groups[group_key] = {ID_FIELD: key, **{field: 0 for field, _ in accumulators}}
        group = groups[group_key]
        for field, expr in accumulators:
            value = _evaluate(doc, expr)
            # $sum ignores missing and non-numeric values
            if _is_number(value):
                group[field] += value
    return list(groups.values())


class ZMemoryStore(ZStore):
    """Dict-backed store implementing the same contract as :class:`ZMongoStore`."""

    def __init__(self) -> None:
        self._collections: Dict[str, "OrderedDict[Any, JsonDict]"] = {}
        self.closed = False

    def _collection(self, name: str) -> "OrderedDict[Any, JsonDict]":
        return self._collections.setdefault(name, OrderedDict())

    def _failed(self, operation: str, collection: str, e: Exception) -> SafeResult:
        logger.error("%s on '%s' failed: %s", operation, collection, e)
        return self.fail(str(e), exc=e)

    def insert(self, collection: str, document: JsonDict) -> SafeResult:
        doc = copy.deepcopy(to_stored(document))
        if ID_FIELD not in doc:
            doc = {ID_FIELD: ObjectId(), **doc}
        docs = self._collection(collection)
        if doc[ID_FIELD] in docs:
            return self._failed(
                "insert", collection, ZCatalogError(f"duplicate key: {doc[ID_FIELD]}")
            )
        docs[doc[ID_FIELD]] = doc
        return self.ok({"inserted_id": doc[ID_FIELD], "acknowledged": True})

    def _select(self, collection: str, query: Optional[JsonDict]) -> List[JsonDict]:
        return [
            copy.deepcopy(doc)
            for doc in self._collection(collection).values()
            if matches(doc, query)
        ]

    def find_one(self, collection: str, query: JsonDict) -> SafeResult:
        try:
            docs = self._select(collection, query)
        except UnsupportedOperationError as e:
            return self._failed("find_one", collection, e)
        return self.ok(docs[0] if docs else None)

    def find(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        try:
            return self.ok(self._select(collection, query))
        except UnsupportedOperationError as e:
            return self._failed("find", collection, e)

    def delete_all(self, collection: str) -> SafeResult:
        docs = self._collection(collection)
        deleted = len(docs)
        docs.clear()
        return self.ok({"deleted_count": deleted, "acknowledged": True})

    def aggregate(self, collection: str, pipeline: Pipeline) -> SafeResult:
        try:
            docs = self._select(collection, None)
            for stage in pipeline:
                if len(stage) != 1:
                    raise UnsupportedOperationError(f"stage with keys {sorted(stage)}")
                (op, spec), = stage.items()
                if op == "$match":
                    docs = [doc for doc in docs if matches(doc, spec)]
                elif op == "$project":
                    docs = _project(docs, spec)
                elif op == "$group":
                    docs = _group(docs, spec)
                else:
                    raise UnsupportedOperationError(op)
            return self.ok(docs)
        except UnsupportedOperationError as e:
            return self._failed("aggregate", collection, e)

    def count(self, collection: str, query: Optional[JsonDict] = None) -> SafeResult:
        try:
            return self.ok({"count": len(self._select(collection, query))})
        except UnsupportedOperationError as e:
            return self._failed("count", collection, e)

    def close(self) -> None:
        self.closed = True
