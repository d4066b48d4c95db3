# zcatalog/references.py
"""
References between catalog documents.

Two forms are understood:

- the typed :class:`Reference`, which names the target collection and the
  target ``ObjectId`` and is stored in MongoDB as a ``DBRef``;
- the legacy tagged string, ``"mongoid:" + <hex id>``, handled by
  :func:`encode`, :func:`is_reference` and :func:`decode`.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from bson.dbref import DBRef
from bson.errors import InvalidId
from bson.objectid import ObjectId

from zcatalog.errors import InvalidReferenceError

REFERENCE_TAG = "mongoid:"
MANUFACTURER_FIELD = "manufacturer"

IdLike = Union[ObjectId, str]


class CollectionKind(Enum):
    COMPONENTS = "component"
    MANUFACTURERS = "manufacturer"

    @property
    def collection(self) -> str:
        return self.value

    @classmethod
    def for_collection(cls, name: str) -> "CollectionKind":
        for kind in cls:
            if kind.value == name:
                return kind
        raise ValueError(f"Unknown collection: {name!r}")

    @classmethod
    def for_field(cls, field_name: Optional[str]) -> "CollectionKind":
        """The collection a legacy reference held in ``field_name`` points to."""
        if field_name == MANUFACTURER_FIELD:
            return cls.MANUFACTURERS
        return cls.COMPONENTS


def _to_objectid(value: IdLike) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would generate a fresh id
    if value is None:
        raise InvalidReferenceError(value, reason="missing identifier")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise InvalidReferenceError(value, reason=str(e)) from e


def encode(identifier: IdLike) -> str:
    """Tag an identifier so it reads as a reference."""
    return f"{REFERENCE_TAG}{identifier}"


def encode_group(identifiers: Iterable[IdLike]) -> List[str]:
    return [encode(i) for i in identifiers]


def is_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(REFERENCE_TAG)


def decode(tagged: Any) -> ObjectId:
    """Strip the tag from a reference string and return the target ``ObjectId``."""
    if not is_reference(tagged):
        raise InvalidReferenceError(tagged)
    return _to_objectid(tagged[len(REFERENCE_TAG):])


@dataclass(frozen=True)
class Reference:
    """A typed pointer to a document in one of the catalog collections."""
    kind: CollectionKind
    identifier: ObjectId

    @classmethod
    def to(cls, kind: CollectionKind, identifier: IdLike) -> "Reference":
        return cls(kind, _to_objectid(identifier))

    @classmethod
    def component(cls, identifier: IdLike) -> "Reference":
        return cls.to(CollectionKind.COMPONENTS, identifier)

    @classmethod
    def manufacturer(cls, identifier: IdLike) -> "Reference":
        return cls.to(CollectionKind.MANUFACTURERS, identifier)

    @classmethod
    def parse(cls, tagged: str, field_name: Optional[str] = None) -> "Reference":
        """Build a typed reference from a legacy tagged string found in ``field_name``."""
        return cls(CollectionKind.for_field(field_name), decode(tagged))

    @classmethod
    def from_dbref(cls, ref: DBRef) -> "Reference":
        try:
            kind = CollectionKind.for_collection(ref.collection)
        except ValueError as e:
            raise InvalidReferenceError(ref, reason=str(e)) from e
        return cls.to(kind, ref.id)

    @property
    def collection(self) -> str:
        return self.kind.collection

    def to_dbref(self) -> DBRef:
        return DBRef(self.kind.collection, self.identifier)

    def encode(self) -> str:
        return encode(self.identifier)

    def __str__(self) -> str:
        return f"{self.kind.collection}:{self.identifier}"
