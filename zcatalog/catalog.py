# zcatalog/catalog.py
"""
Catalog building helpers: create manufacturers and components, link them
with references, wipe the collections and roll up list prices.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from bson.objectid import ObjectId

from zcatalog.documents import ID_FIELD, NAME_FIELD, Document
from zcatalog.errors import NotFoundError
from zcatalog.references import CollectionKind, Reference
from zcatalog.zstore import JsonDict, Pipeline, ZStore

logger = logging.getLogger(__name__)

SHORTNAME_FIELD = "shortname"
PRICE_FIELD = "list_price"


def shortname_for(name: str) -> str:
    """Lookup key for a manufacturer: ``"Selle Royal"`` -> ``"selle-royal"``."""
    return name.lower().replace(" ", "-")


def price_rollup_pipeline(field: str = PRICE_FIELD) -> Pipeline:
    """Sum ``<field>.value`` across every document that has ``field``."""
    return [
        {"$match": {field: {"$exists": True}}},
        {"$project": {"value": f"${field}.value"}},
        {"$group": {"_id": None, "total": {"$sum": "$value"}}},
    ]


class Catalog:
    """Seed builder for the component and manufacturer collections of one store."""

    def __init__(self, store: ZStore):
        self.store = store

    def reset(self) -> None:
        """Delete every document in both catalog collections."""
        for kind in CollectionKind:
            res = self.store.delete_all(kind.collection).unwrap()
            logger.info("Cleared '%s' (%s documents).", kind.collection, res.get("deleted_count"))

    def create_document(
        self,
        kind: CollectionKind,
        name: str,
        properties: Optional[Document] = None,
    ) -> ObjectId:
        """Insert ``properties`` plus ``name`` into ``kind``'s collection and return the new id."""
        document: Document = {**(properties or {}), NAME_FIELD: name}
        res = self.store.insert(kind.collection, document).unwrap()
        inserted_id = res["inserted_id"]
        logger.debug("Created %s '%s' (%s).", kind.collection, name, inserted_id)
        return inserted_id

    def create_manufacturer(self, name: str, properties: Optional[Document] = None) -> ObjectId:
        props = {**(properties or {}), SHORTNAME_FIELD: shortname_for(name)}
        return self.create_document(CollectionKind.MANUFACTURERS, name, props)

    def create_component(self, name: str, properties: Optional[Document] = None) -> ObjectId:
        return self.create_document(CollectionKind.COMPONENTS, name, properties)

    def manufacturer_ref(self, shortname: str) -> Reference:
        """
        Reference to the manufacturer with ``shortname``.

        Raises:
            NotFoundError: if no manufacturer has that shortname.
        """
        doc = self.store.find_one(
            CollectionKind.MANUFACTURERS.collection, {SHORTNAME_FIELD: shortname}
        ).unwrap()
        if not doc or ID_FIELD not in doc:
            raise NotFoundError(shortname)
        return Reference.manufacturer(doc[ID_FIELD])

    @staticmethod
    def component_refs(ids: Iterable[Union[ObjectId, str]]) -> List[Reference]:
        return [Reference.component(i) for i in ids]

    def find_component(self, name: str) -> Optional[JsonDict]:
        return self.store.find_one(CollectionKind.COMPONENTS.collection, {NAME_FIELD: name}).unwrap()

    def total_list_price(self, query: Optional[JsonDict] = None, field: str = PRICE_FIELD) -> Any:
        """Sum of ``<field>.value`` over the priced components matching ``query``."""
        pipeline = price_rollup_pipeline(field)
        if query:
            pipeline.insert(0, {"$match": query})
        rows: List[Dict[str, Any]] = self.store.aggregate(
            CollectionKind.COMPONENTS.collection, pipeline
        ).unwrap()
        return rows[0]["total"] if rows else 0
