from bson.dbref import DBRef
from bson.objectid import ObjectId

from zcatalog.documents import is_composite, to_document, to_stored, to_value
from zcatalog.references import CollectionKind, Reference, encode


def test_dbref_becomes_reference():
    oid = ObjectId()
    value = to_value(DBRef("component", oid))
    assert value == Reference(CollectionKind.COMPONENTS, oid)


def test_legacy_strings_are_typed_by_field():
    maker, part = ObjectId(), ObjectId()
    doc = to_document({
        "name": "Motor",
        "manufacturer": encode(maker),
        "components": [encode(part)],
        "description": "plain text",
    })
    assert doc["manufacturer"] == Reference.manufacturer(maker)
    assert doc["components"] == [Reference.component(part)]
    assert doc["description"] == "plain text"


def test_key_order_is_kept():
    raw = {"_id": ObjectId(), "speeds": 20, "name": "x", "components": [], "full-build": True}
    assert list(to_document(raw)) == list(raw)


def test_nested_documents_are_converted():
    oid = ObjectId()
    doc = to_document({"spec": {"motor": DBRef("component", oid), "volts": 36}})
    assert doc["spec"] == {"motor": Reference.component(oid), "volts": 36}


def test_to_stored_writes_dbrefs():
    oid = ObjectId()
    stored = to_stored({
        "manufacturer": Reference.manufacturer(oid),
        "components": (Reference.component(oid),),
        "list_price": {"value": 45, "currency": "GBP"},
    })
    assert stored["manufacturer"] == DBRef("manufacturer", oid)
    assert stored["components"] == [DBRef("component", oid)]
    assert stored["list_price"] == {"value": 45, "currency": "GBP"}


def test_stored_and_typed_forms_convert_back():
    oid = ObjectId()
    typed = {"manufacturer": Reference.manufacturer(oid), "gears": 10}
    assert to_document(to_stored(typed)) == typed


def test_is_composite():
    assert is_composite({})
    assert is_composite([1, 2])
    assert not is_composite("components")
    assert not is_composite(Reference.component(ObjectId()))
