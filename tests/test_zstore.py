import unittest
from unittest.mock import MagicMock, patch

from bson.dbref import DBRef
from bson.objectid import ObjectId
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult

from zcatalog.config import Settings
from zcatalog.references import Reference
from zcatalog.zstore import ZMongoStore


class TestZMongoStore(unittest.TestCase):

    def setUp(self):
        self.db = MagicMock()
        self.coll = self.db.__getitem__.return_value
        self.store = ZMongoStore(db=self.db)

    def test_insert_converts_references(self):
        oid, maker = ObjectId(), ObjectId()
        self.coll.insert_one.return_value = InsertOneResult(oid, True)

        res = self.store.insert("component", {"name": "Motor", "manufacturer": Reference.manufacturer(maker)})

        self.assertTrue(res.success)
        self.assertEqual(res.data, {"inserted_id": oid, "acknowledged": True})
        self.db.__getitem__.assert_called_with("component")
        written = self.coll.insert_one.call_args[0][0]
        self.assertEqual(written["manufacturer"], DBRef("manufacturer", maker))

    def test_find_one(self):
        self.coll.find_one.return_value = {"_id": ObjectId(), "name": "Yamaha"}
        res = self.store.find_one("manufacturer", {"shortname": "yamaha"})
        self.assertEqual(res.data["name"], "Yamaha")
        self.coll.find_one.assert_called_once_with({"shortname": "yamaha"})

    def test_find_returns_list(self):
        self.coll.find.return_value = iter([{"name": "a"}, {"name": "b"}])
        res = self.store.find("component")
        self.assertEqual([d["name"] for d in res.data], ["a", "b"])
        self.coll.find.assert_called_once_with({})

    def test_delete_all(self):
        self.coll.delete_many.return_value = DeleteResult({"n": 4}, True)
        res = self.store.delete_all("component")
        self.assertEqual(res.data["deleted_count"], 4)
        self.coll.delete_many.assert_called_once_with({})

    def test_aggregate_and_count(self):
        self.coll.aggregate.return_value = iter([{"_id": None, "total": 895}])
        self.coll.count_documents.return_value = 7
        self.assertEqual(self.store.aggregate("component", []).data, [{"_id": None, "total": 895}])
        self.assertEqual(self.store.count("component").data, {"count": 7})

    def test_driver_errors_become_failed_results(self):
        self.coll.find_one.side_effect = PyMongoError("db disconnected")
        with self.assertLogs("zcatalog.zstore", level="ERROR"):
            res = self.store.find_one("component", {})
        self.assertFalse(res.success)
        self.assertEqual(res.error, "db disconnected")
        self.assertIsNone(res.unwrap(quiet=True))

    def test_close_closes_client(self):
        with self.store:
            pass
        self.db.client.close.assert_called_once()

    @patch("zcatalog.zstore.MongoClient")
    def test_connects_from_uri(self, client_cls):
        store = ZMongoStore(uri="mongodb://example:27017", db_name="bikes")
        client_cls.assert_called_once_with("mongodb://example:27017")
        client_cls.return_value.__getitem__.assert_called_once_with("bikes")
        self.assertIs(store.db, client_cls.return_value.__getitem__.return_value)

    @patch("zcatalog.zstore.MongoClient")
    @patch("zcatalog.zstore.Settings.from_env")
    def test_defaults_come_from_settings(self, from_env, client_cls):
        from_env.return_value = Settings(mongo_uri="mongodb://configured:27017", database_name="catalog")
        ZMongoStore()
        from_env.assert_called_once_with()
        client_cls.assert_called_once_with("mongodb://configured:27017")
        client_cls.return_value.__getitem__.assert_called_once_with("catalog")

    @patch("zcatalog.zstore.MongoClient")
    @patch("zcatalog.zstore.Settings.from_env")
    def test_explicit_uri_and_name_skip_settings(self, from_env, client_cls):
        ZMongoStore(uri="mongodb://example:27017", db_name="bikes")
        from_env.assert_not_called()


if __name__ == "__main__":
    unittest.main()
