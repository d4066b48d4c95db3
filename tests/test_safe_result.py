import json
import unittest

from bson.dbref import DBRef
from bson.objectid import ObjectId

from zcatalog.errors import StoreError
from zcatalog.safe_result import SafeResult


class TestSafeResult(unittest.TestCase):

    def test_ok_keeps_raw_data(self):
        oid = ObjectId()
        result = SafeResult.ok({"_id": oid})
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertIs(result.data["_id"], oid)
        self.assertEqual(result.unwrap(), {"_id": oid})

    def test_fail(self):
        exc = RuntimeError("boom")
        result = SafeResult.fail("boom", exc=exc)
        self.assertFalse(result)
        self.assertIs(result.original_exc, exc)
        with self.assertRaises(StoreError) as ctx:
            result.unwrap()
        self.assertIs(ctx.exception.__cause__, exc)
        self.assertIsNone(result.unwrap(quiet=True))

    def test_model_dump_stringifies_bson(self):
        oid = ObjectId("5f50c31e7b1e8a9459b8b73a")
        result = SafeResult.ok({"_id": oid, "manufacturer": DBRef("manufacturer", oid), "ids": [oid]})
        dump = result.model_dump()
        self.assertEqual(dump["data"]["_id"], "5f50c31e7b1e8a9459b8b73a")
        self.assertEqual(dump["data"]["manufacturer"], "manufacturer:5f50c31e7b1e8a9459b8b73a")
        self.assertEqual(dump["data"]["ids"], ["5f50c31e7b1e8a9459b8b73a"])
        self.assertEqual(json.loads(result.to_json())["success"], True)

    def test_repr(self):
        self.assertIn("success=False", repr(SafeResult.fail("x")))


if __name__ == "__main__":
    unittest.main()
