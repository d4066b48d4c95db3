import json
import logging
from typing import Any, Dict, Optional

from bson import json_util
from bson.dbref import DBRef
from bson.objectid import ObjectId

from zcatalog.errors import StoreError

logger = logging.getLogger(__name__)


class SafeResult:
    """
    Wraps every store result in a predictable object.
    Provides:
      - .success: True/False
      - .data: main result (document, list of documents, counts, ...)
      - .error: error string or None
      - .model_dump(): JSON-friendly dict output
      - .unwrap(): the data on success, StoreError on failure
    """

    def __init__(
            self,
            data: Any = None,
            *,
            success: Optional[bool] = None,
            error: Optional[str] = None,
            original_exc: Optional[Exception] = None,
    ):
        self.success = success if success is not None else (error is None)
        self.error = error
        self.data = data
        self._original_exc = original_exc

    @staticmethod
    def _convert_bson(obj: Any) -> Any:
        # ObjectIds and DBRefs become strings for safe serialization
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, DBRef):
            return f"{obj.collection}:{obj.id}"
        if isinstance(obj, dict):
            return {k: SafeResult._convert_bson(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [SafeResult._convert_bson(x) for x in obj]
        return obj

    @classmethod
    def ok(cls, data: Any = None) -> "SafeResult":
        return cls(data=data, success=True, error=None)

    @classmethod
    def fail(cls, error: str, data: Any = None, exc: Optional[Exception] = None) -> "SafeResult":
        return cls(data=data, success=False, error=error, original_exc=exc)

    @property
    def original_exc(self) -> Optional[Exception]:
        return self._original_exc

    def model_dump(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self._convert_bson(self.data),
            "error": self.error,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.model_dump(), indent=indent, default=json_util.default)

    def unwrap(self, *, quiet: bool = False) -> Any:
        """
        Return the data of a successful result.

        Args:
            quiet (bool): If True, log the error and return None instead of raising

        Raises:
            StoreError: If the result failed and quiet=False
        """
        if self.success:
            return self.data
        if quiet:
            logger.info("Store error: %s", self.error)
            return None
        raise StoreError(self.error) from self._original_exc

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self):
        return f"SafeResult(success={self.success}, error={self.error!r}, data={str(self.data)[:300]})"
