# zcatalog/errors.py
"""Exception types raised by the catalog toolkit."""
from typing import Any


class ZCatalogError(Exception):
    """Base class for every error raised by zcatalog."""


class NotFoundError(ZCatalogError):
    """A manufacturer lookup by shortname found nothing."""

    def __init__(self, shortname: str):
        self.shortname = shortname
        super().__init__(f"Manufacturer `{shortname}` not found - check spelling?")


class InvalidReferenceError(ZCatalogError):
    """A value that is not a well-formed reference was decoded as one."""

    def __init__(self, value: Any, reason: str = "not a tagged reference"):
        self.value = value
        super().__init__(f"Invalid reference {value!r}: {reason}")


class CyclicReferenceError(ZCatalogError):
    """Rendering followed a reference back to a document already being rendered."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"Cyclic reference to document {identifier}")


class StoreError(ZCatalogError):
    """A document store operation failed."""


class UnsupportedOperationError(ZCatalogError):
    """The in-memory store was asked for a query or pipeline operator it does not implement."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Unsupported operator: {operator}")
