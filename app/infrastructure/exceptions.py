"""
Custom exceptions shared by the store, the asset host and the services.
"""
from typing import Any, Dict, List


class InfrastructureError(Exception):
    """Base class for exceptions raised by this application."""
    pass


class ProductValidationError(InfrastructureError):
    """Caller supplied data violates one or more field rules."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        fields = ", ".join(str(e.get("field")) for e in errors)
        super().__init__(f"Invalid product data: {fields}")


class NotFoundError(InfrastructureError):
    """Referenced record does not exist."""

    def __init__(self, entity: str = "Product", identifier: Any = None):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}" if identifier is not None else f"{entity} not found")


class StoreError(InfrastructureError):
    """Persistence failure."""
    pass


class ConflictError(StoreError):
    """Uniqueness constraint violation."""
    pass


class ObjectStorageError(InfrastructureError):
    """Asset host failure."""
    pass


class UploadError(ObjectStorageError):
    """Image could not be stored on the asset host."""
    pass


class InvalidImageError(UploadError):
    """Uploaded file was rejected before reaching the asset host."""
    pass


class AssetDeleteError(ObjectStorageError):
    """Image could not be removed from the asset host."""
    pass
