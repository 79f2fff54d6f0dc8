"""
Domain exceptions for the ledger application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class EntityNotFoundError(StorageError):
    """Target of a read, update or delete does not exist."""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(
            f"{entity.replace('_', ' ').capitalize()} not found: {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class EntityInUseError(StorageError):
    """Hard delete refused because ledger rows still reference the entity."""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(
            f"Cannot delete {entity} {entity_id}: it is referenced by ledger entries",
            code="ENTITY_IN_USE",
            details={"entity": entity, "id": entity_id},
        )


class DuplicateInvoiceNumberError(StorageError):
    """Invoice number already issued."""

    def __init__(self, invoice_number: str, existing_id: int | None = None):
        super().__init__(
            f"Invoice number already exists: {invoice_number}",
            code="DUPLICATE_INVOICE_NUMBER",
            details={"invoice_number": invoice_number, "existing_id": existing_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Inventory Exceptions
class InventoryError(LedgerError):
    """Base exception for stock operations."""

    pass


class InsufficientStockError(InventoryError):
    """Requested quantity exceeds stock under a strict policy."""

    def __init__(
        self,
        scope: str,
        product_id: int,
        requested: float,
        available: float,
        vehicle_id: int | None = None,
    ):
        where = f" on vehicle {vehicle_id}" if vehicle_id is not None else ""
        super().__init__(
            f"Insufficient {scope} stock for product {product_id}{where}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "scope": scope,
                "product_id": product_id,
                "vehicle_id": vehicle_id,
                "requested": requested,
                "available": available,
            },
        )


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class UnknownReferenceError(ValidationError):
    """A create referenced a product, party or vehicle that does not exist."""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(
            field=f"{entity}_id",
            message=f"Unknown {entity}: {entity_id}",
            value=entity_id,
        )
        self.code = "UNKNOWN_REFERENCE"
        self.details.update({"entity": entity, "id": entity_id})


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
