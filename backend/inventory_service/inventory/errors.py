# backend/inventory_service/inventory/errors.py


class InventoryError(Exception):
    """Base class for every error raised by the inventory provider."""


class UnrecognizedAddress(InventoryError):
    def __init__(self, address, message: str = "Unknown address"):
        self.address = address
        super().__init__(f"{message} {address}")


class UnroutableAddress(UnrecognizedAddress):
    """Raised by query when the address cannot be routed to the table."""

    def __init__(self, address):
        super().__init__(address, "Cannot query unknown address")


class UnsupportedOperation(InventoryError):
    def __init__(self, operation: str, address):
        self.operation = operation
        self.address = address
        super().__init__(f"{operation} is not supported for {address}")


class InvalidField(InventoryError):
    """A field failed validation. Raised before storage is touched."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def __repr__(self):
        return f"InvalidField(field={self.field!r}, reason={self.reason!r})"


class StorageInsertFailed(InventoryError):
    """The storage engine could not persist an otherwise valid row."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Failed to insert row for {address}")
