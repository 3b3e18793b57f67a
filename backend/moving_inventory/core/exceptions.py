"""Domain exceptions.

Each exception carries the HTTP status the API layer maps it to, so services
can raise them without importing FastAPI. ``main.py`` registers a single
handler for ``InventoryAppError``.
"""


class InventoryAppError(Exception):
    """Base class for expected, caller-recoverable failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(InventoryAppError):
    """A token or id does not resolve to an existing row."""

    status_code = 404


class InventoryNotFoundError(NotFoundError):
    def __init__(self, message: str = "Inventory not found"):
        super().__init__(message)


class RoomNotFoundError(NotFoundError):
    def __init__(self, message: str = "Room not found"):
        super().__init__(message)


class ItemNotFoundError(NotFoundError):
    def __init__(self, message: str = "Item not found"):
        super().__init__(message)


class InventoryLockedError(InventoryAppError):
    """Raised when a mutation is attempted on a locked inventory."""

    status_code = 403

    def __init__(self, message: str = "Inventory is locked"):
        super().__init__(message)


class InventoryConflictError(InventoryAppError):
    """Raised when submitting an inventory that is already locked."""

    status_code = 409

    def __init__(self, message: str = "Inventory already submitted"):
        super().__init__(message)


class AdminUnauthorizedError(InventoryAppError):
    """Raised when the x-admin-key header is missing or wrong."""

    status_code = 401

    def __init__(self, message: str = "Invalid or missing admin API key"):
        super().__init__(message)


class CrmDeliveryError(InventoryAppError):
    """Raised when the CRM webhook call fails."""

    status_code = 502


class UploadNotConfiguredError(InventoryAppError):
    """Raised when image upload credentials are missing."""

    status_code = 400

    def __init__(self, message: str = "Image upload not configured"):
        super().__init__(message)
