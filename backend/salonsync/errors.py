# Overview: Typed failures raised by the service layer and reported to callers.

"""
Every failure the core can report carries a stable ``code`` (machine-checkable)
and a human-readable message. Services raise these; the facade in ``core.py``
and the route handlers turn them into results / JSON error bodies.

Only InconsistentState and StorageUnavailable are operator-facing: the
services log them at error level when they are raised.
"""


class SalonSyncError(Exception):
    """Base class for reported failures."""
    code = "ERROR"
    http_status = 400
    default_message = "Operation failed"

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.default_message)
        self.details = details or {}

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        body = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


# -- Token store --------------------------------------------------------------

class TokenNotFound(SalonSyncError):
    code = "TOKEN_NOT_FOUND"
    default_message = "Invalid token"


class TokenExpired(SalonSyncError):
    code = "TOKEN_EXPIRED"
    default_message = "Token expired"


class InvalidSignature(SalonSyncError):
    code = "INVALID_SIGNATURE"
    default_message = "Token signature does not match"


# -- Attendance -----------------------------------------------------------------

class NoOpenRecord(SalonSyncError):
    code = "NO_OPEN_RECORD"
    default_message = "Attendance record is already closed"


class InconsistentState(SalonSyncError):
    """Status flag and attendance ledger disagree."""
    code = "INCONSISTENT_STATE"
    http_status = 409
    default_message = "Clock status and attendance records disagree"


# -- Checkout ---------------------------------------------------------------------

class EmptyCart(SalonSyncError):
    code = "EMPTY_CART"
    default_message = "Cart is empty"


class InvalidLine(SalonSyncError):
    code = "INVALID_LINE"
    default_message = "Invalid cart line"


class InvalidPaymentMethod(SalonSyncError):
    code = "INVALID_PAYMENT_METHOD"
    default_message = "Payment method must be one of Cash, Card, Transfer"


# -- Directory / catalog ----------------------------------------------------------

class StaffNotFound(SalonSyncError):
    code = "STAFF_NOT_FOUND"
    http_status = 404
    default_message = "Staff member not found"


class ProductNotFound(SalonSyncError):
    code = "PRODUCT_NOT_FOUND"
    http_status = 404
    default_message = "Product not found"


class InvalidCredentials(SalonSyncError):
    code = "INVALID_CREDENTIALS"
    http_status = 401
    default_message = "Invalid staff id or PIN"


class Forbidden(SalonSyncError):
    code = "FORBIDDEN"
    http_status = 403
    default_message = "Role not allowed to perform this action"


class StaffClockedIn(SalonSyncError):
    code = "STAFF_CLOCKED_IN"
    http_status = 409
    default_message = "Staff member is clocked in; clock out before removing"


class ValidationError(SalonSyncError):
    """400-level input problem on CRUD payloads."""
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


# -- Storage ------------------------------------------------------------------------

class StorageUnavailable(SalonSyncError):
    code = "STORAGE_UNAVAILABLE"
    http_status = 503
    default_message = "Storage is unavailable"
