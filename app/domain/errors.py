# app/domain/errors.py
"""
Bledy domenowe. Kazdy blad niesie "kind" i status HTTP,
handler w app/api/errors.py zamienia je na jednolity JSON.
"""


class AppError(Exception):
    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(AppError, ValueError):
    kind = "validation_error"
    status_code = 400


class NotFoundError(AppError, ValueError):
    kind = "not_found"
    status_code = 404


class UnauthorizedError(AppError):
    kind = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(AppError, PermissionError):
    kind = "forbidden"
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class ConflictError(AppError):
    kind = "conflict"
    status_code = 409


class InternalError(AppError):
    kind = "internal_error"
    status_code = 500


class StaleCartError(ConflictError):
    """Wersja koszyka zmienila sie miedzy odczytem a zapisem."""

    def __init__(self, cart_id: int):
        super().__init__(f"Cart {cart_id} was modified by another request")
        self.cart_id = cart_id
