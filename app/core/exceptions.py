from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for faults that are reported to the client as an error envelope."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "details": self.details}


class AuthenticationError(AppError):
    status_code = 401
    code = "unauthorized"


class RequestValidationFault(AppError):
    status_code = 400
    code = "validation_error"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class StoreError(AppError):
    """Persistence failure. The original exception is kept as ``__cause__``."""

    status_code = 500
    code = "store_error"
