from typing import Optional, Any

class CoscoError(Exception):
    """
    Base exception for the COSCO backend.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(CoscoError):
    """
    Raised when a required field is missing or invalid.
    """
    def __init__(self, message: str = "Missing fields", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class ResourceNotFoundError(CoscoError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(CoscoError):
    """
    Raised when an OTP or a payment signature does not match.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=400, details=details)

class DependencyError(CoscoError):
    """
    Raised when an external service (mail transport, Razorpay) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="DEPENDENCY_ERROR", status_code=500, details=details)

class PersistenceError(CoscoError):
    """
    Raised when a MongoDB read or write fails.
    """
    def __init__(self, message: str = "Database error", details: Optional[Any] = None):
        super().__init__(message, code="PERSISTENCE_ERROR", status_code=500, details=details)
