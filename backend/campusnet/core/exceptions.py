"""
Custom Exceptions for CampusNet
===============================

Services raise these instead of HTTPException so the same rules hold for
every caller. The handlers registered in ``campusnet.main`` turn them into
``{"error": <message>}`` responses with the matching status code.

Usage:
    from campusnet.core.exceptions import ResourceNotFoundError

    if not post:
        raise ResourceNotFoundError("Post", post_id)
"""

from typing import Optional, Any, Dict


class CampusNetError(Exception):
    """Base exception for all CampusNet errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusNetError):
    """Missing or invalid bearer token on a protected route"""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTH_REQUIRED")


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid or expired"""

    def __init__(self):
        super().__init__("Invalid or expired token")
        self.code = "INVALID_TOKEN"


class InvalidCredentialError(AuthenticationError):
    """Password did not match the stored hash"""

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)
        self.code = "INVALID_CREDENTIAL"


class AuthorizationError(CampusNetError):
    """Authenticated, but not allowed to perform this action"""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CampusNetError):
    """Referenced entity does not exist"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any = None, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, identifier: Any = None):
        super().__init__("User", identifier)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(CampusNetError):
    """Missing or malformed input"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidIdError(ValidationError):
    """Path identifier is not a valid number"""

    def __init__(self, field: str = "id"):
        super().__init__("Invalid ID", field=field)
        self.code = "INVALID_ID"


class InvalidOperationError(CampusNetError):
    """Request is well-formed but makes no sense for the current state"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_OPERATION")


class DuplicateIdentityError(CampusNetError):
    """Email or username is already taken"""

    status_code = 400

    def __init__(self, field: str):
        super().__init__(
            f"{field.capitalize()} already exists",
            code="DUPLICATE_IDENTITY",
            details={"field": field}
        )


# ============================================
# Conflict Errors (409-type)
# ============================================

class AlreadyExistsError(CampusNetError):
    """Unique pair or slug already present"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="ALREADY_EXISTS")


class ConflictError(CampusNetError):
    """Concurrent toggle lost the race on a unique constraint; retry"""

    status_code = 409

    def __init__(self, message: str = "Conflict, please try again"):
        super().__init__(message, code="CONFLICT")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CampusNetError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {"error": error.message}
