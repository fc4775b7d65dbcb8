"""
Custom Exception Hierarchy
Domain and application-level exceptions
"""


class DomainException(Exception):
    """Base exception for all domain errors"""
    pass


class AuthenticationException(DomainException):
    """Authentication failed"""
    pass


class AuthorizationException(DomainException):
    """User not authorized for this operation"""
    pass


class ValidationException(DomainException):
    """Data validation failed"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidStatusException(ValidationException):
    """Status value is not part of the application status enum"""

    def __init__(self, value: str):
        self.value = value
        super().__init__("status", f"Invalid status '{value}'")


class InvalidTransitionException(ValidationException):
    """Status change not permitted from the current status"""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            "status",
            f"Cannot change application status from '{current}' to '{requested}'"
        )


class RepositoryException(DomainException):
    """Database operation failed"""
    pass


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class DuplicateResourceException(DomainException):
    """Resource already exists"""

    def __init__(self, resource_type: str, field: str, value: str):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(f"{resource_type} with {field}='{value}' already exists")


class ConcurrencyConflictException(DomainException):
    """Record changed underneath the caller (stale version)"""

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(
            f"{resource_type} {identifier} was modified concurrently, reload and retry"
        )


class StorageException(DomainException):
    """File storage operation failed"""

    def __init__(self, operation: str, filename: str, reason: str):
        self.operation = operation
        self.filename = filename
        self.reason = reason
        super().__init__(f"Failed to {operation} file '{filename}': {reason}")
