"""
Campus Map error types.

All errors inherit from CampusMapError for consistent handling.

Taxonomy:
- ValidationError: missing or invalid user input. Surfaced as an alert,
  operation aborted, no partial state change.
- StorageReadError: absent or malformed persisted data. Recovered silently
  with an empty collection.
- NotFoundError: delete referencing a missing id or index. Callers treat
  it as a no-op.
"""


class CampusMapError(Exception):
    """Base exception for all campus map failures."""
    pass


class ValidationError(CampusMapError):
    """Raised when user input is missing or invalid."""
    
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidCoordinate(ValidationError):
    """Raised when a latitude or longitude is not a finite number."""
    
    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}. Must be a finite number.")


class StorageError(CampusMapError):
    """Raised when a slot store operation fails."""
    pass


class StorageReadError(StorageError):
    """Raised when a slot is absent or holds malformed data."""
    
    def __init__(self, key: str, reason: str, missing: bool = False):
        self.key = key
        self.reason = reason
        self.missing = missing
        super().__init__(f"Cannot read slot '{key}': {reason}")


class NotFoundError(CampusMapError):
    """Raised when a delete references a missing id or index."""
    pass
