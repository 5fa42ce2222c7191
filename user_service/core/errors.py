# user_service/core/errors.py


class StorageError(Exception):
    """Raised when a database operation fails for a reason other than a constraint."""


class UserAlreadyExistsError(StorageError):
    """Raised when an insert violates the username or email uniqueness constraint."""
