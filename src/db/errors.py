"""Repository error kinds."""


class RepositoryError(Exception):
    """Base error for persistence failures."""


class NotFoundError(RepositoryError):
    """The requested record does not exist."""


class ConflictError(RepositoryError):
    """The record conflicts with an existing one."""


class StorageError(RepositoryError):
    """The underlying store failed to read or write."""
