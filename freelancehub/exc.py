class DataAccessError(Exception):
    """Base class for errors raised by the storage adapters."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthorized(DataAccessError):  # noqa: N818
    """No resolvable identity for an operation that requires one."""

    kind = "unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFound(DataAccessError):  # noqa: N818
    """An update or lookup matched no record owned by the caller."""

    kind = "not_found"

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class ValidationError(DataAccessError):
    """Malformed input caught before any write."""

    kind = "validation"


class AlreadyExists(DataAccessError):  # noqa: N818
    """The caller already owns the records a bulk write would create."""

    kind = "conflict"


class BackendError(DataAccessError):
    """The datastore call itself failed."""

    kind = "backend"
