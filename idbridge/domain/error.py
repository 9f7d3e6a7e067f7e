"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed caller input.

    ``field`` names the offending input when there is one, e.g. ``"email"``.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DirectoryError(DomainError):
    """The remote identity directory rejected or failed an operation.

    Carries the provider's error code and message unchanged.
    """

    def __init__(self, message: str, code: str | None = None):
        self.code = code
        super().__init__(message)
