"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class IdentityToolkitError(ProviderError):
    """Identity Toolkit rejected a request or could not be reached.

    ``code`` is the provider's error code, e.g. ``"EMAIL_EXISTS"``.
    """

    def __init__(self, code: str, message: str, status: int | None = None):
        self.code = code
        self.message = message
        self.status = status
        super().__init__(f"{code}: {message}" if message != code else code)
