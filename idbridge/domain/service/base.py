"""Base service class for domain services."""


class Service:
    """Base class for domain services.

    Services coordinate the local account store, the identity directory and
    the cache; they hold no state of their own beyond their collaborators.
    """

    pass
