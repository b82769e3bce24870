"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Services are stateless: all state lives in the repositories they are
    handed, so one instance per request is safe.
    """

    pass
