"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the invitation and provisioning rules that span
    several entities and stores.
    """

    pass
