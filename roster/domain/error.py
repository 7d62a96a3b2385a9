"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed input, e.g. an invalid email or a role outside the allowed set."""

    pass


class AuthorizationError(DomainError):
    """Raised when the requester lacks privilege (or membership) for an operation."""

    pass


class PermissionDeniedError(DomainError):
    """Raised when an admin acts on a resource owned by another organization."""

    def __init__(self, resource: str, resource_id: str, organization_id: str):
        self.resource = resource
        self.resource_id = resource_id
        self.organization_id = organization_id
        super().__init__(
            f"You do not have permission to modify {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ExpiredError(DomainError):
    """Raised when an invite resolved but is past its expiry."""

    def __init__(self, invite_id: str):
        self.invite_id = invite_id
        super().__init__("This invitation has expired")


class AlreadyUsedError(DomainError):
    """Raised when an invite resolved but has already been consumed."""

    def __init__(self, invite_id: str):
        self.invite_id = invite_id
        super().__init__("This invitation has already been used")


class ConflictError(DomainError):
    """Existing state blocks the operation or state did not converge."""

    pass


class PersistenceError(DomainError):
    """Transient storage failure."""

    pass
