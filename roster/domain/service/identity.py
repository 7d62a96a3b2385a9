"""Identity provider interface."""

from roster.domain.value import ProfileId


class IdentityProvider:
    """External actor that owns login identities.

    Creating an identity may, as a side effect outside our control, make the
    provider write a skeletal profile row for the new identity.
    """

    async def create_identity(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> ProfileId:
        """Create a login identity.

        Args:
            email: Normalized email address
            password: Plain password, handed straight to the provider
            metadata: Extra user metadata (e.g. display name)

        Returns:
            Opaque identity id, used as the profile id

        Raises:
            ConflictError: If an identity already exists for the email
            ProviderError: If the provider cannot be reached or rejects the request
        """
        raise NotImplementedError
