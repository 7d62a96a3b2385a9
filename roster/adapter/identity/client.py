"""Identity provider clients.

Talks to a GoTrue compatible admin API. Creating a user there fires a
database trigger that inserts a skeletal row into ``profiles``.
"""

import asyncio
from uuid import UUID, uuid4

import httpx
import logfire

from roster.adapter.error import IdentityProviderError
from roster.domain.error import ConflictError
from roster.domain.model.profile import Profile
from roster.domain.repository import ProfileRepository
from roster.domain.service.identity import IdentityProvider
from roster.domain.value import ProfileId

# Error codes / messages GoTrue returns for an already registered email
_DUPLICATE_MARKERS = ("email_exists", "user_already_exists", "already been registered")


class GoTrueIdentityProvider(IdentityProvider):
    """Identity provider backed by the GoTrue admin API."""

    def __init__(
        self,
        url: str,
        service_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize GoTrue client.

        Args:
            url: GoTrue base URL (e.g. https://<project>.supabase.co/auth/v1)
            service_key: Service role key with admin rights
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.url = url.rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self._transport = transport

    async def create_identity(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> ProfileId:
        """Create a confirmed user.

        Raises:
            ConflictError: If the email is already registered
            IdentityProviderError: On transport errors or unexpected responses
        """
        payload = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": metadata,
        }
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    f"{self.url}/admin/users", json=payload, headers=headers
                )
        except httpx.HTTPError as e:
            logfire.error("Identity provider HTTP error", error=str(e))
            raise IdentityProviderError(f"HTTP error creating identity: {e}")

        if response.status_code in (200, 201):
            identity_id = response.json()["id"]
            logfire.info("Identity created at provider", identity_id=identity_id)
            return ProfileId(UUID(identity_id))

        body = response.text
        if response.status_code in (409, 422) and any(
            marker in body for marker in _DUPLICATE_MARKERS
        ):
            logfire.warn("Identity already exists", status_code=response.status_code)
            raise ConflictError("An account with this email already exists")

        logfire.error(
            "Identity creation failed",
            status_code=response.status_code,
            error=body,
        )
        raise IdentityProviderError(
            f"Identity creation failed: {response.status_code}",
            status_code=response.status_code,
        )


class InMemoryIdentityProvider(IdentityProvider):
    """In-memory identity provider for testing.

    Simulates the provider's signup trigger: after an identity is created a
    skeletal profile (no organization, no role) is inserted, either inline or
    after ``trigger_delay`` seconds.
    """

    def __init__(
        self,
        profile_repository: ProfileRepository,
        trigger_enabled: bool = True,
        trigger_delay: float | None = None,
    ) -> None:
        self.profile_repository = profile_repository
        self.trigger_enabled = trigger_enabled
        self.trigger_delay = trigger_delay
        self.identities: dict[str, ProfileId] = {}
        self.metadata: dict[ProfileId, dict[str, str]] = {}
        self.fail_with: Exception | None = None
        self._triggers: set[asyncio.Task[None]] = set()

    async def create_identity(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> ProfileId:
        if self.fail_with is not None:
            raise self.fail_with
        if email in self.identities:
            raise ConflictError("An account with this email already exists")

        identity_id = ProfileId(uuid4())
        self.identities[email] = identity_id
        self.metadata[identity_id] = dict(metadata)

        if self.trigger_enabled:
            if self.trigger_delay is None:
                await self._insert_skeletal_profile(identity_id, email)
            else:
                task = asyncio.create_task(self._delayed_trigger(identity_id, email))
                self._triggers.add(task)
                task.add_done_callback(self._triggers.discard)

        return identity_id

    async def wait_for_triggers(self) -> None:
        """Wait until every scheduled trigger has run."""
        if self._triggers:
            await asyncio.gather(*self._triggers)

    async def _delayed_trigger(self, identity_id: ProfileId, email: str) -> None:
        await asyncio.sleep(self.trigger_delay or 0)
        await self._insert_skeletal_profile(identity_id, email)

    async def _insert_skeletal_profile(self, identity_id: ProfileId, email: str) -> None:
        try:
            await self.profile_repository.insert(Profile(id=identity_id, email=email))
        except ConflictError:
            # on conflict do nothing
            pass
