"""Invite redemption saga."""

import asyncio
from collections.abc import Callable
from datetime import datetime

import logfire

from roster.domain.error import ConflictError, PersistenceError
from roster.domain.model.common import utcnow
from roster.domain.model.invite import Invite
from roster.domain.model.profile import Profile
from roster.domain.repository import ProfileRepository
from roster.domain.value import InviteToken, ProfileId
from roster.util.retry import retry

from .base import Service
from .identity import IdentityProvider
from .invite_service import InviteService


class InviteNotConsumed(Exception):
    """An attempt to consume an invite updated no row."""

    pass


class ProvisioningService(Service):
    """Turns a valid invite into an identity plus an organization profile.

    Steps run in order and commit independently: verify, create identity,
    consume invite, settle, reconcile profile, final check. The identity
    provider may insert a skeletal profile on its own after the identity is
    created, so reconciliation reads, writes and re-reads until the stored
    profile matches the invite.
    """

    def __init__(
        self,
        invite_service: InviteService,
        identity_provider: IdentityProvider,
        profile_repository: ProfileRepository,
        consume_attempts: int = 3,
        reconcile_attempts: int = 3,
        retry_delay: float = 0.5,
        settle_delay: float = 0.5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize provisioning service.

        Args:
            invite_service: Invite domain service
            identity_provider: External identity provider
            profile_repository: Profile repository
            consume_attempts: Attempts to mark the invite used
            reconcile_attempts: Attempts to converge the profile
            retry_delay: Seconds between attempts
            settle_delay: Seconds to wait for the provider's profile trigger
            clock: Source of the current time
        """
        self.invite_service = invite_service
        self.identity_provider = identity_provider
        self.profile_repository = profile_repository
        self.consume_attempts = consume_attempts
        self.reconcile_attempts = reconcile_attempts
        self.retry_delay = retry_delay
        self.settle_delay = settle_delay
        self.clock = clock

    async def redeem_invite(
        self, token: InviteToken, name: str, password: str
    ) -> Profile:
        """Redeem an invite.

        Args:
            token: Invite token
            name: Display name of the new member
            password: Password for the new identity

        Returns:
            The reconciled profile

        Raises:
            NotFoundError: If the token names no invite
            ExpiredError: If the invite expired
            AlreadyUsedError: If the invite was already used
            ConflictError: If the identity exists or the profile did not converge
            ProviderError: If the identity provider failed
        """
        with logfire.span("provisioning_service.redeem_invite", token=token.redacted):
            invite = await self.invite_service.verify_invite(token)

            profile_id = await self.identity_provider.create_identity(
                invite.email, password, {"name": name}
            )
            logfire.info(
                "Identity created",
                invite_id=str(invite.id),
                profile_id=str(profile_id),
            )

            # Consume before reconciling: a consumed invite with a broken profile
            # is repairable, a pending invite that already produced an identity is not
            await self._consume(invite)

            await asyncio.sleep(self.settle_delay)

            profile = await self._reconcile(profile_id, invite, name)

            profile = await self._final_check(invite, profile)

            logfire.info(
                "Invite redeemed",
                invite_id=str(invite.id),
                profile_id=str(profile.id),
                organization_id=str(invite.organization_id),
            )
            return profile

    async def _consume(self, invite: Invite) -> bool:
        async def attempt() -> bool:
            if not await self.invite_service.consume_invite(invite.token):
                raise InviteNotConsumed(str(invite.id))
            return True

        try:
            return await retry(
                attempt,
                attempts=self.consume_attempts,
                delay=self.retry_delay,
                retry_on=(InviteNotConsumed, PersistenceError),
                name="consume_invite",
            )
        except (InviteNotConsumed, PersistenceError) as e:
            logfire.error(
                "Failed to mark invite as used", invite_id=str(invite.id), error=str(e)
            )
            return False

    async def _reconcile(
        self, profile_id: ProfileId, invite: Invite, name: str
    ) -> Profile:
        fields = {
            "organization_id": invite.organization_id,
            "email": invite.email,
            "name": name,
            "role": invite.role,
            "is_active": True,
        }

        async def attempt() -> Profile:
            existing = await self.profile_repository.find_by_id(profile_id)
            if existing is None:
                try:
                    return await self.profile_repository.insert(
                        Profile(id=profile_id, **fields)
                    )
                except ConflictError:
                    logfire.info(
                        "Profile appeared during insert", profile_id=str(profile_id)
                    )

            await self.profile_repository.update(
                profile_id, {**fields, "updated_at": self.clock()}
            )
            current = await self.profile_repository.find_by_id(profile_id)
            if (
                current is None
                or current.organization_id != invite.organization_id
                or current.role != invite.role
            ):
                raise ConflictError(f"Profile {profile_id} does not match invite yet")
            return current

        try:
            return await retry(
                attempt,
                attempts=self.reconcile_attempts,
                delay=self.retry_delay,
                retry_on=(ConflictError, PersistenceError),
                name="reconcile_profile",
            )
        except (ConflictError, PersistenceError) as e:
            logfire.error(
                "Profile reconciliation did not converge",
                profile_id=str(profile_id),
                invite_id=str(invite.id),
                error=str(e),
            )
            raise ConflictError(
                f"Profile for {profile_id} did not converge; "
                "an administrator must repair it"
            ) from e

    async def _final_check(self, invite: Invite, reconciled: Profile) -> Profile:
        current = await self.invite_service.get_invite_by_token(invite.token)
        if current is not None and not current.used:
            logfire.warn(
                "Invite still unused after redemption", invite_id=str(invite.id)
            )
            try:
                await self.invite_service.consume_invite(invite.token)
            except PersistenceError as e:
                logfire.error(
                    "Final invite consumption failed",
                    invite_id=str(invite.id),
                    error=str(e),
                )

        stored = await self.profile_repository.find_by_id(reconciled.id)
        if stored is None:
            logfire.warn(
                "Profile missing after redemption", profile_id=str(reconciled.id)
            )
            return reconciled
        return stored
