"""Unit tests for ProvisioningService."""

from datetime import timedelta

import pytest

from roster.adapter.error import IdentityProviderError
from roster.domain.error import (
    AlreadyUsedError,
    ConflictError,
    ExpiredError,
    NotFoundError,
)
from roster.domain.model.common import utcnow
from roster.domain.model.profile import Profile
from roster.domain.repository import (
    InviteRepository,
    OrganizationRepository,
    ProfileRepository,
)
from roster.domain.service import ProvisioningService
from roster.domain.value import InviteToken, Role
from roster.persistence.repository.inmemory import (
    InMemoryInviteRepository,
    InMemoryProfileRepository,
)
from tests.factories import (
    NOW,
    InviteWorld,
    make_invite,
    make_organization,
    make_profile,
)
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class CountingInviteRepository(InMemoryInviteRepository):
    """Ignores the first ``misses`` consume attempts."""

    def __init__(self, misses: int = 0) -> None:
        super().__init__()
        self.misses = misses
        self.consume_calls = 0

    async def mark_used_by_token(self, token, used_at):
        self.consume_calls += 1
        if self.consume_calls <= self.misses:
            return False
        return await super().mark_used_by_token(token, used_at)


class ClobberedProfileRepository(InMemoryProfileRepository):
    """Drops the first ``lost_updates`` updates, like a trigger overwriting them."""

    def __init__(self, lost_updates: int = 0) -> None:
        super().__init__()
        self.lost_updates = lost_updates
        self.update_calls = 0

    async def update(self, profile_id, fields):
        self.update_calls += 1
        if self.update_calls <= self.lost_updates:
            return await self.find_by_id(profile_id)
        return await super().update(profile_id, fields)


class LateTriggerProfileRepository(InMemoryProfileRepository):
    """A skeletal row lands between the existence check and the insert."""

    async def insert(self, profile: Profile) -> Profile:
        if profile.organization_id is not None and profile.id not in self._profiles:
            await super().insert(Profile(id=profile.id, email=profile.email))
        return await super().insert(profile)


class StampingProfileRepository(InMemoryProfileRepository):
    """Stores its own timestamps on insert but hands back the caller's object."""

    stamped_at = NOW - timedelta(minutes=5)

    async def insert(self, profile: Profile) -> Profile:
        await super().insert(
            profile.model_copy(
                update={"created_at": self.stamped_at, "updated_at": self.stamped_at}
            )
        )
        return profile


async def seed_invite(world: InviteWorld, **kwargs):
    organization, admin = await world.seed()
    invite = await world.invites.save(
        make_invite(organization.id, admin.id, email="new@example.com", **kwargs)
    )
    return organization, invite


class TestRedeemInvite:
    """Tests for redeem_invite method."""

    @pytest.mark.asyncio
    async def test_redeem_provisions_profile(self):
        """Redeeming creates an identity and a profile matching the invite."""
        # Arrange
        world = InviteWorld()
        organization, invite = await seed_invite(world, role=Role.MARKETER)

        # Act
        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina New", "secret123"
        )

        # Assert
        assert profile.id == world.identity.identities["new@example.com"]
        assert profile.organization_id == organization.id
        assert profile.role == Role.MARKETER
        assert profile.email == "new@example.com"
        assert profile.name == "Nina New"
        assert profile.is_active is True
        assert world.identity.metadata[profile.id] == {"name": "Nina New"}

        stored = await world.invites.find_by_id(invite.id)
        assert stored.used is True
        assert await world.profiles.find_by_id(profile.id) == profile

    @pytest.mark.asyncio
    async def test_redeemed_member_leaves_pending_list(self):
        """After redemption the invite is neither pending nor redeemable."""
        world = InviteWorld()
        organization, invite = await seed_invite(world)

        await world.provisioning_service.redeem_invite(invite.token, "Nina", "secret123")

        assert await world.invite_service.list_pending(organization.id) == []
        with pytest.raises(AlreadyUsedError):
            await world.provisioning_service.redeem_invite(
                invite.token, "Nina", "secret123"
            )

    @pytest.mark.asyncio
    async def test_redeem_without_provider_trigger(self):
        """Without a skeletal row the profile is inserted directly."""
        world = InviteWorld()
        world.identity.trigger_enabled = False
        organization, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        assert profile.organization_id == organization.id
        assert profile.role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_redeem_with_delayed_provider_trigger(self):
        """A trigger firing after reconciliation does not undo the profile."""
        world = InviteWorld()
        world.identity.trigger_delay = 0.01
        organization, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )
        await world.identity.wait_for_triggers()

        stored = await world.profiles.find_by_id(profile.id)
        assert stored.organization_id == organization.id
        assert stored.role == Role.MEMBER
        assert stored.name == "Nina"

    @pytest.mark.asyncio
    async def test_redeem_when_trigger_races_insert(self):
        """An insert conflict falls through to an update."""
        world = InviteWorld(profiles=LateTriggerProfileRepository())
        world.identity.trigger_enabled = False
        organization, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        assert profile.organization_id == organization.id
        assert profile.name == "Nina"

    @pytest.mark.asyncio
    async def test_redeem_returns_stored_profile(self):
        """The returned profile is re-read from the store, not the inserted object."""
        profiles = StampingProfileRepository()
        world = InviteWorld(profiles=profiles)
        world.identity.trigger_enabled = False
        _, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        assert profile.created_at == StampingProfileRepository.stamped_at
        assert profile == await world.profiles.find_by_id(profile.id)

    @pytest.mark.asyncio
    async def test_redeem_retries_until_profile_converges(self):
        """A lost update is retried until the re-read matches the invite."""
        profiles = ClobberedProfileRepository(lost_updates=2)
        world = InviteWorld(profiles=profiles)
        organization, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        assert profiles.update_calls == 3
        assert profile.organization_id == organization.id
        assert profile.role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_redeem_fails_when_profile_never_converges(self):
        """Exhausted reconciliation is a conflict, but the invite stays consumed."""
        profiles = ClobberedProfileRepository(lost_updates=100)
        world = InviteWorld(profiles=profiles)
        _, invite = await seed_invite(world)

        with pytest.raises(ConflictError, match="did not converge"):
            await world.provisioning_service.redeem_invite(
                invite.token, "Nina", "secret123"
            )

        assert profiles.update_calls == world.provisioning_service.reconcile_attempts
        assert (await world.invites.find_by_id(invite.id)).used is True

    @pytest.mark.asyncio
    async def test_redeem_retries_consumption(self):
        """A consume that updates nothing is retried."""
        invites = CountingInviteRepository(misses=2)
        world = InviteWorld(invites=invites)
        _, invite = await seed_invite(world)

        await world.provisioning_service.redeem_invite(invite.token, "Nina", "secret123")

        assert invites.consume_calls == 3
        assert (await world.invites.find_by_id(invite.id)).used is True

    @pytest.mark.asyncio
    async def test_final_check_consumes_leftover_invite(self):
        """If every consume attempt missed, the final check consumes the invite."""
        invites = CountingInviteRepository(misses=3)
        world = InviteWorld(invites=invites)
        organization, invite = await seed_invite(world)

        profile = await world.provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        assert invites.consume_calls == 4
        assert profile.organization_id == organization.id
        assert (await world.invites.find_by_id(invite.id)).used is True

    @pytest.mark.asyncio
    async def test_identity_failure_leaves_invite_untouched(self):
        """A provider failure aborts before anything local changes."""
        world = InviteWorld()
        world.identity.fail_with = IdentityProviderError("provider down", 500)
        _, invite = await seed_invite(world)

        with pytest.raises(IdentityProviderError):
            await world.provisioning_service.redeem_invite(
                invite.token, "Nina", "secret123"
            )

        assert (await world.invites.find_by_id(invite.id)).used is False
        assert await world.invite_service.verify_invite(invite.token) == invite

    @pytest.mark.asyncio
    async def test_existing_identity_conflicts(self):
        """An email that already has an identity cannot redeem."""
        world = InviteWorld()
        _, invite = await seed_invite(world)
        await world.identity.create_identity("new@example.com", "pw", {})

        with pytest.raises(ConflictError, match="already exists"):
            await world.provisioning_service.redeem_invite(
                invite.token, "Nina", "secret123"
            )

        assert (await world.invites.find_by_id(invite.id)).used is False

    @pytest.mark.asyncio
    async def test_unknown_token(self):
        world = InviteWorld()

        with pytest.raises(NotFoundError):
            await world.provisioning_service.redeem_invite(
                InviteToken("missing"), "Nina", "secret123"
            )

        assert world.identity.identities == {}

    @pytest.mark.asyncio
    async def test_expired_invite(self):
        """Expired invites never reach the identity provider."""
        world = InviteWorld()
        _, invite = await seed_invite(world)
        world.clock.advance(days=8)

        with pytest.raises(ExpiredError):
            await world.provisioning_service.redeem_invite(
                invite.token, "Nina", "secret123"
            )

        assert world.identity.identities == {}


class TestRedeemInviteContainer:
    """Redemption through the DI container wiring."""

    @pytest.mark.asyncio
    async def test_redeem_through_container(self, unit_env):
        """The container wires the saga to the shared in-memory stores."""
        # Arrange
        provisioning_service = await unit_env.get(ProvisioningService)
        organization_repo = await unit_env.get(OrganizationRepository)
        profile_repo = await unit_env.get(ProfileRepository)
        invite_repo = await unit_env.get(InviteRepository)

        organization = await organization_repo.save(make_organization())
        admin = await profile_repo.insert(make_profile(organization.id))
        invite = await invite_repo.save(
            make_invite(organization.id, admin.id, created_at=utcnow())
        )

        # Act
        profile = await provisioning_service.redeem_invite(
            invite.token, "Nina", "secret123"
        )

        # Assert
        assert profile.organization_id == organization.id
        assert (await profile_repo.find_by_id(profile.id)).role == Role.MEMBER
        assert (await invite_repo.find_by_id(invite.id)).used is True
