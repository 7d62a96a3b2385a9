"""Unit tests for InviteService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from roster.adapter.email.client import RecordingNotificationDispatcher
from roster.domain.error import (
    AlreadyUsedError,
    AuthorizationError,
    ConflictError,
    ExpiredError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from roster.domain.repository import (
    InviteRepository,
    OrganizationRepository,
    ProfileRepository,
)
from roster.domain.service import InviteService
from roster.domain.value import DeliveryMethod, InviteId, InviteToken, RepairAction, Role
from roster.persistence.repository.inmemory import (
    InMemoryInviteRepository,
    InMemoryProfileRepository,
)
from tests.factories import (
    NOW,
    InviteWorld,
    as_requester,
    make_invite,
    make_organization,
    make_profile,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


async def seed_admin(unit_env, organization_name: str = "Acme Care"):
    """Store an organization and its admin in the container's repositories."""
    organization_repo = await unit_env.get(OrganizationRepository)
    profile_repo = await unit_env.get(ProfileRepository)
    organization = await organization_repo.save(make_organization(organization_name))
    admin = await profile_repo.insert(make_profile(organization.id))
    return organization, admin


class TestCreateInvite:
    """Tests for create_invite method."""

    @pytest.mark.asyncio
    async def test_create_invite_success(self, unit_env):
        """Creating an invite should save it and email the invitee."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        dispatcher = await unit_env.get(RecordingNotificationDispatcher)
        organization, admin = await seed_admin(unit_env)

        # Act
        result = await invite_service.create_invite(
            as_requester(admin), "  New.Person@Example.COM ", Role.MEMBER
        )

        # Assert
        invite = result.invite
        assert invite.email == "new.person@example.com"
        assert invite.role == Role.MEMBER
        assert invite.organization_id == organization.id
        assert invite.invited_by == admin.id
        assert invite.used is False
        assert invite.expires_at - invite.created_at == timedelta(days=7)
        assert result.invite_url.endswith(f"/signup?invite={invite.token.root}")
        assert result.delivered is True
        assert result.delivery_method == DeliveryMethod.EMAIL

        saved = await invite_repo.find_by_id(invite.id)
        assert saved == invite

        assert len(dispatcher.sent) == 1
        notification = dispatcher.sent[0]
        assert notification.email == "new.person@example.com"
        assert notification.organization_name == "Acme Care"
        assert notification.inviter_name == "Ada Admin"
        assert notification.invite_url == result.invite_url

    @pytest.mark.asyncio
    async def test_create_invite_accepts_role_string(self, unit_env):
        """Role may be given as its string value."""
        invite_service = await unit_env.get(InviteService)
        _, admin = await seed_admin(unit_env)

        result = await invite_service.create_invite(
            as_requester(admin), "m@example.com", "marketer"
        )

        assert result.invite.role == Role.MARKETER

    @pytest.mark.asyncio
    async def test_create_invite_requires_admin(self, unit_env):
        """Non-admins cannot invite."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        profile_repo = await unit_env.get(ProfileRepository)
        organization, _ = await seed_admin(unit_env)
        member = await profile_repo.insert(
            make_profile(organization.id, email="member@example.com", role=Role.MEMBER)
        )

        # Act & Assert
        with pytest.raises(AuthorizationError, match="Only admins can invite users"):
            await invite_service.create_invite(
                as_requester(member), "new@example.com", Role.MEMBER
            )

        assert await invite_repo.list_by_organization(organization.id) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "message"),
        [
            ("", "Email is required"),
            ("   ", "Email is required"),
            ("not-an-email", "Invalid email address"),
            ("two@@example.com", "Invalid email address"),
        ],
    )
    async def test_create_invite_rejects_bad_email(self, unit_env, email, message):
        """Malformed emails are rejected before anything is stored."""
        invite_service = await unit_env.get(InviteService)
        _, admin = await seed_admin(unit_env)

        with pytest.raises(ValidationError, match=message):
            await invite_service.create_invite(as_requester(admin), email, Role.MEMBER)

    @pytest.mark.asyncio
    async def test_create_invite_rejects_unknown_role(self, unit_env):
        """Only admin, member and marketer are valid roles."""
        invite_service = await unit_env.get(InviteService)
        _, admin = await seed_admin(unit_env)

        with pytest.raises(ValidationError, match="admin, member, marketer"):
            await invite_service.create_invite(
                as_requester(admin), "new@example.com", "owner"
            )

    @pytest.mark.asyncio
    async def test_create_invite_for_existing_member_conflicts(self, unit_env):
        """An email that already has a profile in the organization cannot be invited."""
        invite_service = await unit_env.get(InviteService)
        profile_repo = await unit_env.get(ProfileRepository)
        organization, admin = await seed_admin(unit_env)
        await profile_repo.insert(
            make_profile(organization.id, email="taken@example.com", role=Role.MEMBER)
        )

        with pytest.raises(ConflictError, match="already exists"):
            await invite_service.create_invite(
                as_requester(admin), "Taken@Example.com", Role.MEMBER
            )

    @pytest.mark.asyncio
    async def test_create_invite_for_mixed_case_member_conflicts(self):
        """A member whose stored email has capitals is still recognised."""
        world = InviteWorld()
        organization, admin = await world.seed()
        await world.profiles.insert(
            make_profile(organization.id, email="Taken@Example.com", role=Role.MEMBER)
        )

        with pytest.raises(ConflictError, match="already exists"):
            await world.invite_service.create_invite(
                as_requester(admin), "taken@example.com", Role.MEMBER
            )

    @pytest.mark.asyncio
    async def test_create_invite_supersedes_active_invite(self, unit_env):
        """Re-inviting an email replaces its active invite."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        organization, admin = await seed_admin(unit_env)
        requester = as_requester(admin)
        first = await invite_service.create_invite(
            requester, "new@example.com", Role.MEMBER
        )

        # Act
        second = await invite_service.create_invite(
            requester, "new@example.com", Role.ADMIN
        )

        # Assert
        assert await invite_repo.find_by_id(first.invite.id) is None
        assert await invite_repo.find_by_token(first.invite.token) is None
        invites = await invite_repo.list_by_organization(organization.id)
        assert [i.id for i in invites] == [second.invite.id]
        assert invites[0].role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_create_invite_keeps_other_organizations_invites(self, unit_env):
        """Superseding is scoped to the requester's organization."""
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        _, admin_a = await seed_admin(unit_env, "Org A")
        _, admin_b = await seed_admin(unit_env, "Org B")

        a = await invite_service.create_invite(
            as_requester(admin_a), "shared@example.com", Role.MEMBER
        )
        b = await invite_service.create_invite(
            as_requester(admin_b), "shared@example.com", Role.MEMBER
        )

        assert await invite_repo.find_by_id(a.invite.id) is not None
        assert await invite_repo.find_by_id(b.invite.id) is not None

    @pytest.mark.asyncio
    async def test_create_invite_survives_email_outage(self, unit_env):
        """A failed dispatch still creates the invite, flagged for manual sharing."""
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        dispatcher = await unit_env.get(RecordingNotificationDispatcher)
        dispatcher.fail = True
        _, admin = await seed_admin(unit_env)

        result = await invite_service.create_invite(
            as_requester(admin), "new@example.com", Role.MEMBER
        )

        assert result.delivered is False
        assert result.delivery_method == DeliveryMethod.MANUAL
        assert await invite_repo.find_by_id(result.invite.id) is not None

    @pytest.mark.asyncio
    async def test_create_invite_survives_raising_dispatcher(self):
        """A dispatcher that raises is treated like a failed dispatch."""

        class ExplodingDispatcher(RecordingNotificationDispatcher):
            async def send_invite(self, notification):
                raise RuntimeError("smtp down")

        world = InviteWorld()
        world.invite_service.notification_dispatcher = ExplodingDispatcher()
        _, admin = await world.seed()

        result = await world.invite_service.create_invite(
            as_requester(admin), "new@example.com", Role.MEMBER
        )

        assert result.delivered is False
        assert result.delivery_method == DeliveryMethod.MANUAL

    @pytest.mark.asyncio
    async def test_create_invite_uses_display_fallbacks(self):
        """Missing organization and nameless inviter fall back to generic names."""
        world = InviteWorld()
        organization = make_organization()
        admin = await world.profiles.insert(make_profile(organization.id, name=None))

        await world.invite_service.create_invite(
            as_requester(admin), "new@example.com", Role.MEMBER
        )

        notification = world.dispatcher.sent[0]
        assert notification.organization_name == "Your Organization"
        assert notification.inviter_name == "A team member"

    @pytest.mark.asyncio
    async def test_tokens_are_unique_and_never_reused(self):
        """Every issued token is new, including against deleted invites."""
        world = InviteWorld()
        _, admin = await world.seed()
        requester = as_requester(admin)

        tokens = set()
        for i in range(25):
            result = await world.invite_service.create_invite(
                requester, f"user{i}@example.com", Role.MEMBER
            )
            tokens.add(result.invite.token.root)
            await world.invite_service.cancel_invite(requester, result.invite.id)

        assert len(tokens) == 25
        for token in tokens:
            assert await world.invites.token_exists(InviteToken(token))


class TestVerifyInvite:
    """Tests for verify_invite method."""

    @pytest.mark.asyncio
    async def test_verify_valid_invite(self):
        """A pending invite verifies without being changed."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        result = await world.invite_service.verify_invite(invite.token)

        assert result == invite
        assert (await world.invites.find_by_id(invite.id)).used is False

    @pytest.mark.asyncio
    async def test_verify_unknown_token(self):
        """Unknown tokens are not found."""
        world = InviteWorld()

        with pytest.raises(NotFoundError):
            await world.invite_service.verify_invite(InviteToken("nope"))

    @pytest.mark.asyncio
    async def test_verify_used_invite(self):
        """Used invites cannot be redeemed again."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(
            make_invite(organization.id, admin.id, used=True)
        )

        with pytest.raises(AlreadyUsedError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_verify_expired_invite(self):
        """Invites past their expiry are refused."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        world.clock.advance(days=7, seconds=1)

        with pytest.raises(ExpiredError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_verify_expired_and_used_reports_expired(self):
        """Expiry wins over the used flag."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(
            make_invite(organization.id, admin.id, used=True)
        )
        world.clock.advance(days=8)

        with pytest.raises(ExpiredError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_verify_exactly_at_expiry_is_valid(self):
        """An invite is still valid at the instant it expires."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        world.clock.now = invite.expires_at

        assert await world.invite_service.verify_invite(invite.token) == invite


class TestConsumeInvite:
    """Tests for consume_invite method."""

    @pytest.mark.asyncio
    async def test_consume_is_one_way(self):
        """The first consume flips the invite, later ones report no change."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        assert await world.invite_service.consume_invite(invite.token) is True
        assert await world.invite_service.consume_invite(invite.token) is False

        stored = await world.invites.find_by_id(invite.id)
        assert stored.used is True
        assert stored.used_at == NOW
        with pytest.raises(AlreadyUsedError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_consume_unknown_token(self):
        """Consuming an unknown token changes nothing."""
        world = InviteWorld()

        assert await world.invite_service.consume_invite(InviteToken("nope")) is False


class TestListPending:
    """Tests for list_pending method."""

    @pytest.mark.asyncio
    async def test_list_pending_filters_used_and_expired(self):
        """Only unused, unexpired invites are listed, newest first."""
        # Arrange
        world = InviteWorld()
        organization, admin = await world.seed()
        older = await world.invites.save(
            make_invite(organization.id, admin.id, email="a@example.com")
        )
        newer = await world.invites.save(
            make_invite(
                organization.id,
                admin.id,
                email="b@example.com",
                created_at=NOW + timedelta(hours=1),
            )
        )
        await world.invites.save(
            make_invite(organization.id, admin.id, email="c@example.com", used=True)
        )
        await world.invites.save(
            make_invite(
                organization.id,
                admin.id,
                email="d@example.com",
                created_at=NOW - timedelta(days=10),
            )
        )
        other_organization = make_organization("Other")
        await world.invites.save(make_invite(other_organization.id, admin.id))
        world.clock.advance(hours=2)

        # Act
        pending = await world.invite_service.list_pending(organization.id)

        # Assert
        assert [i.id for i in pending] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_list_pending_heals_invites_of_existing_members(self):
        """Invites whose invitee already has a profile are hidden and marked used."""
        # Arrange
        world = InviteWorld()
        organization, admin = await world.seed()
        stale = await world.invites.save(
            make_invite(organization.id, admin.id, email="joined@example.com")
        )
        fresh = await world.invites.save(
            make_invite(organization.id, admin.id, email="waiting@example.com")
        )
        await world.profiles.insert(
            make_profile(organization.id, email="joined@example.com", role=Role.MEMBER)
        )

        # Act
        pending = await world.invite_service.list_pending(organization.id)
        await world.background.drain()

        # Assert
        assert [i.id for i in pending] == [fresh.id]
        healed = await world.invites.find_by_id(stale.id)
        assert healed.used is True
        assert (await world.invites.find_by_id(fresh.id)).used is False
        assert world.background.pending == 0

    @pytest.mark.asyncio
    async def test_list_pending_heals_member_with_mixed_case_email(self):
        """A profile email stored with capitals still matches the invite."""
        # Arrange
        world = InviteWorld()
        organization, admin = await world.seed()
        stale = await world.invites.save(
            make_invite(organization.id, admin.id, email="b@y.com")
        )
        await world.profiles.insert(
            make_profile(organization.id, email="B@y.com", role=Role.MEMBER)
        )

        # Act
        pending = await world.invite_service.list_pending(organization.id)
        await world.background.drain()

        # Assert
        assert pending == []
        assert (await world.invites.find_by_id(stale.id)).used is True

    @pytest.mark.asyncio
    async def test_list_pending_includes_invite_at_expiry_instant(self):
        """Listing agrees with verify about the expiry boundary."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        world.clock.now = invite.expires_at

        pending = await world.invite_service.list_pending(organization.id)

        assert [i.id for i in pending] == [invite.id]
        assert await world.invite_service.verify_invite(invite.token) == invite

    @pytest.mark.asyncio
    async def test_list_pending_without_member_lookup(self):
        """A failing member lookup disables filtering instead of failing the call."""

        class BrokenProfileRepository(InMemoryProfileRepository):
            async def list_by_organization(self, organization_id, **filters):
                raise PersistenceError("profiles unavailable")

        world = InviteWorld()
        organization, admin = await world.seed()
        world.profile_service.profile_repository = BrokenProfileRepository()
        invite = await world.invites.save(
            make_invite(organization.id, admin.id, email="admin@example.com")
        )

        pending = await world.invite_service.list_pending(organization.id)

        assert [i.id for i in pending] == [invite.id]
        assert world.background.pending == 0


class TestListInvites:
    """Tests for list_invites method."""

    @pytest.mark.asyncio
    async def test_list_invites_returns_everything(self):
        """The full history includes used and expired invites."""
        world = InviteWorld()
        organization, admin = await world.seed()
        used = await world.invites.save(
            make_invite(organization.id, admin.id, email="u@example.com", used=True)
        )
        expired = await world.invites.save(
            make_invite(
                organization.id,
                admin.id,
                email="e@example.com",
                created_at=NOW - timedelta(days=30),
            )
        )

        invites = await world.invite_service.list_invites(organization.id)

        assert [i.id for i in invites] == [used.id, expired.id]


class TestResendInvite:
    """Tests for resend_invite method."""

    @pytest.mark.asyncio
    async def test_resend_rotates_token_and_expiry(self):
        """Resending issues a new token and expiry and keeps everything else."""
        # Arrange
        world = InviteWorld()
        organization, admin = await world.seed()
        original = await world.invites.save(
            make_invite(organization.id, admin.id, role=Role.MARKETER)
        )
        world.clock.advance(days=3)

        # Act
        result = await world.invite_service.resend_invite(
            as_requester(admin), original.id
        )

        # Assert
        resent = result.invite
        assert resent.id == original.id
        assert resent.token != original.token
        assert resent.expires_at == world.clock() + timedelta(days=7)
        assert resent.email == original.email
        assert resent.role == Role.MARKETER
        assert resent.invited_by == original.invited_by
        assert resent.created_at == original.created_at
        assert await world.invites.find_by_token(original.token) is None
        assert world.dispatcher.sent[-1].invite_url == result.invite_url

    @pytest.mark.asyncio
    async def test_resend_names_original_inviter(self):
        """The email names whoever created the invite, not whoever resends it."""
        world = InviteWorld()
        organization, admin = await world.seed()
        other_admin = await world.profiles.insert(
            make_profile(organization.id, email="boss@example.com", name="Bo Boss")
        )
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        await world.invite_service.resend_invite(as_requester(other_admin), invite.id)

        assert world.dispatcher.sent[-1].inviter_name == "Ada Admin"

    @pytest.mark.asyncio
    async def test_resend_used_invite(self):
        """Used invites cannot be resent."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(
            make_invite(organization.id, admin.id, used=True)
        )

        with pytest.raises(AlreadyUsedError):
            await world.invite_service.resend_invite(as_requester(admin), invite.id)

    @pytest.mark.asyncio
    async def test_resend_other_organizations_invite(self):
        """Admins cannot resend another organization's invite."""
        world = InviteWorld()
        _, admin = await world.seed()
        other, other_admin = await world.seed("Other")
        invite = await world.invites.save(make_invite(other.id, other_admin.id))

        with pytest.raises(PermissionDeniedError):
            await world.invite_service.resend_invite(as_requester(admin), invite.id)

    @pytest.mark.asyncio
    async def test_resend_missing_invite(self):
        world = InviteWorld()
        _, admin = await world.seed()

        with pytest.raises(NotFoundError):
            await world.invite_service.resend_invite(
                as_requester(admin), InviteId(uuid4())
            )

    @pytest.mark.asyncio
    async def test_resend_requires_admin(self):
        world = InviteWorld()
        organization, admin = await world.seed()
        member = await world.profiles.insert(
            make_profile(organization.id, email="m@example.com", role=Role.MEMBER)
        )
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        with pytest.raises(AuthorizationError):
            await world.invite_service.resend_invite(as_requester(member), invite.id)


class TestCancelInvite:
    """Tests for cancel_invite method."""

    @pytest.mark.asyncio
    async def test_cancel_deletes_invite(self):
        """Canceling removes the invite and its token stops resolving."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        assert await world.invite_service.cancel_invite(as_requester(admin), invite.id)

        assert await world.invites.find_by_id(invite.id) is None
        with pytest.raises(NotFoundError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        """Canceling a missing invite succeeds."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        requester = as_requester(admin)

        assert await world.invite_service.cancel_invite(requester, invite.id)
        assert await world.invite_service.cancel_invite(requester, invite.id)
        assert await world.invite_service.cancel_invite(requester, InviteId(uuid4()))

    @pytest.mark.asyncio
    async def test_cancel_other_organizations_invite(self):
        """Admins cannot cancel another organization's invite."""
        world = InviteWorld()
        _, admin = await world.seed()
        other, other_admin = await world.seed("Other")
        invite = await world.invites.save(make_invite(other.id, other_admin.id))

        with pytest.raises(PermissionDeniedError):
            await world.invite_service.cancel_invite(as_requester(admin), invite.id)

        assert await world.invites.find_by_id(invite.id) is not None

    @pytest.mark.asyncio
    async def test_cancel_requires_admin(self):
        world = InviteWorld()
        organization, admin = await world.seed()
        member = await world.profiles.insert(
            make_profile(organization.id, email="m@example.com", role=Role.MEMBER)
        )
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        with pytest.raises(AuthorizationError, match="cancel invitations"):
            await world.invite_service.cancel_invite(as_requester(member), invite.id)

    @pytest.mark.asyncio
    async def test_cancel_raced_by_another_delete(self):
        """A zero-row delete of an already vanished invite still succeeds."""

        class RacingInviteRepository(InMemoryInviteRepository):
            async def delete(self, invite_id):
                await super().delete(invite_id)
                return False

        world = InviteWorld(invites=RacingInviteRepository())
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        assert await world.invite_service.cancel_invite(as_requester(admin), invite.id)

    @pytest.mark.asyncio
    async def test_cancel_fails_when_row_survives(self):
        """A zero-row delete that leaves the invite in place is an error."""

        class StubbornInviteRepository(InMemoryInviteRepository):
            async def delete(self, invite_id):
                return False

        world = InviteWorld(invites=StubbornInviteRepository())
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        with pytest.raises(PersistenceError):
            await world.invite_service.cancel_invite(as_requester(admin), invite.id)

    @pytest.mark.asyncio
    async def test_cancel_used_invite_is_rejected(self):
        """A redeemed invite cannot be canceled and its token still reports used."""
        # Arrange
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        await world.provisioning_service.redeem_invite(invite.token, "Nina", "secret123")

        # Act
        with pytest.raises(AlreadyUsedError):
            await world.invite_service.cancel_invite(as_requester(admin), invite.id)

        # Assert
        stored = await world.invites.find_by_id(invite.id)
        assert stored.used is True
        with pytest.raises(AlreadyUsedError):
            await world.invite_service.verify_invite(invite.token)

    @pytest.mark.asyncio
    async def test_cancel_raced_by_redemption(self):
        """An invite consumed between the read and the delete is kept."""

        class RedeemedMidwayInviteRepository(InMemoryInviteRepository):
            async def delete(self, invite_id):
                invite = await self.find_by_id(invite_id)
                await self.mark_used(invite_id, invite.created_at)
                return await super().delete(invite_id)

        world = InviteWorld(invites=RedeemedMidwayInviteRepository())
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        with pytest.raises(AlreadyUsedError):
            await world.invite_service.cancel_invite(as_requester(admin), invite.id)

        assert (await world.invites.find_by_id(invite.id)).used is True


class TestRepairInvite:
    """Tests for repair_invite method."""

    @pytest.mark.asyncio
    async def test_repair_with_existing_profile(self):
        """An invite whose invitee has a profile is marked used."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))
        await world.profiles.insert(
            make_profile(organization.id, email=invite.email, role=Role.MEMBER)
        )

        outcome = await world.invite_service.repair_invite(
            as_requester(admin), invite.id
        )

        assert outcome.success is True
        assert outcome.action == RepairAction.MARKED_USED
        assert (await world.invites.find_by_id(invite.id)).used is True

    @pytest.mark.asyncio
    async def test_repair_without_profile(self):
        """Without a profile the invite is still marked used, with a warning."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        outcome = await world.invite_service.repair_invite(
            as_requester(admin), invite.id
        )

        assert outcome.success is True
        assert outcome.action == RepairAction.MARKED_USED_NO_PROFILE
        assert invite.email in outcome.message
        assert (await world.invites.find_by_id(invite.id)).used is True

    @pytest.mark.asyncio
    async def test_repair_already_used_invite(self):
        """Repairing a used invite is a no-op that reports success."""
        world = InviteWorld()
        organization, admin = await world.seed()
        invite = await world.invites.save(
            make_invite(organization.id, admin.id, used=True)
        )

        outcome = await world.invite_service.repair_invite(
            as_requester(admin), invite.id
        )

        assert outcome.success is True
        assert (await world.invites.find_by_id(invite.id)).used_at == invite.used_at

    @pytest.mark.asyncio
    async def test_repair_other_organizations_invite(self):
        """Invites of other organizations look missing."""
        world = InviteWorld()
        _, admin = await world.seed()
        other, other_admin = await world.seed("Other")
        invite = await world.invites.save(make_invite(other.id, other_admin.id))

        with pytest.raises(NotFoundError):
            await world.invite_service.repair_invite(as_requester(admin), invite.id)

        assert (await world.invites.find_by_id(invite.id)).used is False

    @pytest.mark.asyncio
    async def test_repair_requires_admin(self):
        world = InviteWorld()
        organization, admin = await world.seed()
        member = await world.profiles.insert(
            make_profile(organization.id, email="m@example.com", role=Role.MEMBER)
        )
        invite = await world.invites.save(make_invite(organization.id, admin.id))

        with pytest.raises(AuthorizationError, match="repair invites"):
            await world.invite_service.repair_invite(as_requester(member), invite.id)
