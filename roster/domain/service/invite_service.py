"""Invite domain service."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

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
from roster.domain.model.common import utcnow
from roster.domain.model.invite import Invite, InviteDelivery, RepairOutcome
from roster.domain.repository import InviteRepository, OrganizationRepository
from roster.domain.value import (
    DeliveryMethod,
    EmailAddress,
    InviteId,
    InviteToken,
    OrganizationId,
    ProfileId,
    RepairAction,
    Requester,
    Role,
)
from roster.util.background import BackgroundTaskGroup

from .base import Service
from .notification import DeliveryResult, InviteNotification, NotificationDispatcher
from .profile_service import ProfileService
from .token_service import TokenService

DEFAULT_EXPIRY_DAYS = 7
DEFAULT_ORGANIZATION_NAME = "Your Organization"
DEFAULT_INVITER_NAME = "A team member"


class InviteService(Service):
    """Domain service for the invitation lifecycle.

    Enforces: admin-only mutation, a single active invite per
    organization/email, expiry, cancellation ownership and self-healing of
    invites whose invitee already has a profile.
    """

    def __init__(
        self,
        invite_repository: InviteRepository,
        organization_repository: OrganizationRepository,
        profile_service: ProfileService,
        token_service: TokenService,
        notification_dispatcher: NotificationDispatcher,
        background_tasks: BackgroundTaskGroup,
        frontend_url: str,
        expiry_days: int = DEFAULT_EXPIRY_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Invite repository
            organization_repository: Organization repository (display names)
            profile_service: Profile domain service
            token_service: Token issuer
            notification_dispatcher: Best-effort email sender
            background_tasks: Owner of self-healing tasks
            frontend_url: Web origin used to build invite links
            expiry_days: Invite lifetime in days
            clock: Source of the current time
        """
        self.invite_repository = invite_repository
        self.organization_repository = organization_repository
        self.profile_service = profile_service
        self.token_service = token_service
        self.notification_dispatcher = notification_dispatcher
        self.background_tasks = background_tasks
        self.frontend_url = frontend_url.rstrip("/")
        self.expiry_days = expiry_days
        self.clock = clock

    def invite_url(self, token: InviteToken) -> str:
        """Signup link carrying the token."""
        return f"{self.frontend_url}/signup?invite={token.root}"

    async def create_invite(
        self, requester: Requester, email: str, role: Role | str
    ) -> InviteDelivery:
        """Create an invite, superseding any active invite for the same email.

        Args:
            requester: Resolved caller
            email: Invitee email (normalized here)
            role: Role to assign on redemption

        Returns:
            Created invite, its URL and whether the email was dispatched

        Raises:
            AuthorizationError: If requester is not an admin
            ValidationError: If email or role is invalid
            ConflictError: If the email already belongs to a member
        """
        with logfire.span(
            "invite_service.create_invite",
            requester_id=str(requester.profile_id),
            organization_id=str(requester.organization_id),
            role=str(role),
        ):
            self._require_admin(requester, "invite users")
            normalized_email = self._normalize_email(email)
            invite_role = self._parse_role(role)
            organization_id = requester.organization_id

            member = await self.profile_service.find_member(
                organization_id, normalized_email
            )
            if member:
                logfire.warn(
                    "Invitee is already a member",
                    organization_id=str(organization_id),
                    profile_id=str(member.id),
                )
                raise ConflictError(
                    "User with this email already exists in your organization"
                )

            now = self.clock()
            await self._supersede_active_invites(organization_id, normalized_email, now)

            invite = Invite(
                id=InviteId(uuid4()),
                organization_id=organization_id,
                email=normalized_email,
                role=invite_role,
                token=await self.token_service.issue(),
                invited_by=requester.profile_id,
                created_at=now,
                expires_at=now + timedelta(days=self.expiry_days),
            )
            saved = await self.invite_repository.save(invite)
            logfire.info(
                "Invite created",
                invite_id=str(saved.id),
                organization_id=str(organization_id),
                role=saved.role.value,
                expires_at=saved.expires_at.isoformat(),
            )

            return await self._deliver(saved, inviter_id=requester.profile_id)

    async def verify_invite(self, token: InviteToken) -> Invite:
        """Check that a token names a redeemable invite. No side effects.

        Args:
            token: Invite token

        Returns:
            The invite

        Raises:
            NotFoundError: If no invite carries the token
            ExpiredError: If the invite is past its expiry
            AlreadyUsedError: If the invite was consumed
        """
        with logfire.span("invite_service.verify_invite", token=token.redacted):
            invite = await self.invite_repository.find_by_token(token)
            if not invite:
                logfire.warn("Invite not found", token=token.redacted)
                raise NotFoundError("Invite", token.redacted)

            # Expiry is checked first: an expired invite is refused whatever its used flag
            if invite.is_expired(self.clock()):
                logfire.info(
                    "Invite expired",
                    invite_id=str(invite.id),
                    expires_at=invite.expires_at.isoformat(),
                )
                raise ExpiredError(str(invite.id))

            if invite.used:
                logfire.info(
                    "Invite already used",
                    invite_id=str(invite.id),
                    used_at=invite.used_at.isoformat() if invite.used_at else None,
                )
                raise AlreadyUsedError(str(invite.id))

            return invite

    async def get_invite_by_token(self, token: InviteToken) -> Invite | None:
        """Get invite by token without validation."""
        return await self.invite_repository.find_by_token(token)

    async def consume_invite(self, token: InviteToken) -> bool:
        """Mark the invite holding ``token`` as used.

        Returns:
            True if this call flipped the invite to used
        """
        with logfire.span("invite_service.consume_invite", token=token.redacted):
            updated = await self.invite_repository.mark_used_by_token(
                token, self.clock()
            )
            logfire.info("Invite consumption", token=token.redacted, updated=updated)
            return updated

    async def list_pending(self, organization_id: OrganizationId) -> list[Invite]:
        """List unused, unexpired invites, excluding ones that already produced a member.

        Excluded invites are marked used in the background.

        Args:
            organization_id: Organization

        Returns:
            Pending invites, newest first
        """
        with logfire.span(
            "invite_service.list_pending", organization_id=str(organization_id)
        ):
            candidates = await self.invite_repository.list_by_organization(
                organization_id, used=False, active_at=self.clock()
            )

            try:
                member_emails = await self.profile_service.member_emails(organization_id)
            except PersistenceError as e:
                logfire.warn(
                    "Error fetching members for invite filtering",
                    organization_id=str(organization_id),
                    error=str(e),
                )
                member_emails = set()

            pending: list[Invite] = []
            for invite in candidates:
                if invite.email in member_emails:
                    logfire.info(
                        "Filtering out invite - profile already exists",
                        invite_id=str(invite.id),
                    )
                    self.background_tasks.spawn(
                        self._mark_used_if_member(invite),
                        name=f"heal-invite-{invite.id}",
                    )
                    continue
                pending.append(invite)

            logfire.info(
                "Pending invites listed",
                organization_id=str(organization_id),
                candidate_count=len(candidates),
                pending_count=len(pending),
            )
            return pending

    async def list_invites(self, organization_id: OrganizationId) -> list[Invite]:
        """List every invite of an organization, newest first."""
        with logfire.span(
            "invite_service.list_invites", organization_id=str(organization_id)
        ):
            invites = await self.invite_repository.list_by_organization(organization_id)
            logfire.info(
                "Invites listed",
                organization_id=str(organization_id),
                count=len(invites),
            )
            return invites

    async def resend_invite(
        self, requester: Requester, invite_id: InviteId
    ) -> InviteDelivery:
        """Rotate the token and expiry of an invite and dispatch it again.

        Email, role, organization, inviter and creation time are unchanged.

        Raises:
            AuthorizationError: If requester is not an admin
            NotFoundError: If the invite does not exist
            PermissionDeniedError: If the invite belongs to another organization
            AlreadyUsedError: If the invite was already consumed
        """
        with logfire.span(
            "invite_service.resend_invite",
            requester_id=str(requester.profile_id),
            invite_id=str(invite_id),
        ):
            self._require_admin(requester, "resend invitations")
            invite = await self._get_owned_invite(requester, invite_id)
            if invite.used:
                raise AlreadyUsedError(str(invite.id))

            now = self.clock()
            rotated = invite.model_copy(
                update={
                    "token": await self.token_service.issue(),
                    "expires_at": now + timedelta(days=self.expiry_days),
                    "used": False,
                }
            )
            saved = await self.invite_repository.save(rotated)
            logfire.info(
                "Invite resent",
                invite_id=str(saved.id),
                expires_at=saved.expires_at.isoformat(),
            )

            return await self._deliver(saved, inviter_id=invite.invited_by)

    async def cancel_invite(self, requester: Requester, invite_id: InviteId) -> bool:
        """Hard delete a pending invite. Canceling a missing invite succeeds.

        Raises:
            AuthorizationError: If requester is not an admin
            PermissionDeniedError: If the invite belongs to another organization
            AlreadyUsedError: If the invite has been consumed
            PersistenceError: If the store kept the row after the delete
        """
        with logfire.span(
            "invite_service.cancel_invite",
            requester_id=str(requester.profile_id),
            invite_id=str(invite_id),
        ):
            self._require_admin(requester, "cancel invitations")

            invite = await self.invite_repository.find_by_id(invite_id)
            if not invite:
                logfire.info("Invite already canceled", invite_id=str(invite_id))
                return True

            if invite.organization_id != requester.organization_id:
                logfire.error(
                    "Organization mismatch on cancel",
                    invite_id=str(invite_id),
                    invite_organization_id=str(invite.organization_id),
                    requester_organization_id=str(requester.organization_id),
                )
                raise PermissionDeniedError(
                    "Invite", str(invite_id), str(requester.organization_id)
                )

            if invite.used:
                logfire.warn("Cannot cancel used invite", invite_id=str(invite_id))
                raise AlreadyUsedError(str(invite_id))

            deleted = await self.invite_repository.delete(invite_id)
            if not deleted:
                # Zero rows: either someone else deleted it or the store filtered us out
                current = await self.invite_repository.find_by_id(invite_id)
                if current and current.used:
                    logfire.warn(
                        "Invite consumed during cancel", invite_id=str(invite_id)
                    )
                    raise AlreadyUsedError(str(invite_id))
                if current:
                    logfire.error(
                        "Invite still exists after delete", invite_id=str(invite_id)
                    )
                    raise PersistenceError(f"Unable to delete invite {invite_id}")
                logfire.info(
                    "Invite was deleted concurrently", invite_id=str(invite_id)
                )
                return True

            logfire.info("Invite canceled", invite_id=str(invite_id))
            return True

    async def repair_invite(
        self, requester: Requester, invite_id: InviteId
    ) -> RepairOutcome:
        """Mark a stuck pending invite as used.

        A stuck invite is marked used whether or not a profile exists, since
        the invitee may already hold an identity at the provider.

        Raises:
            AuthorizationError: If requester is not an admin
            NotFoundError: If the invite is not in the requester's organization
            PersistenceError: If the invite could not be marked used
        """
        with logfire.span(
            "invite_service.repair_invite",
            requester_id=str(requester.profile_id),
            invite_id=str(invite_id),
        ):
            self._require_admin(requester, "repair invites")

            invite = await self.invite_repository.find_by_id(invite_id)
            if not invite or invite.organization_id != requester.organization_id:
                logfire.warn("Invite not found for repair", invite_id=str(invite_id))
                raise NotFoundError("Invite", str(invite_id))

            try:
                member = await self.profile_service.find_member(
                    invite.organization_id, invite.email
                )
            except PersistenceError as e:
                logfire.warn(
                    "Error checking for member during repair",
                    invite_id=str(invite_id),
                    error=str(e),
                )
                member = None

            await self._ensure_used(invite)

            if member:
                logfire.info(
                    "Repaired invite with existing profile",
                    invite_id=str(invite_id),
                    profile_id=str(member.id),
                )
                return RepairOutcome(
                    success=True,
                    action=RepairAction.MARKED_USED,
                    message="User already exists. Invite marked as used.",
                )

            logfire.warn(
                "Repaired invite without profile", invite_id=str(invite_id)
            )
            return RepairOutcome(
                success=True,
                action=RepairAction.MARKED_USED_NO_PROFILE,
                message=(
                    f"Invite marked as used, but no profile exists for "
                    f"{invite.email}. If they have signed up, their profile "
                    f"may need to be created manually."
                ),
            )

    async def _ensure_used(self, invite: Invite) -> None:
        if invite.used:
            return
        if await self.invite_repository.mark_used(invite.id, self.clock()):
            return
        current = await self.invite_repository.find_by_id(invite.id)
        if current and current.used:
            return
        raise PersistenceError(f"Failed to mark invite {invite.id} as used")

    async def _mark_used_if_member(self, invite: Invite) -> bool:
        member = await self.profile_service.find_member(
            invite.organization_id, invite.email
        )
        if not member:
            return False
        updated = await self.invite_repository.mark_used(invite.id, self.clock())
        logfire.info(
            "Stale invite marked as used",
            invite_id=str(invite.id),
            profile_id=str(member.id),
            updated=updated,
        )
        return updated

    async def _supersede_active_invites(
        self, organization_id: OrganizationId, email: str, now: datetime
    ) -> None:
        try:
            active = await self.invite_repository.find_active_by_email(
                organization_id, email, now
            )
        except PersistenceError as e:
            logfire.warn("Failed to look up active invites", error=str(e))
            return

        for stale in active:
            try:
                await self.invite_repository.delete(stale.id)
                logfire.info("Superseded active invite", invite_id=str(stale.id))
            except PersistenceError as e:
                logfire.warn(
                    "Failed to cancel existing invite",
                    invite_id=str(stale.id),
                    error=str(e),
                )

    async def _get_owned_invite(
        self, requester: Requester, invite_id: InviteId
    ) -> Invite:
        invite = await self.invite_repository.find_by_id(invite_id)
        if not invite:
            raise NotFoundError("Invite", str(invite_id))
        if invite.organization_id != requester.organization_id:
            raise PermissionDeniedError(
                "Invite", str(invite_id), str(requester.organization_id)
            )
        return invite

    async def _deliver(self, invite: Invite, inviter_id: ProfileId) -> InviteDelivery:
        invite_url = self.invite_url(invite.token)
        organization_name = await self._organization_name(invite.organization_id)
        inviter_name = await self.profile_service.get_display_name(
            inviter_id, DEFAULT_INVITER_NAME
        )

        notification = InviteNotification(
            email=invite.email,
            invite_url=invite_url,
            role=invite.role,
            organization_name=organization_name,
            inviter_name=inviter_name,
        )
        try:
            result = await self.notification_dispatcher.send_invite(notification)
        except Exception as e:
            logfire.warn("Email sending failed (non-critical)", error=str(e))
            result = DeliveryResult(
                delivered=False, method=DeliveryMethod.MANUAL, error=str(e)
            )

        if not result.delivered:
            logfire.info(
                "Invite email not sent, link must be shared manually",
                invite_id=str(invite.id),
                error=result.error,
            )

        return InviteDelivery(
            invite=invite,
            invite_url=invite_url,
            delivered=result.delivered,
            delivery_method=result.method if result.delivered else DeliveryMethod.MANUAL,
        )

    async def _organization_name(self, organization_id: OrganizationId) -> str:
        try:
            organization = await self.organization_repository.find_by_id(
                organization_id
            )
        except Exception as e:
            logfire.warn(
                "Error fetching organization details",
                organization_id=str(organization_id),
                error=str(e),
            )
            return DEFAULT_ORGANIZATION_NAME
        return organization.name if organization else DEFAULT_ORGANIZATION_NAME

    @staticmethod
    def _require_admin(requester: Requester, action: str) -> None:
        if not requester.is_admin:
            logfire.warn(
                "Non-admin attempted invite operation",
                requester_id=str(requester.profile_id),
                action=action,
            )
            raise AuthorizationError(f"Only admins can {action}")

    @staticmethod
    def _normalize_email(email: str) -> str:
        try:
            return EmailAddress(email).root
        except PydanticValidationError:
            if not (email or "").strip():
                raise ValidationError("Email is required")
            raise ValidationError(f"Invalid email address: {email.strip()}")

    @staticmethod
    def _parse_role(role: Role | str) -> Role:
        try:
            return Role(role)
        except ValueError:
            allowed = ", ".join(r.value for r in Role)
            raise ValidationError(f"Invalid role. Must be one of: {allowed}")
