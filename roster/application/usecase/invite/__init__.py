"""Invite use cases."""

from roster.application.usecase.invite.cancel_invite import (
    CancelInviteRequest,
    CancelInviteResponse,
    CancelInviteUseCase,
)
from roster.application.usecase.invite.common import InviteItem
from roster.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
)
from roster.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from roster.application.usecase.invite.list_pending_invites import (
    ListPendingInvitesRequest,
    ListPendingInvitesResponse,
    ListPendingInvitesUseCase,
)
from roster.application.usecase.invite.redeem_invite import (
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemInviteUseCase,
)
from roster.application.usecase.invite.repair_invite import (
    RepairInviteRequest,
    RepairInviteResponse,
    RepairInviteUseCase,
)
from roster.application.usecase.invite.resend_invite import (
    ResendInviteRequest,
    ResendInviteResponse,
    ResendInviteUseCase,
)
from roster.application.usecase.invite.verify_invite import (
    VerifyInviteRequest,
    VerifyInviteResponse,
    VerifyInviteUseCase,
)

__all__ = [
    "CancelInviteRequest",
    "CancelInviteResponse",
    "CancelInviteUseCase",
    "CreateInviteRequest",
    "CreateInviteResponse",
    "CreateInviteUseCase",
    "InviteItem",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "ListPendingInvitesRequest",
    "ListPendingInvitesResponse",
    "ListPendingInvitesUseCase",
    "RedeemInviteRequest",
    "RedeemInviteResponse",
    "RedeemInviteUseCase",
    "RepairInviteRequest",
    "RepairInviteResponse",
    "RepairInviteUseCase",
    "ResendInviteRequest",
    "ResendInviteResponse",
    "ResendInviteUseCase",
    "VerifyInviteRequest",
    "VerifyInviteResponse",
    "VerifyInviteUseCase",
]
