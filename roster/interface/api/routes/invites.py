"""Invite routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, status
from pydantic import BaseModel

from roster.application.usecase.invite import (
    CancelInviteRequest,
    CancelInviteResponse,
    CancelInviteUseCase,
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    ListPendingInvitesRequest,
    ListPendingInvitesResponse,
    ListPendingInvitesUseCase,
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemInviteUseCase,
    RepairInviteRequest,
    RepairInviteResponse,
    RepairInviteUseCase,
    ResendInviteRequest,
    ResendInviteResponse,
    ResendInviteUseCase,
    VerifyInviteRequest,
    VerifyInviteResponse,
    VerifyInviteUseCase,
)
from roster.domain.service.jwt_service import JWTService
from roster.util.jwt import JWTError

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class CreateInviteAPIRequest(BaseModel):
    """API request for creating an invite."""

    email: str
    role: str


def _authenticate(jwt_service: JWTService, auth_token: str | None) -> str:
    """Return the caller's profile id from the auth cookie.

    Raises:
        HTTPException: 401 if the cookie is missing or invalid
    """
    if not auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return str(jwt_service.get_profile_id(auth_token))
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


@router.post(
    "", response_model=CreateInviteResponse, status_code=status.HTTP_201_CREATED
)
async def create_invite(
    request: CreateInviteAPIRequest,
    create_invite_use_case: FromDishka[CreateInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateInviteResponse:
    """Invite an email address into the caller's organization.

    When ``delivered`` is false the returned ``invite_url`` must be shared
    manually.
    """
    requester_id = _authenticate(jwt_service, auth_token)
    return await create_invite_use_case.execute(
        CreateInviteRequest(
            requester_id=requester_id, email=request.email, role=request.role
        )
    )


@router.get("", response_model=ListInvitesResponse)
async def list_invites(
    list_invites_use_case: FromDishka[ListInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListInvitesResponse:
    """List every invite of the caller's organization."""
    requester_id = _authenticate(jwt_service, auth_token)
    return await list_invites_use_case.execute(
        ListInvitesRequest(requester_id=requester_id)
    )


@router.get("/pending", response_model=ListPendingInvitesResponse)
async def list_pending_invites(
    list_pending_invites_use_case: FromDishka[ListPendingInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListPendingInvitesResponse:
    """List pending invites of the caller's organization."""
    requester_id = _authenticate(jwt_service, auth_token)
    return await list_pending_invites_use_case.execute(
        ListPendingInvitesRequest(requester_id=requester_id)
    )


@router.get("/verify/{token}", response_model=VerifyInviteResponse)
async def verify_invite(
    token: str,
    verify_invite_use_case: FromDishka[VerifyInviteUseCase],
) -> VerifyInviteResponse:
    """Check an invite token before showing the signup form. Public."""
    return await verify_invite_use_case.execute(VerifyInviteRequest(token=token))


@router.post("/redeem", response_model=RedeemInviteResponse)
async def redeem_invite(
    request: RedeemInviteRequest,
    redeem_invite_use_case: FromDishka[RedeemInviteUseCase],
) -> RedeemInviteResponse:
    """Sign up through an invite. Public."""
    return await redeem_invite_use_case.execute(request)


@router.post("/{invite_id}/resend", response_model=ResendInviteResponse)
async def resend_invite(
    invite_id: UUID,
    resend_invite_use_case: FromDishka[ResendInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ResendInviteResponse:
    """Rotate an invite's link and send it again."""
    requester_id = _authenticate(jwt_service, auth_token)
    return await resend_invite_use_case.execute(
        ResendInviteRequest(requester_id=requester_id, invite_id=str(invite_id))
    )


@router.post("/{invite_id}/repair", response_model=RepairInviteResponse)
async def repair_invite(
    invite_id: UUID,
    repair_invite_use_case: FromDishka[RepairInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RepairInviteResponse:
    """Mark a stuck invite as used."""
    requester_id = _authenticate(jwt_service, auth_token)
    return await repair_invite_use_case.execute(
        RepairInviteRequest(requester_id=requester_id, invite_id=str(invite_id))
    )


@router.delete("/{invite_id}", response_model=CancelInviteResponse)
async def cancel_invite(
    invite_id: UUID,
    cancel_invite_use_case: FromDishka[CancelInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CancelInviteResponse:
    """Cancel a pending invite."""
    requester_id = _authenticate(jwt_service, auth_token)
    return await cancel_invite_use_case.execute(
        CancelInviteRequest(requester_id=requester_id, invite_id=str(invite_id))
    )
