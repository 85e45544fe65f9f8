"""API router for the signed-in user's profile."""

from fastapi import APIRouter, Depends, HTTPException, status

from parkease.application.services.auth_service import AuthService
from parkease.core.dependencies import get_auth_service, get_user_service
from parkease.domain.models import SessionUser
from parkease.presentation.api.dependencies import get_current_session
from parkease.presentation.api.schemas.user_schemas import (
    ChangePasswordRequest,
    ProfileResponse,
    ProfileUpdateRequest,
)
from parkease.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    session: SessionUser = Depends(get_current_session),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """Get current user profile."""
    return ProfileResponse.from_user(user_service.get_profile(session.id))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    session: SessionUser = Depends(get_current_session),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    """Update current user profile."""
    try:
        user = user_service.update_profile(
            session.id,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            avatar=request.avatar,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return ProfileResponse.from_user(user)


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    request: ChangePasswordRequest,
    session: SessionUser = Depends(get_current_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> None:
    """Change the password of the current user."""
    try:
        auth_service.change_password(session.id, request.current_password, request.new_password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
