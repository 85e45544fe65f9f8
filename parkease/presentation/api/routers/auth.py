"""API router for sign-up, sign-in and token based account flows."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....application.services.auth_service import AuthService
from ....application.services.session_service import SessionService
from ....core.dependencies import get_auth_service, get_session_service
from ....domain.models import SessionUser
from ...api.dependencies import get_current_session
from ...api.schemas.auth import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    MagicLinkRequest,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    SessionUserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _login_response(session: SessionUser, session_service: SessionService) -> LoginResponse:
    return LoginResponse(
        access_token=session_service.create_token(session),
        expires_in=session_service.expires_in,
        user=SessionUserResponse.from_session(session),
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    try:
        user = auth_service.register(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password=payload.password,
            phone=payload.phone,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RegisterResponse.from_user(user, "Registration successful. Please verify your email.")


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service),
) -> LoginResponse:
    session = auth_service.login(payload.email, payload.password)
    return _login_response(session, session_service)


@router.get("/session", response_model=SessionUserResponse)
async def current_session(session: SessionUser = Depends(get_current_session)) -> SessionUserResponse:
    return SessionUserResponse.from_session(session)


@router.get("/verify-email", response_model=MessageResponse)
async def verify_email(
    token: str = Query(..., min_length=1),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.verify_email(token)
    return MessageResponse(message="Email verified successfully.")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    payload: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        auth_service.resend_verification(payload.email)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Verification email sent.")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.request_password_reset(payload.email)
    return MessageResponse(
        message="If an account exists with that email, a password reset link has been sent."
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        auth_service.reset_password(payload.token, payload.password)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Password has been reset successfully.")


@router.post("/magic-link", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
async def request_magic_link(
    payload: MagicLinkRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        auth_service.request_magic_link(payload.email, payload.return_url)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Magic link sent.")


@router.get("/magic-link", response_model=LoginResponse)
async def consume_magic_link(
    token: str = Query(..., min_length=1),
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service),
) -> LoginResponse:
    session = auth_service.login_with_magic_link(token)
    return _login_response(session, session_service)
