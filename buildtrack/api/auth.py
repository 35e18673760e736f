#buildtrack/api/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from buildtrack.schemas.auth import (
    LoginResponse,
    TokenRefreshRequest,
    TokenRefreshResponse,
    PasswordResetRequest,
    PasswordReset
)
from buildtrack.schemas.user import UserCreate, UserRead
from buildtrack.schemas.response import MessageResponse
from buildtrack.crud.user import (
    create_user,
    authenticate_user,
    get_user_by_username,
    get_user_by_email,
    set_last_login,
    update_password_for_reset,
)
from buildtrack.crud import auth as crud_auth
from buildtrack.core.security import (
    create_access_token,
    create_refresh_token,
    verify_refresh_token
)
from buildtrack.core.exceptions import ProfileValidationError, AuthError
from buildtrack.dependencies import get_db, get_current_active_user
from buildtrack.models.user import User as DBUser
from buildtrack.core.settings import settings
from datetime import timedelta
import logging

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("BuildTrack.AuthAPI")

ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

def _issue_tokens(db: Session, user: DBUser) -> TokenRefreshResponse:
    access_token_str, access_token_expires_at = create_access_token(
        data={"sub": user.username, "user_id": user.id, "role": user.role},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    refresh_token_str, refresh_token_expires_at, refresh_jti = create_refresh_token(
        data={"sub": user.username, "user_id": user.id},
        expires_delta=timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    )
    # the refresh record is what makes rotation and logout work, so failures propagate
    crud_auth.store_token_info(
        db=db,
        user_id=user.id,
        token=access_token_str,
        token_type="access",
        expires_at=access_token_expires_at,
    )
    crud_auth.store_token_info(
        db=db,
        user_id=user.id,
        token=refresh_token_str,
        token_type="refresh",
        jti=refresh_jti,
        expires_at=refresh_token_expires_at,
    )
    return TokenRefreshResponse(
        access_token=access_token_str,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        refresh_token=refresh_token_str
    )

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    data: UserCreate,
    db: Session = Depends(get_db),
):
    """
    Create an account. Self-registration never grants superuser rights.
    """
    payload = data.model_dump()
    payload["is_superuser"] = False
    payload["is_active"] = True
    try:
        return create_user(db, payload)
    except ProfileValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    Log in with username or email and password.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")
    try:
        tokens = _issue_tokens(db, user)
    except AuthError as e:
        logger.error(f"Failed to issue tokens for user {user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not complete login.")

    set_last_login(db, user.id)
    return LoginResponse(**tokens.model_dump())

@router.post("/refresh", response_model=TokenRefreshResponse, status_code=status.HTTP_200_OK)
def refresh_token(
    data: TokenRefreshRequest,
    db: Session = Depends(get_db),
):
    """
    Rotate access and refresh tokens. The presented refresh token is revoked.
    """
    payload = verify_refresh_token(data.refresh_token)
    if not payload or "user_id" not in payload or "jti" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token payload")

    token_jti = payload["jti"]
    if not crud_auth.is_refresh_token_active(db, token_jti=token_jti):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token revoked or invalid")

    user = get_user_by_username(db, payload["sub"])
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    crud_auth.revoke_refresh_token(db, token_jti=token_jti)
    try:
        return _issue_tokens(db, user)
    except AuthError as e:
        logger.error(f"Failed to issue tokens during refresh for user {user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not refresh tokens.")

@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def logout(
    data: TokenRefreshRequest,
    db: Session = Depends(get_db),
):
    payload = verify_refresh_token(data.refresh_token)
    if not payload or "jti" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token for logout",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if crud_auth.revoke_refresh_token(db, token_jti=payload["jti"]):
        return MessageResponse(message="Logout successful.")
    return MessageResponse(message="Logout successful (token already invalid or not found).")

@router.get("/me", response_model=UserRead)
def get_me(current_user: DBUser = Depends(get_current_active_user)):
    return current_user

@router.post("/logout_all", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def logout_all(
    db: Session = Depends(get_db),
    user: DBUser = Depends(get_current_active_user)
):
    """
    Revoke every token the user holds.
    """
    count = crud_auth.revoke_all_tokens_for_user(db, user_id=user.id)
    return MessageResponse(message=f"Logged out from {count} sessions.")

# --- Password reset ---

RESET_REQUESTED_MESSAGE = "If an account with this email exists, a password reset link has been sent."

@router.post("/password-reset/request", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def request_password_reset(
    data: PasswordResetRequest,
    db: Session = Depends(get_db),
):
    """
    Start a password reset. The answer is the same whether or not the email is known.
    """
    user = get_user_by_email(db, email=data.email)
    if not user:
        logger.info(f"Password reset requested for unknown email: {data.email}")
        return MessageResponse(message=RESET_REQUESTED_MESSAGE)

    crud_auth.create_password_reset_token(db, user=user)
    # TODO: send the reset link by email once an outbound mail provider is configured
    logger.info(f"Password reset token generated for user {user.id}")
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)

@router.post("/password-reset/reset", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def reset_password(
    data: PasswordReset,
    db: Session = Depends(get_db),
):
    user = crud_auth.get_user_by_password_reset_token(db, token=data.token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired password reset token."
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User account is inactive."
        )
    if not update_password_for_reset(db, user=user, new_password=data.new_password):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update password."
        )
    logger.info(f"Password has been reset for user {user.id}")
    return MessageResponse(message="Your password has been successfully reset.")
