#buildtrack/crud/auth.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from datetime import datetime, timedelta, timezone
import logging
import secrets

from buildtrack.models.auth import AccessToken
from buildtrack.models.user import User
from buildtrack.core.exceptions import AuthError

logger = logging.getLogger("BuildTrack.Auth")

PASSWORD_RESET_TOKEN_EXPIRE_MINUTES = 60

def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)

def store_token_info(
    db: Session,
    user_id: int,
    token: str,
    token_type: str,
    expires_at: Optional[datetime] = None,
    jti: Optional[str] = None,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AccessToken:
    """
    Record an issued access or refresh token for later revocation.
    """
    if token_type not in ("access", "refresh"):
        raise ValueError("Invalid token_type. Must be 'access' or 'refresh'.")
    if token_type == "refresh" and not jti:
        raise ValueError("JTI must be provided for refresh tokens.")

    token_obj = AccessToken(
        user_id=user_id,
        token=token,
        token_type=token_type,
        expires_at=expires_at,
        jti=jti if token_type == "refresh" else None,
        user_agent=user_agent,
        ip_address=ip_address,
        is_active=True,
        revoked=False,
    )
    db.add(token_obj)
    try:
        db.commit()
        db.refresh(token_obj)
        logger.info(f"Stored {token_type} token for user {user_id}")
        return token_obj
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error storing {token_type} token: {e}")
        raise AuthError(f"Failed to store {token_type} token due to a conflict.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error storing {token_type} token: {e}")
        raise AuthError(f"Database error while storing {token_type} token.")

def get_active_tokens_by_user(db: Session, user_id: int) -> List[AccessToken]:
    return db.query(AccessToken).filter(
        AccessToken.user_id == user_id,
        AccessToken.is_active == True,
        AccessToken.revoked == False
    ).order_by(AccessToken.created_at.desc()).all()

def revoke_refresh_token(db: Session, token_jti: str) -> bool:
    """
    Revoke a refresh token by JTI. False when unknown or already revoked.
    """
    entry = db.query(AccessToken).filter(
        AccessToken.jti == token_jti,
        AccessToken.token_type == "refresh",
    ).first()
    if not entry:
        logger.warning(f"Refresh token with JTI {token_jti} not found for revocation.")
        return False
    if entry.revoked:
        logger.info(f"Refresh token with JTI {token_jti} was already revoked.")
        return False
    entry.revoked = True
    entry.is_active = False
    try:
        db.commit()
        logger.info(f"Revoked refresh token with JTI {token_jti}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to revoke refresh token with JTI {token_jti}: {e}")
        raise AuthError("Database error while revoking refresh token.")

def is_refresh_token_active(db: Session, token_jti: str) -> bool:
    return db.query(AccessToken).filter(
        AccessToken.jti == token_jti,
        AccessToken.token_type == "refresh",
        AccessToken.is_active == True,
        AccessToken.revoked == False
    ).first() is not None

def revoke_all_tokens_for_user(db: Session, user_id: int) -> int:
    tokens = get_active_tokens_by_user(db, user_id)
    for token in tokens:
        token.revoked = True
        token.is_active = False
    try:
        db.commit()
        logger.info(f"Revoked {len(tokens)} tokens for user {user_id}")
        return len(tokens)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to revoke tokens for user {user_id}: {e}")
        raise AuthError("Database error while revoking tokens.")

def create_password_reset_token(db: Session, user: User) -> str:
    """
    Generate and store a one-hour password reset token.
    """
    token = secrets.token_urlsafe(32)
    user.password_reset_token = token
    user.password_reset_token_expires_at = datetime.now(timezone.utc) + timedelta(minutes=PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"Created password reset token for user {user.id}")
        return token
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating password reset token for user {user.id}: {e}")
        raise AuthError("Database error while creating password reset token.")

def get_user_by_password_reset_token(db: Session, token: str) -> Optional[User]:
    """
    Resolve a reset token. Expired tokens are cleared and yield None.
    """
    user = db.query(User).filter(User.password_reset_token == token).first()
    if not user:
        return None
    expires_at = user.password_reset_token_expires_at
    if expires_at and _as_utc(expires_at) > datetime.now(timezone.utc):
        return user
    user.password_reset_token = None
    user.password_reset_token_expires_at = None
    try:
        db.commit()
        logger.info(f"Cleared expired password reset token for user {user.id}")
    except Exception as e:
        db.rollback()
        logger.error(f"Error clearing expired password reset token for user {user.id}: {e}")
        raise AuthError("Database error while clearing password reset token.")
    return None
