#buildtrack/crud/user.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from buildtrack.models.user import User
from buildtrack.core.exceptions import ProfileValidationError
from buildtrack.core.security import get_password_hash, verify_password

logger = logging.getLogger("BuildTrack.Users")

def create_user(db: Session, data: dict) -> User:
    """
    Create an account. Username and email must be unique.
    """
    username = data["username"]
    email = data["email"]
    if db.query(User).filter(or_(User.username == username, User.email == email)).first():
        raise ProfileValidationError("User with this username or email already exists.")
    user = User(
        username=username,
        email=email,
        password_hash=get_password_hash(data["password"]),
        first_name=data.get("first_name"),
        last_name=data.get("last_name"),
        language=data.get("language"),
        role=data.get("role"),
        is_active=data.get("is_active", True),
        is_superuser=data.get("is_superuser", False),
        organization_id=data.get("organization_id"),
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"Created user '{user.username}' (ID: {user.id})")
        return user
    except IntegrityError:
        db.rollback()
        logger.warning(f"Duplicate user '{username}' / '{email}'")
        raise ProfileValidationError("User with this username or email already exists.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user: {e}")
        raise ProfileValidationError("Database error while creating user.")

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def authenticate_user(db: Session, login: str, password: str) -> Optional[User]:
    """
    Look the user up by username or email and check the password.
    """
    user = get_user_by_username(db, login) or get_user_by_email(db, login)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user

def set_last_login(db: Session, user_id: int) -> Optional[User]:
    """
    Record a login and advance the daily login streak.

    Same day: unchanged. Next day: +1. Any gap: back to 1.
    """
    user = get_user(db, user_id)
    if not user:
        return None
    now = datetime.now(timezone.utc)
    today = now.date()
    if user.last_login_date == today:
        pass
    elif user.last_login_date == today - timedelta(days=1):
        user.login_streak = (user.login_streak or 0) + 1
    else:
        user.login_streak = 1
    user.last_login_date = today
    user.last_login_at = now
    try:
        db.commit()
        db.refresh(user)
        return user
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to record login for user {user_id}: {e}")
        raise ProfileValidationError("Database error while recording login.")

def update_password_for_reset(db: Session, user: User, new_password: str) -> bool:
    """
    Set a new password and clear the reset token.
    """
    user.password_hash = get_password_hash(new_password)
    user.password_reset_token = None
    user.password_reset_token_expires_at = None
    try:
        db.commit()
        logger.info(f"Password reset for user {user.id}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to reset password for user {user.id}: {e}")
        return False
