import pytest
from datetime import date, timedelta, datetime, timezone
from sqlalchemy.orm import Session

from buildtrack.crud import user as crud_user
from buildtrack.schemas.user import UserCreate
from buildtrack.core.exceptions import ProfileValidationError
from buildtrack.core.security import verify_password
from buildtrack.models.user import User as UserModel

def test_create_user_success(db: Session):
    user_in = UserCreate(username="newuser", email="newuser@example.com", password="password123")
    user = crud_user.create_user(db, user_in.model_dump())
    assert user is not None
    assert user.username == "newuser"
    assert user.email == "newuser@example.com"
    assert user.is_active is True
    assert user.is_superuser is False
    assert user.login_streak == 0
    assert user.skills == []
    assert verify_password("password123", user.password_hash)

def test_create_user_duplicate_username(db: Session):
    crud_user.create_user(db, UserCreate(username="dupuser", email="dupuser1@example.com", password="password123").model_dump())
    user_in2 = UserCreate(username="dupuser", email="dupuser2@example.com", password="password456")
    with pytest.raises(ProfileValidationError, match="User with this username or email already exists."):
        crud_user.create_user(db, user_in2.model_dump())

def test_create_user_duplicate_email(db: Session):
    crud_user.create_user(db, UserCreate(username="anotheruser1", email="dupemail@example.com", password="password123").model_dump())
    user_in2 = UserCreate(username="anotheruser2", email="dupemail@example.com", password="password456")
    with pytest.raises(ProfileValidationError, match="User with this username or email already exists."):
        crud_user.create_user(db, user_in2.model_dump())

def test_get_user_lookups(db: Session, test_user: UserModel):
    assert crud_user.get_user(db, test_user.id).username == "testuser"
    assert crud_user.get_user_by_username(db, "testuser").id == test_user.id
    assert crud_user.get_user_by_email(db, "testuser@example.com").id == test_user.id
    assert crud_user.get_user(db, 99999) is None
    assert crud_user.get_user_by_username(db, "nosuchusername") is None

def test_authenticate_user(db: Session, test_user: UserModel):
    assert crud_user.authenticate_user(db, "testuser", "testpassword").id == test_user.id
    assert crud_user.authenticate_user(db, "testuser@example.com", "testpassword").id == test_user.id
    assert crud_user.authenticate_user(db, "testuser", "wrong") is None
    assert crud_user.authenticate_user(db, "ghost", "testpassword") is None

def _today() -> date:
    return datetime.now(timezone.utc).date()

def test_login_streak_first_login(db: Session, test_user: UserModel):
    user = crud_user.set_last_login(db, test_user.id)
    assert user.login_streak == 1
    assert user.last_login_date == _today()

def test_login_streak_same_day_unchanged(db: Session, test_user: UserModel):
    test_user.login_streak = 3
    test_user.last_login_date = _today()
    db.commit()
    user = crud_user.set_last_login(db, test_user.id)
    assert user.login_streak == 3

def test_login_streak_consecutive_day(db: Session, test_user: UserModel):
    test_user.login_streak = 3
    test_user.last_login_date = _today() - timedelta(days=1)
    db.commit()
    user = crud_user.set_last_login(db, test_user.id)
    assert user.login_streak == 4

def test_login_streak_resets_after_gap(db: Session, test_user: UserModel):
    test_user.login_streak = 9
    test_user.last_login_date = _today() - timedelta(days=3)
    db.commit()
    user = crud_user.set_last_login(db, test_user.id)
    assert user.login_streak == 1

def test_set_last_login_unknown_user(db: Session):
    assert crud_user.set_last_login(db, 99999) is None

def test_update_password_for_reset(db: Session, test_user: UserModel):
    test_user.password_reset_token = "abc"
    db.commit()
    assert crud_user.update_password_for_reset(db, test_user, "NewPassword9") is True
    db.refresh(test_user)
    assert test_user.password_reset_token is None
    assert verify_password("NewPassword9", test_user.password_hash)
