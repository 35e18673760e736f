from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, func
)
from sqlalchemy.orm import relationship
from buildtrack.models.base import Base

class AccessToken(Base):
    """
    AccessToken: issued access and refresh tokens, kept for revocation and audit.
    """
    __tablename__ = "access_tokens"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    token: str = Column(String(512), unique=True, nullable=False, index=True, doc="Token string")
    jti: str = Column(String(255), unique=True, index=True, nullable=True, doc="JTI of refresh tokens")
    token_type: str = Column(String(50), nullable=True, doc="'access' or 'refresh'")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at: datetime = Column(DateTime(timezone=True), nullable=True)
    user_agent: str = Column(String(256), nullable=True)
    ip_address: str = Column(String(64), nullable=True)
    is_active: bool = Column(Boolean, default=True, nullable=False)
    revoked: bool = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="access_tokens")

    def __repr__(self):
        return (
            f"<AccessToken(id={self.id}, user_id={self.user_id}, "
            f"type={self.token_type}, is_active={self.is_active}, revoked={self.revoked})>"
        )

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        # SQLite hands back naive datetimes
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) > expires_at
