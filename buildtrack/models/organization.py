from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from buildtrack.models.base import Base

class Organization(Base):
    """
    Organization: the company a user belongs to. One-to-one with User.
    """
    __tablename__ = "organizations"

    id: int = Column(Integer, primary_key=True, index=True)
    name: str = Column(String(128), nullable=False, doc="Organization name")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="organization", uselist=False)

    def __repr__(self):
        return f"<Organization(id={self.id}, name='{self.name}')>"
