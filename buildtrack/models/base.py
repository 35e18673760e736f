#buildtrack/models/base.py
"""
Declarative base for all ORM models.

    from buildtrack.models.base import Base
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
