# buildtrack/initial_data.py

import logging
from dotenv import load_dotenv

# .env values must be in the environment before settings are built
load_dotenv()

from sqlalchemy.orm import Session
from buildtrack.database import SessionLocal, engine
from buildtrack.models import Organization
from buildtrack.models.base import Base
from buildtrack.crud.user import create_user as crud_create_user, get_user_by_username
from buildtrack.core.settings import settings
from buildtrack.core.exceptions import ProfileValidationError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("BuildTrack.InitialData")

DEFAULT_ORGANIZATION_NAME = "BuildTrack"

def create_default_organization(db: Session) -> Organization:
    organization = db.query(Organization).filter(Organization.name == DEFAULT_ORGANIZATION_NAME).first()
    if organization:
        return organization
    organization = Organization(name=DEFAULT_ORGANIZATION_NAME)
    db.add(organization)
    db.commit()
    db.refresh(organization)
    logger.info(f"Created organization '{organization.name}' (ID: {organization.id})")
    return organization

def create_initial_admin_user(db: Session) -> None:
    logger.info("Checking if initial admin user needs to be created...")
    superuser_username = settings.FIRST_SUPERUSER_USERNAME

    if get_user_by_username(db, username=superuser_username):
        logger.info(f"Admin user '{superuser_username}' already exists. No action taken.")
        return

    organization = create_default_organization(db)
    user_data = {
        "username": superuser_username,
        "email": settings.FIRST_SUPERUSER_EMAIL,
        "password": settings.FIRST_SUPERUSER_PASSWORD,
        "first_name": "Admin",
        "last_name": "User",
        "role": "admin",
        "is_active": True,
        "is_superuser": True,
        "organization_id": organization.id,
    }
    try:
        crud_create_user(db=db, data=user_data)
        logger.info(f"Admin user '{superuser_username}' created successfully.")
    except ProfileValidationError as e:
        logger.error(f"Failed to create admin user: {e}")

def main() -> None:
    logger.info("Initializing initial data (tables, admin user)...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        create_initial_admin_user(db)
    finally:
        db.close()
    logger.info("Finished initial data setup.")

if __name__ == "__main__":
    main()
