"""Initialize database tables and create initial data if needed"""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from smsdesk.core.config import settings
from smsdesk.db.base import Base
from smsdesk.models import User  # noqa: F401  registers every model on Base.metadata
from smsdesk.services.auth_service import get_password_hash

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise


def create_initial_data(session_factory: sessionmaker) -> None:
    """Create the administrator account from .env configuration when no admin exists"""
    db = session_factory()
    try:
        if db.query(User).filter(User.is_admin == True).count() == 0:
            admin = User(
                username=settings.ADMIN_USERNAME,
                password=get_password_hash(settings.ADMIN_PASSWORD),
                full_name=settings.ADMIN_FULL_NAME,
                phone=settings.ADMIN_PHONE,
                messages_remaining=settings.INITIAL_CREDITS,
                messages_sent=0,
                is_admin=True,
                is_active=True,
            )
            db.add(admin)
            db.commit()
            logger.info(f"Admin created: {settings.ADMIN_USERNAME}")
            logger.warning("Change default admin credentials in .env file!")

    except Exception as e:
        logger.error(f"Error creating initial data: {str(e)}")
        db.rollback()
    finally:
        db.close()
