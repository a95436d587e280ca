import logging

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.models.users import Users

logger = logging.getLogger(__name__)


def seed_admin(db: Session) -> bool:
    """Create the default admin when the users table is empty."""
    if db.query(Users.id).first():
        return False

    admin = Users(
        username=settings.ADMIN_USERNAME,
        name=settings.ADMIN_NAME,
        role="admin",
    )
    admin.set_password(settings.ADMIN_PASSWORD)

    try:
        db.add(admin)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error creating default admin")
        raise

    logger.info("Default admin '%s' created", admin.username)
    return True
