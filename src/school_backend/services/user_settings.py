import logging
from sqlalchemy.orm import Session

from school_backend.model.auth import User, UserSettings
from school_backend.services.curriculum import require_entity

logger = logging.getLogger(__name__)

# Values of a user who never saved any settings
DEFAULT_USER_SETTINGS = {
    "theme": "light",
    "language": "pt-BR",
    "timezone": "America/Sao_Paulo",
    "date_format": "DD/MM/YYYY",
    "currency": "BRL",
    "email_notifications": True,
    "push_notifications": False,
    "lesson_reminders": True,
    "weekly_reports": False,
    "session_timeout": 30,
}


def get_user_settings(user_id: str, db: Session) -> dict:
    require_entity(db, User, user_id, "User")

    stored = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if stored is None:
        return {"user_id": user_id, **DEFAULT_USER_SETTINGS}

    return {"user_id": user_id, **{key: getattr(stored, key) for key in DEFAULT_USER_SETTINGS}}


def update_user_settings(user_id: str, data: dict, db: Session) -> dict:
    """Create the settings row on first save, otherwise change the given fields."""
    require_entity(db, User, user_id, "User")

    stored = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    try:
        if stored is None:
            stored = UserSettings(user_id=user_id, **{**DEFAULT_USER_SETTINGS, **data})
            db.add(stored)
        else:
            for key, value in data.items():
                setattr(stored, key, value)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.debug(f"Settings of user {user_id} saved")

    return get_user_settings(user_id, db)
