import logging

from sqlalchemy.orm import Session

from arkvault.models import Activity

logger = logging.getLogger(__name__)

PASSWORD_CREATED = "password_created"
PASSWORD_UPDATED = "password_updated"
PASSWORD_DELETED = "password_deleted"
PASSWORD_VIEWED = "password_viewed"
GENERATED = "generated"
SHARED = "shared"
SETTINGS_UPDATED = "settings_updated"
PROFILE_UPDATED = "profile_updated"

TITLE_MAX = Activity.title.type.length


def record(db: Session, user_id: str, activity_type: str, title: str) -> Activity:
    """Add a feed row to the session. The caller commits."""
    if len(title) > TITLE_MAX:
        title = title[:TITLE_MAX - 3] + "..."
    entry = Activity(user_id=user_id, activity_type=activity_type, title=title)
    db.add(entry)
    logger.debug("activity %s for user %s", activity_type, user_id)
    return entry
