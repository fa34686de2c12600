import logging
from collections import Counter
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from arkvault import activity, strength
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.dependencies import get_cipher
from arkvault.errors import DecryptionError
from arkvault.models import Activity, Credential, SharedPassword, User, UserSettings
from arkvault.schemas import ActivityOut, DashboardOut, SettingsIn, SettingsOut
from arkvault.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["account"])


def _recent_activity(db: Session, user: User, limit: int):
    return db.query(Activity).filter(
        Activity.user_id == user.id
    ).order_by(Activity.id.desc()).limit(limit).all()


@router.get("/activity", response_model=List[ActivityOut])
def list_activity(
    limit: int = Query(50, ge=1, le=500),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _recent_activity(db, user, limit)


# ── Settings ───────────────────────────────────────────────────────────────────

@router.get("/settings", response_model=SettingsOut)
def get_settings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    settings = db.get(UserSettings, user.id)
    if settings is None:
        return SettingsIn()
    return settings


@router.put("/settings", response_model=SettingsOut)
def update_settings(body: SettingsIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    settings = db.get(UserSettings, user.id)
    if settings is None:
        settings = UserSettings(user_id=user.id)
        db.add(settings)

    for field, value in body.model_dump().items():
        setattr(settings, field, value)

    activity.record(db, user.id, activity.SETTINGS_UPDATED, "Updated settings")
    db.commit()
    db.refresh(settings)
    return settings


# ── Dashboard ──────────────────────────────────────────────────────────────────

@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    credentials = db.query(Credential).filter(Credential.owner_id == user.id).all()

    weak = 0
    for credential in credentials:
        try:
            value = strength.score(cipher.decrypt(credential.encrypted_password))
        except DecryptionError as ex:
            logger.warning("password %s does not decrypt: %s", credential.id, ex)
            value = 0
        if value < 50:
            weak += 1

    categories = Counter(c.category or "Uncategorized" for c in credentials)
    shared_count = db.query(SharedPassword).filter(SharedPassword.sender_id == user.id).count()

    return {
        "total_passwords": len(credentials),
        "weak_passwords": weak,
        "shared_count": shared_count,
        "categories": dict(categories),
        "recent_activity": _recent_activity(db, user, 5),
    }
