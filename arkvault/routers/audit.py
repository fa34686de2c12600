import logging
from collections import defaultdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from arkvault import pwned, strength
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.dependencies import get_cipher
from arkvault.models import Credential, User
from arkvault.schemas import AuditReport, LeakCheckRequest, LeakCheckResult
from arkvault.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit", tags=["audit"])

WEAK_BELOW = 50


@router.get("", response_model=AuditReport)
def audit_vault(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    credentials = db.query(Credential).filter(
        Credential.owner_id == user.id
    ).order_by(Credential.title, Credential.id).all()

    weak = []
    by_password = defaultdict(list)
    total_strength = 0

    for credential in credentials:
        plaintext = cipher.decrypt(credential.encrypted_password)
        value = strength.score(plaintext)
        total_strength += value
        if value < WEAK_BELOW:
            weak.append(credential.id)
        by_password[plaintext].append(credential.id)

    reused = [ids for ids in by_password.values() if len(ids) > 1]
    average = round(total_strength / len(credentials)) if credentials else 0

    logger.info("audit for user %s: %d entries, %d weak, %d reused groups",
                user.id, len(credentials), len(weak), len(reused))
    return {"total": len(credentials), "average_strength": average, "weak": weak, "reused": reused}


@router.post("/leak-check", response_model=LeakCheckResult)
def check_password_leak(body: LeakCheckRequest, user: User = Depends(get_current_user)):
    count = pwned.times_pwned(body.password)
    return {"leaked": count > 0, "times_found": count}
