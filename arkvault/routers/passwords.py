import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from arkvault import activity, strength
from arkvault.crypto import Cipher, is_legacy
from arkvault.database import get_db
from arkvault.dependencies import get_cipher, get_mailer
from arkvault.errors import DecryptionError
from arkvault.mailer import Mailer, share_message
from arkvault.models import Credential, SharedPassword, User
from arkvault.schemas import (
    CredentialCreate,
    CredentialOut,
    CredentialSummary,
    CredentialUpdate,
    ReencryptResult,
    ShareRecordOut,
    ShareRequest,
)
from arkvault.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["passwords"])


def get_owned_credential(db: Session, user: User, credential_id: str) -> Credential:
    credential = db.query(Credential).filter(
        Credential.id == credential_id,
        Credential.owner_id == user.id,
    ).first()

    if not credential:
        raise HTTPException(status_code=404, detail="Password not found")
    return credential


def _summary(credential: Credential, plaintext: Optional[str]) -> dict:
    value = strength.score(plaintext) if plaintext is not None else 0
    return {
        "id": credential.id,
        "title": credential.title,
        "username": credential.username,
        "url": credential.url,
        "category": credential.category,
        "notes": credential.notes,
        "strength": value,
        "strength_label": strength.label(value),
        "updated_at": credential.updated_at,
    }


def _detail(credential: Credential, plaintext: str) -> dict:
    data = _summary(credential, plaintext)
    data["password"] = plaintext
    data["created_at"] = credential.created_at
    return data


# ── Entries ────────────────────────────────────────────────────────────────────

@router.get("/passwords", response_model=List[CredentialSummary])
def list_passwords(
    category: Optional[str] = None,
    q: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    query = db.query(Credential).filter(Credential.owner_id == user.id)
    if category:
        query = query.filter(Credential.category == category)
    if q:
        pattern = f"%{q}%"
        query = query.filter(or_(
            Credential.title.ilike(pattern),
            Credential.username.ilike(pattern),
            Credential.url.ilike(pattern),
        ))

    result = []
    for credential in query.order_by(Credential.title, Credential.id).all():
        try:
            plaintext = cipher.decrypt(credential.encrypted_password)
        except DecryptionError as ex:
            # listing stays usable; GET /passwords/{id} reports the failure
            logger.warning("password %s does not decrypt: %s", credential.id, ex)
            plaintext = None
        result.append(_summary(credential, plaintext))

    return result


@router.post("/passwords", response_model=CredentialOut, status_code=201)
def create_password(
    body: CredentialCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    credential = Credential(
        owner_id=user.id,
        title=body.title,
        username=body.username,
        encrypted_password=cipher.encrypt(body.password),
        url=body.url,
        category=body.category,
        notes=body.notes,
    )
    db.add(credential)
    activity.record(db, user.id, activity.PASSWORD_CREATED, f"Added password '{body.title}'")
    db.commit()
    db.refresh(credential)

    logger.info("user %s created password %s", user.id, credential.id)
    return _detail(credential, body.password)


@router.get("/passwords/{credential_id}", response_model=CredentialOut)
def get_password(
    credential_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    credential = get_owned_credential(db, user, credential_id)
    plaintext = cipher.decrypt(credential.encrypted_password)

    activity.record(db, user.id, activity.PASSWORD_VIEWED, f"Viewed password '{credential.title}'")
    db.commit()

    return _detail(credential, plaintext)


@router.put("/passwords/{credential_id}", response_model=CredentialOut)
def update_password(
    credential_id: str,
    body: CredentialUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    credential = get_owned_credential(db, user, credential_id)
    changes = body.model_dump(exclude_unset=True)

    password = changes.pop("password", None)
    if password is not None:
        credential.encrypted_password = cipher.encrypt(password)
    for field, value in changes.items():
        setattr(credential, field, value)

    activity.record(db, user.id, activity.PASSWORD_UPDATED, f"Updated password '{credential.title}'")
    db.commit()
    db.refresh(credential)

    plaintext = password if password is not None else cipher.decrypt(credential.encrypted_password)
    return _detail(credential, plaintext)


@router.delete("/passwords/{credential_id}")
def delete_password(
    credential_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    credential = get_owned_credential(db, user, credential_id)

    activity.record(db, user.id, activity.PASSWORD_DELETED, f"Deleted password '{credential.title}'")
    db.delete(credential)
    db.commit()

    return {"status": "password deleted"}


@router.post("/passwords/reencrypt", response_model=ReencryptResult)
def reencrypt_passwords(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    """Rewrite the caller's legacy-format tokens as AES-GCM tokens."""
    count = 0
    for credential in db.query(Credential).filter(Credential.owner_id == user.id).all():
        if is_legacy(credential.encrypted_password):
            plaintext = cipher.decrypt(credential.encrypted_password)
            credential.encrypted_password = cipher.encrypt(plaintext)
            count += 1

    db.commit()
    logger.info("re-encrypted %d legacy passwords for user %s", count, user.id)
    return {"reencrypted": count}


# ── Sharing ────────────────────────────────────────────────────────────────────

@router.post("/passwords/{credential_id}/share", response_model=ShareRecordOut, status_code=201)
def share_password(
    credential_id: str,
    body: ShareRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
    mailer: Mailer = Depends(get_mailer),
):
    credential = get_owned_credential(db, user, credential_id)
    plaintext = cipher.decrypt(credential.encrypted_password)

    subject, text = share_message(
        user.email, credential.title, credential.username, plaintext,
        url=credential.url, note=body.message,
    )
    # Nothing is recorded unless the mail went out
    mailer.send(body.recipient_email, subject, text)

    record = SharedPassword(
        password_id=credential.id,
        sender_id=user.id,
        recipient_email=body.recipient_email,
        password_title=credential.title,
        password_username=credential.username,
        password_url=credential.url,
        password_category=credential.category,
    )
    db.add(record)
    activity.record(
        db, user.id, activity.SHARED,
        f"Shared password '{credential.title}' with {body.recipient_email}",
    )
    db.commit()
    db.refresh(record)

    return record


@router.get("/shared", response_model=List[ShareRecordOut])
def list_shared(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(SharedPassword).filter(
        SharedPassword.sender_id == user.id
    ).order_by(SharedPassword.id.desc()).all()
