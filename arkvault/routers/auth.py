import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from arkvault import activity
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.dependencies import get_cipher
from arkvault.models import AuthToken, MailerConfig, User, UserSettings
from arkvault.schemas import (
    LoginRequest,
    MailerConfigIn,
    MailerConfigOut,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    UserOut,
)
from arkvault.security import (
    get_current_token,
    get_current_user,
    hash_password,
    issue_token,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserOut, status_code=201)
def signup(body: SignupRequest, db: Session = Depends(get_db)):
    email = body.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    user = User(email=email, password_hash=hash_password(body.password), full_name=body.full_name)
    db.add(user)
    db.flush()
    db.add(UserSettings(user_id=user.id))
    db.commit()
    db.refresh(user)

    logger.info("created account %s", user.id)
    return user


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.lower()).first()
    if user is None or not verify_password(user.password_hash, body.password):
        logger.info("failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = issue_token(db, user)
    return TokenResponse(access_token=token.token, expires_at=token.expires_at)


@router.post("/logout")
def logout(token: AuthToken = Depends(get_current_token), db: Session = Depends(get_db)):
    db.delete(token)
    db.commit()
    return {"status": "logged out"}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.put("/me", response_model=UserOut)
def update_me(
    body: ProfileUpdate,
    token: AuthToken = Depends(get_current_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True)

    if "full_name" in changes:
        user.full_name = body.full_name

    if body.new_password is not None:
        if not body.current_password or not verify_password(user.password_hash, body.current_password):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        user.password_hash = hash_password(body.new_password)
        # other sessions end when the password changes
        db.query(AuthToken).filter(
            AuthToken.user_id == user.id,
            AuthToken.token != token.token,
        ).delete(synchronize_session="fetch")
        logger.info("password changed for user %s", user.id)

    activity.record(db, user.id, activity.PROFILE_UPDATED, "Updated profile")
    db.commit()
    db.refresh(user)
    return user


# ── Mailer configuration ───────────────────────────────────────────────────────

def _mailer_out(row: MailerConfig) -> dict:
    return {
        "host": row.host,
        "port": row.port,
        "username": row.username,
        "use_ssl": row.use_ssl,
        "use_tls": row.use_tls,
        "sender": row.sender,
        "has_password": bool(row.encrypted_password),
    }


@router.get("/me/mailer", response_model=MailerConfigOut)
def get_mailer_config(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    row = db.get(MailerConfig, user.id)
    if row is None:
        raise HTTPException(status_code=404, detail="No mailer configured")
    return _mailer_out(row)


@router.put("/me/mailer", response_model=MailerConfigOut)
def put_mailer_config(
    body: MailerConfigIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    row = db.get(MailerConfig, user.id)
    if row is None:
        row = MailerConfig(user_id=user.id)
        db.add(row)

    row.host = body.host
    row.port = body.port
    row.username = body.username
    row.use_ssl = body.use_ssl
    row.use_tls = body.use_tls
    row.sender = body.sender
    if body.password is not None:
        row.encrypted_password = cipher.encrypt(body.password)

    db.commit()
    db.refresh(row)
    return _mailer_out(row)


@router.delete("/me/mailer")
def delete_mailer_config(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    row = db.get(MailerConfig, user.id)
    if row is None:
        raise HTTPException(status_code=404, detail="No mailer configured")
    db.delete(row)
    db.commit()
    return {"status": "mailer configuration removed"}
