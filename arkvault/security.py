import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from arkvault import config
from arkvault.database import get_db
from arkvault.models import AuthToken, User

logger = logging.getLogger(__name__)

hasher = PasswordHasher(
    time_cost=config.ARGON2_TIME_COST,
    memory_cost=config.ARGON2_MEMORY_COST,
    parallelism=config.ARGON2_PARALLELISM,
    type=Type.ID,
)

bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def issue_token(db: Session, user: User) -> AuthToken:
    token = AuthToken(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=config.TOKEN_TTL_MINUTES),
    )
    db.add(token)
    db.commit()
    db.refresh(token)
    logger.info("issued token for user %s", user.id)
    return token


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
) -> AuthToken:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    token = db.get(AuthToken, credentials.credentials)
    if token is None:
        raise _unauthorized("Invalid token")

    if _as_utc(token.expires_at) <= datetime.now(timezone.utc):
        db.delete(token)
        db.commit()
        raise _unauthorized("Token expired")

    return token


def get_current_user(
    token: AuthToken = Depends(get_current_token),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, token.user_id)
    if user is None:
        raise _unauthorized("Invalid token")
    return user
