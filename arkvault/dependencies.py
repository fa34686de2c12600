from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from arkvault import config
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.mailer import Mailer
from arkvault.models import MailerConfig, User
from arkvault.security import get_current_user


@lru_cache(maxsize=1)
def get_cipher() -> Cipher:
    # Key derivation runs once per process
    return Cipher.from_config(config)


def get_mailer(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
) -> Mailer:
    """The caller's own SMTP settings when saved, else the server-wide ones."""
    row = db.get(MailerConfig, user.id)
    if row is not None:
        return Mailer.from_user_config(row, cipher)
    return Mailer.from_config(config)
