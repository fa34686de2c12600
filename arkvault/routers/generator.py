import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from arkvault import activity, config, generator, strength
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.dependencies import get_cipher
from arkvault.errors import ConfigurationError
from arkvault.models import PasswordHistory, User
from arkvault.schemas import (
    GeneratedPassword,
    GenerateRequest,
    HistoryEntryOut,
    PresetOut,
    StrengthOut,
    StrengthRequest,
)
from arkvault.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generator"])


@router.post("/generator", response_model=GeneratedPassword)
def generate_password(
    body: GenerateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    try:
        if body.preset:
            options = generator.preset(body.preset)
        else:
            options = generator.GeneratorOptions(**body.model_dump(exclude={"preset"}))
        password = generator.generate(options)
    except ConfigurationError as ex:
        raise HTTPException(status_code=400, detail=str(ex))

    value = strength.score(password)
    db.add(PasswordHistory(owner_id=user.id, password=cipher.encrypt(password), strength=value))
    activity.record(db, user.id, activity.GENERATED, "Generated a new password")
    db.commit()

    return {"password": password, "strength": value, "label": strength.label(value)}


@router.get("/generator/presets", response_model=List[PresetOut])
def list_presets():
    return [{"name": name, **asdict(options)} for name, options in generator.PRESETS.items()]


@router.get("/generator/history", response_model=List[HistoryEntryOut])
def password_history(
    limit: int = Query(config.HISTORY_LIMIT, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cipher: Cipher = Depends(get_cipher),
):
    entries = db.query(PasswordHistory).filter(
        PasswordHistory.owner_id == user.id
    ).order_by(PasswordHistory.id.desc()).limit(limit).all()

    return [
        {
            "id": e.id,
            "password": cipher.decrypt(e.password),
            "strength": e.strength,
            "created_at": e.created_at,
        }
        for e in entries
    ]


@router.post("/strength", response_model=StrengthOut)
def check_strength(body: StrengthRequest):
    value = strength.score(body.password)
    return {"strength": value, "label": strength.label(value)}
