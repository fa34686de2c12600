from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from arkvault import config


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ── Accounts ───────────────────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class UserOut(ORMModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=200)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=8)


class MailerConfigIn(BaseModel):
    host: str = Field(min_length=1, max_length=255)
    port: int = Field(default=465, ge=1, le=65535)
    username: Optional[str] = Field(default=None, max_length=320)
    # omitted on update keeps the stored password
    password: Optional[str] = None
    use_ssl: bool = True
    use_tls: bool = False
    sender: Optional[str] = Field(default=None, max_length=320)


class MailerConfigOut(ORMModel):
    host: str
    port: int
    username: Optional[str] = None
    use_ssl: bool
    use_tls: bool
    sender: Optional[str] = None
    has_password: bool


# ── Credentials ────────────────────────────────────────────────────────────────

class CredentialCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    username: str = Field(default="", max_length=320)
    password: str
    url: Optional[str] = Field(default=None, max_length=2048)
    category: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


class CredentialUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    username: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = None
    url: Optional[str] = Field(default=None, max_length=2048)
    category: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None

    @field_validator("title", "username", "password")
    @classmethod
    def not_null(cls, value):
        # these may be omitted but never cleared
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class CredentialSummary(ORMModel):
    id: str
    title: str
    username: str
    url: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    strength: int
    strength_label: str
    updated_at: Optional[datetime] = None


class CredentialOut(CredentialSummary):
    password: str
    created_at: Optional[datetime] = None


class ReencryptResult(BaseModel):
    reencrypted: int


# ── Generator ──────────────────────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    preset: Optional[str] = None
    length: int = config.PASSWORD_LENGTH
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    symbols: bool = True
    exclude_similar: bool = False
    exclude_ambiguous: bool = False
    custom_chars: str = ""
    exclude_chars: str = ""


class StrengthRequest(BaseModel):
    password: str


class StrengthOut(BaseModel):
    strength: int
    label: str


class GeneratedPassword(StrengthOut):
    password: str


class PresetOut(BaseModel):
    name: str
    length: int
    uppercase: bool
    lowercase: bool
    numbers: bool
    symbols: bool
    exclude_similar: bool


class HistoryEntryOut(BaseModel):
    id: int
    password: str
    strength: int
    created_at: Optional[datetime] = None


# ── Sharing ────────────────────────────────────────────────────────────────────

class ShareRequest(BaseModel):
    recipient_email: EmailStr
    message: Optional[str] = None


class ShareRecordOut(ORMModel):
    id: int
    password_id: Optional[str] = None
    recipient_email: str
    password_title: str
    password_username: Optional[str] = None
    password_url: Optional[str] = None
    password_category: Optional[str] = None
    sent_at: Optional[datetime] = None


# ── Audit ──────────────────────────────────────────────────────────────────────

class AuditReport(BaseModel):
    total: int
    average_strength: int
    weak: List[str]
    reused: List[List[str]]


class LeakCheckRequest(BaseModel):
    password: str


class LeakCheckResult(BaseModel):
    leaked: bool
    times_found: int


# ── Activity / settings / dashboard ────────────────────────────────────────────

class ActivityOut(ORMModel):
    id: int
    activity_type: str
    title: str
    created_at: Optional[datetime] = None


class SettingsIn(BaseModel):
    auto_lock_time: int = Field(default=15, ge=0, le=60)
    password_length: int = Field(default=config.PASSWORD_LENGTH, ge=8, le=config.PASSWORD_MAX_LENGTH)
    theme: str = Field(default="system", pattern="^(light|dark|system)$")
    export_format: str = Field(default="json", pattern="^(json|csv)$")
    security_options: Dict[str, bool] = Field(default_factory=dict)
    notification_options: Dict[str, bool] = Field(default_factory=dict)


class SettingsOut(SettingsIn, ORMModel):
    pass


class DashboardOut(BaseModel):
    total_passwords: int
    weak_passwords: int
    shared_count: int
    categories: Dict[str, int]
    recent_activity: List[ActivityOut]
