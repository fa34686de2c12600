import uuid

from sqlalchemy import Boolean, Column, String, Text, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import declarative_base

base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class User(base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(320), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now())


class AuthToken(base):
    __tablename__ = "auth_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now())


class Credential(base):
    __tablename__ = "passwords"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    username = Column(String(320), nullable=False, default="")
    encrypted_password = Column(Text, nullable=False)
    url = Column(String(2048), nullable=True)
    category = Column(String(100), nullable=True, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(),
                        onupdate=func.now())


class PasswordHistory(base):
    __tablename__ = "password_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # cipher token, same format as passwords.encrypted_password
    password = Column(Text, nullable=False)
    strength = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now())


class SharedPassword(base):
    __tablename__ = "shared_passwords"

    id = Column(Integer, primary_key=True, autoincrement=True)
    password_id = Column(String(36), ForeignKey("passwords.id", ondelete="SET NULL"), nullable=True)
    sender_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    recipient_email = Column(String(320), nullable=False)
    password_title = Column(String(200), nullable=False)
    password_username = Column(String(320), nullable=True)
    password_url = Column(String(2048), nullable=True)
    password_category = Column(String(100), nullable=True)

    sent_at = Column(DateTime(timezone=True),
                     server_default=func.now())


class Activity(base):
    __tablename__ = "user_activity"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    activity_type = Column(String(50), nullable=False)
    title = Column(String(300), nullable=False)

    created_at = Column(DateTime(timezone=True),
                        server_default=func.now())


class MailerConfig(base):
    __tablename__ = "mailer_configuration"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    host = Column(String(255), nullable=False)
    port = Column(Integer, nullable=False, default=465)
    username = Column(String(320), nullable=True)
    # cipher token, same format as passwords.encrypted_password
    encrypted_password = Column(Text, nullable=True)
    use_ssl = Column(Boolean, nullable=False, default=True)
    use_tls = Column(Boolean, nullable=False, default=False)
    sender = Column(String(320), nullable=True)

    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(),
                        onupdate=func.now())


class UserSettings(base):
    __tablename__ = "user_settings"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    auto_lock_time = Column(Integer, nullable=False, default=15)
    password_length = Column(Integer, nullable=False, default=16)
    theme = Column(String(10), nullable=False, default="system")
    export_format = Column(String(10), nullable=False, default="json")
    security_options = Column(JSON, nullable=False, default=dict)
    notification_options = Column(JSON, nullable=False, default=dict)

    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(),
                        onupdate=func.now())
