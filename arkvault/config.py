import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str = ""):
    raw = os.getenv(name, default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./arkvault.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = _env_list("CORS_ORIGINS", "*")

# Cipher
VAULT_KEY = os.getenv("VAULT_KEY")
VAULT_KEY_SALT = os.getenv("VAULT_KEY_SALT", "arkvault-credential-cipher")
VAULT_KDF_ITERATIONS = int(os.getenv("VAULT_KDF_ITERATIONS", 390000))
VAULT_LEGACY_DECRYPT = _env_bool("VAULT_LEGACY_DECRYPT", "true")

# Account passwords
ARGON2_TIME_COST = int(os.getenv("ARGON2_TIME_COST", 3))
ARGON2_MEMORY_COST = int(os.getenv("ARGON2_MEMORY_COST", 65536))
ARGON2_PARALLELISM = int(os.getenv("ARGON2_PARALLELISM", 4))
TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", 60 * 24))

# Generator
PASSWORD_LENGTH = int(os.getenv("PASSWORD_LENGTH", 16))
PASSWORD_MAX_LENGTH = 128
HISTORY_LIMIT = 10

# Sharing
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "true")
SMTP_SSL = _env_bool("SMTP_SSL", "false")
MAIL_FROM = os.getenv("MAIL_FROM", "ArkVault <no-reply@arkvault.local>")

# Leak check
HIBP_API_URL = os.getenv("HIBP_API_URL", "https://api.pwnedpasswords.com/range")
HIBP_TIMEOUT = float(os.getenv("HIBP_TIMEOUT", 10))
