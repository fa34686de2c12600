class ArkVaultError(Exception):
    """Base class for all ArkVault errors."""
    pass


class ConfigurationError(ArkVaultError):
    """Raised when settings or caller-supplied options cannot produce a result."""
    pass


class DecryptionError(ArkVaultError):
    """Raised when a stored token cannot be turned back into plaintext."""
    pass


class MalformedCiphertextError(DecryptionError):
    """The token is not something the cipher could have produced."""
    pass


class AuthenticationFailedError(DecryptionError):
    """The token is well formed but fails verification (wrong key or tampered)."""
    pass


class MailerError(ArkVaultError):
    """Raised when a share email cannot be delivered."""
    pass


class LeakCheckError(ArkVaultError):
    """Raised when the breach lookup service is unreachable or misbehaves."""
    pass
