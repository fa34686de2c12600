# arkvault/crypto.py — credential cipher
#
# Strategy:
#   - The passphrase comes from configuration and is handed to Cipher() once
#   - A 256-bit AES key is derived from it with PBKDF2-HMAC-SHA256
#   - Format stored in DB: base64( IV [12 bytes] + ciphertext + GCM tag [16 bytes] )
#   - Older rows may hold OpenSSL "Salted__" AES-CBC tokens; those are readable
#     when legacy_decrypt is on, but never written

import base64
import binascii
import hashlib
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher as _BlockCipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from arkvault.errors import (
    AuthenticationFailedError,
    ConfigurationError,
    MalformedCiphertextError,
)

logger = logging.getLogger(__name__)

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16

LEGACY_MAGIC = b"Salted__"
LEGACY_PREFIX = "U2FsdGVkX1"  # base64 of LEGACY_MAGIC


def is_legacy(token: str) -> bool:
    """True for OpenSSL-style passphrase tokens written by the old web client."""
    return token.startswith(LEGACY_PREFIX)


def _b64decode(token: str) -> bytes:
    try:
        return base64.b64decode(token.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as ex:
        raise MalformedCiphertextError("Ciphertext is not valid base64.") from ex


def _evp_bytes_to_key(passphrase: bytes, salt: bytes, length: int) -> bytes:
    # OpenSSL EVP_BytesToKey with MD5 and a single iteration.
    derived = b""
    block = b""
    while len(derived) < length:
        block = hashlib.md5(block + passphrase + salt).digest()
        derived += block
    return derived[:length]


class Cipher:
    """
    Encrypts and decrypts stored password values with one configured key.

    Instances hold no mutable state after construction and can be shared
    across requests.
    """

    def __init__(self, passphrase: str, salt: str = "arkvault-credential-cipher",
                 iterations: int = 390000, legacy_decrypt: bool = True):
        if not passphrase:
            raise ConfigurationError("VAULT_KEY is not set; the credential cipher has no key.")

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt.encode("utf-8"),
            iterations=iterations,
        )
        self._aesgcm = AESGCM(kdf.derive(passphrase.encode("utf-8")))
        self._passphrase = passphrase.encode("utf-8")
        self.legacy_decrypt = legacy_decrypt

    @classmethod
    def from_config(cls, config) -> "Cipher":
        return cls(
            config.VAULT_KEY,
            salt=config.VAULT_KEY_SALT,
            iterations=config.VAULT_KDF_ITERATIONS,
            legacy_decrypt=config.VAULT_LEGACY_DECRYPT,
        )

    # ── Encrypt / Decrypt ──────────────────────────────────────────────────────

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a UTF-8 string with AES-256-GCM.
        Returns base64( iv[12] + ciphertext + tag[16] )
        """
        iv = os.urandom(NONCE_SIZE)
        ciphertext_and_tag = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        return base64.b64encode(iv + ciphertext_and_tag).decode("utf-8")

    def decrypt(self, token: str) -> str:
        """
        Decrypt a token produced by encrypt().

        Raises MalformedCiphertextError when the token has the wrong shape and
        AuthenticationFailedError when the tag does not verify. A wrong key and
        a tampered token look the same from here.
        """
        if self.legacy_decrypt and is_legacy(token):
            return self._decrypt_legacy(token)

        combined = _b64decode(token)
        if len(combined) < NONCE_SIZE + TAG_SIZE:
            raise MalformedCiphertextError("Ciphertext too short to hold a nonce and tag.")

        iv = combined[:NONCE_SIZE]
        try:
            plaintext_bytes = self._aesgcm.decrypt(iv, combined[NONCE_SIZE:], None)
        except InvalidTag as ex:
            raise AuthenticationFailedError(
                "Ciphertext failed authentication (wrong key or tampered data)."
            ) from ex

        try:
            return plaintext_bytes.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise MalformedCiphertextError("Decrypted value is not UTF-8 text.") from ex

    # ── Legacy tokens ──────────────────────────────────────────────────────────

    def _decrypt_legacy(self, token: str) -> str:
        """
        Decrypt base64( "Salted__" + salt[8] + AES-256-CBC ciphertext ).

        There is no integrity tag in this format. A wrong passphrase is only
        noticed through bad padding or bytes that are not UTF-8, and both
        raise instead of yielding an empty string.
        """
        raw = _b64decode(token)
        body = raw[16:]
        if raw[:8] != LEGACY_MAGIC or not body or len(body) % 16:
            raise MalformedCiphertextError("Legacy ciphertext has an invalid layout.")

        key_iv = _evp_bytes_to_key(self._passphrase, raw[8:16], KEY_SIZE + 16)
        decryptor = _BlockCipher(algorithms.AES(key_iv[:KEY_SIZE]), modes.CBC(key_iv[KEY_SIZE:])).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()

        unpadder = padding.PKCS7(128).unpadder()
        try:
            plaintext_bytes = unpadder.update(padded) + unpadder.finalize()
            return plaintext_bytes.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as ex:
            logger.debug("legacy token rejected: %s", type(ex).__name__)
            raise AuthenticationFailedError(
                "Legacy ciphertext did not decrypt cleanly (wrong key or corrupt data)."
            ) from ex
