import base64
import hashlib

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher as BlockCipher, algorithms, modes

from arkvault.crypto import Cipher, is_legacy
from arkvault.errors import (
    AuthenticationFailedError,
    ConfigurationError,
    DecryptionError,
    MalformedCiphertextError,
)


def openssl_token(passphrase: str, plaintext: str, salt: bytes = b"arkvault") -> str:
    """What the old web client stored: base64("Salted__" + salt + AES-256-CBC)."""
    derived, block = b"", b""
    while len(derived) < 48:
        block = hashlib.md5(block + passphrase.encode() + salt).digest()
        derived += block
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext.encode()) + padder.finalize()
    encryptor = BlockCipher(algorithms.AES(derived[:32]), modes.CBC(derived[32:48])).encryptor()
    body = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(b"Salted__" + salt + body).decode()


@pytest.mark.parametrize("plaintext", ["", "hunter2", "Abcdefgh12!@", "pässwörd ✓", "x" * 500])
def test_round_trip(cipher, plaintext):
    assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext


def test_tokens_are_text_and_differ_per_call(cipher):
    first = cipher.encrypt("same")
    second = cipher.encrypt("same")
    assert first != second
    assert base64.b64decode(first)
    assert not is_legacy(first)


def test_wrong_key_raises(cipher):
    other = Cipher("another-key", iterations=1000)
    with pytest.raises(AuthenticationFailedError):
        other.decrypt(cipher.encrypt("secret"))


def test_tampered_token_raises(cipher):
    raw = bytearray(base64.b64decode(cipher.encrypt("secret")))
    raw[15] ^= 1
    with pytest.raises(AuthenticationFailedError):
        cipher.decrypt(base64.b64encode(bytes(raw)).decode())


@pytest.mark.parametrize("token", ["not base64!!", "AAAA", ""])
def test_malformed_token_raises(cipher, token):
    with pytest.raises(MalformedCiphertextError):
        cipher.decrypt(token)


def test_decryption_errors_share_a_base(cipher):
    with pytest.raises(DecryptionError):
        cipher.decrypt("AAAA")


def test_missing_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        Cipher("")


def test_legacy_token_decrypts(cipher):
    token = openssl_token("test-vault-key", "legacy secret")
    assert is_legacy(token)
    assert cipher.decrypt(token) == "legacy secret"


def test_legacy_token_with_wrong_key_raises():
    token = openssl_token("test-vault-key", "legacy secret")
    with pytest.raises(DecryptionError):
        Cipher("another-key", iterations=1000).decrypt(token)


def test_legacy_decrypt_can_be_disabled():
    strict = Cipher("test-vault-key", iterations=1000, legacy_decrypt=False)
    with pytest.raises(DecryptionError):
        strict.decrypt(openssl_token("test-vault-key", "legacy secret"))


def test_truncated_legacy_token_is_malformed(cipher):
    token = base64.b64encode(b"Salted__12345678abc").decode()
    with pytest.raises(MalformedCiphertextError):
        cipher.decrypt(token)
