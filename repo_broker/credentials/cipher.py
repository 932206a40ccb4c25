"""Token encryption using AES-256-GCM.

Security Model:
- One 32-byte key per user/machine (see repo_broker.credentials.keys)
- Each token encrypted independently with a fresh 12-byte nonce
- Stored form: base64(nonce || ciphertext || tag), safe to embed in JSON
- Authentication failure (tampering, wrong key) is always an error, never
  a silently wrong plaintext

Known limitation:
    ``looks_encrypted`` is a heuristic. A plaintext token without a known
    provider prefix that happens to be valid base64 and longer than
    ``MIN_ENCRYPTED_LENGTH`` is classified as ciphertext. On load its
    decryption fails and the value is kept as-is; on save it is written
    without encryption. This ambiguity is kept for compatibility with
    existing credential files.
"""

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from repo_broker.exceptions import CryptoError

KEY_SIZE = 32
NONCE_SIZE = 12
MIN_ENCRYPTED_LENGTH = 20

# Personal access token prefixes issued by GitHub (ghp_, gho_) and GitLab (glpat-)
PLAINTEXT_TOKEN_PREFIXES = ("ghp_", "gho_", "glpat-")


def _aead(key: bytes) -> AESGCM:
    if len(key) != KEY_SIZE:
        raise CryptoError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
    return AESGCM(key)


def _strict_b64decode(value: str) -> bytes:
    return base64.b64decode(value.encode("ascii"), validate=True)


def encrypt(plaintext: str, key: bytes) -> str:
    """Encrypt a token.

    Args:
        plaintext: Token in clear text
        key: 32-byte key

    Returns:
        Base64 text holding nonce and ciphertext

    Raises:
        CryptoError: If the key has the wrong size
    """
    nonce = secrets.token_bytes(NONCE_SIZE)
    sealed = _aead(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + sealed).decode("ascii")


def decrypt(encrypted: str, key: bytes) -> str:
    """Decrypt a token produced by :func:`encrypt`.

    Args:
        encrypted: Base64 text holding nonce and ciphertext
        key: 32-byte key

    Returns:
        Token in clear text

    Raises:
        CryptoError: If the text is not valid base64, is shorter than the
            nonce, or fails authentication
    """
    try:
        blob = _strict_b64decode(encrypted)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise CryptoError("Encrypted token is not valid base64") from e

    if len(blob) < NONCE_SIZE:
        raise CryptoError("Encrypted token is too short")

    aead = _aead(key)
    nonce, sealed = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    try:
        plaintext = aead.decrypt(nonce, sealed, None)
    except InvalidTag as e:
        raise CryptoError(
            "Token failed authentication",
            suggestion="The credential file was modified or the encryption key changed",
        ) from e

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CryptoError("Decrypted token is not valid UTF-8") from e


def looks_encrypted(value: str) -> bool:
    """Heuristic check whether a stored token is ciphertext.

    Known plaintext prefixes are never treated as encrypted. Anything else
    counts as encrypted when it is strict base64 and longer than
    ``MIN_ENCRYPTED_LENGTH`` characters.
    """
    if value.startswith(PLAINTEXT_TOKEN_PREFIXES):
        return False

    try:
        _strict_b64decode(value)
    except (binascii.Error, UnicodeEncodeError):
        return False
    return len(value) > MIN_ENCRYPTED_LENGTH


class TokenCipher:
    """Groups the token encryption functions for injection into the store.

    Example:
        >>> cipher = TokenCipher()
        >>> blob = cipher.encrypt("glpat-abc", key)
        >>> cipher.looks_encrypted(blob)
        True
    """

    def encrypt(self, plaintext: str, key: bytes) -> str:
        return encrypt(plaintext, key)

    def decrypt(self, encrypted: str, key: bytes) -> str:
        return decrypt(encrypted, key)

    def looks_encrypted(self, value: str) -> bool:
        return looks_encrypted(value)
