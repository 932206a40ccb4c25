"""Encryption key acquisition backed by the OS keyring.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker

On hosts without a usable keyring backend (servers, containers, CI) the key
is derived deterministically from the machine id and the user name, so that
tokens written earlier on the same machine stay readable.
"""

import base64
import binascii
import hashlib
import os
import secrets
import sys
import threading
from pathlib import Path
from typing import cast

import keyring
import structlog
from keyring.errors import KeyringError, PasswordDeleteError

from repo_broker.credentials.cipher import KEY_SIZE
from repo_broker.exceptions import CryptoError

log = structlog.get_logger(__name__)

DEFAULT_SERVICE_NAME = "repo-broker"
DEFAULT_KEY_NAME = "encryption-key"
FALLBACK_VERSION_TAG = "repo-broker-v1"

LINUX_MACHINE_ID_FILES = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))


def read_machine_id() -> str:
    """Best-effort machine identifier.

    Returns:
        Contents of the Linux machine-id file, or a fixed per-platform string
    """
    if sys.platform.startswith("linux"):
        for candidate in LINUX_MACHINE_ID_FILES:
            try:
                machine_id = candidate.read_text(encoding="utf-8").strip()
            except OSError:
                continue
            if machine_id:
                return machine_id
    elif sys.platform == "darwin":
        return "macos-fallback-key"
    elif sys.platform == "win32":
        return "windows-fallback-key"

    return "repo-broker-default-key"


def current_user() -> str:
    """Name of the invoking user, empty when the environment does not say."""
    return os.environ.get("USER") or os.environ.get("USERNAME") or ""


def derive_fallback_key(machine_id: str, user: str) -> bytes:
    """Derive the deterministic fallback key.

    Args:
        machine_id: Machine identifier
        user: User name

    Returns:
        SHA-256 digest of ``machine_id:user:version-tag``
    """
    combined = f"{machine_id}:{user}:{FALLBACK_VERSION_TAG}"
    return hashlib.sha256(combined.encode("utf-8")).digest()


class KeyProvider:
    """Obtains the symmetric key used for every token.

    The key is resolved lazily on the first :meth:`obtain_key` call and
    cached on this instance for the rest of the process. Build one provider
    per process and pass it to whoever needs the key.

    Resolution order:
    1. Existing key in the OS keyring
    2. New random key, stored in the OS keyring
    3. Deterministic key derived from machine id and user name, when the
       keyring cannot store the new key

    Example:
        >>> provider = KeyProvider()
        >>> key = provider.obtain_key()
        >>> len(key)
        32
    """

    def __init__(
        self,
        service_name: str = DEFAULT_SERVICE_NAME,
        key_name: str = DEFAULT_KEY_NAME,
    ) -> None:
        self.service_name = service_name
        self.key_name = key_name
        self._key: bytes | None = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> bool:
        """Whether the key has already been resolved."""
        return self._key is not None

    def obtain_key(self) -> bytes:
        """Return the 32-byte key, resolving it on first use.

        Raises:
            CryptoError: If the stored key is malformed
        """
        with self._lock:
            if self._key is None:
                self._key = self._resolve_key()
            return self._key

    def forget_key(self) -> bool:
        """Delete the key from the OS keyring and drop the cached copy.

        Returns:
            True if a stored key was deleted, False if none existed

        Raises:
            CryptoError: If the keyring operation fails
        """
        with self._lock:
            self._key = None
            try:
                keyring.delete_password(self.service_name, self.key_name)
            except PasswordDeleteError:
                return False
            except KeyringError as e:
                raise CryptoError(
                    f"Failed to delete encryption key: {e}",
                    reference=f"{self.service_name}/{self.key_name}",
                ) from e
        log.info("encryption_key_deleted", service=self.service_name)
        return True

    def _resolve_key(self) -> bytes:
        stored = self._read_stored_key()
        if stored is not None:
            log.debug("encryption_key_loaded", source="keyring")
            return self._decode_key(stored)

        key = secrets.token_bytes(KEY_SIZE)
        encoded = base64.b64encode(key).decode("ascii")
        try:
            keyring.set_password(self.service_name, self.key_name, encoded)
        except KeyringError as e:
            log.warning("keyring_unavailable_using_derived_key", error=str(e))
            return derive_fallback_key(read_machine_id(), current_user())

        log.info("encryption_key_created", service=self.service_name)
        return key

    def _read_stored_key(self) -> str | None:
        try:
            return cast(str | None, keyring.get_password(self.service_name, self.key_name))
        except KeyringError as e:
            log.debug("keyring_read_failed", error=str(e))
            return None

    def _decode_key(self, stored: str) -> bytes:
        try:
            key = base64.b64decode(stored.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise CryptoError(
                "Stored encryption key is not valid base64",
                reference=f"{self.service_name}/{self.key_name}",
            ) from e

        if len(key) != KEY_SIZE:
            raise CryptoError(
                f"Stored encryption key has {len(key)} bytes, expected {KEY_SIZE}",
                reference=f"{self.service_name}/{self.key_name}",
            )
        return key
