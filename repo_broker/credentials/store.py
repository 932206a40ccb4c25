"""Credential file persistence with transparent token encryption.

The credential file is a JSON document::

    {
      "accounts": [
        {"name": "work", "provider": "github", "api_url": "...",
         "domain": "https://github.com", "token": "<base64 ciphertext>",
         "owners": ["my-company"]}
      ]
    }

Tokens are ciphertext on disk and plaintext in memory. Files written by
older versions may hold plaintext tokens; they load unchanged and are
encrypted on the next save.
"""

import json
import os
import threading
from pathlib import Path

import structlog
from pydantic import ValidationError

from repo_broker.credentials.cipher import TokenCipher
from repo_broker.credentials.keys import KeyProvider
from repo_broker.credentials.models import Account, CredentialStore
from repo_broker.exceptions import ConfigIOError, CryptoError

log = structlog.get_logger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class CredentialFile:
    """Loads and saves a :class:`CredentialStore` at a fixed path.

    Loads and saves on one instance are serialized by a lock, so a reader
    never observes a half-written store from a concurrent writer. Writes go
    through a temporary file and an atomic rename.

    Example:
        >>> credential_file = CredentialFile(Path("~/.repo-broker/config.json"), KeyProvider())
        >>> store = credential_file.load()
        >>> store.add_account(account)
        >>> credential_file.save(store)
    """

    def __init__(
        self,
        path: Path,
        key_provider: KeyProvider,
        cipher: TokenCipher | None = None,
    ) -> None:
        """Initialize the credential file.

        Args:
            path: Location of the JSON credential file
            key_provider: Source of the encryption key
            cipher: Token cipher (default AES-256-GCM implementation)
        """
        self.path = Path(path).expanduser()
        self.key_provider = key_provider
        self.cipher = cipher or TokenCipher()
        self._lock = threading.Lock()

    def load(self) -> CredentialStore:
        """Read the store, decrypting tokens.

        Returns:
            Store with plaintext tokens; empty if the file does not exist

        Raises:
            ConfigIOError: If the file cannot be read or parsed
            CryptoError: If the encryption key cannot be obtained
        """
        with self._lock:
            if not self.path.exists():
                log.debug("credential_file_missing", path=str(self.path))
                return CredentialStore()

            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigIOError(f"Cannot read credential file: {self.path}") from e

            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ConfigIOError(f"Credential file is not valid JSON: {self.path}") from e

            if not isinstance(data, dict):
                raise ConfigIOError(f"Credential file must hold a JSON object: {self.path}")

            try:
                store = CredentialStore.model_validate({"accounts": data.get("accounts") or []})
            except ValidationError as e:
                raise ConfigIOError(f"Invalid account record in {self.path}: {e}") from e

            key = self.key_provider.obtain_key()
            for account in store.accounts:
                if not self.cipher.looks_encrypted(account.token):
                    continue
                try:
                    account.token = self.cipher.decrypt(account.token, key)
                except CryptoError:
                    # Plaintext token that happens to look like base64
                    log.debug("token_left_as_is", account=account.name)

            log.debug("credential_file_loaded", path=str(self.path), accounts=len(store))
            return store

    def save(self, store: CredentialStore) -> None:
        """Write the store, encrypting tokens that are still plaintext.

        The in-memory store is not modified.

        Raises:
            ConfigIOError: If the file or its directory cannot be written
            CryptoError: If the encryption key cannot be obtained
        """
        with self._lock:
            key = self.key_provider.obtain_key()

            records = []
            for account in store.accounts:
                stored: Account = account.model_copy(deep=True)
                if not self.cipher.looks_encrypted(stored.token):
                    stored.token = self.cipher.encrypt(stored.token, key)
                records.append(stored.to_record())

            payload = json.dumps({"accounts": records}, indent=2)
            self._write(payload)
            log.debug("credential_file_saved", path=str(self.path), accounts=len(records))

    def _write(self, payload: str) -> None:
        directory = self.path.parent
        temp_file = self.path.with_suffix(".tmp")
        try:
            if not directory.exists():
                directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)

            fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)

            # O_CREAT mode is filtered by umask and ignored for existing files
            temp_file.chmod(FILE_MODE)
            temp_file.replace(self.path)
        except OSError as e:
            try:
                temp_file.unlink(missing_ok=True)
            except OSError:
                log.debug("temp_file_not_removed", path=str(temp_file))
            raise ConfigIOError(f"Cannot write credential file: {self.path}") from e
