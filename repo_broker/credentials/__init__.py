"""Encrypted multi-account credential storage.

Components:
    - KeyProvider: symmetric key from the OS keyring, with a derived fallback
    - TokenCipher: AES-256-GCM token encryption
    - Account / CredentialStore: in-memory account collection
    - CredentialFile: JSON persistence with transparent encryption
    - AccountResolver: domain + owner account selection

Example:
    >>> from repo_broker.credentials import AccountResolver, CredentialFile, KeyProvider
    >>> store = CredentialFile(path, KeyProvider()).load()
    >>> account = AccountResolver().resolve_for_owner(store, "github.com", "acme")
"""

from repo_broker.credentials.cipher import TokenCipher, decrypt, encrypt, looks_encrypted
from repo_broker.credentials.keys import KeyProvider
from repo_broker.credentials.models import Account, CredentialStore, normalize_domain
from repo_broker.credentials.resolver import AccountResolver, split_module_path
from repo_broker.credentials.store import CredentialFile
from repo_broker.exceptions import AccountNotFoundError, CredentialError, CryptoError

__all__ = [
    "Account",
    "AccountNotFoundError",
    "AccountResolver",
    "CredentialError",
    "CredentialFile",
    "CredentialStore",
    "CryptoError",
    "KeyProvider",
    "TokenCipher",
    "decrypt",
    "encrypt",
    "looks_encrypted",
    "normalize_domain",
    "split_module_path",
]
