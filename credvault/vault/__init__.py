"""
Credential vault - namespaced access to the OS credential store.

The PyQt6 UI lives in manager_ui / app and is imported on demand so the
store API works without a display.
"""

from .errors import (
    StoreError,
    StoreUnavailable,
    WriteFailed,
    DeleteFailed,
    NotFound,
    ValidationFailed,
)
from .naming import DEFAULT_PREFIX, add_prefix, remove_prefix
from .keychain import (
    KeychainBackend,
    NativeCredential,
    WindowsCredentialBackend,
    KeyringBackend,
    default_backend,
    KEYRING_AVAILABLE,
    WIN32CRED_AVAILABLE,
)
from .store import CredentialStore, Credential, Login
from .access import get, set, default_store

__all__ = [
    # Errors
    "StoreError",
    "StoreUnavailable",
    "WriteFailed",
    "DeleteFailed",
    "NotFound",
    "ValidationFailed",
    # Naming
    "DEFAULT_PREFIX",
    "add_prefix",
    "remove_prefix",
    # Keychain
    "KeychainBackend",
    "NativeCredential",
    "WindowsCredentialBackend",
    "KeyringBackend",
    "default_backend",
    "KEYRING_AVAILABLE",
    "WIN32CRED_AVAILABLE",
    # Store
    "CredentialStore",
    "Credential",
    "Login",
    # Access
    "get",
    "set",
    "default_store",
]
