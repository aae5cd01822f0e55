"""
credvault - a small GUI and API over the OS credential store.
"""

from .vault import (
    CredentialStore,
    Credential,
    Login,
    NotFound,
    StoreError,
    get,
    set,
)

__version__ = "0.1.0"

__all__ = [
    "CredentialStore",
    "Credential",
    "Login",
    "NotFound",
    "StoreError",
    "get",
    "set",
]
