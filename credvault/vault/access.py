"""
Programmatic credential access for scripts and other programs.

    >>> import credvault
    >>> credvault.set("github", credvault.Login("octocat", "s3cret"))
    >>> credvault.get("github").username
    'octocat'
"""

from __future__ import annotations
import logging
from typing import Optional

from .store import CredentialStore, Login

logger = logging.getLogger(__name__)

_default_store: Optional[CredentialStore] = None


def default_store() -> CredentialStore:
    """Shared store configured from the user's settings, created on first use."""
    global _default_store
    if _default_store is None:
        from ..config import get_settings

        settings = get_settings()
        _default_store = CredentialStore(prefix=settings.prefix, persist=settings.persist)
    return _default_store


def get(name: str, store: CredentialStore = None) -> Optional[Login]:
    """
    Fetch a username/password pair.

    Returns:
        Login, or None if nothing is stored under name
    """
    cred = (store or default_store()).read(name)
    if cred is None:
        return None
    return cred.login


def set(name: str, login: Login, store: CredentialStore = None) -> bool:
    """
    Store a username/password pair, replacing any existing entry.

    Raises:
        WriteFailed: The store rejected the write
    """
    return (store or default_store()).write(name, login.username, login.password)
