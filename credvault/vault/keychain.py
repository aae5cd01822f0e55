"""
Native credential store backends.

Supports:
- Windows: Credential Manager via pywin32 (generic credentials)
- macOS / Linux: the system keyring via the keyring package
  (enumeration needs Secret Service - GNOME Keyring / KWallet)
"""

from __future__ import annotations
import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Try to import keyring - missing it only matters off Windows
try:
    import keyring
    from keyring.backends import fail as keyring_fail
    from keyring.backends import null as keyring_null
    from keyring.errors import PasswordDeleteError
    KEYRING_AVAILABLE = True
except ImportError:
    KEYRING_AVAILABLE = False
    logger.debug("keyring not available - install with: pip install keyring")

# pywin32 only exists on Windows
try:
    import pywintypes
    import win32cred
    WIN32CRED_AVAILABLE = True
except ImportError:
    WIN32CRED_AVAILABLE = False

ERROR_NOT_FOUND = 1168


@dataclass
class NativeCredential:
    """Raw entry as the native store returns it (target is prefixed)."""
    target: str
    username: str
    secret: str


class KeychainBackend(ABC):
    """
    Boundary to the OS secret store.

    Targets passed here are already prefixed; backends know nothing about
    the naming convention.
    """

    name = "unknown"

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        ...

    @abstractmethod
    def write(self, target: str, username: str, secret: str, persist: str = "enterprise") -> None:
        """Create or overwrite a generic secret. Raises on any failure."""
        ...

    @abstractmethod
    def read(self, target: str) -> Optional[NativeCredential]:
        """Return the entry, or None if the store has no such target."""
        ...

    @abstractmethod
    def delete(self, target: str) -> bool:
        """Remove the entry. False if it did not exist; raises on other failures."""
        ...

    @abstractmethod
    def enumerate(self, pattern: str) -> list[str]:
        """Target names matching a trailing-wildcard pattern, in store order."""
        ...


class WindowsCredentialBackend(KeychainBackend):
    """Windows Credential Manager, generic credential type."""

    name = "Windows Credential Manager"

    @classmethod
    def is_available(cls) -> bool:
        return WIN32CRED_AVAILABLE

    @staticmethod
    def _persist_flag(persist: str) -> int:
        flags = {
            "session": win32cred.CRED_PERSIST_SESSION,
            "local_machine": win32cred.CRED_PERSIST_LOCAL_MACHINE,
            "enterprise": win32cred.CRED_PERSIST_ENTERPRISE,
        }
        return flags[persist]

    def write(self, target: str, username: str, secret: str, persist: str = "enterprise") -> None:
        credential = {
            "Type": win32cred.CRED_TYPE_GENERIC,
            "TargetName": target,
            "UserName": username,
            "CredentialBlob": secret,
            "Persist": self._persist_flag(persist),
        }
        win32cred.CredWrite(credential, 0)

    def read(self, target: str) -> Optional[NativeCredential]:
        try:
            cred = win32cred.CredRead(Type=win32cred.CRED_TYPE_GENERIC, TargetName=target)
        except pywintypes.error as e:
            if e.winerror == ERROR_NOT_FOUND:
                return None
            raise

        blob = cred["CredentialBlob"] or b""
        return NativeCredential(
            target=cred["TargetName"],
            username=cred["UserName"] or "",
            secret=blob.decode("utf-16-le"),
        )

    def delete(self, target: str) -> bool:
        try:
            win32cred.CredDelete(Type=win32cred.CRED_TYPE_GENERIC, TargetName=target)
        except pywintypes.error as e:
            if e.winerror == ERROR_NOT_FOUND:
                return False
            raise
        return True

    def enumerate(self, pattern: str) -> list[str]:
        # pywin32 copies the native array into Python objects and frees it
        # before returning, so nothing outlives this call
        try:
            creds = win32cred.CredEnumerate(pattern, 0)
        except pywintypes.error as e:
            if e.winerror == ERROR_NOT_FOUND:
                return []
            raise
        return [
            cred["TargetName"] for cred in creds
            if cred["Type"] == win32cred.CRED_TYPE_GENERIC
        ]


class KeyringBackend(KeychainBackend):
    """
    System keyring via the keyring package.

    Each target is stored as its own keyring service holding a single
    username/password pair.
    """

    @classmethod
    def is_available(cls) -> bool:
        """Check if system keychain is available and functional."""
        if not KEYRING_AVAILABLE:
            return False

        try:
            # Ask keyring which backend it resolved
            backend = keyring.get_keyring()
            # Fail and Null backends share the class name Keyring
            backend_name = f"{type(backend).__module__}.{type(backend).__name__}"
            if isinstance(backend, (keyring_fail.Keyring, keyring_null.Keyring)):
                logger.debug(f"Keyring backend not usable: {backend_name}")
                return False
            logger.debug(f"Keyring backend: {backend_name}")
            return True
        except Exception as e:
            logger.debug(f"Keyring backend check failed: {e}")
            return False

    @property
    def name(self) -> str:
        return f"keyring ({type(keyring.get_keyring()).__name__})"

    def write(self, target: str, username: str, secret: str, persist: str = "enterprise") -> None:
        # Persistence scope is a Windows concept; the keyring decides its own
        existing = keyring.get_credential(target, None)
        keyring.set_password(target, username, secret)
        # A new username is a separate keyring item; drop the old one
        if existing is not None and existing.username != username:
            keyring.delete_password(target, existing.username)

    def read(self, target: str) -> Optional[NativeCredential]:
        cred = keyring.get_credential(target, None)
        if cred is None:
            return None
        return NativeCredential(
            target=target,
            username=cred.username or "",
            secret=cred.password or "",
        )

    def delete(self, target: str) -> bool:
        cred = keyring.get_credential(target, None)
        if cred is None:
            return False
        try:
            keyring.delete_password(target, cred.username)
        except PasswordDeleteError:
            return False
        return True

    def enumerate(self, pattern: str) -> list[str]:
        backend = keyring.get_keyring()
        get_collection = getattr(backend, "get_preferred_collection", None)
        if get_collection is None:
            raise StoreUnavailable(
                f"Keyring backend {type(backend).__name__} cannot list entries"
            )

        # Targets are only ever matched by prefix; glob characters in the
        # prefix itself are literal
        prefix = pattern[:-1] if pattern.endswith("*") else pattern
        targets = []
        for item in get_collection().get_all_items():
            service = item.get_attributes().get("service")
            if service and service.startswith(prefix) and service not in targets:
                targets.append(service)
        return targets


def default_backend() -> KeychainBackend:
    """
    Pick the native store for this host.

    Raises:
        StoreUnavailable: No usable store on this host
    """
    if sys.platform == "win32":
        if WindowsCredentialBackend.is_available():
            return WindowsCredentialBackend()
        raise StoreUnavailable("pywin32 is required - install with: pip install pywin32")

    if KeyringBackend.is_available():
        return KeyringBackend()
    raise StoreUnavailable("No usable system keyring - install with: pip install keyring")
