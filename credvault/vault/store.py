"""
Credential store adapter over the OS secret store.

The OS store owns every entry. Nothing here caches - each call goes
straight to the native backend and returns a fresh copy.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import StoreError, StoreUnavailable, WriteFailed, DeleteFailed, NotFound
from .keychain import KeychainBackend, default_backend
from .naming import DEFAULT_PREFIX, add_prefix, remove_prefix

logger = logging.getLogger(__name__)


@dataclass
class Login:
    """Username/password pair as external callers see it."""
    username: str
    password: str


@dataclass
class Credential:
    """Credential stored in the OS store (name without prefix)."""
    name: str
    username: str
    password: str

    @property
    def login(self) -> Login:
        return Login(self.username, self.password)

    def __repr__(self) -> str:
        return f"Credential(name={self.name!r}, username={self.username!r}, password='***')"


class CredentialStore:
    """
    Namespaced access to the OS credential store.

    Every name is stored as prefix + name so entries never collide with
    unrelated system credentials.
    """

    def __init__(
        self,
        backend: KeychainBackend = None,
        prefix: str = DEFAULT_PREFIX,
        persist: str = "enterprise",
    ):
        """
        Initialize credential store.

        Args:
            backend: Native store backend, defaults to the host's store
            prefix: Namespace prepended to every name
            persist: Persistence scope for writes
        """
        self.backend = backend or default_backend()
        self.prefix = prefix
        self.persist = persist

    @property
    def backend_name(self) -> str:
        return self.backend.name

    def _target(self, name: str) -> str:
        return add_prefix(name, self.prefix)

    def write(self, name: str, username: str, password: str) -> bool:
        """
        Create or overwrite a credential.

        Returns:
            True once the store accepted the write

        Raises:
            WriteFailed: The store rejected the write
        """
        target = self._target(name)
        try:
            self.backend.write(target, username, password, self.persist)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Write of '{target}' failed: {e}")
            raise WriteFailed(f"Failed to write credential '{remove_prefix(name, self.prefix)}': {e}") from e

        logger.info(f"Stored credential '{target}'")
        return True

    def read(self, name: str) -> Optional[Credential]:
        """
        Look up a credential.

        Returns:
            Credential, or None if nothing is stored under name
        """
        return self._read_target(self._target(name))

    def _read_target(self, target: str) -> Optional[Credential]:
        try:
            native = self.backend.read(target)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Read of '{target}' failed: {e}")
            raise StoreError(f"Failed to read credential '{remove_prefix(target, self.prefix)}': {e}") from e

        if native is None:
            logger.debug(f"No credential stored under '{target}'")
            return None

        return Credential(
            name=remove_prefix(native.target, self.prefix),
            username=native.username or "",
            password=native.secret,
        )

    def require(self, name: str) -> Credential:
        """Like read(), but raise NotFound when absent."""
        cred = self.read(name)
        if cred is None:
            raise NotFound(remove_prefix(name, self.prefix))
        return cred

    def exists(self, name: str) -> bool:
        return self.read(name) is not None

    def delete(self, name: str) -> bool:
        """
        Remove a credential.

        Raises:
            DeleteFailed: Store rejected the delete, or nothing was stored
        """
        target = self._target(name)
        try:
            removed = self.backend.delete(target)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Delete of '{target}' failed: {e}")
            raise DeleteFailed(f"Failed to delete credential '{remove_prefix(name, self.prefix)}': {e}") from e

        if not removed:
            raise DeleteFailed(f"Credential '{remove_prefix(name, self.prefix)}' does not exist")

        logger.info(f"Deleted credential '{target}'")
        return True

    def enumerate(self, filter_prefix: str = None) -> list[Credential]:
        """
        List stored credentials whose target starts with filter_prefix.

        Each match is re-read to pick up username and password. Entries
        that vanish between listing and reading are skipped.

        Args:
            filter_prefix: Target prefix to match, defaults to the store prefix

        Returns:
            Credentials in store order
        """
        pattern = (filter_prefix if filter_prefix is not None else self.prefix) + "*"
        try:
            targets = self.backend.enumerate(pattern)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Enumerating '{pattern}' failed: {e}")
            raise StoreError(f"Failed to list credentials: {e}") from e

        credentials = []
        for target in targets:
            cred = self._read_target(target)
            if cred is None:
                logger.debug(f"'{target}' disappeared during enumeration")
                continue
            credentials.append(cred)

        logger.debug(f"Enumerated {len(credentials)} credentials matching '{pattern}'")
        return credentials

    def replace(self, original_name: str, name: str, username: str, password: str) -> bool:
        """
        Save an edited credential, renaming if the name changed.

        A rename writes the new entry before deleting the old one, so a
        failed write leaves the original untouched.
        """
        if self._target(original_name) == self._target(name):
            return self.write(name, username, password)

        self.write(name, username, password)
        try:
            self.delete(original_name)
        except DeleteFailed as e:
            # New entry is in place; the old one is left as a duplicate
            logger.warning(f"Renamed '{original_name}' to '{name}' but old entry remains: {e}")
            raise
        logger.info(f"Renamed credential '{original_name}' to '{name}'")
        return True
