"""
Shared fixtures: an in-memory native backend and an offscreen Qt app.
"""

import os
from typing import Optional

import pytest

from credvault.vault.keychain import KeychainBackend, NativeCredential
from credvault.vault.store import CredentialStore


class MemoryBackend(KeychainBackend):
    """Dict-backed stand-in for the OS store, keeps insertion order."""

    name = "memory"

    def __init__(self):
        self.entries: dict[str, tuple[str, str, str]] = {}
        self.fail_writes = False

    @classmethod
    def is_available(cls) -> bool:
        return True

    def write(self, target, username, secret, persist="enterprise"):
        if self.fail_writes:
            raise OSError("store rejected write")
        self.entries[target] = (username, secret, persist)

    def read(self, target) -> Optional[NativeCredential]:
        if target not in self.entries:
            return None
        username, secret, _ = self.entries[target]
        return NativeCredential(target, username, secret)

    def delete(self, target) -> bool:
        return self.entries.pop(target, None) is not None

    def enumerate(self, pattern):
        prefix = pattern.rstrip("*")
        return [t for t in self.entries if t.startswith(prefix)]


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return CredentialStore(backend=backend, prefix="App_")


@pytest.fixture(scope="session")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    widgets = pytest.importorskip("PyQt6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app
