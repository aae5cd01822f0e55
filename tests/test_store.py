"""
CredentialStore behaviour against the in-memory backend.
"""

import pytest

from credvault.vault.errors import (
    DeleteFailed, NotFound, StoreError, StoreUnavailable, WriteFailed,
)
from credvault.vault.store import CredentialStore, Credential, Login


def test_write_then_read_round_trip(store):
    assert store.write("alice", "u1", "p1") is True
    cred = store.read("alice")
    assert cred == Credential("alice", "u1", "p1")


def test_write_stores_prefixed_target_with_enterprise_scope(store, backend):
    store.write("alice", "u1", "p1")
    assert backend.entries == {"App_alice": ("u1", "p1", "enterprise")}


def test_already_prefixed_names_are_not_prefixed_twice(store, backend):
    store.write("App_alice", "u1", "p1")
    assert list(backend.entries) == ["App_alice"]
    assert store.read("alice").name == "alice"


def test_read_missing_returns_none(store):
    assert store.read("never-created") is None


def test_read_empty_username(store, backend):
    backend.entries["App_token"] = (None, "secret", "enterprise")
    assert store.read("token").username == ""


def test_require_raises_not_found(store):
    with pytest.raises(NotFound) as exc:
        store.require("ghost")
    assert exc.value.name == "ghost"


def test_exists(store):
    store.write("alice", "", "p")
    assert store.exists("alice")
    assert not store.exists("bob")


def test_delete_then_read(store):
    store.write("bob", "u", "p")
    assert store.delete("bob") is True
    assert store.read("bob") is None


def test_delete_missing_is_failure(store):
    with pytest.raises(DeleteFailed):
        store.delete("bob")


def test_overwrite_replaces_values(store):
    store.write("alice", "u1", "p1")
    store.write("alice", "u2", "p2")
    assert store.read("alice").login == Login("u2", "p2")


def test_write_failure_surfaces_as_write_failed(store, backend):
    backend.fail_writes = True
    with pytest.raises(WriteFailed):
        store.write("alice", "u", "p")
    assert backend.entries == {}


def test_backend_read_error_is_store_error(store, backend, monkeypatch):
    def broken(target):
        raise OSError("boom")

    monkeypatch.setattr(backend, "read", broken)
    with pytest.raises(StoreError):
        store.read("alice")


def test_store_unavailable_passes_through(store, backend, monkeypatch):
    def unavailable(pattern):
        raise StoreUnavailable("no listing")

    monkeypatch.setattr(backend, "enumerate", unavailable)
    with pytest.raises(StoreUnavailable):
        store.enumerate()


def test_enumerate_returns_only_prefixed_entries(store, backend):
    backend.entries["SomeOtherApp"] = ("x", "y", "enterprise")
    store.write("alice", "u1", "p1")
    store.write("bob", "u2", "p2")

    creds = store.enumerate()
    assert {c.name: c.username for c in creds} == {"alice": "u1", "bob": "u2"}
    assert all(c.password for c in creds)


def test_enumerate_keeps_store_order(store):
    for name in ["zeta", "alpha", "mid"]:
        store.write(name, "", "p")
    assert [c.name for c in store.enumerate()] == ["zeta", "alpha", "mid"]


def test_enumerate_with_explicit_filter(store, backend):
    backend.entries["Other_one"] = ("o", "s", "enterprise")
    store.write("alice", "u1", "p1")

    creds = store.enumerate("Other_")
    assert [(c.name, c.username) for c in creds] == [("Other_one", "o")]


def test_enumerate_empty(store):
    assert store.enumerate() == []


def test_replace_same_name_overwrites(store, backend):
    store.write("x", "u", "p")
    store.replace("x", "x", "u2", "p2")
    assert list(backend.entries) == ["App_x"]
    assert store.read("x").login == Login("u2", "p2")


def test_replace_renames(store):
    store.write("x", "u", "p")
    store.replace("x", "y", "u2", "p2")
    assert store.read("x") is None
    assert store.read("y") == Credential("y", "u2", "p2")


def test_failed_rename_keeps_original(store, backend):
    store.write("x", "u", "p")
    backend.fail_writes = True

    with pytest.raises(WriteFailed):
        store.replace("x", "y", "u2", "p2")

    assert store.read("x") == Credential("x", "u", "p")
    assert store.read("y") is None


def test_rename_with_stuck_old_entry_leaves_duplicate(store, backend, monkeypatch):
    store.write("x", "u", "p")

    def locked(target):
        raise OSError("access denied")

    monkeypatch.setattr(backend, "delete", locked)

    with pytest.raises(DeleteFailed):
        store.replace("x", "y", "u2", "p2")

    assert store.read("x") == Credential("x", "u", "p")
    assert store.read("y") == Credential("y", "u2", "p2")


def test_repr_hides_password():
    assert "hunter2" not in repr(Credential("a", "b", "hunter2"))


def test_default_backend_used_when_none_given(monkeypatch, backend):
    from credvault.vault import store as store_module

    monkeypatch.setattr(store_module, "default_backend", lambda: backend)
    assert CredentialStore().backend is backend
