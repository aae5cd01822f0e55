import pytest

from credvault.vault.naming import DEFAULT_PREFIX, add_prefix, remove_prefix


@pytest.mark.parametrize("name", ["alice", "", "App_", "App_alice", "x App_"])
def test_add_prefix_is_idempotent(name):
    once = add_prefix(name, "App_")
    assert add_prefix(once, "App_") == once
    assert once.startswith("App_")


@pytest.mark.parametrize("name", ["alice", "", "bob_App_", "with space"])
def test_remove_undoes_add(name):
    assert remove_prefix(add_prefix(name, "App_"), "App_") == name


def test_remove_prefix_leaves_unprefixed_names():
    assert remove_prefix("github", "App_") == "github"


def test_remove_prefix_strips_only_once():
    assert remove_prefix("App_App_x", "App_") == "App_x"


def test_default_prefix():
    assert add_prefix("github") == DEFAULT_PREFIX + "github"
