"""
Prefix namespacing for entries in the shared OS credential store.
"""

DEFAULT_PREFIX = "CredVault_"


def add_prefix(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Return name with prefix prepended, unchanged if already prefixed."""
    if name.startswith(prefix):
        return name
    return prefix + name


def remove_prefix(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Strip one leading prefix if present."""
    if name.startswith(prefix):
        return name[len(prefix):]
    return name
