"""
Credential store error taxonomy.

Absence is not an error for plain lookups - read() returns None. NotFound
is only raised where the caller asked for an entry that must exist.
"""


class StoreError(Exception):
    """Base class for credential store failures."""
    pass


class StoreUnavailable(StoreError):
    """No usable native store (library missing, backend rejected, unsupported call)."""
    pass


class WriteFailed(StoreError):
    """The native store rejected a write."""
    pass


class DeleteFailed(StoreError):
    """The native store rejected a delete (including a missing entry)."""
    pass


class NotFound(StoreError):
    """No entry under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Credential '{name}' not found")
        self.name = name


class ValidationFailed(Exception):
    """User input rejected before any store call."""
    pass
