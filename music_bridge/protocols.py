"""Protocol definitions for dependency injection."""

from typing import Protocol


class SecretStore(Protocol):
    """Key/value store for credential material.

    This protocol defines the interface the authenticator persists its
    credential through, allowing for dependency injection and easier testing.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is not an error."""
        ...
