from typing import Protocol


class SessionStorage(Protocol):
    """Durable key/value storage for the persisted session blob."""

    def read(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``. Removing a missing key is not an error."""
        ...
