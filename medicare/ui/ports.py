from typing import Protocol


class Navigator(Protocol):
    """Moves the user between views."""

    @property
    def current_path(self) -> str:
        """The path of the view currently shown."""
        ...

    def push(self, path: str) -> None:
        """Navigate to ``path``, keeping the current view in history."""
        ...

    def replace(self, path: str) -> None:
        """Navigate to ``path``, replacing the current history entry."""
        ...


class Notifier(Protocol):
    """Shows transient notifications (toasts) to the user."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...
