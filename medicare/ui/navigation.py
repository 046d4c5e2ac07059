from loguru import logger


class HistoryNavigator:
    """In-process navigation history.

    ``entries`` is the history stack; the last entry is the current view.
    """

    def __init__(self, start: str = "/") -> None:
        self.entries: list[str] = [start]

    @property
    def current_path(self) -> str:
        return self.entries[-1]

    def push(self, path: str) -> None:
        logger.debug("Navigating to {}", path)
        self.entries.append(path)

    def replace(self, path: str) -> None:
        logger.debug("Redirecting to {}", path)
        self.entries[-1] = path

    def back(self) -> str:
        if len(self.entries) > 1:
            self.entries.pop()
        return self.current_path
