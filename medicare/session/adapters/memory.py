class InMemorySessionStorage:
    """Process-local storage; nothing survives a restart.

    Pre-load ``items`` to simulate what a previous run persisted.
    """

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})
        self.writes: int = 0

    def read(self, key: str) -> str | None:
        return self.items.get(key)

    def write(self, key: str, value: str) -> None:
        self.items[key] = value
        self.writes += 1

    def remove(self, key: str) -> None:
        self.items.pop(key, None)
