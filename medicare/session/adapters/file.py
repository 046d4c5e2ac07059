import re
from pathlib import Path

from loguru import logger

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileSessionStorage:
    """Stores each key as a JSON file inside ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)
        logger.debug("Persisted '{}' to {}", key, path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
