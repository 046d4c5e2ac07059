from enum import Enum

from loguru import logger
from pydantic import BaseModel, ConfigDict


class ToastLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Toast(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: ToastLevel
    message: str


class ToastQueue:
    """Collects notifications until the view layer drains them."""

    def __init__(self) -> None:
        self.pending: list[Toast] = []

    def success(self, message: str) -> None:
        logger.info("Toast (success): {}", message)
        self.pending.append(Toast(level=ToastLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        logger.info("Toast (error): {}", message)
        self.pending.append(Toast(level=ToastLevel.ERROR, message=message))

    def drain(self) -> list[Toast]:
        toasts, self.pending = self.pending, []
        return toasts

    @property
    def messages(self) -> list[str]:
        return [t.message for t in self.pending]
