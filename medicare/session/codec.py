import json
from typing import Any

from pydantic import ValidationError

from medicare.domain.exceptions import SessionStorageError
from medicare.domain.models import Session


def serialize_session(session: Session) -> str:
    """Encode ``session`` as ``{"user": ..., "token": ..., "isAuthenticated": ...}``."""
    return session.model_dump_json(by_alias=True)


def deserialize_session(raw: str) -> Session:
    """Decode a persisted session blob.

    Accepts the flat shape written by :func:`serialize_session` as well as the
    ``{"state": {...}, "version": N}`` envelope older clients persisted.

    Raises:
        SessionStorageError: If the blob is not valid JSON or not a session.
    """
    try:
        data: Any = json.loads(raw)
    except ValueError as exc:
        raise SessionStorageError(f"Persisted session is not valid JSON: {exc}") from exc

    if isinstance(data, dict) and isinstance(data.get("state"), dict):
        data = data["state"]

    if not isinstance(data, dict):
        raise SessionStorageError("Persisted session is not a JSON object")

    try:
        return Session.model_validate(data)
    except ValidationError as exc:
        raise SessionStorageError(f"Persisted session has an invalid shape: {exc}") from exc
