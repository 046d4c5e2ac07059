from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medicare.booking.draft import normalize_optional
from medicare.domain.models import Role

_FORM_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class UserForm(BaseModel):
    model_config = _FORM_CONFIG

    username: str
    email: str
    password: str = ""
    role: Role = Role.USER

    def to_create_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_update_json(self) -> dict[str, Any]:
        """Update body; an empty password leaves the stored one unchanged."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude=None if normalize_optional(self.password) else {"password"},
        )


class DoctorForm(BaseModel):
    model_config = _FORM_CONFIG

    name: str
    specialization: str
    email: str
    phone: str
    experience: int = 0
    consultation_fee: float = 0
    bio: str | None = None
    qualifications: list[str] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class MedicalTestForm(BaseModel):
    model_config = _FORM_CONFIG

    name: str
    description: str
    category: str = "General"
    price: float = 0
    duration: int = 30
    preparation_instructions: str | None = None
    normal_range: str | None = None
    is_available: bool = True

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
