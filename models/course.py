"""Datenmodell für eine Lehrveranstaltung (Mata Kuliah)."""

from pydantic import Field, field_validator

from models.base import WireModel, as_count, as_text


class Course(WireModel):
    """Repräsentiert eine Lehrveranstaltung."""

    id: str
    code: str = ""                                   # Kode MK, z.B. "IF201"
    name: str
    credit_hours: int = Field(0, ge=0, alias="credits")  # SKS

    @field_validator("id", "code", "name", mode="before")
    @classmethod
    def _text(cls, v):
        return as_text(v)

    @field_validator("credit_hours", mode="before")
    @classmethod
    def _credits(cls, v):
        return as_count(v)
