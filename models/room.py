"""Datenmodell für einen Raum (Pydantic v2)."""

from pydantic import Field, field_validator

from models.base import WireModel, as_count, as_text


class Room(WireModel):
    """Repräsentiert einen Hörsaal oder Seminarraum."""

    id: str
    name: str             # "R.301"
    capacity: int = Field(0, ge=0)
    building: str = ""    # Gedung
    location: str = ""    # Lokasi

    @field_validator("id", "name", "building", "location", mode="before")
    @classmethod
    def _text(cls, v):
        return as_text(v)

    @field_validator("capacity", mode="before")
    @classmethod
    def _capacity(cls, v):
        return as_count(v)
