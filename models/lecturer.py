"""Datenmodell für eine Lehrkraft (Dosen, Pydantic v2)."""

from pydantic import Field, field_validator

from models.base import WireModel, as_text


class Lecturer(WireModel):
    """Repräsentiert eine Lehrkraft.

    Die Personalnummer (NIP) ist eindeutig und dient gleichzeitig als
    Benutzername und Passwort im Dozierenden-Portal.
    """

    id: str
    name: str
    employee_number: str = Field(alias="nip")
    position: str = ""       # "Lektor", "Guru Besar", ...
    expertise: str = ""

    @field_validator("id", "name", "employee_number", "position", "expertise",
                     mode="before")
    @classmethod
    def _text(cls, v):
        return as_text(v)
