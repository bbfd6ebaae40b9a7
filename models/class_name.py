"""Datenmodell für eine Lerngruppe (Kelas, z.B. "PDB01")."""

from pydantic import field_validator

from models.base import WireModel, as_text


class ClassName(WireModel):
    """Bezeichner einer Lerngruppe.

    Namen müssen nicht global eindeutig sein; innerhalb eines Zeitfensters
    (Tag, Slot) wird der Name aber als eindeutig behandelt.
    """

    id: str
    name: str

    @field_validator("id", "name", mode="before")
    @classmethod
    def _text(cls, v):
        return as_text(v)
