"""Gemeinsame Basis für alle Tabellen-Datensätze (Pydantic v2).

Die Spreadsheet-Tabellen verwenden camelCase-Spaltennamen (``courseId``,
``credits``, ``nip``); im Python-Code gelten snake_case-Namen. Die Abbildung
erfolgt über Feld-Aliase.
"""

import time
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict


class WireModel(BaseModel):
    """Basisklasse für Datensätze, die 1:1 in eine Tabellenzeile passen."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Gibt den Datensatz mit den Spaltennamen der Tabelle zurück."""
        return self.model_dump(by_alias=True, mode="json")


def as_text(value: Any) -> str:
    """Normalisiert Zellwerte zu Strings.

    Das Spreadsheet liefert Zahlen als Zahlen (z.B. eine NIP als 1.9870101e17
    oder eine ID als 12.0); ganzzahlige Floats werden ohne ".0" ausgegeben.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def as_count(value: Any) -> int:
    """Wandelt Zahlenfelder wie ``credits``/``capacity`` um; Ungültiges → 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return 0


def new_id(prefix: str) -> str:
    """Erzeugt eine neue, eindeutige Datensatz-ID, z.B. ``sch-1718000000000-a1b2c3``."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
