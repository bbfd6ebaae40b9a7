"""Stammdaten-Tabellen: Spalten-Schema und generische CRUD-Operationen.

Jede Tabelle (Lehrveranstaltungen, Lehrkräfte, Räume, Lerngruppen) wird über
ein ``TableSchema`` beschrieben. ``TableManager`` arbeitet auf diesem Schema:
Anlegen, Löschen (ohne Kaskade), Massenimport und Export.
"""

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from config.defaults import LECTURER_POSITIONS
from models.base import WireModel, as_text, new_id
from models.class_name import ClassName
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.store import EntityStore
from scheduling.results import ImportReport

if TYPE_CHECKING:
    from sync.adapter import SyncAdapter

logger = logging.getLogger(__name__)


class ColumnKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"


class Column(BaseModel):
    """Eine bearbeitbare Spalte (``key`` = Spaltenname im Spreadsheet)."""
    key: str
    label: str                      # Überschrift in Formular und Excel
    kind: ColumnKind = ColumnKind.TEXT
    options: tuple[str, ...] = ()   # nur für SELECT
    required: bool = False


class TableSchema(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str                  # Tabellenname im Store / Spreadsheet
    title: str                 # Anzeigename
    model: type[WireModel]
    id_prefix: str
    columns: tuple[Column, ...]

    def column(self, key: str) -> Optional[Column]:
        return next((c for c in self.columns if c.key == key), None)


class RecordValidationError(ValueError):
    """Ungültige Eingabe beim Anlegen eines Datensatzes."""


# ─── TABELLEN-REGISTER ───

TABLES: dict[str, TableSchema] = {
    "courses": TableSchema(
        name="courses", title="Mata Kuliah", model=Course, id_prefix="c",
        columns=(
            Column(key="code", label="Kode MK"),
            Column(key="name", label="Nama MK", required=True),
            Column(key="credits", label="SKS", kind=ColumnKind.NUMBER),
        ),
    ),
    "lecturers": TableSchema(
        name="lecturers", title="Dosen", model=Lecturer, id_prefix="l",
        columns=(
            Column(key="name", label="Nama", required=True),
            Column(key="nip", label="NIP", required=True),
            Column(key="position", label="Status", kind=ColumnKind.SELECT,
                   options=LECTURER_POSITIONS),
            Column(key="expertise", label="Keahlian"),
        ),
    ),
    "rooms": TableSchema(
        name="rooms", title="Ruangan", model=Room, id_prefix="r",
        columns=(
            Column(key="building", label="Gedung"),
            Column(key="name", label="Ruangan", required=True),
            Column(key="capacity", label="Kapasitas", kind=ColumnKind.NUMBER),
            Column(key="location", label="Lokasi"),
        ),
    ),
    "classes": TableSchema(
        name="classes", title="Kelas (PDB)", model=ClassName, id_prefix="cls",
        columns=(
            Column(key="name", label="Nama Kelas", required=True),
        ),
    ),
}


def get_schema(name: str) -> TableSchema:
    try:
        return TABLES[name]
    except KeyError:
        raise KeyError(
            f"Unbekannte Tabelle '{name}'. Verfügbar: {', '.join(TABLES)}"
        ) from None


class TableManager:
    """CRUD für eine Stammdaten-Tabelle: sofort lokal, danach an das Spreadsheet."""

    def __init__(self, store: EntityStore, schema: TableSchema,
                 sync: Optional["SyncAdapter"] = None):
        self.store = store
        self.schema = schema
        self.sync = sync

    @property
    def records(self) -> list:
        return self.store.table(self.schema.name)

    # ─── Anlegen ───

    def add(self, values: dict[str, Any]) -> WireModel:
        """Legt einen Datensatz an.

        Raises:
            RecordValidationError: Pflichtfeld leer, keine ganze Zahl ≥ 0, Wert nicht
                in der Auswahlliste oder NIP bereits vergeben.
        """
        wire = {}
        for col in self.schema.columns:
            raw = as_text(values.get(col.key, ""))
            if col.required and not raw:
                raise RecordValidationError(f"'{col.label}' darf nicht leer sein.")
            if raw and col.kind == ColumnKind.NUMBER:
                try:
                    number = float(raw)
                except ValueError:
                    raise RecordValidationError(
                        f"'{col.label}' muss eine Zahl sein, nicht '{raw}'."
                    ) from None
                if number < 0:
                    raise RecordValidationError(f"'{col.label}' darf nicht negativ sein.")
                if not number.is_integer():
                    raise RecordValidationError(
                        f"'{col.label}' muss eine ganze Zahl sein, nicht '{raw}'."
                    )
            if raw and col.kind == ColumnKind.SELECT and raw not in col.options:
                raise RecordValidationError(
                    f"'{raw}' ist kein gültiger Wert für '{col.label}'. "
                    f"Erlaubt: {', '.join(col.options)}"
                )
            wire[col.key] = raw

        if self.schema.name == "lecturers" and self._nip_taken(wire["nip"]):
            raise RecordValidationError(f"NIP {wire['nip']} ist bereits vergeben.")

        wire["id"] = new_id(self.schema.id_prefix)
        try:
            record = self.schema.model.model_validate(wire)
        except ValidationError as e:
            raise RecordValidationError(str(e)) from e

        self.store.add(self.schema.name, record)
        logger.info(f"{self.schema.title}: {record.id} angelegt")
        if self.sync is not None:
            self.sync.push("add", self.schema.name, record.to_wire())
        return record

    # ─── Löschen ───

    def delete(self, record_id: str) -> bool:
        """Löscht einen Datensatz. Verweise in Terminen bleiben stehen."""
        removed = self.store.remove(self.schema.name, record_id)
        if removed is None:
            logger.warning(f"{self.schema.title}: {record_id} nicht gefunden")
            return False
        logger.info(f"{self.schema.title}: {record_id} gelöscht")
        if self.sync is not None:
            self.sync.push("delete", self.schema.name, {"id": record_id})
        return True

    # ─── Massenimport ───

    def import_rows(self, rows: list[dict[str, Any]]) -> ImportReport:
        """Übernimmt bereits auf Spaltenschlüssel abgebildete Zeilen.

        Nachsichtig: fehlende optionale Werte bleiben leer, ungültige Zahlen
        werden 0. Zeilen ohne Pflichtwerte und doppelte NIPs werden übersprungen.
        """
        stamp = int(time.time() * 1000)
        accepted: list[WireModel] = []
        skipped = 0
        seen_nips = {l.employee_number for l in self.store.lecturers}

        for index, row in enumerate(rows):
            wire = {col.key: as_text(row.get(col.key, "")) for col in self.schema.columns}
            if any(col.required and not wire[col.key] for col in self.schema.columns):
                skipped += 1
                continue
            if self.schema.name == "lecturers":
                if wire["nip"] in seen_nips:
                    logger.warning(f"NIP {wire['nip']} doppelt, Zeile {index + 2} übersprungen")
                    skipped += 1
                    continue
                seen_nips.add(wire["nip"])
            wire["id"] = f"{self.schema.id_prefix}-imp-{stamp}-{index}"
            try:
                accepted.append(self.schema.model.model_validate(wire))
            except ValidationError as e:
                logger.warning(f"Zeile {index + 2} übersprungen: {e.errors()[0]['msg']}")
                skipped += 1

        self.store.extend(self.schema.name, accepted)
        logger.info(f"{self.schema.title}: {len(accepted)} importiert, {skipped} übersprungen")
        if self.sync is not None:
            self.sync.push_bulk(self.schema.name, [r.to_wire() for r in accepted])
        return ImportReport(table=self.schema.name, imported=len(accepted), skipped=skipped)

    # ─── Export ───

    def export_rows(self) -> list[dict[str, Any]]:
        """Zeilen mit Spaltenüberschriften als Schlüssel."""
        rows = []
        for record in self.records:
            wire = record.to_wire()
            rows.append({col.label: wire.get(col.key, "") for col in self.schema.columns})
        return rows

    def _nip_taken(self, nip: str) -> bool:
        return any(l.employee_number == nip for l in self.store.lecturers)
