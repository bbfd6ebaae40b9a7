"""Excel-Import für Stammdaten-Tabellen und den Wochenplan.

Gelesen wird immer das erste Tabellenblatt; die erste Zeile enthält die
Spaltenüberschriften.
"""

import logging
import time
import uuid
from pathlib import Path
from typing import Any, Optional

from config.schema import ImportPolicy
from data.tables import TableManager, TableSchema
from models.base import as_text
from models.schedule_item import ScheduleItem
from models.store import EntityStore
from models.timeslot import Day, normalize_time_slot
from scheduling.engine import AssignmentEngine
from scheduling.results import ImportReport

logger = logging.getLogger(__name__)


class ExcelImportError(Exception):
    """Fehler beim Excel-Import."""


# Erkannte Überschriften im Wochenplan-Import, in Prioritätsreihenfolge
SCHEDULE_HEADERS: dict[str, tuple[str, ...]] = {
    "day": ("Hari", "Day"),
    "time_slot": ("Waktu", "Jam Sesi", "Time"),
    "class_name": ("Nama Kelas", "Kelas", "Class"),
    "course": ("Mata Kuliah", "Course"),
    "lecturer": ("Dosen", "Lecturer"),
    "room": ("Ruangan", "Room"),
}

OPEN_SLOT_MARKER = "open slot"


def read_rows(path: Path) -> list[dict[str, Any]]:
    """Erstes Tabellenblatt → Liste von Dicts (erste Zeile = Header).

    Raises:
        ExcelImportError: Datei fehlt, ist unlesbar oder enthält keine Daten.
    """
    path = Path(path)
    try:
        import openpyxl
        wb = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
    except FileNotFoundError:
        raise ExcelImportError(f"Datei nicht gefunden: {path}")
    except Exception as e:
        raise ExcelImportError(f"Fehler beim Öffnen der Excel-Datei: {e}")

    try:
        sheet = wb[wb.sheetnames[0]]
        rows = list(sheet.iter_rows(values_only=True))
    finally:
        wb.close()

    if not rows:
        raise ExcelImportError(f"Excel-Datei ist leer: {path}")
    headers = [
        as_text(h) if h is not None else f"col_{i}"
        for i, h in enumerate(rows[0])
    ]
    result = []
    for row in rows[1:]:
        if all(v is None or as_text(v) == "" for v in row):
            continue
        result.append({
            headers[i]: v for i, v in enumerate(row) if i < len(headers)
        })
    if not result:
        raise ExcelImportError(f"Excel-Datei enthält keine Datenzeilen: {path}")
    return result


def _pick(row: dict[str, Any], *names: str) -> str:
    """Erster nicht-leerer Wert unter einer der Überschriften."""
    for name in names:
        value = as_text(row.get(name))
        if value:
            return value
    return ""


# ─── Stammdaten ──────────────────────────────────────────────────────────────

def map_table_rows(rows: list[dict[str, Any]], schema: TableSchema) -> list[dict[str, str]]:
    """Bildet Excel-Zeilen auf Spaltenschlüssel ab.

    Gesucht wird je Spalte unter Überschrift, Schlüssel und deren
    Großschreibung (z.B. "Nama MK", "name", "NAMA MK", "NAME").
    """
    mapped = []
    for row in rows:
        mapped.append({
            col.key: _pick(row, col.label, col.key, col.label.upper(), col.key.upper())
            for col in schema.columns
        })
    return mapped


def import_table(path: Path, manager: TableManager) -> ImportReport:
    rows = read_rows(path)
    logger.info(f"{len(rows)} Zeilen aus {Path(path).name} gelesen")
    return manager.import_rows(map_table_rows(rows, manager.schema))


# ─── Wochenplan ──────────────────────────────────────────────────────────────

def build_schedule_items(
    rows: list[dict[str, Any]], store: EntityStore
) -> tuple[list[ScheduleItem], int]:
    """Löst Namen in IDs auf und baut Termine.

    Lehrveranstaltung per Name (ohne Groß-/Kleinschreibung) oder Kode MK,
    Raum per Name. Eine unbekannte Lehrkraft oder "Open Slot" ergibt einen
    offenen Termin. Zeilen ohne Tag, Zeitfenster, Lerngruppe,
    Lehrveranstaltung oder Raum werden übersprungen.

    Returns:
        (Termine, Anzahl übersprungener Zeilen)
    """
    stamp = int(time.time() * 1000)
    items: list[ScheduleItem] = []
    skipped = 0

    for index, row in enumerate(rows):
        values = {field: _pick(row, *names) for field, names in SCHEDULE_HEADERS.items()}
        day = Day.parse(values["day"])
        time_slot = normalize_time_slot(values["time_slot"])
        course = _match_course(store, values["course"])
        room = _match_room(store, values["room"])

        if day is None or time_slot is None or not values["class_name"] \
                or course is None or room is None:
            logger.debug(f"Zeile {index + 2} übersprungen: {values}")
            skipped += 1
            continue

        items.append(ScheduleItem(
            id=f"sch-imp-{stamp}-{uuid.uuid4().hex[:9]}",
            course_id=course.id,
            lecturer_id=_match_lecturer_id(store, values["lecturer"]),
            room_id=room.id,
            class_name=values["class_name"],
            day=day,
            time_slot=time_slot,
        ))

    return items, skipped


def _match_course(store: EntityStore, ref: str):
    if not ref:
        return None
    low = ref.lower()
    return next(
        (c for c in store.courses if c.name.lower() == low or c.code == ref), None
    )


def _match_room(store: EntityStore, ref: str):
    if not ref:
        return None
    low = ref.lower()
    return next((r for r in store.rooms if r.name.lower() == low), None)


def _match_lecturer_id(store: EntityStore, ref: str) -> str:
    if not ref or ref.lower() == OPEN_SLOT_MARKER:
        return ""
    low = ref.lower()
    lecturer = next((l for l in store.lecturers if l.name.lower() == low), None)
    if lecturer is None:
        logger.warning(f"Lehrkraft '{ref}' unbekannt, Termin bleibt offen")
        return ""
    return lecturer.id


def import_schedule(
    path: Path, engine: AssignmentEngine, policy: Optional[ImportPolicy] = None
) -> ImportReport:
    """Importiert Termine aus Excel gemäß Import-Richtlinie (Default: trusted)."""
    rows = read_rows(path)
    items, skipped = build_schedule_items(rows, engine.store)
    report = engine.import_items(items, policy or ImportPolicy.TRUSTED)
    report.skipped = skipped
    return report
