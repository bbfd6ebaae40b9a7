"""EntityStore: Lokaler Datenbestand aller Tabellen + JSON-Persistenz (Pydantic v2).

Der Store ist der lokale, optimistisch aktualisierte Stand. Änderungen werden
sofort hier eingetragen; das Spreadsheet wird danach (fire-and-forget)
benachrichtigt. Eine vollständige Neuabfrage ersetzt den gesamten Inhalt.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from models.class_name import ClassName
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.schedule_item import ScheduleItem

Record = Union[Course, Lecturer, Room, ClassName, ScheduleItem]

TABLE_NAMES: tuple[str, ...] = ("courses", "lecturers", "rooms", "classes", "schedule")

UNKNOWN = "unbekannt"
OPEN_SLOT_LABEL = "Open Slot"


def default_classes(count: int, prefix: str = "PDB") -> list[ClassName]:
    """Standard-Lerngruppen PDB01..PDB<count>, falls das Spreadsheet keine liefert."""
    return [
        ClassName(id=f"cls-{i}", name=f"{prefix}{i:02d}")
        for i in range(1, count + 1)
    ]


class EntityStore(BaseModel):
    """Alle Stammdaten und der Wochenplan, jeweils per ID eindeutig."""

    courses: list[Course] = []
    lecturers: list[Lecturer] = []
    rooms: list[Room] = []
    classes: list[ClassName] = []
    schedule: list[ScheduleItem] = []

    # Zustand der Verbindung zum Spreadsheet (Stand der letzten Abfrage)
    remote_connected: bool = False
    last_sync_error: Optional[str] = None
    fetched_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    # ─── Tabellenzugriff ───

    def table(self, name: str) -> list:
        if name not in TABLE_NAMES:
            raise KeyError(f"Unbekannte Tabelle: {name}")
        return getattr(self, name)

    def get(self, table: str, record_id: str) -> Optional[Record]:
        return next((r for r in self.table(table) if r.id == record_id), None)

    def add(self, table: str, record: Record) -> None:
        self.table(table).append(record)

    def extend(self, table: str, records: list) -> None:
        self.table(table).extend(records)

    def remove(self, table: str, record_id: str) -> Optional[Record]:
        """Entfernt einen Datensatz; gibt ihn zurück oder None wenn unbekannt."""
        rows = self.table(table)
        for idx, r in enumerate(rows):
            if r.id == record_id:
                return rows.pop(idx)
        return None

    def replace(self, table: str, record: Record) -> bool:
        """Ersetzt den Datensatz mit gleicher ID. True wenn vorhanden."""
        rows = self.table(table)
        for idx, r in enumerate(rows):
            if r.id == record.id:
                rows[idx] = record
                return True
        return False

    def replace_all(
        self,
        courses: list[Course],
        lecturers: list[Lecturer],
        rooms: list[Room],
        classes: list[ClassName],
        schedule: list[ScheduleItem],
    ) -> None:
        """Ersetzt den kompletten Bestand (vollständige Neuabfrage).

        Liefert das Spreadsheet keine Lerngruppen, bleiben die lokalen bestehen.
        """
        self.courses = list(courses)
        self.lecturers = list(lecturers)
        self.rooms = list(rooms)
        if classes:
            self.classes = list(classes)
        self.schedule = list(schedule)

    # ─── Lookups ───

    def course(self, course_id: str) -> Optional[Course]:
        return self.get("courses", course_id)

    def lecturer(self, lecturer_id: str) -> Optional[Lecturer]:
        return self.get("lecturers", lecturer_id) if lecturer_id else None

    def room(self, room_id: str) -> Optional[Room]:
        return self.get("rooms", room_id)

    def class_by_name(self, name: str) -> Optional[ClassName]:
        return next((c for c in self.classes if c.name == name), None)

    def find_course(self, ref: str) -> Optional[Course]:
        """Sucht per ID, Kode MK oder Name (Groß-/Kleinschreibung egal)."""
        ref = (ref or "").strip()
        low = ref.lower()
        return next(
            (c for c in self.courses
             if c.id == ref or c.code == ref or c.name.lower() == low),
            None,
        )

    def find_room(self, ref: str) -> Optional[Room]:
        """Sucht per ID oder Raumname (Groß-/Kleinschreibung egal)."""
        ref = (ref or "").strip()
        low = ref.lower()
        return next(
            (r for r in self.rooms if r.id == ref or r.name.lower() == low),
            None,
        )

    def find_lecturer(self, ref: str) -> Optional[Lecturer]:
        """Sucht per ID, NIP oder Name (Groß-/Kleinschreibung egal)."""
        ref = (ref or "").strip()
        low = ref.lower()
        return next(
            (l for l in self.lecturers
             if l.id == ref or l.employee_number == ref or l.name.lower() == low),
            None,
        )

    # ─── Anzeige-Labels (fehlende Referenzen sind kein Fehler) ───

    def course_label(self, course_id: str) -> str:
        c = self.course(course_id)
        return c.name if c else f"{course_id} ({UNKNOWN})"

    def room_label(self, room_id: str) -> str:
        r = self.room(room_id)
        return r.name if r else f"{room_id} ({UNKNOWN})"

    def lecturer_label(self, lecturer_id: str) -> str:
        if not lecturer_id:
            return OPEN_SLOT_LABEL
        l = self.lecturer(lecturer_id)
        return l.name if l else f"{lecturer_id} ({UNKNOWN})"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand (Dashboard)."""
        open_slots = sum(1 for s in self.schedule if s.is_open)
        lines = [
            f"Lehrveranstaltungen: {len(self.courses)}",
            f"Lehrkräfte: {len(self.lecturers)}",
            f"Räume: {len(self.rooms)}",
            f"Lerngruppen: {len(self.classes)}",
            f"Termine: {len(self.schedule)} ({open_slots} offen)",
            "Spreadsheet: verbunden" if self.remote_connected
            else "Spreadsheet: offline",
        ]
        return "\n".join(lines)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Bestand als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.modified_at = datetime.now(timezone.utc)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2, by_alias=True))

    @classmethod
    def load_json(cls, path: Path) -> "EntityStore":
        """Lädt einen Bestand aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())

    @classmethod
    def load_or_new(cls, path: Path, class_count: int = 125,
                    class_prefix: str = "PDB") -> "EntityStore":
        """Lädt den Bestand oder legt einen neuen mit Standard-Lerngruppen an."""
        path = Path(path)
        if path.exists():
            return cls.load_json(path)
        return cls(classes=default_classes(class_count, class_prefix))
