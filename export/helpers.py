"""Gemeinsame Hilfsfunktionen für Excel- und PDF-Export."""

from datetime import date
from typing import Any

from models.store import EntityStore, OPEN_SLOT_LABEL

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "occupied":     "B3D4FF",
    "open":         "FFF2B3",
    "free":         "F5F5F5",
    "alt":          "D6E4F0",
    "header":       "4472C4",
}

# Spalten des Wochenplan-Exports (gleichzeitig vom Import erkannt)
SCHEDULE_EXPORT_HEADERS: tuple[str, ...] = (
    "Hari", "Waktu", "Nama Kelas", "Mata Kuliah", "Kode MK", "Dosen", "Ruangan",
)

# Spalten des Monitoring-Exports
OCCUPANCY_EXPORT_HEADERS: tuple[str, ...] = (
    "Ruangan", "Kapasitas", "Jam Sesi", "Status", "Mata Kuliah", "Kelas", "Dosen",
)


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def date_stamp() -> str:
    """Datum für Dateinamen (YYYY-MM-DD)."""
    return date.today().isoformat()


def safe_filename(text: str) -> str:
    """Leerzeichen → Unterstrich, Klammern entfernt ("Kelas (PDB)" → "Kelas_PDB")."""
    cleaned = "".join(ch for ch in text if ch not in "()/\\:")
    return "_".join(cleaned.split())


def schedule_export_rows(store: EntityStore) -> list[dict[str, Any]]:
    """Wochenplan als Zeilen, in Wochenreihenfolge.

    Fehlende Stammdaten werden mit ihrer ID ausgegeben, offene Termine mit
    "Open Slot".
    """
    rows = []
    for s in sorted(store.schedule, key=lambda s: (s.slot.sort_key, s.class_name)):
        course = store.course(s.course_id)
        lecturer = store.lecturer(s.lecturer_id)
        room = store.room(s.room_id)
        rows.append({
            "Hari": s.day.value,
            "Waktu": s.time_slot,
            "Nama Kelas": s.class_name,
            "Mata Kuliah": course.name if course else s.course_id,
            "Kode MK": (course.code or "-") if course else "-",
            "Dosen": lecturer.name if lecturer else OPEN_SLOT_LABEL,
            "Ruangan": room.name if room else s.room_id,
        })
    return rows
