"""Gemeinsamer Renderer für Terminal-Anzeigen des Wochenplans.

Wird von den Rich-Ausgaben der CLI und vom Textual-Browser verwendet.
"""

from typing import TYPE_CHECKING

from models.timeslot import DAYS, TIME_SLOTS, Slot
from scheduling.queries import CellStatus, room_week_grid

if TYPE_CHECKING:
    from analysis.occupancy import OccupancyReport
    from models.schedule_item import ScheduleItem
    from models.store import EntityStore

GRID_HEADERS: list[str] = ["Zeit"] + [d.value for d in DAYS]

OCCUPANCY_HEADERS: list[str] = [
    "Raum", "Plätze", "Zeitfenster", "Status", "Lehrveranstaltung", "Lerngruppe", "Lehrkraft",
]


def _week_rows(
    items: list["ScheduleItem"], cell_text
) -> list[list[str]]:
    """Zeile pro Zeitfenster, Spalte pro Tag; mehrere Termine untereinander."""
    rows: list[list[str]] = []
    for time_slot in TIME_SLOTS:
        cells = [time_slot]
        for day in DAYS:
            here = [s for s in items if s.day == day and s.time_slot == time_slot]
            cells.append("\n".join(cell_text(s) for s in here) if here else "—")
        rows.append(cells)
    return rows


def _free_cell_text(status: CellStatus) -> str:
    if status.is_free:
        return "frei"
    blocked = []
    if status.lecturer_busy:
        blocked.append("Lehrkraft")
    if status.class_busy:
        blocked.append("Lerngruppe")
    return "belegt: " + ", ".join(blocked)


def render_room_rows(room_id: str, store: "EntityStore", lecturer_id: str = "",
                     class_name: str = "") -> list[list[str]]:
    """Wochenraster eines Raums. Jede Zeile: [Zeit, Senin, …, Sabtu].

    Ohne Auswahl bleiben leere Zellen "—". Mit Lehrkraft oder Lerngruppe
    steht dort "frei" oder, was die Auswahl anderswo blockiert.
    """
    grid = room_week_grid(store.schedule, room_id, lecturer_id, class_name)
    selected = bool(lecturer_id or class_name)
    rows: list[list[str]] = []
    for time_slot in TIME_SLOTS:
        cells = [time_slot]
        for day in DAYS:
            status = grid[Slot(day, time_slot)]
            here = [s for s in status.items if s.room_id == room_id]
            if here:
                cells.append("\n".join(
                    f"{store.course_label(s.course_id)}\n{s.class_name} · "
                    f"{store.lecturer_label(s.lecturer_id)}"
                    for s in here
                ))
            else:
                cells.append(_free_cell_text(status) if selected else "—")
        rows.append(cells)
    return rows


def render_lecturer_rows(lecturer_id: str, store: "EntityStore") -> list[list[str]]:
    """Wochenraster einer Lehrkraft mit Raum statt Lehrkraft in der Zelle."""
    items = [s for s in store.schedule if lecturer_id and s.lecturer_id == lecturer_id]
    return _week_rows(
        items,
        lambda s: f"{store.course_label(s.course_id)}\n{s.class_name} · "
                  f"{store.room_label(s.room_id)}",
    )


def render_occupancy_rows(report: "OccupancyReport") -> list[list[str]]:
    return [
        [r.room, str(r.capacity), r.time_slot, r.status, r.course, r.class_name, r.lecturer]
        for r in report.rows
    ]
