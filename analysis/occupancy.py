"""Raumauslastung eines Wochentags (Monitoring)."""

from typing import Optional

from pydantic import BaseModel

from models.store import EntityStore, OPEN_SLOT_LABEL
from models.timeslot import Day, TIME_SLOTS

STATUS_OCCUPIED = "Terisi"
STATUS_FREE = "Kosong"


class OccupancyRow(BaseModel):
    """Eine Zeile pro Raum und Zeitfenster."""

    room: str
    capacity: int
    time_slot: str
    occupied: bool
    item_id: Optional[str] = None
    course: str = "-"
    class_name: str = "-"
    lecturer: str = "-"

    @property
    def status(self) -> str:
        return STATUS_OCCUPIED if self.occupied else STATUS_FREE


class OccupancyReport(BaseModel):
    """Auslastung der (gefilterten) Räume an einem Tag."""

    day: Day
    search: str = ""
    rooms: int = 0
    rows: list[OccupancyRow]
    total_slots: int
    occupied_slots: int
    occupancy_rate: int     # gerundete Prozent, 0 ohne Räume

    @property
    def free_slots(self) -> int:
        return max(self.total_slots - self.occupied_slots, 0)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box
        from export.tui_renderer import OCCUPANCY_HEADERS, render_occupancy_rows

        console = Console()
        color = "green" if self.occupancy_rate < 70 else (
            "yellow" if self.occupancy_rate < 90 else "red")
        lines = [
            f"Tag: [bold]{self.day.value}[/bold]"
            + (f"   Filter: '{self.search}'" if self.search else ""),
            f"Räume: {self.rooms} | Slots: {self.total_slots} | "
            f"belegt: {self.occupied_slots} | frei: {self.free_slots}",
            f"Auslastung: [{color}]{self.occupancy_rate}%[/{color}]",
        ]
        console.print(Panel("\n".join(lines), title="Monitoring", border_style="cyan"))
        if not self.rows:
            console.print("[dim]Keine Räume gefunden.[/dim]")
            return

        table = Table(box=box.SIMPLE_HEAVY)
        for header in OCCUPANCY_HEADERS:
            table.add_column(header)
        for row in render_occupancy_rows(self):
            style = "green" if row[3] == STATUS_OCCUPIED else "dim"
            table.add_row(*row, style=style)
        console.print(table)


def build_occupancy_report(store: EntityStore, day: Day, search: str = "") -> OccupancyReport:
    """Berechnet die Auslastung für ``day``.

    Räume werden per Teilstring im Namen gefiltert (ohne Groß-/Kleinschreibung).
    Belegt zählt jeder Termin des Tages in einem der gefilterten Räume.
    """
    needle = search.strip().lower()
    rooms = [r for r in store.rooms if needle in r.name.lower()]
    room_ids = {r.id for r in rooms}
    day_items = [s for s in store.schedule if s.day == day]

    total = len(rooms) * len(TIME_SLOTS)
    occupied = sum(1 for s in day_items if s.room_id in room_ids)
    rate = round(occupied / total * 100) if total > 0 else 0

    rows: list[OccupancyRow] = []
    for room in rooms:
        for time_slot in TIME_SLOTS:
            item = next(
                (s for s in day_items if s.room_id == room.id and s.time_slot == time_slot),
                None,
            )
            if item is None:
                rows.append(OccupancyRow(
                    room=room.name, capacity=room.capacity,
                    time_slot=time_slot, occupied=False,
                ))
                continue
            course = store.course(item.course_id)
            lecturer = store.lecturer(item.lecturer_id)
            rows.append(OccupancyRow(
                room=room.name,
                capacity=room.capacity,
                time_slot=time_slot,
                occupied=True,
                item_id=item.id,
                course=course.name if course else "-",
                class_name=item.class_name,
                lecturer=lecturer.name if lecturer else OPEN_SLOT_LABEL,
            ))

    return OccupancyReport(
        day=day,
        search=search,
        rooms=len(rooms),
        rows=rows,
        total_slots=total,
        occupied_slots=occupied,
        occupancy_rate=rate,
    )
