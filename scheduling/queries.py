"""Lesende Abfragen für Portal und Wochenraster."""

from collections import Counter
from typing import Iterable, Optional

from pydantic import BaseModel

from models.course import Course
from models.schedule_item import ScheduleItem
from models.store import EntityStore
from models.timeslot import Day, Slot, all_slots
from scheduling.conflicts import items_in_slot


class CellStatus(BaseModel):
    """Zustand einer Zelle im Admin-Wochenraster (ein Raum, ein Slot)."""

    items: list[ScheduleItem] = []              # alle Termine des Slots
    room_item: Optional[ScheduleItem] = None    # Termin im gewählten Raum
    lecturer_busy: bool = False                 # gewählte Lehrkraft anderswo belegt
    class_busy: bool = False                    # gewählte Lerngruppe anderswo belegt

    @property
    def is_free(self) -> bool:
        return self.room_item is None and not self.lecturer_busy and not self.class_busy


def cell_status(
    schedule: Iterable[ScheduleItem],
    day: Day,
    time_slot: str,
    room_id: str = "",
    lecturer_id: str = "",
    class_name: str = "",
) -> CellStatus:
    items = items_in_slot(schedule, day, time_slot)
    room_item = next((s for s in items if s.room_id == room_id), None) if room_id else None
    return CellStatus(
        items=items,
        room_item=room_item,
        lecturer_busy=bool(lecturer_id) and any(
            s.lecturer_id == lecturer_id and s.room_id != room_id for s in items
        ),
        class_busy=bool(class_name) and any(
            s.class_name == class_name and s.room_id != room_id for s in items
        ),
    )


def open_slots(schedule: Iterable[ScheduleItem]) -> list[ScheduleItem]:
    """Alle offenen Termine in Wochenreihenfolge."""
    return sorted((s for s in schedule if s.is_open), key=lambda s: s.slot.sort_key)


def courses_with_open_slots(store: EntityStore) -> list[tuple[Course, int]]:
    """Lehrveranstaltungen mit mindestens einem offenen Termin und deren Anzahl."""
    counts = Counter(s.course_id for s in store.schedule if s.is_open)
    return [(c, counts[c.id]) for c in store.courses if counts[c.id] > 0]


def open_sessions(schedule: Iterable[ScheduleItem], course_id: str) -> list[ScheduleItem]:
    return [s for s in open_slots(schedule) if s.course_id == course_id]


def lecturer_schedule(schedule: Iterable[ScheduleItem], lecturer_id: str) -> list[ScheduleItem]:
    """Eigene Termine einer Lehrkraft, nach Tag und Zeitfenster sortiert."""
    return sorted(
        (s for s in schedule if lecturer_id and s.lecturer_id == lecturer_id),
        key=lambda s: s.slot.sort_key,
    )


def room_week_grid(
    schedule: Iterable[ScheduleItem],
    room_id: str,
    lecturer_id: str = "",
    class_name: str = "",
) -> dict[Slot, CellStatus]:
    """Wochenraster eines Raums: alle 30 Slots → Zellenstatus.

    Mit gewählter Lehrkraft oder Lerngruppe zeigt der Status leerer Zellen,
    ob dort noch eingeplant werden kann.
    """
    schedule = list(schedule)
    return {
        slot: cell_status(schedule, slot.day, slot.time_slot,
                          room_id, lecturer_id, class_name)
        for slot in all_slots()
    }
