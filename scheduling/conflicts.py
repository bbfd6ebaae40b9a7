"""Konfliktprüfung für einen Kandidaten-Termin.

Reine Lesefunktionen über die aktuelle Terminliste. Geprüft werden drei
unabhängige Achsen je Slot (Tag, Zeitfenster):

  1. Raum      – höchstens ein Termin pro (Tag, Zeitfenster, Raum)
  2. Klasse    – höchstens ein Termin pro (Tag, Zeitfenster, Lerngruppe)
  3. Lehrkraft – höchstens ein Termin pro (Tag, Zeitfenster, Lehrkraft)

Die Reihenfolge Raum → Klasse → Lehrkraft ist fest: gemeldet wird immer nur
der erste gefundene Konflikt, Raum-Doppelbelegung hat Vorrang.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from models.schedule_item import ScheduleItem
from models.timeslot import Day


class ConflictKind(str, Enum):
    ROOM = "room"
    CLASS = "class"
    LECTURER = "lecturer"


class Conflict(BaseModel):
    """Ein gefundener Konflikt samt dem bereits belegenden Termin."""

    kind: ConflictKind
    existing: ScheduleItem


def items_in_slot(
    schedule: Iterable[ScheduleItem], day: Day, time_slot: str
) -> list[ScheduleItem]:
    """Alle Termine eines Slots."""
    return [s for s in schedule if s.day == day and s.time_slot == time_slot]


def find_room_occupant(
    schedule: Iterable[ScheduleItem], day: Day, time_slot: str, room_id: str
) -> Optional[ScheduleItem]:
    return next(
        (s for s in items_in_slot(schedule, day, time_slot) if s.room_id == room_id),
        None,
    )


def find_class_occupant(
    schedule: Iterable[ScheduleItem], day: Day, time_slot: str, class_name: str
) -> Optional[ScheduleItem]:
    return next(
        (s for s in items_in_slot(schedule, day, time_slot)
         if s.class_name == class_name),
        None,
    )


def find_lecturer_occupant(
    schedule: Iterable[ScheduleItem],
    day: Day,
    time_slot: str,
    lecturer_id: str,
    exclude_room_id: Optional[str] = None,
) -> Optional[ScheduleItem]:
    """Termin der Lehrkraft im Slot; optional ohne Termine im Raum ``exclude_room_id``.

    Eine leere ``lecturer_id`` (offener Slot) belegt nie eine Lehrkraft.
    """
    if not lecturer_id:
        return None
    return next(
        (s for s in items_in_slot(schedule, day, time_slot)
         if s.lecturer_id == lecturer_id
         and (exclude_room_id is None or s.room_id != exclude_room_id)),
        None,
    )


def check_conflict(
    schedule: Iterable[ScheduleItem],
    day: Day,
    time_slot: str,
    room_id: str,
    class_name: str,
    lecturer_id: str = "",
) -> Optional[Conflict]:
    """Prüft einen Kandidaten gegen die bestehenden Termine.

    Returns:
        Den ersten Konflikt in der Reihenfolge Raum, Klasse, Lehrkraft
        oder None. Bei der Lehrkraft-Prüfung werden Termine im selben Raum
        ausgeklammert (ein Termin kollidiert nicht mit sich selbst).
    """
    schedule = list(schedule)

    occupant = find_room_occupant(schedule, day, time_slot, room_id)
    if occupant is not None:
        return Conflict(kind=ConflictKind.ROOM, existing=occupant)

    occupant = find_class_occupant(schedule, day, time_slot, class_name)
    if occupant is not None:
        return Conflict(kind=ConflictKind.CLASS, existing=occupant)

    occupant = find_lecturer_occupant(
        schedule, day, time_slot, lecturer_id, exclude_room_id=room_id
    )
    if occupant is not None:
        return Conflict(kind=ConflictKind.LECTURER, existing=occupant)

    return None
