"""Wochenraster: Wochentage, Zeitfenster und der Slot-Schlüssel (Tag, Zeitfenster)."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Day(str, Enum):
    """Die sechs Unterrichtstage. Die Werte sind die Tabellenwerte."""

    MONDAY = "Senin"
    TUESDAY = "Selasa"
    WEDNESDAY = "Rabu"
    THURSDAY = "Kamis"
    FRIDAY = "Jumat"
    SATURDAY = "Sabtu"

    @property
    def position(self) -> int:
        """0=Montag .. 5=Samstag."""
        return DAYS.index(self)

    @classmethod
    def parse(cls, raw) -> Optional["Day"]:
        """Erkennt Tabellenwert, englischen oder deutschen Tagesnamen."""
        if isinstance(raw, cls):
            return raw
        token = str(raw or "").strip().lower()
        if not token:
            return None
        return _DAY_MAP.get(token)


DAYS: tuple[Day, ...] = tuple(Day)

# Feste, geordnete Zeitfenster eines Tages
TIME_SLOTS: tuple[str, ...] = (
    "07:00 - 08:40",
    "09:00 - 10:40",
    "11:00 - 12:40",
    "13:00 - 14:40",
    "15:00 - 16:40",
)

_DAY_MAP: dict[str, Day] = {}
for _day, _aliases in {
    Day.MONDAY:    ("monday", "mon", "montag", "mo"),
    Day.TUESDAY:   ("tuesday", "tue", "dienstag", "di"),
    Day.WEDNESDAY: ("wednesday", "wed", "mittwoch", "mi"),
    Day.THURSDAY:  ("thursday", "thu", "donnerstag", "do"),
    Day.FRIDAY:    ("friday", "fri", "freitag", "fr"),
    Day.SATURDAY:  ("saturday", "sat", "samstag", "sa"),
}.items():
    _DAY_MAP[_day.value.lower()] = _day
    _DAY_MAP[_day.name.lower()] = _day
    for _alias in _aliases:
        _DAY_MAP[_alias] = _day


def normalize_time_slot(raw) -> Optional[str]:
    """Gibt das passende Zeitfenster aus TIME_SLOTS zurück oder None.

    Akzeptiert abweichende Leerzeichen ("07:00-08:40") und die 1-basierte
    Nummer des Zeitfensters ("1" .. "5").
    """
    text = str(raw or "").strip()
    if not text:
        return None
    if text.isdigit():
        number = int(text)
        return TIME_SLOTS[number - 1] if 1 <= number <= len(TIME_SLOTS) else None
    compact = text.replace(" ", "").replace("–", "-")
    for slot in TIME_SLOTS:
        if slot.replace(" ", "") == compact:
            return slot
    return None


@dataclass(frozen=True)
class Slot:
    """Ein Zeitfenster im Wochenraster: Kombination aus Tag und Zeitfenster.

    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    """

    day: Day
    time_slot: str

    @property
    def sort_key(self) -> tuple[int, int]:
        """Sortierung nach Wochentag, dann nach Zeitfenster."""
        slot_idx = TIME_SLOTS.index(self.time_slot) if self.time_slot in TIME_SLOTS else len(TIME_SLOTS)
        return self.day.position, slot_idx

    def __str__(self) -> str:
        return f"{self.day.value} {self.time_slot}"


def all_slots() -> list[Slot]:
    """Alle 30 Slots des Wochenrasters in Wochenreihenfolge."""
    return [Slot(day, ts) for day in DAYS for ts in TIME_SLOTS]
