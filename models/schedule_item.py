"""Datenmodell für einen Eintrag im Wochenplan (Pydantic v2)."""

from pydantic import Field, field_validator

from models.base import WireModel, as_text
from models.timeslot import Day, Slot, TIME_SLOTS, normalize_time_slot


class ScheduleItem(WireModel):
    """Eine Lehrveranstaltung einer Lerngruppe in einem Raum zu einem Slot.

    ``lecturer_id == ""`` kennzeichnet einen offenen Slot, den Lehrkräfte
    über das Portal übernehmen können.
    """

    id: str
    course_id: str = Field(alias="courseId")
    lecturer_id: str = Field("", alias="lecturerId")
    room_id: str = Field(alias="roomId")
    class_name: str = Field(alias="className")
    day: Day
    time_slot: str = Field(alias="timeSlot")

    @field_validator("id", "course_id", "lecturer_id", "room_id", "class_name",
                     mode="before")
    @classmethod
    def _text(cls, v):
        return as_text(v)

    @field_validator("day", mode="before")
    @classmethod
    def _day(cls, v):
        return Day.parse(v) or v

    @field_validator("time_slot", mode="before")
    @classmethod
    def _time_slot(cls, v):
        slot = normalize_time_slot(v)
        if slot is None:
            raise ValueError(
                f"Unbekanntes Zeitfenster '{v}'. Erlaubt: {', '.join(TIME_SLOTS)}"
            )
        return slot

    @property
    def slot(self) -> Slot:
        return Slot(self.day, self.time_slot)

    @property
    def is_open(self) -> bool:
        """True wenn noch keine Lehrkraft zugewiesen ist."""
        return self.lecturer_id == ""
