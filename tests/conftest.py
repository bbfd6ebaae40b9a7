"""Gemeinsame Fixtures: kleiner Bestand und ein austauschbarer HTTP-Opener."""

import json
from typing import Any, Optional

import pytest

from models.class_name import ClassName
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.schedule_item import ScheduleItem
from models.store import EntityStore
from models.timeslot import Day


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def make_item(item_id: str, room_id: str = "r1", class_name: str = "PDB01",
              lecturer_id: str = "", day: Day = Day.MONDAY,
              time_slot: str = "07:00 - 08:40", course_id: str = "c1") -> ScheduleItem:
    return ScheduleItem(
        id=item_id, course_id=course_id, lecturer_id=lecturer_id,
        room_id=room_id, class_name=class_name, day=day, time_slot=time_slot,
    )


def make_store(schedule: Optional[list[ScheduleItem]] = None) -> EntityStore:
    """Zwei Lehrveranstaltungen, drei Lehrkräfte, drei Räume, drei Lerngruppen."""
    return EntityStore(
        courses=[
            Course(id="c1", code="IF202", name="Basis Data", credit_hours=3),
            Course(id="c2", code="IF201", name="Struktur Data", credit_hours=3),
        ],
        lecturers=[
            Lecturer(id="l1", name="Andi Santoso", employee_number="111"),
            Lecturer(id="l2", name="Budi Wijaya", employee_number="222"),
            Lecturer(id="l3", name="Citra Utami", employee_number="333"),
        ],
        rooms=[
            Room(id="r1", name="R.301", capacity=40),
            Room(id="r2", name="R.302", capacity=30),
            Room(id="r3", name="Lab 1", capacity=25),
        ],
        classes=[
            ClassName(id="cls-1", name="PDB01"),
            ClassName(id="cls-2", name="PDB02"),
            ClassName(id="cls-3", name="PDB03"),
        ],
        schedule=list(schedule or []),
    )


class FakeResponse:
    """Antwort-Objekt wie von urllib.request.urlopen (Context-Manager)."""

    def __init__(self, body: Any = None, status: int = 200,
                 content_type: str = "application/json; charset=utf-8"):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        self._body = (body or "").encode("utf-8")
        self.status = status
        self.headers = {"Content-Type": content_type}
        self.was_read = False

    def read(self) -> bytes:
        self.was_read = True
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOpener:
    """Zeichnet Requests auf und liefert vorbereitete Antworten oder Fehler."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response if response is not None else FakeResponse({})
        self.error = error
        self.requests: list = []
        self.timeouts: list = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def posted(self) -> list[dict]:
        return [json.loads(r.data.decode("utf-8")) for r in self.requests if r.data]


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def store() -> EntityStore:
    return make_store()


@pytest.fixture
def remote_payload() -> dict:
    """Antwort des Endpunkts, wie sie das Spreadsheet liefert (Zahlen als Zahlen)."""
    return {
        "courses": [{"id": "c1", "code": "IF202", "name": "Basis Data", "credits": "3"}],
        "lecturers": [{"id": "l1", "name": "Andi Santoso", "nip": 1.9870101e17,
                       "position": "Lektor", "expertise": ""}],
        "rooms": [{"id": "r1", "name": "R.301", "capacity": 40.0,
                   "building": "Gedung A", "location": ""}],
        "classes": [{"id": "cls-1", "name": "PDB01"}],
        "schedule": [{"id": "s1", "courseId": "c1", "lecturerId": "l1", "roomId": "r1",
                      "className": "PDB01", "day": "Senin", "timeSlot": "07:00 - 08:40"}],
    }
