"""Tests für die Konfliktprüfung und die lesenden Abfragen."""

from models.timeslot import Day, Slot
from scheduling.conflicts import ConflictKind, check_conflict, find_lecturer_occupant
from scheduling.queries import (
    cell_status,
    courses_with_open_slots,
    lecturer_schedule,
    open_sessions,
    room_week_grid,
)

from conftest import make_item, make_store

SLOT_1 = "07:00 - 08:40"
SLOT_2 = "09:00 - 10:40"


class TestCheckConflict:
    def test_empty_schedule_has_no_conflict(self):
        """Leerer Plan → kein Konflikt."""
        assert check_conflict([], Day.MONDAY, SLOT_1, "r1", "PDB01", "l1") is None

    def test_room_conflict(self):
        """Gleicher Raum im gleichen Slot kollidiert."""
        existing = make_item("s1", room_id="r1", class_name="PDB02")
        conflict = check_conflict([existing], Day.MONDAY, SLOT_1, "r1", "PDB01")
        assert conflict.kind == ConflictKind.ROOM
        assert conflict.existing.id == "s1"

    def test_room_has_priority_over_class_and_lecturer(self):
        """Sind alle drei Achsen belegt, wird der Raum gemeldet."""
        existing = make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1")
        conflict = check_conflict([existing], Day.MONDAY, SLOT_1, "r1", "PDB01", "l1")
        assert conflict.kind == ConflictKind.ROOM

    def test_class_conflict_in_other_room(self):
        """Eine Lerngruppe kann nicht in zwei Räumen gleichzeitig sein."""
        existing = make_item("s1", room_id="r2", class_name="PDB01")
        conflict = check_conflict([existing], Day.MONDAY, SLOT_1, "r1", "PDB01")
        assert conflict.kind == ConflictKind.CLASS
        assert conflict.existing.room_id == "r2"

    def test_lecturer_conflict_in_other_room(self):
        existing = make_item("s1", room_id="r2", class_name="PDB02", lecturer_id="l1")
        conflict = check_conflict([existing], Day.MONDAY, SLOT_1, "r1", "PDB01", "l1")
        assert conflict.kind == ConflictKind.LECTURER

    def test_open_slot_never_blocks_lecturer(self):
        """Offene Termine (ohne Lehrkraft) belegen keine Lehrkraft."""
        existing = make_item("s1", room_id="r2", class_name="PDB02", lecturer_id="")
        assert check_conflict([existing], Day.MONDAY, SLOT_1, "r1", "PDB01", "") is None

    def test_other_slot_is_independent(self):
        existing = make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1")
        assert check_conflict([existing], Day.MONDAY, SLOT_2, "r1", "PDB01", "l1") is None
        assert check_conflict([existing], Day.TUESDAY, SLOT_1, "r1", "PDB01", "l1") is None

    def test_lecturer_occupant_without_room_exclusion(self):
        """Ohne Ausschluss zählt auch ein Termin im selben Raum."""
        existing = make_item("s1", room_id="r1", lecturer_id="l1")
        assert find_lecturer_occupant([existing], Day.MONDAY, SLOT_1, "l1") is not None
        assert find_lecturer_occupant(
            [existing], Day.MONDAY, SLOT_1, "l1", exclude_room_id="r1"
        ) is None


class TestQueries:
    def test_cell_status(self):
        """Zellenstatus markiert Raum, Lehrkraft und Lerngruppe getrennt."""
        schedule = [
            make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1"),
            make_item("s2", room_id="r2", class_name="PDB02", lecturer_id="l2"),
        ]
        status = cell_status(schedule, Day.MONDAY, SLOT_1, room_id="r3",
                             lecturer_id="l2", class_name="PDB01")
        assert status.room_item is None
        assert status.lecturer_busy
        assert status.class_busy
        assert not status.is_free
        assert len(status.items) == 2

        free = cell_status(schedule, Day.MONDAY, SLOT_2, room_id="r1", lecturer_id="l1")
        assert free.is_free

    def test_class_in_selected_room_is_not_busy(self):
        """Die Lerngruppe im gewählten Raum selbst blockiert nicht als Lerngruppe."""
        schedule = [make_item("s1", room_id="r1", class_name="PDB01")]
        here = cell_status(schedule, Day.MONDAY, SLOT_1, room_id="r1", class_name="PDB01")
        assert here.room_item.id == "s1"
        assert not here.class_busy
        elsewhere = cell_status(schedule, Day.MONDAY, SLOT_1, room_id="r2",
                                class_name="PDB01")
        assert elsewhere.class_busy
        assert not elsewhere.is_free

    def test_courses_with_open_slots(self):
        store = make_store([
            make_item("s1", course_id="c1", lecturer_id=""),
            make_item("s2", course_id="c1", room_id="r2", class_name="PDB02", lecturer_id=""),
            make_item("s3", course_id="c2", room_id="r3", class_name="PDB03", lecturer_id="l1"),
        ])
        result = courses_with_open_slots(store)
        assert [(c.id, n) for c, n in result] == [("c1", 2)]

    def test_open_sessions_sorted_by_week(self):
        schedule = [
            make_item("late", day=Day.FRIDAY),
            make_item("early", day=Day.MONDAY, time_slot=SLOT_2),
            make_item("taken", day=Day.MONDAY, lecturer_id="l1"),
        ]
        assert [s.id for s in open_sessions(schedule, "c1")] == ["early", "late"]

    def test_lecturer_schedule_sorted(self):
        """Eigener Plan: Tag vor Zeitfenster, fremde und offene Termine fehlen."""
        schedule = [
            make_item("b", day=Day.TUESDAY, time_slot=SLOT_1, lecturer_id="l1"),
            make_item("a", day=Day.MONDAY, time_slot=SLOT_2, lecturer_id="l1"),
            make_item("x", day=Day.MONDAY, lecturer_id="l2"),
            make_item("o", day=Day.MONDAY, lecturer_id=""),
        ]
        assert [s.id for s in lecturer_schedule(schedule, "l1")] == ["a", "b"]
        assert lecturer_schedule(schedule, "") == []

    def test_room_week_grid(self):
        schedule = [
            make_item("s1", room_id="r1", day=Day.SATURDAY),
            make_item("s2", room_id="r2", lecturer_id="l2"),
        ]
        grid = room_week_grid(schedule, "r1", lecturer_id="l2")
        assert len(grid) == 30
        assert grid[Slot(Day.SATURDAY, SLOT_1)].room_item.id == "s1"
        assert grid[Slot(Day.MONDAY, SLOT_1)].lecturer_busy
        assert grid[Slot(Day.MONDAY, SLOT_2)].is_free
