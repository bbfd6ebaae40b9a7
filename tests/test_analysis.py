"""Tests für Planprüfung, Raumauslastung, Demo-Daten und Terminal-Renderer."""

from analysis.occupancy import STATUS_FREE, STATUS_OCCUPIED, build_occupancy_report
from analysis.schedule_validator import ScheduleValidator
from data.demo_data import DemoDataGenerator
from export.tui_browser import browser_entries
from export.tui_renderer import GRID_HEADERS, render_lecturer_rows, render_room_rows
from models.timeslot import Day

from conftest import make_item, make_store


# ─── PLANPRÜFUNG ──────────────────────────────────────────────────────────────

class TestScheduleValidator:
    def test_clean_schedule_is_valid(self):
        store = make_store([
            make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1"),
            make_item("s2", room_id="r2", class_name="PDB02", lecturer_id=""),
            make_item("s3", room_id="r3", class_name="PDB03", lecturer_id=""),
        ])
        report = ScheduleValidator().validate(store)
        assert report.is_valid
        assert report.violations == []

    def test_double_bookings_are_errors(self):
        """Ungeprüft importierte Kollisionen werden als Fehler gemeldet."""
        store = make_store([
            make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1"),
            make_item("s2", room_id="r1", class_name="PDB01", lecturer_id="l1"),
        ])
        report = ScheduleValidator().validate(store)
        assert not report.is_valid
        constraints = sorted(v.constraint for v in report.errors)
        assert constraints == [
            "class_double_booking", "lecturer_double_booking", "room_double_booking",
        ]

    def test_dangling_references_are_warnings(self):
        store = make_store([make_item("s1", room_id="r99", lecturer_id="l99",
                                      class_name="PDB77")])
        report = ScheduleValidator().validate(store)
        assert report.is_valid
        assert len(report.warnings) == 1
        warning = report.warnings[0]
        assert warning.entity == "s1"
        assert "r99" in warning.description and "l99" in warning.description
        assert "PDB77" in warning.description


# ─── RAUMAUSLASTUNG ───────────────────────────────────────────────────────────

class TestOccupancy:
    def test_rate_and_rows(self):
        store = make_store([
            make_item("s1", room_id="r1", lecturer_id="l1"),
            make_item("s2", room_id="r2", class_name="PDB02"),
            make_item("s3", room_id="r1", day=Day.TUESDAY),
        ])
        report = build_occupancy_report(store, Day.MONDAY)
        assert report.rooms == 3
        assert report.total_slots == 15
        assert report.occupied_slots == 2
        assert report.free_slots == 13
        assert report.occupancy_rate == 13
        first = report.rows[0]
        assert (first.room, first.status, first.lecturer) == ("R.301", STATUS_OCCUPIED,
                                                              "Andi Santoso")
        open_row = next(r for r in report.rows if r.item_id == "s2")
        assert open_row.lecturer == "Open Slot"
        assert report.rows[1].status == STATUS_FREE

    def test_search_filters_rooms(self):
        store = make_store([make_item("s1", room_id="r3")])
        report = build_occupancy_report(store, Day.MONDAY, search="lab")
        assert report.rooms == 1
        assert report.total_slots == 5
        assert report.occupancy_rate == 20

    def test_no_rooms_means_zero_rate(self):
        report = build_occupancy_report(make_store(), Day.MONDAY, search="keiner")
        assert report.total_slots == 0
        assert report.occupancy_rate == 0
        assert report.rows == []


# ─── DEMO-DATEN ───────────────────────────────────────────────────────────────

class TestDemoData:
    def test_generated_schedule_is_conflict_free(self):
        store = DemoDataGenerator(seed=42).generate()
        assert len(store.lecturers) == 16
        assert len(store.rooms) == 8
        assert len(store.classes) == 20
        assert 0 < len(store.schedule) <= 60
        assert any(s.is_open for s in store.schedule)
        assert ScheduleValidator().validate(store).violations == []

    def test_seed_is_reproducible(self):
        a = DemoDataGenerator(seed=1).generate()
        b = DemoDataGenerator(seed=1).generate()
        assert [l.employee_number for l in a.lecturers] == [
            l.employee_number for l in b.lecturers
        ]
        assert [(s.room_id, s.slot) for s in a.schedule] == [
            (s.room_id, s.slot) for s in b.schedule
        ]

    def test_nips_are_unique(self):
        store = DemoDataGenerator(seed=3).generate()
        nips = [l.employee_number for l in store.lecturers]
        assert len(set(nips)) == len(nips)
        assert all(len(n) == 18 for n in nips)


# ─── TERMINAL-ANZEIGE ─────────────────────────────────────────────────────────

class TestRenderer:
    def test_room_grid(self):
        store = make_store([make_item("s1", room_id="r1", lecturer_id="l1",
                                      day=Day.WEDNESDAY)])
        rows = render_room_rows("r1", store)
        assert len(GRID_HEADERS) == 7
        assert len(rows) == 5
        assert rows[0][0] == "07:00 - 08:40"
        assert "Basis Data" in rows[0][3]
        assert "Andi Santoso" in rows[0][3]
        assert rows[0][1] == "—"

    def test_room_grid_marks_free_cells_for_selection(self):
        """Leere Zellen zeigen, ob Lehrkraft und Lerngruppe dort frei sind."""
        store = make_store([
            make_item("s1", room_id="r1", class_name="PDB01", lecturer_id="l1"),
            make_item("s2", room_id="r2", class_name="PDB02", lecturer_id="l2",
                      day=Day.TUESDAY),
            make_item("s3", room_id="r3", class_name="PDB03", lecturer_id="l3",
                      day=Day.WEDNESDAY),
            make_item("s4", room_id="r2", class_name="PDB03", lecturer_id="l2",
                      day=Day.SATURDAY),
        ])
        rows = render_room_rows("r1", store, lecturer_id="l2", class_name="PDB03")
        assert "Basis Data" in rows[0][1]
        assert rows[0][2] == "belegt: Lehrkraft"
        assert rows[0][3] == "belegt: Lerngruppe"
        assert rows[0][4] == "frei"
        assert rows[0][6] == "belegt: Lehrkraft, Lerngruppe"
        assert rows[1][1] == "frei"

    def test_lecturer_grid_shows_room(self):
        store = make_store([make_item("s1", room_id="r3", lecturer_id="l1")])
        rows = render_lecturer_rows("l1", store)
        assert "Lab 1" in rows[0][1]
        assert all(cell == "—" for row in rows[1:] for cell in row[1:])

    def test_browser_entries(self):
        store = make_store()
        entries = browser_entries(store)
        assert len(entries) == 6
        assert entries[0][0] == "room"
        assert browser_entries(store, "budi") == [("lecturer", "l2", "Budi Wijaya (222)")]
