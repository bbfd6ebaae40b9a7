"""End-to-End-Tests der Click-CLI in einem leeren Arbeitsverzeichnis."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli
from models.store import EntityStore
from models.timeslot import Day

from conftest import make_item, make_store

SNAPSHOT = Path("output/vorlesungsplan.json")


@pytest.fixture
def runner():
    r = CliRunner()
    with r.isolated_filesystem():
        yield r


def _seed(schedule=None) -> None:
    make_store(schedule).save_json(SNAPSHOT)


def _login(runner, role: str, user: str) -> None:
    password = "admin" if role == "admin" else user
    result = runner.invoke(cli, ["login", "--role", role, "-u", user, "-p", password])
    assert result.exit_code == 0, result.output


def _reload() -> EntityStore:
    return EntityStore.load_json(SNAPSHOT)


class TestBasics:
    def test_stats_without_config_uses_defaults(self, runner):
        """Ohne Config und ohne Stand: 125 Standard-Lerngruppen, offline."""
        result = runner.invoke(cli, ["stats"])
        assert result.exit_code == 0, result.output
        assert "Lerngruppen: 125" in result.output
        assert "offline" in result.output

    def test_generate(self, runner):
        result = runner.invoke(cli, ["generate", "--seed", "5", "-y"])
        assert result.exit_code == 0, result.output
        store = _reload()
        assert len(store.rooms) == 8
        assert store.schedule

    def test_pull_without_url(self, runner):
        result = runner.invoke(cli, ["pull"])
        assert result.exit_code == 1
        assert "Keine Spreadsheet-URL" in result.output

    def test_set_url_writes_config(self, runner):
        result = runner.invoke(cli, ["config", "set-url", "https://example.com/exec"])
        assert result.exit_code == 0, result.output
        assert "https://example.com/exec" in Path("config/app_config.yaml").read_text(
            encoding="utf-8"
        )


class TestLogin:
    def test_login_logout(self, runner):
        _seed()
        _login(runner, "lecturer", "222")
        assert "Budi Wijaya" in runner.invoke(cli, ["whoami"]).output
        runner.invoke(cli, ["logout"])
        assert "Nicht angemeldet" in runner.invoke(cli, ["whoami"]).output

    def test_wrong_password(self, runner):
        _seed()
        result = runner.invoke(cli, ["login", "--role", "lecturer", "-u", "222", "-p", "x"])
        assert result.exit_code == 1


class TestScheduleCommands:
    def test_requires_admin(self, runner):
        _seed()
        result = runner.invoke(cli, ["schedule", "remove", "s1"])
        assert result.exit_code == 1
        assert "Nur für Administratoren" in result.output

    def test_add_and_conflict(self, runner):
        _seed()
        _login(runner, "admin", "admin")
        args = ["schedule", "add", "-c", "Basis Data", "-r", "R.301", "-k", "PDB01",
                "-d", "Montag", "-t", "1", "-l", "111"]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        item = _reload().schedule[0]
        assert (item.course_id, item.room_id, item.lecturer_id) == ("c1", "r1", "l1")
        assert item.day == Day.MONDAY

        args[7] = "PDB02"
        result = runner.invoke(cli, args)
        assert result.exit_code == 1
        assert "Abgelehnt" in result.output
        assert len(_reload().schedule) == 1

    def test_add_with_missing_room_is_incomplete_selection(self, runner):
        _seed()
        _login(runner, "admin", "admin")
        result = runner.invoke(cli, ["schedule", "add", "-c", "Basis Data", "-k", "PDB01",
                                     "-d", "Senin", "-t", "1"])
        assert result.exit_code == 1
        assert "Auswahl unvollständig" in result.output
        assert "Abgelehnt" not in result.output
        assert _reload().schedule == []

    def test_invalid_day(self, runner):
        _seed()
        _login(runner, "admin", "admin")
        result = runner.invoke(cli, ["schedule", "add", "-d", "Sonntag"])
        assert result.exit_code == 2

    def test_remove(self, runner):
        _seed([make_item("s1")])
        _login(runner, "admin", "admin")
        result = runner.invoke(cli, ["schedule", "remove", "s1"])
        assert result.exit_code == 0, result.output
        assert _reload().schedule == []

    def test_show_room_grid_for_selection(self, runner):
        _seed([make_item("s1", room_id="r2", class_name="PDB02", lecturer_id="l1")])
        result = runner.invoke(cli, ["schedule", "show", "-r", "R.301", "-l", "111",
                                     "-k", "PDB02"])
        assert result.exit_code == 0, result.output
        assert "frei für Andi Santoso / PDB02" in result.output
        assert "belegt" in result.output

    def test_show_class_requires_room(self, runner):
        _seed()
        result = runner.invoke(cli, ["schedule", "show", "-k", "PDB01"])
        assert result.exit_code == 1
        assert "nur zusammen mit --room" in result.output

    def test_show_unknown_class(self, runner):
        _seed()
        result = runner.invoke(cli, ["schedule", "show", "-r", "R.301", "-k", "PDB99"])
        assert result.exit_code == 1
        assert "PDB99" in result.output

    def test_check_reports_double_booking(self, runner):
        _seed([make_item("s1"), make_item("s2", class_name="PDB02")])
        result = runner.invoke(cli, ["schedule", "check"])
        assert result.exit_code == 1

    def test_export(self, runner):
        _seed([make_item("s1")])
        result = runner.invoke(cli, ["schedule", "export"])
        assert result.exit_code == 0, result.output
        assert list(Path("output").glob("Jadwal_Kuliah_Lengkap_*.xlsx"))


class TestPortalCommands:
    def test_claim_and_release(self, runner):
        _seed([make_item("open1")])
        _login(runner, "lecturer", "222")
        result = runner.invoke(cli, ["portal", "claim", "open1"])
        assert result.exit_code == 0, result.output
        assert _reload().get("schedule", "open1").lecturer_id == "l2"

        result = runner.invoke(cli, ["portal", "release", "open1"])
        assert result.exit_code == 0, result.output
        assert _reload().get("schedule", "open1").is_open

    def test_release_foreign_slot(self, runner):
        _seed([make_item("s1", lecturer_id="l1")])
        _login(runner, "lecturer", "222")
        result = runner.invoke(cli, ["portal", "release", "s1"])
        assert result.exit_code == 1
        assert _reload().get("schedule", "s1").lecturer_id == "l1"

    def test_admin_needs_lecturer_option(self, runner):
        _seed([make_item("open1")])
        _login(runner, "admin", "admin")
        assert runner.invoke(cli, ["portal", "claim", "open1"]).exit_code == 1
        result = runner.invoke(cli, ["portal", "claim", "open1", "-l", "Citra Utami"])
        assert result.exit_code == 0, result.output
        assert _reload().get("schedule", "open1").lecturer_id == "l3"

    def test_open_lists_courses(self, runner):
        _seed([make_item("open1")])
        result = runner.invoke(cli, ["portal", "open"])
        assert result.exit_code == 0, result.output
        assert "Basis Data" in result.output


class TestDataAndMonitor:
    def test_data_add_and_delete(self, runner):
        _seed()
        _login(runner, "admin", "admin")
        result = runner.invoke(cli, ["data", "add", "rooms", "--set", "name=R.500",
                                     "--set", "capacity=20"])
        assert result.exit_code == 0, result.output
        room = _reload().find_room("R.500")
        assert room.capacity == 20

        result = runner.invoke(cli, ["data", "delete", "rooms", room.id])
        assert result.exit_code == 0, result.output
        assert _reload().find_room("R.500") is None

    def test_data_add_unknown_field(self, runner):
        _seed()
        _login(runner, "admin", "admin")
        result = runner.invoke(cli, ["data", "add", "rooms", "--set", "farbe=rot"])
        assert result.exit_code == 1

    def test_monitor_with_excel(self, runner):
        _seed([make_item("s1")])
        result = runner.invoke(cli, ["monitor", "--day", "Senin", "--excel"])
        assert result.exit_code == 0, result.output
        assert list(Path("output").glob("Monitoring_Okupansi_Senin_*.xlsx"))
