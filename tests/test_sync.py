"""Tests für den Spreadsheet-Client und den Sync-Adapter (ohne Netzwerk)."""

import urllib.error

import pytest

from config.schema import AppConfig, RemoteConfig
from models.store import EntityStore
from sync.adapter import SyncAdapter, build_sync
from sync.sheets import SheetsClient, SyncError, parse_snapshot

from conftest import FakeOpener, FakeResponse, make_item, make_store

URL = "https://script.example.com/macros/s/abc/exec"


def _client(opener: FakeOpener) -> SheetsClient:
    return SheetsClient(URL, timeout=5, write_timeout=2, opener=opener)


# ─── PARSEN ───────────────────────────────────────────────────────────────────

class TestParseSnapshot:
    def test_numbers_are_normalized(self, remote_payload):
        """Zahlen aus dem Spreadsheet werden zu Strings bzw. Ganzzahlen."""
        snap = parse_snapshot(remote_payload)
        assert snap.lecturers[0].employee_number == "198701010000000000"
        assert snap.rooms[0].capacity == 40
        assert snap.courses[0].credit_hours == 3
        assert snap.schedule[0].course_id == "c1"
        assert snap.dropped_rows == 0

    def test_invalid_rows_are_dropped(self, remote_payload):
        remote_payload["schedule"].append({"id": "bad", "courseId": "c1", "roomId": "r1",
                                           "className": "PDB01", "day": "Sonntag",
                                           "timeSlot": "07:00 - 08:40"})
        remote_payload["schedule"].append({"id": "bad2", "courseId": "c1", "roomId": "r1",
                                           "className": "PDB01", "day": "Senin",
                                           "timeSlot": "06:00"})
        snap = parse_snapshot(remote_payload)
        assert [s.id for s in snap.schedule] == ["s1"]
        assert snap.dropped_rows == 2

    def test_missing_tables_are_empty(self):
        snap = parse_snapshot({"courses": []})
        assert snap.rooms == [] and snap.schedule == []


# ─── CLIENT ───────────────────────────────────────────────────────────────────

class TestSheetsClient:
    def test_empty_url_rejected(self):
        with pytest.raises(ValueError):
            SheetsClient("  ")

    def test_fetch_all_adds_cache_buster(self, remote_payload):
        opener = FakeOpener(FakeResponse(remote_payload))
        snap = _client(opener).fetch_all()
        assert len(snap.schedule) == 1
        req = opener.requests[0]
        assert req.get_method() == "GET"
        assert req.full_url.startswith(URL + "?t=")

    def test_fetch_all_with_query_string(self, remote_payload):
        opener = FakeOpener(FakeResponse(remote_payload))
        SheetsClient(URL + "?x=1", opener=opener).fetch_all()
        assert "?x=1&t=" in opener.requests[0].full_url

    def test_error_payload(self):
        opener = FakeOpener(FakeResponse({"error": "Sheet fehlt"}))
        with pytest.raises(SyncError, match="Sheet fehlt"):
            _client(opener).fetch_all()

    def test_html_response(self):
        """Eine Anmeldeseite statt JSON ist ein Sync-Fehler."""
        opener = FakeOpener(FakeResponse("<html></html>", content_type="text/html"))
        with pytest.raises(SyncError, match="kein JSON"):
            _client(opener).fetch_all()

    def test_http_status(self):
        opener = FakeOpener(FakeResponse({}, status=500))
        with pytest.raises(SyncError, match="500"):
            _client(opener).fetch_all()

    def test_network_error(self):
        opener = FakeOpener(error=urllib.error.URLError("timed out"))
        with pytest.raises(SyncError, match="Verbindung fehlgeschlagen"):
            _client(opener).fetch_all()

    def test_write_body(self):
        opener = FakeOpener(FakeResponse("ok", content_type="text/plain"))
        _client(opener).write("update", "schedule", {"id": "s1", "lecturerId": "l1"})
        req = opener.requests[0]
        assert req.get_method() == "POST"
        assert req.get_header("Content-type") == "text/plain"
        assert opener.posted == [{
            "action": "update", "table": "schedule",
            "data": {"id": "s1", "lecturerId": "l1"}, "id": "s1",
        }]

    def test_write_does_not_wait_for_body(self):
        """Schreiben nutzt den kurzen Timeout und liest die Antwort nicht."""
        response = FakeResponse("ok", content_type="text/plain")
        opener = FakeOpener(response)
        _client(opener).write("delete", "schedule", {"id": "s1"})
        assert opener.timeouts == [2]
        assert response.was_read is False

    def test_fetch_uses_read_timeout(self, remote_payload):
        opener = FakeOpener(FakeResponse(remote_payload))
        _client(opener).fetch_all()
        assert opener.timeouts == [5]

    def test_write_bulk_has_no_id(self):
        opener = FakeOpener(FakeResponse("ok", content_type="text/plain"))
        _client(opener).write("bulk_add", "rooms", [{"id": "r1"}])
        assert "id" not in opener.posted[0]

    def test_write_rejects_unknown_action_and_table(self):
        client = _client(FakeOpener())
        with pytest.raises(ValueError):
            client.write("upsert", "rooms", {})
        with pytest.raises(ValueError):
            client.write("add", "students", {})

    def test_write_network_error(self):
        opener = FakeOpener(error=urllib.error.URLError("offline"))
        with pytest.raises(SyncError, match="Schreibfehler"):
            _client(opener).write("delete", "rooms", {"id": "r1"})


# ─── ADAPTER ──────────────────────────────────────────────────────────────────

class TestSyncAdapter:
    def test_refresh_replaces_store(self, remote_payload):
        store = make_store([make_item("lokal")])
        adapter = SyncAdapter(store, _client(FakeOpener(FakeResponse(remote_payload))))
        assert adapter.refresh()
        assert [s.id for s in store.schedule] == ["s1"]
        assert [r.id for r in store.rooms] == ["r1"]
        assert store.remote_connected
        assert store.last_sync_error is None
        assert store.fetched_at is not None

    def test_refresh_keeps_classes_when_remote_has_none(self, remote_payload):
        remote_payload["classes"] = []
        store = make_store()
        SyncAdapter(store, _client(FakeOpener(FakeResponse(remote_payload)))).refresh()
        assert [c.name for c in store.classes] == ["PDB01", "PDB02", "PDB03"]

    def test_refresh_failure_keeps_local_state(self):
        store = make_store([make_item("lokal")])
        store.remote_connected = True
        adapter = SyncAdapter(store, _client(FakeOpener(FakeResponse({"error": "kaputt"}))))
        assert not adapter.refresh()
        assert [s.id for s in store.schedule] == ["lokal"]
        assert not store.remote_connected
        assert "kaputt" in store.last_sync_error

    def test_refresh_without_client(self, store):
        assert not SyncAdapter(store).refresh()

    def test_push_offline_is_skipped(self, store):
        """Vor der ersten erfolgreichen Abfrage wird nichts gesendet."""
        opener = FakeOpener()
        SyncAdapter(store, _client(opener)).push("add", "rooms", {"id": "r9"})
        assert opener.requests == []

    def test_push_online(self, store):
        opener = FakeOpener(FakeResponse("ok", content_type="text/plain"))
        store.remote_connected = True
        SyncAdapter(store, _client(opener)).push("add", "rooms", {"id": "r9"})
        assert opener.posted[0]["table"] == "rooms"

    def test_push_failure_marks_offline_without_raising(self, store):
        store.remote_connected = True
        adapter = SyncAdapter(store, _client(FakeOpener(error=OSError("reset"))))
        adapter.push("delete", "rooms", {"id": "r1"})
        assert not store.remote_connected
        assert "Schreibfehler" in store.last_sync_error
        assert not adapter.online

    def test_push_bulk_skips_empty(self, store):
        opener = FakeOpener()
        store.remote_connected = True
        SyncAdapter(store, _client(opener)).push_bulk("rooms", [])
        assert opener.requests == []

    def test_build_sync(self):
        store = EntityStore()
        assert build_sync(AppConfig(), store).client is None
        config = AppConfig(remote=RemoteConfig(sheet_url=URL, timeout_seconds=3,
                                                write_timeout_seconds=1.5))
        adapter = build_sync(config, store)
        assert adapter.client.url == URL
        assert adapter.client.timeout == 3
        assert adapter.client.write_timeout == 1.5
