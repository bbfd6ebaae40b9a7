"""HTTP-Client für den Spreadsheet-Endpunkt (Web-App).

Der Endpunkt bietet genau zwei Operationen:

  GET  <url>?t=<ms>   → {"courses": [...], "lecturers": [...], "rooms": [...],
                         "classes": [...], "schedule": [...]} oder {"error": "..."}
  POST <url>          → Body (text/plain): {"action", "table", "data", "id"}

``action`` ist eine von add, bulk_add, delete, update. ``update`` ersetzt
auf Serverseite die Zeile mit gleicher ID.
"""

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from models.class_name import ClassName
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.schedule_item import ScheduleItem

logger = logging.getLogger(__name__)

# Spalten der Tabellenblätter, in Blattreihenfolge
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "courses": ("id", "code", "name", "credits"),
    "lecturers": ("id", "name", "nip", "position", "expertise"),
    "rooms": ("id", "name", "capacity", "building", "location"),
    "classes": ("id", "name"),
    "schedule": ("id", "courseId", "lecturerId", "roomId", "className", "day", "timeSlot"),
}

WRITE_ACTIONS: tuple[str, ...] = ("add", "bulk_add", "delete", "update")

_TABLE_MODELS = {
    "courses": Course,
    "lecturers": Lecturer,
    "rooms": Room,
    "classes": ClassName,
    "schedule": ScheduleItem,
}


class SyncError(Exception):
    """Spreadsheet nicht erreichbar oder Antwort unbrauchbar."""


class RemoteSnapshot(BaseModel):
    """Vollständiger Tabellenstand aus einem GET."""

    courses: list[Course] = []
    lecturers: list[Lecturer] = []
    rooms: list[Room] = []
    classes: list[ClassName] = []
    schedule: list[ScheduleItem] = []
    dropped_rows: int = 0     # Zeilen, die nicht validiert werden konnten


def parse_snapshot(raw: dict[str, Any]) -> RemoteSnapshot:
    """Validiert jede Zeile einzeln; ungültige Zeilen werden verworfen und geloggt.

    ``credits`` und ``capacity`` werden dabei zu Zahlen (Ungültiges → 0).
    """
    tables: dict[str, list] = {}
    dropped = 0
    for name, model in _TABLE_MODELS.items():
        rows = raw.get(name) or []
        if not isinstance(rows, list):
            logger.warning(f"Tabelle '{name}' ist keine Liste, wird ignoriert")
            rows = []
        parsed = []
        for idx, row in enumerate(rows):
            try:
                parsed.append(model.model_validate(row))
            except ValidationError as e:
                dropped += 1
                logger.warning(f"{name}[{idx}] verworfen: {e.errors()[0]['msg']}")
        tables[name] = parsed
    return RemoteSnapshot(**tables, dropped_rows=dropped)


class SheetsClient:
    """Synchroner Client für GET (alles laden) und POST (eine Änderung)."""

    def __init__(
        self,
        url: str,
        timeout: float = 20.0,
        write_timeout: float = 5.0,
        opener: Optional[Callable[..., Any]] = None,
    ):
        if not url.strip():
            raise ValueError("Spreadsheet-URL fehlt.")
        self.url = url.strip()
        self.timeout = timeout
        self.write_timeout = write_timeout
        # Für Tests austauschbar; Signatur wie urllib.request.urlopen
        self._open = opener or urllib.request.urlopen

    def fetch_all(self) -> RemoteSnapshot:
        """Lädt alle Tabellen.

        Raises:
            SyncError: Netzwerkfehler, HTTP-Status ≠ 2xx, keine JSON-Antwort
                oder ``{"error": ...}`` vom Endpunkt.
        """
        separator = "&" if "?" in self.url else "?"
        fetch_url = f"{self.url}{separator}t={int(time.time() * 1000)}"
        req = urllib.request.Request(fetch_url, method="GET")
        try:
            with self._open(req, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise SyncError(f"Serverfehler: {status}")
                content_type = response.headers.get("Content-Type") or ""
                if "application/json" not in content_type:
                    raise SyncError(
                        "Antwort ist kein JSON. URL und Freigabe ('Jeder') prüfen."
                    )
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise SyncError(f"Serverfehler: {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise SyncError(f"Verbindung fehlgeschlagen: {e.reason}") from e
        except OSError as e:
            raise SyncError(f"Verbindung fehlgeschlagen: {e}") from e

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise SyncError(f"Ungültiges JSON vom Spreadsheet: {e}") from e
        if not isinstance(data, dict):
            raise SyncError("Unerwartete Antwort vom Spreadsheet.")
        if data.get("error"):
            raise SyncError(f"Spreadsheet meldet Fehler: {data['error']}")

        snapshot = parse_snapshot(data)
        logger.info(
            f"Spreadsheet geladen: {len(snapshot.schedule)} Termine, "
            f"{snapshot.dropped_rows} Zeilen verworfen"
        )
        return snapshot

    def write(self, action: str, table: str, payload: Any) -> None:
        """Sendet eine Änderung, ohne auf den Antwortinhalt zu warten.

        Blockiert höchstens ``write_timeout`` Sekunden bis zum Eintreffen des
        Statuscodes; der Body wird nicht gelesen.

        Raises:
            ValueError: unbekannte Aktion oder Tabelle.
            SyncError: Netzwerk- oder HTTP-Fehler.
        """
        if action not in WRITE_ACTIONS:
            raise ValueError(f"Unbekannte Aktion: {action}")
        if table not in TABLE_COLUMNS:
            raise ValueError(f"Unbekannte Tabelle: {table}")

        body: dict[str, Any] = {"action": action, "table": table, "data": payload}
        if isinstance(payload, dict) and "id" in payload:
            body["id"] = payload["id"]

        req = urllib.request.Request(
            self.url,
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "text/plain"},
            method="POST",
        )
        try:
            with self._open(req, timeout=self.write_timeout):
                pass
        except urllib.error.HTTPError as e:
            raise SyncError(f"Schreibfehler ({action} {table}): {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise SyncError(f"Schreibfehler ({action} {table}): {e.reason}") from e
        except OSError as e:
            raise SyncError(f"Schreibfehler ({action} {table}): {e}") from e
