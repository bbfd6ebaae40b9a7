"""Fire-and-forget-Anbindung des lokalen Stands an das Spreadsheet.

Lokale Änderungen sind bereits übernommen, wenn ``push`` aufgerufen wird.
Schreibfehler werden geloggt und setzen den Stand auf offline; es gibt
keinen Rollback und keine Wiederholung. Die einzige Wiederherstellung ist
eine vollständige Neuabfrage (``refresh``).

Ein Kommandozeilenaufruf endet erst, wenn seine Schreibanfragen abgesetzt
sind. Deshalb wartet ``SheetsClient.write`` nur auf den Statuscode, liest
den Antwortinhalt nicht und nutzt einen eigenen, kurzen Timeout
(``remote.write_timeout_seconds``). Ein Schreibzugriff, der länger braucht,
zählt als fehlgeschlagen und setzt den Stand auf offline, auch wenn das
Spreadsheet ihn später noch übernimmt; die nächste Abfrage gleicht das aus.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from config.schema import AppConfig
from models.store import EntityStore
from sync.sheets import SheetsClient, SyncError

logger = logging.getLogger(__name__)


class SyncAdapter:
    def __init__(self, store: EntityStore, client: Optional[SheetsClient] = None):
        self.store = store
        self.client = client

    @property
    def online(self) -> bool:
        """Schreiben nur bei konfigurierter URL und erfolgreicher letzter Abfrage."""
        return self.client is not None and self.store.remote_connected

    def refresh(self) -> bool:
        """Ersetzt den kompletten lokalen Stand durch den des Spreadsheets.

        Returns:
            True bei Erfolg. Bei Fehlern bleibt der lokale Stand unverändert,
            der Store wird als offline markiert und die Meldung gespeichert.
        """
        if self.client is None:
            logger.warning("Keine Spreadsheet-URL konfiguriert, Abfrage übersprungen")
            return False
        try:
            snapshot = self.client.fetch_all()
        except SyncError as e:
            logger.error(f"Abfrage fehlgeschlagen: {e}")
            self.store.remote_connected = False
            self.store.last_sync_error = str(e)
            return False

        self.store.replace_all(
            courses=snapshot.courses,
            lecturers=snapshot.lecturers,
            rooms=snapshot.rooms,
            classes=snapshot.classes,
            schedule=snapshot.schedule,
        )
        self.store.remote_connected = True
        self.store.last_sync_error = None
        self.store.fetched_at = datetime.now(timezone.utc)
        return True

    def push(self, action: str, table: str, payload: Any) -> None:
        """Sendet eine Änderung; wirft nie."""
        if not self.online:
            logger.debug(f"Offline, '{action}' auf '{table}' nur lokal")
            return
        try:
            self.client.write(action, table, payload)
        except SyncError as e:
            logger.error(f"Synchronisierung fehlgeschlagen: {e}")
            self.store.remote_connected = False
            self.store.last_sync_error = str(e)

    def push_bulk(self, table: str, records: list[dict]) -> None:
        if not records:
            return
        self.push("bulk_add", table, records)


def build_sync(config: AppConfig, store: EntityStore) -> SyncAdapter:
    """Adapter gemäß Konfiguration; ohne URL ohne Client (rein lokal)."""
    client = None
    if config.remote.sheet_url.strip():
        client = SheetsClient(config.remote.sheet_url,
                              timeout=config.remote.timeout_seconds,
                              write_timeout=config.remote.write_timeout_seconds)
    return SyncAdapter(store, client)
