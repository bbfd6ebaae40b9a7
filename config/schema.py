from enum import Enum

from pydantic import BaseModel, Field


class ImportPolicy(str, Enum):
    """Umgang mit importierten Terminen."""
    # Zeilen werden ohne Konfliktprüfung übernommen (Verhalten des Spreadsheets)
    TRUSTED = "trusted"
    # Jede Zeile läuft durch die Konfliktprüfung, Kollisionen werden abgelehnt
    CHECKED = "checked"


# ─── SPREADSHEET-ANBINDUNG ───

class RemoteConfig(BaseModel):
    """Anbindung an den Spreadsheet-Endpunkt (Web-App)."""
    # URL der veröffentlichten Web-App; leer = nur lokal arbeiten
    sheet_url: str = ""
    # Timeout pro HTTP-Anfrage in Sekunden
    timeout_seconds: float = Field(20.0, gt=0, le=300)
    # Kürzerer Timeout für Schreibzugriffe; die Antwort wird nicht abgewartet
    write_timeout_seconds: float = Field(5.0, gt=0, le=60)


class AdminConfig(BaseModel):
    """Zugangsdaten des Administrators (nicht gehärtet)."""
    username: str = "admin"
    password: str = "admin"


class StorageConfig(BaseModel):
    """Lokale Dateien."""
    # Lokaler JSON-Stand aller Tabellen (Cache der letzten Abfrage)
    snapshot_path: str = "output/vorlesungsplan.json"
    # Angemeldete Sitzung
    session_path: str = "output/session.json"
    # Zielordner für Excel- und PDF-Exporte
    output_dir: str = "output"


class ImportConfig(BaseModel):
    """Regeln für Excel-Importe."""
    schedule_policy: ImportPolicy = ImportPolicy.TRUSTED


# ─── GESAMTKONFIGURATION ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration des Vorlesungsplans."""
    # Name der Hochschule (Kopfzeile in PDF-Exporten)
    institution_name: str = "Muster-Universität"
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)
    # Anzahl Standard-Lerngruppen (PDB01 .. PDB125), falls das Spreadsheet keine liefert
    default_class_count: int = Field(125, ge=0, le=999)
    # Präfix der Standard-Lerngruppen
    class_prefix: str = "PDB"
    # Log-Level der Konsole (DEBUG, INFO, WARNING, ERROR)
    log_level: str = Field("WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
