"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import AppConfig, ImportConfig, ImportPolicy, RemoteConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Vorlesungsplan - Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "remote": (
        "Spreadsheet",
        "URL der Web-App. Leer lassen, um nur mit dem lokalen Stand zu arbeiten.",
    ),
    "admin": (
        "Administrator",
        "Einfache Anmeldung, nicht gehärtet.",
    ),
    "storage": (
        "Dateien",
        None,
    ),
    "imports": (
        "Import",
        "schedule_policy: trusted = ohne Konfliktprüfung, checked = mit Prüfung.",
    ),
    "default_class_count": (
        "Lerngruppen",
        "Standard-Lerngruppen, falls das Spreadsheet keine liefert.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "app_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'vorlesungsplan setup' aus, um die Anwendung einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AppConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie load(), aber ohne Datei gilt die Default-Konfiguration."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            from config.defaults import default_config
            return default_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        remote_map = CommentedMap(cm["remote"])
        remote_map.yaml_add_eol_comment("Sekunden pro Anfrage", "timeout_seconds")
        remote_map.yaml_add_eol_comment("Sekunden pro Schreibzugriff", "write_timeout_seconds")
        cm["remote"] = remote_map

        return cm

    # ─── Anzeige ───

    def show(self, config: AppConfig) -> None:
        table = Table(title="Konfiguration", box=box.ROUNDED)
        table.add_column("Parameter", style="bold")
        table.add_column("Wert")
        table.add_row("Hochschule", config.institution_name)
        table.add_row("Spreadsheet-URL", config.remote.sheet_url or "[dim](offline)[/dim]")
        table.add_row("Timeout", f"{config.remote.timeout_seconds:g}s")
        table.add_row("Schreib-Timeout", f"{config.remote.write_timeout_seconds:g}s")
        table.add_row("Admin-Benutzer", config.admin.username)
        table.add_row("Lokaler Stand", config.storage.snapshot_path)
        table.add_row("Exportordner", config.storage.output_dir)
        table.add_row("Termin-Import", config.imports.schedule_policy.value)
        table.add_row(
            "Standard-Lerngruppen",
            f"{config.default_class_count} ({config.class_prefix}01 …)",
        )
        table.add_row("Log-Level", config.log_level)
        console.print(table)

    # ─── Interaktives Bearbeiten ───

    def edit_interactive(self, config: AppConfig) -> AppConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Spreadsheet-Anbindung")
            console.print("  [bold]2.[/bold] Administrator-Zugang")
            console.print("  [bold]3.[/bold] Import-Richtlinie")
            console.print("  [bold]4.[/bold] Standard-Lerngruppen")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(
                    update={"remote": self._edit_remote(config.remote)}
                )
            elif choice == "2":
                user = Prompt.ask("Benutzername", default=config.admin.username)
                pw = Prompt.ask("Passwort", password=True,
                                default=config.admin.password)
                config = config.model_copy(update={
                    "admin": config.admin.model_copy(
                        update={"username": user, "password": pw})
                })
            elif choice == "3":
                config = config.model_copy(
                    update={"imports": self._edit_imports(config.imports)}
                )
            elif choice == "4":
                n = IntPrompt.ask("Anzahl Lerngruppen",
                                  default=config.default_class_count)
                prefix = Prompt.ask("Präfix", default=config.class_prefix)
                config = config.model_copy(
                    update={"default_class_count": n, "class_prefix": prefix}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_remote(self, rc: RemoteConfig) -> RemoteConfig:
        url = Prompt.ask("Web-App-URL (leer = offline)", default=rc.sheet_url)
        timeout = FloatPrompt.ask("Timeout in Sekunden", default=rc.timeout_seconds)
        write_timeout = FloatPrompt.ask(
            "Timeout für Schreibzugriffe", default=rc.write_timeout_seconds
        )
        return RemoteConfig(sheet_url=url.strip(), timeout_seconds=timeout,
                            write_timeout_seconds=write_timeout)

    def _edit_imports(self, ic: ImportConfig) -> ImportConfig:
        console.print(
            "[dim]trusted: importierte Termine werden ohne Konfliktprüfung übernommen.\n"
            "checked: jede Zeile wird geprüft, Kollisionen werden abgelehnt.[/dim]"
        )
        checked = Confirm.ask(
            "Importierte Termine auf Konflikte prüfen?",
            default=ic.schedule_policy == ImportPolicy.CHECKED,
        )
        return ImportConfig(
            schedule_policy=ImportPolicy.CHECKED if checked else ImportPolicy.TRUSTED
        )
