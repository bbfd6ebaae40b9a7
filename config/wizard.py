"""Interaktiver Setup-Wizard für die Ersteinrichtung des Vorlesungsplans.

Nutzt rich für schöne Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.defaults import default_config
from config.schema import AdminConfig, AppConfig, ImportConfig, ImportPolicy, RemoteConfig

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


# ─── SCHRITTE ───

def _wizard_institution() -> str:
    _header("Schritt 1: Hochschule")
    return Prompt.ask("Name der Hochschule", default=default_config().institution_name)


def _wizard_remote() -> RemoteConfig:
    _header("Schritt 2: Spreadsheet")
    _info("Die Web-App liefert alle Tabellen per GET und nimmt Änderungen per POST an.")
    _info("Ohne URL arbeitet die Anwendung nur mit dem lokalen Stand.")
    url = Prompt.ask("Web-App-URL", default="")
    return RemoteConfig(sheet_url=url.strip())


def _wizard_admin() -> AdminConfig:
    _header("Schritt 3: Administrator")
    user = Prompt.ask("Benutzername", default="admin")
    pw = Prompt.ask("Passwort", password=True, default="admin")
    return AdminConfig(username=user, password=pw)


def _wizard_imports() -> ImportConfig:
    _header("Schritt 4: Import")
    _info("Im Spreadsheet-Betrieb werden importierte Termine ungeprüft übernommen.")
    checked = Confirm.ask("Importierte Termine stattdessen auf Konflikte prüfen?",
                          default=False)
    return ImportConfig(
        schedule_policy=ImportPolicy.CHECKED if checked else ImportPolicy.TRUSTED
    )


def _show_summary(config: AppConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.SIMPLE)
    table.add_column("Bereich", style="bold")
    table.add_column("Wert")
    table.add_row("Hochschule", config.institution_name)
    table.add_row("Spreadsheet", config.remote.sheet_url or "offline")
    table.add_row("Administrator", config.admin.username)
    table.add_row("Termin-Import", config.imports.schedule_policy.value)
    table.add_row("Lerngruppen", str(config.default_class_count))
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[AppConfig]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        Fertige AppConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen beim Vorlesungsplan![/bold]\n\n"
        "Der Wizard richtet die Anbindung an das Spreadsheet ein.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Vorlesungsplan[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        config = default_config().model_copy(update={
            "institution_name": _wizard_institution(),
            "remote": _wizard_remote(),
            "admin": _wizard_admin(),
            "imports": _wizard_imports(),
        })
        n = IntPrompt.ask("Anzahl Standard-Lerngruppen", default=config.default_class_count)
        config = config.model_copy(update={"default_class_count": n})

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
