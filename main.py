"""Vorlesungsplan: Haupt-CLI.

Verwendung:
  vorlesungsplan setup                        Ersteinrichtung (Wizard)
  vorlesungsplan config show|edit|set-url     Konfiguration
  vorlesungsplan login|logout|whoami          Anmeldung (Admin / Lehrkraft)
  vorlesungsplan pull                         Alle Tabellen neu vom Spreadsheet laden
  vorlesungsplan stats                        Übersicht (Dashboard)
  vorlesungsplan generate                     Lokale Demo-Daten erzeugen
  vorlesungsplan data list|add|delete|import|export <tabelle>
  vorlesungsplan schedule add|remove|show|check|import|export
  vorlesungsplan portal open|mine|claim|release
  vorlesungsplan monitor --day Senin          Raumauslastung
  vorlesungsplan browse                       Terminal-Browser
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger("vorlesungsplan")


# ─── HILFSFUNKTIONEN ──────────────────────────────────────────────────────────

def _load_config():
    """Lädt die Konfiguration (Default ohne Datei) oder bricht ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_store(config):
    from models.store import EntityStore
    path = Path(config.storage.snapshot_path)
    try:
        return EntityStore.load_or_new(
            path, class_count=config.default_class_count,
            class_prefix=config.class_prefix,
        )
    except ValueError as e:
        console.print(f"[red]Lokaler Stand unlesbar: {path}[/red]\n{e}")
        sys.exit(1)


def _save_store(config, store) -> None:
    store.save_json(Path(config.storage.snapshot_path))


def _context():
    """(config, store, sync) für Befehle, die mit dem Bestand arbeiten."""
    from sync.adapter import build_sync
    _, config = _load_config()
    store = _load_store(config)
    return config, store, build_sync(config, store)


def _warn_if_offline(store, sync) -> None:
    if sync.client is not None and not store.remote_connected:
        console.print(
            "[yellow]⚠  Offline: Änderungen werden nur lokal gespeichert. "
            "Mit [bold]pull[/bold] neu verbinden.[/yellow]"
        )


def _current_user(config):
    from models.user import load_session
    return load_session(Path(config.storage.session_path))


def _require_admin(config):
    from models.user import UserRole
    user = _current_user(config)
    if user is None or user.role != UserRole.ADMIN:
        console.print(
            "[red]Nur für Administratoren.[/red] "
            "Anmelden mit [bold]vorlesungsplan login --role admin[/bold]."
        )
        sys.exit(1)
    return user


def _portal_lecturer(config, store, lecturer_ref: Optional[str]) -> str:
    """Lehrkraft für Portal-Befehle: eigene Sitzung oder Admin mit --lecturer."""
    from models.user import UserRole
    user = _current_user(config)
    if user is None:
        console.print("[red]Nicht angemeldet.[/red] Zuerst [bold]login[/bold] ausführen.")
        sys.exit(1)
    if user.role == UserRole.LECTURER:
        return user.id
    if not lecturer_ref:
        console.print("[red]Als Administrator bitte --lecturer angeben.[/red]")
        sys.exit(1)
    lecturer = store.find_lecturer(lecturer_ref)
    if lecturer is None:
        console.print(f"[red]Lehrkraft '{lecturer_ref}' nicht gefunden.[/red]")
        sys.exit(1)
    return lecturer.id


def _parse_day(ctx, param, value):
    if value is None:
        return None
    from models.timeslot import Day
    day = Day.parse(value)
    if day is None:
        raise click.BadParameter(
            f"Unbekannter Tag '{value}'. Erlaubt: {', '.join(d.value for d in Day)}"
        )
    return day


def _print_result(result, success_text: str) -> None:
    if result.ok:
        console.print(f"[green]✓[/green] {success_text}")
        return
    if result.reason.is_missing_selection:
        console.print(f"[yellow bold]✗ Auswahl unvollständig:[/yellow bold] {result.message}")
    else:
        console.print(f"[red bold]✗ Abgelehnt:[/red bold] {result.message}")
    sys.exit(1)


def _schedule_table(store, items, title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Tag")
    table.add_column("Zeitfenster")
    table.add_column("Lerngruppe")
    table.add_column("Lehrveranstaltung")
    table.add_column("Lehrkraft")
    table.add_column("Raum")
    for s in items:
        lecturer = store.lecturer_label(s.lecturer_id)
        table.add_row(
            s.id, s.day.value, s.time_slot, s.class_name,
            store.course_label(s.course_id),
            f"[yellow]{lecturer}[/yellow]" if s.is_open else lecturer,
            store.room_label(s.room_id),
        )
    return table


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]vorlesungsplan config edit[/bold] zum Bearbeiten."
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]vorlesungsplan pull[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config()
    mgr.show(config)


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config()
    mgr.edit_interactive(config)


@cmd_config.command("set-url")
@click.argument("url")
def config_set_url(url: str):
    """Setzt die URL der Spreadsheet-Web-App (leer = offline)."""
    mgr, config = _load_config()
    config = config.model_copy(update={
        "remote": config.remote.model_copy(update={"sheet_url": url.strip()})
    })
    mgr.save(config)


# ─── ANMELDUNG ────────────────────────────────────────────────────────────────

@click.command("login")
@click.option("--role", type=click.Choice(["admin", "lecturer"]), default="lecturer",
              show_default=True, help="Administrator oder Lehrkraft (NIP).")
@click.option("--username", "-u", prompt="Benutzername / NIP")
@click.option("--password", "-p", prompt="Passwort", hide_input=True)
def cmd_login(role: str, username: str, password: str):
    """Meldet einen Administrator oder eine Lehrkraft an."""
    from models.user import AuthenticationError, UserRole, authenticate, save_session

    _, config = _load_config()
    store = _load_store(config)
    try:
        user = authenticate(
            UserRole(role), username.strip(), password, store.lecturers,
            admin_username=config.admin.username,
            admin_password=config.admin.password,
        )
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    save_session(user, Path(config.storage.session_path))
    console.print(f"[green]✓[/green] Angemeldet als [bold]{user.name}[/bold] ({user.role.value})")


@click.command("logout")
def cmd_logout():
    """Beendet die Sitzung."""
    from models.user import clear_session
    _, config = _load_config()
    clear_session(Path(config.storage.session_path))
    console.print("[green]✓[/green] Abgemeldet.")


@click.command("whoami")
def cmd_whoami():
    """Zeigt die aktuelle Sitzung."""
    _, config = _load_config()
    user = _current_user(config)
    if user is None:
        console.print("[dim]Nicht angemeldet.[/dim]")
        return
    console.print(f"{user.name} ({user.role.value}, {user.id})")


# ─── SYNCHRONISIERUNG ─────────────────────────────────────────────────────────

@click.command("pull")
def cmd_pull():
    """Lädt alle Tabellen neu vom Spreadsheet (ersetzt den lokalen Stand)."""
    config, store, sync = _context()
    if sync.client is None:
        console.print(
            "[red]Keine Spreadsheet-URL konfiguriert.[/red] "
            "Mit [bold]config set-url[/bold] setzen."
        )
        sys.exit(1)
    with console.status("Verbinde mit Spreadsheet..."):
        ok = sync.refresh()
    _save_store(config, store)
    if not ok:
        console.print(f"[red bold]Abfrage fehlgeschlagen:[/red bold] {store.last_sync_error}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Aktualisiert.\n\n{store.summary()}")


@click.command("stats")
def cmd_stats():
    """Übersicht über den Datenbestand."""
    from scheduling.queries import courses_with_open_slots

    _, config = _load_config()
    store = _load_store(config)
    console.print(Panel(store.summary(), title=config.institution_name, border_style="cyan"))
    if store.last_sync_error:
        console.print(f"[red]Letzter Sync-Fehler:[/red] {store.last_sync_error}")
    open_courses = courses_with_open_slots(store)
    if open_courses:
        table = Table(title="Offene Termine je Lehrveranstaltung", box=box.SIMPLE)
        table.add_column("Kode")
        table.add_column("Lehrveranstaltung")
        table.add_column("Offen", justify="right")
        for course, count in open_courses:
            table.add_row(course.code or "-", course.name, str(count))
        console.print(table)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--yes", "-y", is_flag=True, default=False,
              help="Vorhandenen lokalen Stand ohne Rückfrage ersetzen.")
def cmd_generate(seed: int, yes: bool):
    """Erzeugt einen lokalen Demo-Bestand (ohne Spreadsheet)."""
    from data.demo_data import DemoDataGenerator

    _, config = _load_config()
    path = Path(config.storage.snapshot_path)
    if path.exists() and not yes:
        if not click.confirm(f"{path} existiert. Ersetzen?", default=False):
            return

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = DemoDataGenerator(seed=seed)
    store = gen.generate(class_prefix=config.class_prefix)
    gen.print_summary(store)
    _save_store(config, store)
    console.print(f"[green]✓[/green] Gespeichert: {path}")


# ─── STAMMDATEN ───────────────────────────────────────────────────────────────

_TABLE_CHOICE = click.Choice(["courses", "lecturers", "rooms", "classes"])


@click.group("data")
def cmd_data():
    """Stammdaten: Lehrveranstaltungen, Lehrkräfte, Räume, Lerngruppen."""


@cmd_data.command("list")
@click.argument("table_name", type=_TABLE_CHOICE)
def data_list(table_name: str):
    """Listet eine Tabelle auf."""
    from data.tables import TableManager, get_schema

    _, config = _load_config()
    store = _load_store(config)
    schema = get_schema(table_name)
    rows = TableManager(store, schema).export_rows()

    table = Table(title=f"{schema.title} ({len(rows)})", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    for col in schema.columns:
        table.add_column(col.label)
    for record, row in zip(store.table(table_name), rows):
        table.add_row(record.id, *[str(v) for v in row.values()])
    console.print(table)


@cmd_data.command("add")
@click.argument("table_name", type=_TABLE_CHOICE)
@click.option("--set", "values", multiple=True, metavar="SCHLÜSSEL=WERT",
              help="Feldwert, z.B. --set name=Basis Data. Fehlende Felder werden abgefragt.")
def data_add(table_name: str, values: tuple[str, ...]):
    """Legt einen Datensatz an."""
    from rich.prompt import Prompt
    from data.tables import RecordValidationError, TableManager, get_schema

    config, store, sync = _context()
    _require_admin(config)
    schema = get_schema(table_name)

    given: dict[str, str] = {}
    for pair in values:
        key, sep, value = pair.partition("=")
        if not sep or schema.column(key.strip()) is None:
            console.print(
                f"[red]Ungültig: '{pair}'. Felder: "
                f"{', '.join(c.key for c in schema.columns)}[/red]"
            )
            sys.exit(1)
        given[key.strip()] = value.strip()
    if not values:
        for col in schema.columns:
            given[col.key] = Prompt.ask(
                col.label, choices=list(col.options) or None, default="",
                show_choices=bool(col.options),
            )

    try:
        record = TableManager(store, schema, sync).add(given)
    except RecordValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _save_store(config, store)
    _warn_if_offline(store, sync)
    console.print(f"[green]✓[/green] {schema.title} angelegt: {record.id}")


@cmd_data.command("delete")
@click.argument("table_name", type=_TABLE_CHOICE)
@click.argument("record_id")
def data_delete(table_name: str, record_id: str):
    """Löscht einen Datensatz (Termine mit Verweis bleiben bestehen)."""
    from data.tables import TableManager, get_schema

    config, store, sync = _context()
    _require_admin(config)
    if not TableManager(store, get_schema(table_name), sync).delete(record_id):
        console.print(f"[red]Datensatz '{record_id}' nicht gefunden.[/red]")
        sys.exit(1)
    _save_store(config, store)
    _warn_if_offline(store, sync)
    console.print(f"[green]✓[/green] Gelöscht: {record_id}")


@cmd_data.command("import")
@click.argument("table_name", type=_TABLE_CHOICE)
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
def data_import(table_name: str, datei: Path):
    """Importiert Datensätze aus Excel (erstes Blatt, Überschriften wie im Export)."""
    from data.excel_import import ExcelImportError, import_table
    from data.tables import TableManager, get_schema

    config, store, sync = _context()
    _require_admin(config)
    try:
        report = import_table(datei, TableManager(store, get_schema(table_name), sync))
    except ExcelImportError as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    _save_store(config, store)
    report.print_rich()
    _warn_if_offline(store, sync)


@cmd_data.command("export")
@click.argument("table_name", type=_TABLE_CHOICE)
def data_export(table_name: str):
    """Exportiert eine Tabelle nach Excel."""
    from data.tables import get_schema
    from export.excel_export import ExcelExporter

    _, config = _load_config()
    store = _load_store(config)
    path = ExcelExporter(store).export_table(get_schema(table_name), Path(config.storage.output_dir))
    console.print(f"[green]✓[/green] Excel gespeichert: {path}")


# ─── WOCHENPLAN ───────────────────────────────────────────────────────────────

@click.group("schedule")
def cmd_schedule():
    """Wochenplan verwalten (Administrator)."""


@cmd_schedule.command("add")
@click.option("--course", "-c", "course_ref", default="", help="ID, Kode MK oder Name.")
@click.option("--room", "-r", "room_ref", default="", help="ID oder Raumname.")
@click.option("--class", "-k", "class_name", default="", help="Lerngruppe, z.B. PDB01.")
@click.option("--day", "-d", callback=_parse_day, help="Tag, z.B. Senin oder Montag.")
@click.option("--time", "-t", "time_slot", default="", help="Zeitfenster oder Nummer 1-5.")
@click.option("--lecturer", "-l", "lecturer_ref", default="",
              help="ID, NIP oder Name; leer = offener Termin.")
def schedule_add(course_ref, room_ref, class_name, day, time_slot, lecturer_ref):
    """Legt einen Termin an (mit Konfliktprüfung)."""
    from scheduling.engine import AssignmentEngine, Candidate

    config, store, sync = _context()
    _require_admin(config)

    course = store.find_course(course_ref) if course_ref else None
    room = store.find_room(room_ref) if room_ref else None
    lecturer = store.find_lecturer(lecturer_ref) if lecturer_ref else None
    candidate = Candidate(
        course_id=course.id if course else course_ref,
        room_id=room.id if room else room_ref,
        class_name=class_name.strip(),
        lecturer_id=lecturer.id if lecturer else lecturer_ref,
        day=day,
        time_slot=time_slot,
    )
    result = AssignmentEngine(store, sync).propose_assignment(candidate)
    if result.ok:
        _save_store(config, store)
        _warn_if_offline(store, sync)
    _print_result(result, f"Termin angelegt: {result.item.id if result.item else ''}")


@cmd_schedule.command("remove")
@click.argument("item_id")
def schedule_remove(item_id: str):
    """Löscht einen Termin."""
    from scheduling.engine import AssignmentEngine

    config, store, sync = _context()
    _require_admin(config)
    known = store.get("schedule", item_id) is not None
    AssignmentEngine(store, sync).remove_assignment(item_id)
    _save_store(config, store)
    _warn_if_offline(store, sync)
    if known:
        console.print(f"[green]✓[/green] Termin gelöscht: {item_id}")
    else:
        console.print(f"[yellow]Termin '{item_id}' war lokal nicht vorhanden.[/yellow]")


@cmd_schedule.command("show")
@click.option("--room", "-r", "room_ref", default=None, help="Wochenraster eines Raums.")
@click.option("--lecturer", "-l", "lecturer_ref", default=None,
              help="Wochenraster einer Lehrkraft; mit --room: freie Zellen für sie markieren.")
@click.option("--class", "-k", "class_ref", default=None,
              help="Nur mit --room: freie Zellen für diese Lerngruppe markieren.")
@click.option("--day", "-d", callback=_parse_day, help="Nur ein Tag (Liste).")
def schedule_show(room_ref, lecturer_ref, class_ref, day):
    """Zeigt den Wochenplan als Liste oder als Raster."""
    from export.tui_renderer import GRID_HEADERS, render_lecturer_rows, render_room_rows

    _, config = _load_config()
    store = _load_store(config)

    if class_ref and not room_ref:
        console.print("[red]--class ist nur zusammen mit --room möglich.[/red]")
        sys.exit(1)

    lecturer = None
    if lecturer_ref:
        lecturer = store.find_lecturer(lecturer_ref)
        if lecturer is None:
            console.print(f"[red]Lehrkraft '{lecturer_ref}' nicht gefunden.[/red]")
            sys.exit(1)
    if class_ref and store.class_by_name(class_ref) is None:
        console.print(f"[red]Lerngruppe '{class_ref}' nicht gefunden.[/red]")
        sys.exit(1)

    if room_ref or lecturer:
        if room_ref:
            room = store.find_room(room_ref)
            if room is None:
                console.print(f"[red]Raum '{room_ref}' nicht gefunden.[/red]")
                sys.exit(1)
            title = f"Raum {room.name}"
            selection = [x for x in (lecturer.name if lecturer else "", class_ref or "") if x]
            if selection:
                title += f" (frei für {' / '.join(selection)})"
            rows = render_room_rows(room.id, store,
                                    lecturer_id=lecturer.id if lecturer else "",
                                    class_name=class_ref or "")
        else:
            title, rows = lecturer.name, render_lecturer_rows(lecturer.id, store)
        table = Table(title=title, box=box.ROUNDED, show_lines=True)
        for header in GRID_HEADERS:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        console.print(table)
        return

    items = [s for s in store.schedule if day is None or s.day == day]
    items.sort(key=lambda s: (s.slot.sort_key, store.room_label(s.room_id)))
    console.print(_schedule_table(store, items, f"Wochenplan ({len(items)} Termine)"))


@cmd_schedule.command("check")
def schedule_check():
    """Prüft den gesamten Plan auf Doppelbelegungen und verwaiste Verweise."""
    from analysis.schedule_validator import ScheduleValidator

    _, config = _load_config()
    store = _load_store(config)
    report = ScheduleValidator().validate(store)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


@cmd_schedule.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--checked/--trusted", "checked", default=None,
              help="Konfliktprüfung erzwingen bzw. abschalten (Default: Konfiguration).")
def schedule_import(datei: Path, checked: Optional[bool]):
    """Importiert Termine aus Excel."""
    from analysis.schedule_validator import ScheduleValidator
    from config.schema import ImportPolicy
    from data.excel_import import ExcelImportError, import_schedule
    from scheduling.engine import AssignmentEngine

    config, store, sync = _context()
    _require_admin(config)
    policy = config.imports.schedule_policy
    if checked is not None:
        policy = ImportPolicy.CHECKED if checked else ImportPolicy.TRUSTED

    try:
        report = import_schedule(datei, AssignmentEngine(store, sync), policy)
    except ExcelImportError as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    _save_store(config, store)
    report.print_rich()
    _warn_if_offline(store, sync)

    if not report.checked and report.imported:
        validation = ScheduleValidator().validate(store)
        if not validation.is_valid:
            validation.print_rich()


@cmd_schedule.command("export")
def schedule_export():
    """Exportiert den kompletten Wochenplan nach Excel."""
    from export.excel_export import ExcelExporter

    _, config = _load_config()
    store = _load_store(config)
    if not store.schedule:
        console.print("[yellow]Keine Termine vorhanden.[/yellow]")
        return
    path = ExcelExporter(store).export_schedule(Path(config.storage.output_dir))
    console.print(f"[green]✓[/green] Excel gespeichert: {path}")


# ─── PORTAL ───────────────────────────────────────────────────────────────────

@click.group("portal")
def cmd_portal():
    """Dozierenden-Portal: offene Termine übernehmen und freigeben."""


@cmd_portal.command("open")
@click.option("--course", "-c", "course_ref", default=None,
              help="Nur offene Termine dieser Lehrveranstaltung.")
def portal_open(course_ref: Optional[str]):
    """Zeigt Lehrveranstaltungen mit offenen Terminen bzw. deren Termine."""
    from scheduling.queries import courses_with_open_slots, open_sessions

    _, config = _load_config()
    store = _load_store(config)
    if course_ref:
        course = store.find_course(course_ref)
        if course is None:
            console.print(f"[red]Lehrveranstaltung '{course_ref}' nicht gefunden.[/red]")
            sys.exit(1)
        items = open_sessions(store.schedule, course.id)
        console.print(_schedule_table(store, items, f"Offene Termine: {course.name}"))
        return

    courses = courses_with_open_slots(store)
    if not courses:
        console.print("[dim]Keine offenen Termine.[/dim]")
        return
    table = Table(title="Lehrveranstaltungen mit offenen Terminen", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Kode")
    table.add_column("Lehrveranstaltung")
    table.add_column("SKS", justify="right")
    table.add_column("Offen", justify="right")
    for course, count in courses:
        table.add_row(course.id, course.code or "-", course.name,
                      str(course.credit_hours), str(count))
    console.print(table)


@cmd_portal.command("mine")
@click.option("--lecturer", "-l", "lecturer_ref", default=None,
              help="Nur für Administratoren: Lehrkraft (ID, NIP oder Name).")
def portal_mine(lecturer_ref: Optional[str]):
    """Eigener Lehrplan, nach Tag und Zeitfenster sortiert."""
    from scheduling.queries import lecturer_schedule

    _, config = _load_config()
    store = _load_store(config)
    lecturer_id = _portal_lecturer(config, store, lecturer_ref)
    items = lecturer_schedule(store.schedule, lecturer_id)
    console.print(_schedule_table(
        store, items, f"Lehrplan {store.lecturer_label(lecturer_id)} ({len(items)})"
    ))


@cmd_portal.command("claim")
@click.argument("item_id")
@click.option("--lecturer", "-l", "lecturer_ref", default=None,
              help="Nur für Administratoren: für diese Lehrkraft übernehmen.")
def portal_claim(item_id: str, lecturer_ref: Optional[str]):
    """Übernimmt einen offenen Termin."""
    from scheduling.claims import SlotClaimWorkflow

    config, store, sync = _context()
    lecturer_id = _portal_lecturer(config, store, lecturer_ref)
    result = SlotClaimWorkflow(store, sync).claim(item_id, lecturer_id)
    if result.ok:
        _save_store(config, store)
        _warn_if_offline(store, sync)
    _print_result(result, f"Termin übernommen: {item_id}")


@cmd_portal.command("release")
@click.argument("item_id")
@click.option("--lecturer", "-l", "lecturer_ref", default=None,
              help="Nur für Administratoren: Lehrkraft, deren Termin freigegeben wird.")
def portal_release(item_id: str, lecturer_ref: Optional[str]):
    """Gibt einen eigenen Termin wieder frei."""
    from models.user import UserRole
    from scheduling.claims import SlotClaimWorkflow

    config, store, sync = _context()
    user = _current_user(config)
    owner = None
    if user is None or user.role == UserRole.LECTURER or lecturer_ref:
        owner = _portal_lecturer(config, store, lecturer_ref)
    result = SlotClaimWorkflow(store, sync).release(item_id, owner)
    if result.ok:
        _save_store(config, store)
        _warn_if_offline(store, sync)
    _print_result(result, f"Termin freigegeben: {item_id}")


# ─── MONITORING ───────────────────────────────────────────────────────────────

@click.command("monitor")
@click.option("--day", "-d", callback=_parse_day, default="Senin", show_default=True,
              help="Wochentag.")
@click.option("--search", "-s", default="", help="Filter auf Raumnamen.")
@click.option("--excel", is_flag=True, default=False, help="Als Excel exportieren.")
@click.option("--pdf", is_flag=True, default=False, help="Als PDF exportieren.")
@click.option("--week", is_flag=True, default=False,
              help="PDF mit allen sechs Tagen (nur mit --pdf).")
def cmd_monitor(day, search: str, excel: bool, pdf: bool, week: bool):
    """Raumauslastung eines Tages."""
    from analysis.occupancy import build_occupancy_report
    from export.excel_export import ExcelExporter
    from export.pdf_export import PdfExporter
    from models.timeslot import DAYS

    _, config = _load_config()
    store = _load_store(config)
    report = build_occupancy_report(store, day, search)
    report.print_rich()

    output_dir = Path(config.storage.output_dir)
    if excel:
        path = ExcelExporter(store).export_occupancy(report, output_dir)
        console.print(f"[green]✓[/green] Excel gespeichert: {path}")
    if pdf:
        reports = [build_occupancy_report(store, d, search) for d in DAYS] if week else [report]
        path = PdfExporter(config.institution_name).export_occupancy(reports, output_dir)
        console.print(f"[green]✓[/green] PDF gespeichert: {path}")


# ─── BROWSE ───────────────────────────────────────────────────────────────────

@click.command("browse")
def cmd_browse():
    """Startet den Terminal-Browser (Räume und Lehrkräfte)."""
    from export.tui_browser import VorlesungsplanApp

    _, config = _load_config()
    store = _load_store(config)
    VorlesungsplanApp(store).run()


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Protokollausgabe (DEBUG).")
def cli(verbose: bool):
    """Vorlesungsplan: Raum- und Terminplanung mit Spreadsheet-Anbindung.

    Starten Sie mit: vorlesungsplan setup
    """
    from config.manager import ConfigManager

    level = "DEBUG" if verbose else "WARNING"
    if not verbose:
        try:
            level = ConfigManager().load_or_default().log_level
        except ValueError:
            pass  # ungültige Config meldet der jeweilige Befehl
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Vorlesungsplan![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_login)
cli.add_command(cmd_logout)
cli.add_command(cmd_whoami)
cli.add_command(cmd_pull)
cli.add_command(cmd_stats)
cli.add_command(cmd_generate)
cli.add_command(cmd_data)
cli.add_command(cmd_schedule)
cli.add_command(cmd_portal)
cli.add_command(cmd_monitor)
cli.add_command(cmd_browse)


if __name__ == "__main__":
    main()
