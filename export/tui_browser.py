"""Textual TUI Browser für den Wochenplan.

Startet mit: vorlesungsplan browse
Navigation: ↑↓, Enter=Auswahl, /=Suche, q=Beenden, ?=Hilfe
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.store import EntityStore


def browser_entries(store: "EntityStore", query: str = "") -> list[tuple[str, str, str]]:
    """Einträge der Seitenleiste: (Art, ID, Beschriftung), gefiltert nach ``query``."""
    query = query.lower()
    entries: list[tuple[str, str, str]] = []
    for room in sorted(store.rooms, key=lambda r: r.name):
        label = f"Raum {room.name}"
        if not query or query in label.lower():
            entries.append(("room", room.id, label))
    for lecturer in sorted(store.lecturers, key=lambda l: l.name):
        label = f"{lecturer.name} ({lecturer.employee_number})"
        if not query or query in label.lower():
            entries.append(("lecturer", lecturer.id, label))
    return entries


class VorlesungsplanApp:
    """Textual TUI App für den Wochenplan.

    Lazy-importiert textual um Startzeit zu minimieren.
    """

    def __init__(self, store: "EntityStore") -> None:
        self.store = store

    def run(self) -> None:
        """Startet die TUI Anwendung."""
        from textual.app import App, ComposeResult
        from textual.widgets import (
            Header, Footer, ListView, ListItem, DataTable, Input, Label,
        )
        from textual.containers import Horizontal
        from textual.binding import Binding

        store = self.store

        class _App(App):
            CSS = """
            ListView { width: 34; border: solid $primary; }
            DataTable { border: solid $secondary; }
            Input { dock: bottom; }
            """
            BINDINGS = [
                Binding("q", "quit", "Beenden"),
                Binding("escape", "quit", "Beenden"),
                Binding("/", "focus_search", "Suche"),
                Binding("?", "show_help", "Hilfe"),
            ]

            def compose(self) -> ComposeResult:
                yield Header()
                with Horizontal():
                    yield ListView(id="entity_list")
                    yield DataTable(id="schedule_table")
                yield Input(placeholder="Suche (Raum oder Lehrkraft)...", id="search")
                yield Footer()

            def on_mount(self) -> None:
                self._fill_list("")
                if self._all_items:
                    kind, eid, _ = self._all_items[0]
                    self._show_entity(kind, eid)

            def _fill_list(self, query: str) -> None:
                lv = self.query_one("#entity_list", ListView)
                lv.clear()
                self._all_items = browser_entries(store, query)
                for _, _, label in self._all_items:
                    lv.append(ListItem(Label(label)))

            def on_list_view_selected(self, event: ListView.Selected) -> None:
                idx = event.list_view.index
                if idx is not None and 0 <= idx < len(self._all_items):
                    kind, eid, _ = self._all_items[idx]
                    self._show_entity(kind, eid)

            def on_input_changed(self, event: Input.Changed) -> None:
                self._fill_list(event.value)

            def _show_entity(self, kind: str, eid: str) -> None:
                from export.tui_renderer import (
                    GRID_HEADERS, render_lecturer_rows, render_room_rows,
                )

                table = self.query_one("#schedule_table", DataTable)
                table.clear(columns=True)
                table.add_columns(*GRID_HEADERS)

                if kind == "room":
                    rows = render_room_rows(eid, store)
                else:
                    rows = render_lecturer_rows(eid, store)
                for row in rows:
                    table.add_row(*row, height=None)

            def action_focus_search(self) -> None:
                self.query_one("#search", Input).focus()

            def action_show_help(self) -> None:
                self.notify(
                    "↑↓: Navigation | Enter: Auswählen | /: Suche | q: Beenden",
                    title="Hilfe",
                )

        _App().run()
