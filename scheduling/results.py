"""Ergebnistypen der Planungsoperationen.

Ablehnungen sind reguläre Rückgabewerte, keine Exceptions: jede Ablehnung
trägt genau eine lesbare Meldung, die den kollidierenden Raum bzw. das
kollidierende Zeitfenster nennt.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from models.schedule_item import ScheduleItem


class RejectionReason(str, Enum):
    # Auswahl unvollständig
    MISSING_ROOM = "missing_room"
    MISSING_COURSE = "missing_course"
    MISSING_CLASS = "missing_class"
    MISSING_SLOT = "missing_slot"
    UNKNOWN_LECTURER = "unknown_lecturer"
    # Belegungskonflikte (Admin-Pfad)
    ROOM_CONFLICT = "room_conflict"
    CLASS_CONFLICT = "class_conflict"
    LECTURER_CONFLICT = "lecturer_conflict"
    # Portal (Übernehmen / Freigeben)
    LECTURER_ALREADY_BUSY = "lecturer_already_busy"
    ITEM_NOT_FOUND = "item_not_found"
    SLOT_ALREADY_TAKEN = "slot_already_taken"
    SLOT_NOT_ASSIGNED = "slot_not_assigned"
    SLOT_NOT_OWNED = "slot_not_owned"

    @property
    def is_missing_selection(self) -> bool:
        return self in (
            RejectionReason.MISSING_ROOM,
            RejectionReason.MISSING_COURSE,
            RejectionReason.MISSING_CLASS,
            RejectionReason.MISSING_SLOT,
        )


class Rejection(BaseModel):
    """Begründete Ablehnung einer Operation."""

    reason: RejectionReason
    message: str
    conflicting_item: Optional[ScheduleItem] = None


class ScheduleResult(BaseModel):
    """Ergebnis von propose_assignment / claim / release.

    Genau eines von ``item`` (Erfolg) oder ``rejection`` ist gesetzt.
    """

    item: Optional[ScheduleItem] = None
    rejection: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @property
    def reason(self) -> Optional[RejectionReason]:
        return self.rejection.reason if self.rejection else None

    @property
    def message(self) -> str:
        return self.rejection.message if self.rejection else ""

    @classmethod
    def success(cls, item: ScheduleItem) -> "ScheduleResult":
        return cls(item=item)

    @classmethod
    def reject(
        cls,
        reason: RejectionReason,
        message: str,
        conflicting_item: Optional[ScheduleItem] = None,
    ) -> "ScheduleResult":
        return cls(rejection=Rejection(
            reason=reason, message=message, conflicting_item=conflicting_item,
        ))


class ImportReport(BaseModel):
    """Ergebnis eines Excel-Imports."""

    table: str = "schedule"
    imported: int = 0
    skipped: int = 0                 # unvollständige / nicht zuordenbare Zeilen
    rejected: list[str] = []         # Konfliktmeldungen (nur bei Prüfung)
    checked: bool = False            # True = Zeilen liefen durch die Konfliktprüfung

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.imported:
            lines = [f"[bold green]✓ {self.imported} Datensätze importiert[/bold green]"]
        else:
            lines = ["[bold red]✗ Nichts importiert[/bold red]"]
        if self.skipped:
            lines.append(
                f"[yellow]{self.skipped} Zeilen übersprungen "
                f"(unvollständig oder nicht zuordenbar).[/yellow]"
            )
        if self.rejected:
            lines.append("\n[red bold]Wegen Konflikten abgelehnt:[/red bold]")
            for msg in self.rejected:
                lines.append(f"  [red]• {msg}[/red]")
        if self.table == "schedule" and not self.checked:
            lines.append("[dim]Importierte Termine wurden nicht auf Konflikte geprüft.[/dim]")
        console.print(Panel("\n".join(lines), title="Import", border_style="cyan"))
