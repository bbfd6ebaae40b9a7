"""Prüfung des gesamten Wochenplans.

Sicherheitsnetz unabhängig von der Zuweisungs-Engine: ungeprüft importierte
Termine oder parallele Änderungen anderer Sitzungen können Doppelbelegungen
erzeugen, die hier sichtbar werden.
"""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from models.store import EntityStore


class ValidationViolation(BaseModel):
    """Eine einzelne Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "room_double_booking"
    description: str
    entity: str          # room_id / class_name / lecturer_id / item_id


class ValidationReport(BaseModel):
    """Ergebnis der Plan-Prüfung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ KONFLIKTFREI[/bold green]"
            if self.is_valid
            else "[bold red]✗ DOPPELBELEGUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Plan-Prüfung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=24)
        table.add_column("Entität", width=16)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ScheduleValidator:
    """Prüft den Wochenplan eines EntityStore auf Verletzungen."""

    def validate(self, store: EntityStore) -> ValidationReport:
        violations: list[ValidationViolation] = []

        violations.extend(self._check_double_booking(store, "room"))
        violations.extend(self._check_double_booking(store, "class"))
        violations.extend(self._check_double_booking(store, "lecturer"))
        violations.extend(self._check_references(store))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_double_booking(
        self, store: EntityStore, axis: str
    ) -> list[ValidationViolation]:
        """Je (Tag, Zeitfenster) höchstens ein Termin pro Raum/Lerngruppe/Lehrkraft."""
        seen: dict[tuple, list] = defaultdict(list)
        for item in store.schedule:
            if axis == "room":
                key = item.room_id
            elif axis == "class":
                key = item.class_name
            else:
                key = item.lecturer_id
                if not key:
                    continue  # offene Slots belegen keine Lehrkraft
            seen[(key, item.day, item.time_slot)].append(item)

        violations: list[ValidationViolation] = []
        for (key, day, time_slot), items in seen.items():
            if len(items) < 2:
                continue
            if axis == "room":
                entity = store.room_label(key)
                detail = ", ".join(i.class_name for i in items)
            elif axis == "class":
                entity = key
                detail = ", ".join(store.room_label(i.room_id) for i in items)
            else:
                entity = store.lecturer_label(key)
                detail = ", ".join(store.room_label(i.room_id) for i in items)
            violations.append(ValidationViolation(
                severity="error",
                constraint=f"{axis}_double_booking",
                entity=entity,
                description=f"{day.value} {time_slot}: {len(items)} Termine ({detail})",
            ))
        return violations

    def _check_references(self, store: EntityStore) -> list[ValidationViolation]:
        """Verweise auf gelöschte Stammdaten sind Warnungen (keine Kaskade)."""
        violations: list[ValidationViolation] = []
        class_names = {c.name for c in store.classes}
        for item in store.schedule:
            missing = []
            if store.course(item.course_id) is None:
                missing.append(f"Lehrveranstaltung {item.course_id}")
            if store.room(item.room_id) is None:
                missing.append(f"Raum {item.room_id}")
            if item.lecturer_id and store.lecturer(item.lecturer_id) is None:
                missing.append(f"Lehrkraft {item.lecturer_id}")
            if item.class_name not in class_names:
                missing.append(f"Lerngruppe {item.class_name}")
            if missing:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="dangling_reference",
                    entity=item.id,
                    description=f"{item.slot}: unbekannt: {', '.join(missing)}",
                ))
        return violations
