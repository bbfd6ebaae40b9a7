"""Zuweisungs-Engine: Termine prüfen, anlegen, löschen und importieren.

``evaluate_assignment`` ist eine reine Funktion über einen Store-Stand; die
Klasse ``AssignmentEngine`` führt danach den Commit aus (lokaler Store
sofort, Spreadsheet fire-and-forget).
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from pydantic import BaseModel

from config.schema import ImportPolicy
from models.base import new_id
from models.schedule_item import ScheduleItem
from models.store import EntityStore
from models.timeslot import Day, normalize_time_slot
from scheduling.conflicts import Conflict, ConflictKind, check_conflict
from scheduling.results import ImportReport, RejectionReason, ScheduleResult

if TYPE_CHECKING:
    from sync.adapter import SyncAdapter

logger = logging.getLogger(__name__)

_CONFLICT_REASONS = {
    ConflictKind.ROOM: RejectionReason.ROOM_CONFLICT,
    ConflictKind.CLASS: RejectionReason.CLASS_CONFLICT,
    ConflictKind.LECTURER: RejectionReason.LECTURER_CONFLICT,
}


class Candidate(BaseModel):
    """Auswahl aus dem Planungsformular. Leere Strings = nicht gewählt."""

    course_id: str = ""
    room_id: str = ""
    class_name: str = ""
    lecturer_id: str = ""       # optional: leer = offener Slot
    day: Optional[Day] = None
    time_slot: str = ""


def conflict_message(store: EntityStore, conflict: Conflict, room_id: str,
                     class_name: str) -> str:
    """Meldung zu einem Konflikt; nennt immer den tatsächlich belegten Raum."""
    existing = conflict.existing
    occupied_room = store.room_label(existing.room_id)
    if conflict.kind == ConflictKind.ROOM:
        return (
            f"Raum {store.room_label(room_id)} ist am {existing.day.value} "
            f"um {existing.time_slot} bereits belegt."
        )
    if conflict.kind == ConflictKind.CLASS:
        return (
            f"Lerngruppe {class_name} hat in diesem Zeitfenster bereits einen "
            f"Termin in Raum {occupied_room}."
        )
    return (
        f"{store.lecturer_label(existing.lecturer_id)} unterrichtet zu dieser "
        f"Zeit bereits in Raum {occupied_room}."
    )


def evaluate_assignment(
    store: EntityStore, candidate: Candidate, item_id: str
) -> ScheduleResult:
    """Prüft einen Kandidaten und baut bei Erfolg den neuen Termin (ohne Commit).

    Prüfreihenfolge: Raum → Lehrveranstaltung → Lerngruppe → Slot gewählt →
    Lehrkraft existiert → Konflikte (Raum, Klasse, Lehrkraft).
    """
    if not candidate.room_id:
        return ScheduleResult.reject(
            RejectionReason.MISSING_ROOM, "Bitte zuerst einen Raum wählen."
        )
    if store.room(candidate.room_id) is None:
        return ScheduleResult.reject(
            RejectionReason.MISSING_ROOM,
            f"Raum '{candidate.room_id}' existiert nicht.",
        )

    if not candidate.course_id:
        return ScheduleResult.reject(
            RejectionReason.MISSING_COURSE, "Bitte eine Lehrveranstaltung wählen."
        )
    if store.course(candidate.course_id) is None:
        return ScheduleResult.reject(
            RejectionReason.MISSING_COURSE,
            f"Lehrveranstaltung '{candidate.course_id}' existiert nicht.",
        )

    if not candidate.class_name:
        return ScheduleResult.reject(
            RejectionReason.MISSING_CLASS, "Bitte eine Lerngruppe (PDB) wählen."
        )
    if store.class_by_name(candidate.class_name) is None:
        return ScheduleResult.reject(
            RejectionReason.MISSING_CLASS,
            f"Lerngruppe '{candidate.class_name}' existiert nicht.",
        )

    time_slot = normalize_time_slot(candidate.time_slot)
    if candidate.day is None or time_slot is None:
        return ScheduleResult.reject(
            RejectionReason.MISSING_SLOT, "Bitte Tag und Zeitfenster wählen."
        )

    if candidate.lecturer_id and store.lecturer(candidate.lecturer_id) is None:
        return ScheduleResult.reject(
            RejectionReason.UNKNOWN_LECTURER,
            f"Lehrkraft '{candidate.lecturer_id}' existiert nicht.",
        )

    conflict = check_conflict(
        store.schedule,
        candidate.day,
        time_slot,
        candidate.room_id,
        candidate.class_name,
        candidate.lecturer_id,
    )
    if conflict is not None:
        return ScheduleResult.reject(
            _CONFLICT_REASONS[conflict.kind],
            conflict_message(store, conflict, candidate.room_id, candidate.class_name),
            conflicting_item=conflict.existing,
        )

    return ScheduleResult.success(ScheduleItem(
        id=item_id,
        course_id=candidate.course_id,
        lecturer_id=candidate.lecturer_id,
        room_id=candidate.room_id,
        class_name=candidate.class_name,
        day=candidate.day,
        time_slot=time_slot,
    ))


class AssignmentEngine:
    """Legt Termine im Admin-Pfad an und entfernt sie wieder."""

    def __init__(self, store: EntityStore, sync: Optional["SyncAdapter"] = None):
        self.store = store
        self.sync = sync

    def propose_assignment(self, candidate: Candidate) -> ScheduleResult:
        """Prüft den Kandidaten und legt bei Erfolg einen neuen Termin an."""
        result = evaluate_assignment(self.store, candidate, new_id("sch"))
        if not result.ok:
            logger.info(f"Termin abgelehnt ({result.reason.value}): {result.message}")
            return result

        item = result.item
        self.store.add("schedule", item)
        logger.info(
            f"Termin {item.id} angelegt: {item.class_name} in "
            f"{self.store.room_label(item.room_id)}, {item.slot}"
        )
        if self.sync is not None:
            self.sync.push("add", "schedule", item.to_wire())
        return result

    def remove_assignment(self, item_id: str) -> None:
        """Entfernt einen Termin. Unbekannte IDs sind ein No-op im Store."""
        removed = self.store.remove("schedule", item_id)
        if removed is None:
            logger.debug(f"Termin {item_id} nicht im lokalen Bestand")
        else:
            logger.info(f"Termin {item_id} gelöscht ({removed.slot})")
        if self.sync is not None:
            self.sync.push("delete", "schedule", {"id": item_id})

    def import_items(
        self, items: Iterable[ScheduleItem], policy: ImportPolicy
    ) -> ImportReport:
        """Übernimmt importierte Termine gemäß Import-Richtlinie.

        TRUSTED: alle Zeilen werden ohne Konfliktprüfung übernommen.
        CHECKED: jede Zeile wird gegen Bestand + bereits übernommene Zeilen
        geprüft; kollidierende Zeilen werden abgelehnt.
        """
        items = list(items)
        checked = policy == ImportPolicy.CHECKED
        accepted: list[ScheduleItem] = []
        rejected: list[str] = []

        if checked:
            for item in items:
                conflict = check_conflict(
                    self.store.schedule + accepted,
                    item.day, item.time_slot, item.room_id,
                    item.class_name, item.lecturer_id,
                )
                if conflict is None:
                    accepted.append(item)
                else:
                    msg = conflict_message(self.store, conflict, item.room_id,
                                           item.class_name)
                    rejected.append(f"{item.class_name}, {item.slot}: {msg}")
        else:
            accepted = items

        self.store.extend("schedule", accepted)
        logger.info(
            f"Import: {len(accepted)} Termine übernommen, {len(rejected)} abgelehnt "
            f"(Richtlinie: {policy.value})"
        )
        if accepted and self.sync is not None:
            self.sync.push_bulk("schedule", [i.to_wire() for i in accepted])
        return ImportReport(
            table="schedule", imported=len(accepted), rejected=rejected,
            checked=checked,
        )
