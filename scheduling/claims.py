"""Dozierenden-Portal: offene Slots übernehmen und wieder freigeben.

Zustände eines Termins: offen (``lecturer_id == ""``) ↔ vergeben.
"""

import logging
from typing import TYPE_CHECKING, Optional

from models.store import EntityStore
from scheduling.conflicts import find_lecturer_occupant
from scheduling.results import RejectionReason, ScheduleResult

if TYPE_CHECKING:
    from sync.adapter import SyncAdapter

logger = logging.getLogger(__name__)


def evaluate_claim(store: EntityStore, item_id: str, lecturer_id: str) -> ScheduleResult:
    """Prüft, ob ``lecturer_id`` den Termin ``item_id`` übernehmen darf.

    Anders als im Admin-Pfad zählt hier jeder Termin der Lehrkraft im
    selben Slot, unabhängig vom Raum.
    """
    item = store.get("schedule", item_id)
    if item is None:
        return ScheduleResult.reject(
            RejectionReason.ITEM_NOT_FOUND, f"Termin '{item_id}' nicht gefunden."
        )
    if store.lecturer(lecturer_id) is None:
        return ScheduleResult.reject(
            RejectionReason.UNKNOWN_LECTURER,
            f"Lehrkraft '{lecturer_id}' existiert nicht.",
        )
    if not item.is_open:
        return ScheduleResult.reject(
            RejectionReason.SLOT_ALREADY_TAKEN,
            f"Dieser Termin ist bereits an "
            f"{store.lecturer_label(item.lecturer_id)} vergeben.",
            conflicting_item=item,
        )

    busy = find_lecturer_occupant(store.schedule, item.day, item.time_slot, lecturer_id)
    if busy is not None:
        return ScheduleResult.reject(
            RejectionReason.LECTURER_ALREADY_BUSY,
            f"Sie haben bereits am {busy.day.value} um {busy.time_slot} einen "
            f"Lehrauftrag in Raum {store.room_label(busy.room_id)}.",
            conflicting_item=busy,
        )

    return ScheduleResult.success(item.model_copy(update={"lecturer_id": lecturer_id}))


def evaluate_release(
    store: EntityStore, item_id: str, lecturer_id: Optional[str] = None
) -> ScheduleResult:
    """Prüft die Freigabe. Mit ``lecturer_id`` nur für den eigenen Termin."""
    item = store.get("schedule", item_id)
    if item is None:
        return ScheduleResult.reject(
            RejectionReason.ITEM_NOT_FOUND, f"Termin '{item_id}' nicht gefunden."
        )
    if item.is_open:
        return ScheduleResult.reject(
            RejectionReason.SLOT_NOT_ASSIGNED,
            "Dieser Termin ist noch keiner Lehrkraft zugewiesen.",
        )
    if lecturer_id is not None and item.lecturer_id != lecturer_id:
        return ScheduleResult.reject(
            RejectionReason.SLOT_NOT_OWNED,
            f"Dieser Termin gehört {store.lecturer_label(item.lecturer_id)}.",
            conflicting_item=item,
        )
    return ScheduleResult.success(item.model_copy(update={"lecturer_id": ""}))


class SlotClaimWorkflow:
    """Übernehmen / Freigeben mit sofortigem lokalen Commit und ``update``-Write."""

    def __init__(self, store: EntityStore, sync: Optional["SyncAdapter"] = None):
        self.store = store
        self.sync = sync

    def claim(self, item_id: str, lecturer_id: str) -> ScheduleResult:
        result = evaluate_claim(self.store, item_id, lecturer_id)
        if result.ok:
            self._commit(result, f"von {self.store.lecturer_label(lecturer_id)} übernommen")
        else:
            logger.info(f"Übernahme abgelehnt ({result.reason.value}): {result.message}")
        return result

    def release(self, item_id: str, lecturer_id: Optional[str] = None) -> ScheduleResult:
        result = evaluate_release(self.store, item_id, lecturer_id)
        if result.ok:
            self._commit(result, "freigegeben")
        else:
            logger.info(f"Freigabe abgelehnt ({result.reason.value}): {result.message}")
        return result

    def _commit(self, result: ScheduleResult, action: str) -> None:
        item = result.item
        self.store.replace("schedule", item)
        logger.info(f"Termin {item.id} ({item.slot}) {action}")
        if self.sync is not None:
            self.sync.push("update", "schedule", item.to_wire())
