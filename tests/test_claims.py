"""Tests für das Dozierenden-Portal: Termine übernehmen und freigeben."""

from models.timeslot import Day
from scheduling.claims import SlotClaimWorkflow, evaluate_claim, evaluate_release
from scheduling.results import RejectionReason

from conftest import make_item, make_store


class RecordingSync:
    def __init__(self):
        self.calls: list[tuple] = []

    def push(self, action, table, payload):
        self.calls.append((action, table, payload))


def _portal_store():
    return make_store([
        make_item("open1", room_id="r1", class_name="PDB01"),
        make_item("open2", room_id="r2", class_name="PDB02", day=Day.TUESDAY),
        make_item("taken", room_id="r3", class_name="PDB03", lecturer_id="l2",
                  day=Day.TUESDAY),
    ])


class TestClaim:
    def test_claim_open_slot(self):
        store = _portal_store()
        sync = RecordingSync()
        result = SlotClaimWorkflow(store, sync).claim("open1", "l1")
        assert result.ok
        assert store.get("schedule", "open1").lecturer_id == "l1"
        assert sync.calls == [("update", "schedule", result.item.to_wire())]
        assert sync.calls[0][2]["lecturerId"] == "l1"

    def test_claim_keeps_other_fields(self):
        store = _portal_store()
        before = store.get("schedule", "open1")
        SlotClaimWorkflow(store).claim("open1", "l1")
        after = store.get("schedule", "open1")
        assert after.model_dump(exclude={"lecturer_id"}) == before.model_dump(
            exclude={"lecturer_id"}
        )

    def test_claim_taken_slot_rejected(self):
        """Ein vergebener Termin kann nicht übernommen werden."""
        store = _portal_store()
        result = evaluate_claim(store, "taken", "l1")
        assert result.reason == RejectionReason.SLOT_ALREADY_TAKEN
        assert "Budi Wijaya" in result.message

    def test_claim_rejected_when_lecturer_busy(self):
        """Eigener Termin im selben Slot, egal in welchem Raum, blockiert."""
        store = _portal_store()
        sync = RecordingSync()
        workflow = SlotClaimWorkflow(store, sync)
        result = workflow.claim("open2", "l2")
        assert result.reason == RejectionReason.LECTURER_ALREADY_BUSY
        assert "Selasa" in result.message and "Lab 1" in result.message
        assert store.get("schedule", "open2").is_open
        assert sync.calls == []

    def test_claim_unknown_item_or_lecturer(self):
        store = _portal_store()
        assert evaluate_claim(store, "nope", "l1").reason == RejectionReason.ITEM_NOT_FOUND
        assert evaluate_claim(store, "open1", "l99").reason == RejectionReason.UNKNOWN_LECTURER

    def test_claim_twice_second_fails(self):
        store = _portal_store()
        workflow = SlotClaimWorkflow(store)
        assert workflow.claim("open1", "l1").ok
        assert workflow.claim("open1", "l3").reason == RejectionReason.SLOT_ALREADY_TAKEN
        assert store.get("schedule", "open1").lecturer_id == "l1"


class TestRelease:
    def test_release_own_slot(self):
        store = _portal_store()
        sync = RecordingSync()
        result = SlotClaimWorkflow(store, sync).release("taken", "l2")
        assert result.ok
        assert store.get("schedule", "taken").is_open
        assert sync.calls[0][0] == "update"
        assert sync.calls[0][2]["lecturerId"] == ""

    def test_release_foreign_slot_rejected(self):
        store = _portal_store()
        result = evaluate_release(store, "taken", "l1")
        assert result.reason == RejectionReason.SLOT_NOT_OWNED
        assert store.get("schedule", "taken").lecturer_id == "l2"

    def test_release_open_slot_rejected(self):
        store = _portal_store()
        assert evaluate_release(store, "open1", "l1").reason == RejectionReason.SLOT_NOT_ASSIGNED
        assert evaluate_release(store, "nope").reason == RejectionReason.ITEM_NOT_FOUND

    def test_admin_release_without_owner_check(self):
        """Ohne lecturer_id (Administrator) wird jeder vergebene Termin frei."""
        store = _portal_store()
        assert SlotClaimWorkflow(store).release("taken").ok

    def test_claim_then_release_restores_item(self):
        store = _portal_store()
        before = store.get("schedule", "open1")
        workflow = SlotClaimWorkflow(store)
        workflow.claim("open1", "l1")
        workflow.release("open1", "l1")
        assert store.get("schedule", "open1") == before
