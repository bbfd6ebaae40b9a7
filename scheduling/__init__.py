from scheduling.claims import SlotClaimWorkflow, evaluate_claim, evaluate_release
from scheduling.conflicts import Conflict, ConflictKind, check_conflict
from scheduling.engine import AssignmentEngine, Candidate, evaluate_assignment
from scheduling.results import ImportReport, Rejection, RejectionReason, ScheduleResult

__all__ = [
    "AssignmentEngine",
    "Candidate",
    "Conflict",
    "ConflictKind",
    "ImportReport",
    "Rejection",
    "RejectionReason",
    "ScheduleResult",
    "SlotClaimWorkflow",
    "check_conflict",
    "evaluate_assignment",
    "evaluate_claim",
    "evaluate_release",
]
