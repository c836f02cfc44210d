# app/mice/modules/attendance_rules.py

from typing import Optional, Dict, Tuple

from ..models.db_models import AttendanceRecord
from ..models.scan_models import AttendanceState, ScanMode, ScanOutcome

# (state before the scan, scan mode) -> outcome reported to the scanner
TRANSITIONS: Dict[Tuple[AttendanceState, ScanMode], ScanOutcome] = {
    (AttendanceState.NO_RECORD, ScanMode.TIME_IN): ScanOutcome.CHECKED_IN,
    (AttendanceState.NO_RECORD, ScanMode.TIME_OUT): ScanOutcome.NOT_CHECKED_IN,
    (AttendanceState.CHECKED_IN, ScanMode.TIME_IN): ScanOutcome.ALREADY_CHECKED_IN,
    (AttendanceState.CHECKED_IN, ScanMode.TIME_OUT): ScanOutcome.CHECKED_OUT,
    # A finished cycle still answers "already checked in" to a time-in scan.
    (AttendanceState.COMPLETE, ScanMode.TIME_IN): ScanOutcome.ALREADY_CHECKED_IN,
    (AttendanceState.COMPLETE, ScanMode.TIME_OUT): ScanOutcome.ALREADY_CHECKED_OUT,
}

# Outcomes that come with a write to the attendance row.
MUTATING_OUTCOMES = frozenset({ScanOutcome.CHECKED_IN, ScanOutcome.CHECKED_OUT})


def attendance_state(record: Optional[AttendanceRecord]) -> AttendanceState:
    """
    Classifies an attendance row for scanning. A row without a time-in (one a
    staff member created by setting a status by hand) counts as no record.
    """
    if record is None or record.time_in is None:
        return AttendanceState.NO_RECORD
    if record.time_out is None:
        return AttendanceState.CHECKED_IN
    return AttendanceState.COMPLETE


def resolve_transition(state: AttendanceState, mode: ScanMode) -> ScanOutcome:
    return TRANSITIONS[(state, ScanMode(mode))]


def is_mutating(outcome: ScanOutcome) -> bool:
    return outcome in MUTATING_OUTCOMES
