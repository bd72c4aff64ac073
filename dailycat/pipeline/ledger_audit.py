"""Post-hoc consistency check between day records and the used-photo ledger."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from dailycat.dates import utc_today


@dataclass
class LedgerAuditReport:
    days_checked: int = 0
    ledger_size: int = 0
    duplicate_assignments: Dict[str, List[str]] = field(default_factory=dict)
    unrecorded_photo_ids: List[str] = field(default_factory=list)
    invalid_records: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.duplicate_assignments or self.unrecorded_photo_ids or self.invalid_records)


def audit_ledger(*, day_store, ledger, start: str = "0001-01-01", end: str = "") -> LedgerAuditReport:
    """Scan day records in `[start, end]` (end defaults to far future).

    Duplicates can legitimately appear after concurrent fillers race; the
    report surfaces them rather than repairing anything.
    """
    records = day_store.get_range(start, end or "9999-12-31")
    used = set(ledger.all_ids())

    by_photo: Dict[str, List[str]] = defaultdict(list)
    report = LedgerAuditReport(days_checked=len(records), ledger_size=len(used))
    for r in records:
        if not r.is_consistent():
            report.invalid_records.append(r.id)
        if r.photo_id:
            by_photo[r.photo_id].append(r.id)

    report.duplicate_assignments = {pid: days for pid, days in sorted(by_photo.items()) if len(days) > 1}
    report.unrecorded_photo_ids = sorted(pid for pid in by_photo if pid not in used)
    return report


def summarize(report: LedgerAuditReport) -> str:
    lines = [
        f"[audit] {utc_today().isoformat()} days_checked={report.days_checked} ledger_size={report.ledger_size}",
        f"[audit] duplicate_assignments={len(report.duplicate_assignments)} "
        f"unrecorded_photo_ids={len(report.unrecorded_photo_ids)} invalid_records={len(report.invalid_records)}",
    ]
    for pid, days in report.duplicate_assignments.items():
        lines.append(f"  photo {pid} assigned to {', '.join(days)}")
    for pid in report.unrecorded_photo_ids:
        lines.append(f"  photo {pid} missing from ledger")
    for day_id in report.invalid_records:
        lines.append(f"  day {day_id} violates status/photo invariant")
    return "\n".join(lines)
