"""CSV sign-in sheet export of the organizer view."""
from __future__ import annotations
import csv
import io
import logging
from typing import NamedTuple, Optional

from attendance_tracker.view.models import EventType
from attendance_tracker.view.reconcile import ReconciledView, RowView

logger = logging.getLogger(__name__)

CSV_HEADER = ["Name", "Email", "Enrollment No", "Phone Number", "Signature"]
MISSING = "—"
LEADER_SUFFIX = " (Leader)"
CSV_MIME_TYPE = "text/csv"


class CsvExport(NamedTuple):
    filename: str
    content: str
    mime_type: str = CSV_MIME_TYPE


def export_filename(event_name: Optional[str]) -> str:
    return f"{event_name or 'event'}_attendance.csv"


def _row(row: RowView, suffix: str = "") -> list[str]:
    p = row.participant
    return [
        p.name + suffix,
        p.email,
        p.enrollment_no or MISSING,
        p.phone_number or MISSING,
        "",  # signed on paper
    ]


def build_rows(view: ReconciledView) -> list[list[str]]:
    """Header plus one line per visible row; GROUP teams end with a blank line.

    Hidden rows are left out. The search query is not applied.
    """
    rows = [list(CSV_HEADER)]
    if view.event_type == EventType.GROUP:
        for group in view.visible_groups:
            if group.leader is not None:
                rows.append(_row(group.leader, LEADER_SUFFIX))
            rows.extend(_row(m) for m in group.members)
            rows.append([])
    else:
        rows.extend(_row(r) for r in view.visible_rows)
    return rows


def render_csv(rows: list[list[str]]) -> str:
    """Join rows with ``\\n``; fields with commas, quotes or newlines are RFC 4180 quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    content = buffer.getvalue()
    # No terminator after the last line
    return content[:-1] if content.endswith("\n") else content


def export_csv(view: ReconciledView, event_name: Optional[str]) -> CsvExport:
    rows = build_rows(view)
    export = CsvExport(filename=export_filename(event_name), content=render_csv(rows))
    logger.info("Exported %d CSV lines to %s", len(rows), export.filename)
    return export
