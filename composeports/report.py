"""Single-header CSV report: one row per exposed service or error."""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterable, Iterator

from composeports.models import ExposedServiceRecord

TABLE_HEADER = ("PATH", "SERVICE", "PORTS", "ERROR")


@dataclass(frozen=True)
class ReportRow:
    path: str
    service: str = ""
    ports: str = ""
    error: str = ""

    def as_tuple(self):
        return (self.path, self.service, self.ports, self.error)


def iter_report_rows(records: Iterable[ExposedServiceRecord]) -> Iterator[ReportRow]:
    """Flatten records into rows.

    A scanned file that exposes nothing still gets a row with empty service
    and port columns, so every matched file shows up in the report.
    """
    for record in records:
        if not record.ok:
            yield ReportRow(record.path, error=str(record.error))
        elif not record.exposed_services:
            yield ReportRow(record.path)
        else:
            for svc in record.exposed_services:
                yield ReportRow(record.path, svc.name, svc.ports)


def _render(fields) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(fields)
    return buf.getvalue()


def format_csv_table(records: Iterable[ExposedServiceRecord]) -> Iterator[str]:
    yield _render(TABLE_HEADER)
    for row in iter_report_rows(records):
        yield _render(row.as_tuple())
