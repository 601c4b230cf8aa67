"""CSV rendering of collected appointments."""

from __future__ import annotations

import csv
from typing import Iterable, List, TextIO

from .models import AppointmentRecord

REPORT_COLUMNS = ("name", "city", "appointment_type_name", "time", "website")


def sort_records(records: Iterable[AppointmentRecord]) -> List[AppointmentRecord]:
    """Chronological order; the ``time`` string is zero padded so it sorts as text."""
    return sorted(records, key=lambda record: (record.time, record.name, record.category_label))


def to_row(record: AppointmentRecord) -> dict[str, str]:
    return {
        "name": record.name,
        "city": record.city,
        "appointment_type_name": record.category_label,
        "time": record.time,
        "website": record.website,
    }


def write_report(records: Iterable[AppointmentRecord], stream: TextIO) -> int:
    """Write the header and one quoted row per record. Returns the row count."""
    writer = csv.DictWriter(
        stream,
        fieldnames=REPORT_COLUMNS,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    writer.writeheader()
    rows = 0
    for record in sort_records(records):
        writer.writerow(to_row(record))
        rows += 1
    return rows
