"""Awaken tax CSV export.

One header row, then one row per record. Dates are ``MM/DD/YYYY HH:MM:SS`` in
UTC and ``ID`` is the first 16 characters of the hash.
"""

import csv
import io
from collections.abc import Iterable
from datetime import datetime, timezone

from chainview.domain.models.transaction import CanonicalTransaction

AWAKEN_COLUMNS = [
    "Date",
    "Asset",
    "Amount",
    "Fee",
    "P&L",
    "Payment Token",
    "ID",
    "Notes",
    "Tag",
    "Transaction Hash",
]

ID_LENGTH = 16


def format_awaken_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%m/%d/%Y %H:%M:%S")


def awaken_row(tx: CanonicalTransaction) -> list[str]:
    return [
        format_awaken_date(tx.timestamp),
        tx.asset,
        tx.amount,
        tx.fee,
        tx.pnl or "0",
        tx.payment_token or tx.fee_asset,
        tx.hash[:ID_LENGTH],
        tx.notes or f"{tx.type} - {tx.direction.value}",
        tx.tag.value if tx.tag else "",
        tx.hash,
    ]


class AwakenCsvWriter:
    """Serializes records into the Awaken CSV dialect."""

    def write(self, records: Iterable[CanonicalTransaction], out: io.TextIOBase) -> int:
        """Write header and rows to ``out``; returns the number of data rows."""
        writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(AWAKEN_COLUMNS)
        count = 0
        for tx in records:
            writer.writerow(awaken_row(tx))
            count += 1
        return count

    def write_to_string(self, records: Iterable[CanonicalTransaction]) -> str:
        buf = io.StringIO()
        self.write(records, buf)
        # No trailing newline after the last row
        return buf.getvalue().rstrip("\n")
