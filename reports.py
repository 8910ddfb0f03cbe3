from typing import Iterable, TextIO

from models import AccountSnapshot

REPORT_COLUMNS = ("client", "available", "held", "total", "locked")
SEPARATOR = ", "


def format_row(snapshot: AccountSnapshot) -> str:
    # Decimals keep their own precision, no padding to four places
    return SEPARATOR.join((
        str(snapshot.client),
        str(snapshot.available),
        str(snapshot.held),
        str(snapshot.total),
        "true" if snapshot.locked else "false",
    ))


def write_report(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> int:
    """Write the account report to ``stream`` and return the number of rows written."""
    stream.write(SEPARATOR.join(REPORT_COLUMNS) + "\n")
    rows = 0
    for snapshot in snapshots:
        stream.write(format_row(snapshot) + "\n")
        rows += 1
    return rows
