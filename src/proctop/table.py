"""Process table model: sorted rows, filtered views and derived column widths."""

import logging
from collections.abc import Callable, Iterable

from rich.cells import cell_len

from proctop.errors import DataAcquisitionError
from proctop.models import MISSING_PATH, UNKNOWN_OWNER, ProcessRecord, ProcessRow

logger = logging.getLogger(__name__)

COLUMNS = ("PID", "NAME", "PATH", "USER", "CPU%")
ELLIPSIS = "..."
DEFAULT_MAX_CELL_WIDTH = 30


def truncate(value: str, max_width: int) -> str:
    """Truncate value to max_width terminal cells, ending it with '...'."""
    if cell_len(value) <= max_width:
        return value
    budget = max(0, max_width - len(ELLIPSIS))
    kept: list[str] = []
    used = 0
    for char in value:
        width = cell_len(char)
        if used + width > budget:
            break
        kept.append(char)
        used += width
    return "".join(kept) + ELLIPSIS


def format_cells(row: ProcessRow, max_width: int = DEFAULT_MAX_CELL_WIDTH) -> tuple[str, ...]:
    """Format a row as display strings, one per column in COLUMNS."""
    return (
        str(row.pid),
        truncate(row.name, max_width),
        truncate(row.path or "-", max_width),
        truncate(row.owner, max_width),
        f"{row.cpu_percent:.1f}",
    )


def column_widths(
    view: Iterable[ProcessRow], max_width: int = DEFAULT_MAX_CELL_WIDTH
) -> tuple[int, ...]:
    """
    Width of each column across a view, in terminal cells.

    A column is never narrower than its header label, so an empty view
    yields the header label lengths.
    """
    widths = [cell_len(label) for label in COLUMNS]
    for row in view:
        for i, cell in enumerate(format_cells(row, max_width)):
            widths[i] = max(widths[i], cell_len(cell))
    return tuple(widths)


class ProcessTable:
    """
    Rows of the latest snapshot, always sorted ascending by pid.

    The row sequence is replaced wholesale on every refresh. Filtering never
    mutates it, so clearing a filter restores the full pid order.
    """

    def __init__(self, resolve_username: Callable[[int], str]) -> None:
        """
        Initialize an empty table.

        Args:
            resolve_username: Maps a uid to a login name; may raise
                DataAcquisitionError.
        """
        self._resolve_username = resolve_username
        self._rows: tuple[ProcessRow, ...] = ()
        self._generation = 0

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> tuple[ProcessRow, ...]:
        """All rows in pid order."""
        return self._rows

    @property
    def generation(self) -> int:
        """Incremented on every refresh; derived views keyed on it go stale."""
        return self._generation

    def refresh(self, snapshot: Iterable[ProcessRecord]) -> None:
        """Replace the rows with a pid-sorted translation of snapshot."""
        rows: dict[int, ProcessRow] = {}
        for record in snapshot:
            if record.pid in rows:
                logger.debug("Duplicate pid %d in snapshot, keeping first", record.pid)
                continue
            rows[record.pid] = ProcessRow(
                pid=record.pid,
                name=record.name,
                path=record.path or MISSING_PATH,
                owner=self._owner_of(record),
                cpu_percent=record.cpu_percent,
            )

        self._rows = tuple(sorted(rows.values(), key=lambda row: row.pid))
        self._generation += 1

    def _owner_of(self, record: ProcessRecord) -> str:
        if record.owner_uid is None:
            return UNKNOWN_OWNER
        try:
            return self._resolve_username(record.owner_uid)
        except DataAcquisitionError as exc:
            logger.debug("Owner lookup failed for pid %d: %s", record.pid, exc)
            return UNKNOWN_OWNER

    def filtered_view(self, filter_text: str = "") -> list[ProcessRow]:
        """Rows whose path contains filter_text (case-sensitive), in pid order."""
        if not filter_text:
            return list(self._rows)
        return [row for row in self._rows if filter_text in row.path]

