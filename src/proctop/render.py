"""Frame layout and rich renderables for the process table."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from proctop.models import HostSummary, ProcessRow
from proctop.palettes import Palette
from proctop.state import InputMode, ViewState
from proctop.table import COLUMNS, column_widths, format_cells

TITLE = "Running Processes"
SCROLL_TRACK = "│"
SCROLL_THUMB = "█"

NORMAL_HINTS = (
    ("↑/↓", "select"),
    ("←/→", "palette"),
    ("/", "filter"),
    ("c", "clear filter"),
    ("q", "quit"),
)
EDITING_HINTS = (
    ("Enter", "apply"),
    ("Esc", "cancel"),
    ("←/→", "move cursor"),
    ("Backspace", "delete"),
)


@dataclass(slots=True, frozen=True)
class Frame:
    """Everything needed to paint one screen, already laid out."""

    headers: tuple[str, ...]
    widths: tuple[int, ...]
    rows: list[tuple[str, ...]]  # Visible window only
    window_start: int
    selected_index: int | None
    scroll_offset: int
    row_height: int
    total_rows: int  # Rows in the filtered view
    unfiltered_rows: int
    palette: Palette
    input_mode: InputMode
    filter_text: str
    cursor: int
    active_filter: str
    host: HostSummary | None = None


class Renderer(Protocol):
    """Paints frames on some output and releases it when done."""

    @property
    def viewport_height(self) -> int:
        """How many table rows fit on screen."""
        ...

    def render(self, frame: Frame) -> None:
        ...

    def close(self) -> None:
        ...


def build_frame(
    view: Sequence[ProcessRow],
    state: ViewState,
    viewport_height: int,
    max_cell_width: int,
    unfiltered_rows: int | None = None,
    host: HostSummary | None = None,
    widths: tuple[int, ...] | None = None,
) -> Frame:
    """
    Lay out the visible window of view for the given view state.

    The window scrolls just far enough to keep the selected row visible.
    Column widths are measured over the whole view unless already known.
    """
    viewport = max(1, viewport_height)
    selected = state.selected_index
    start = 0 if selected is None else max(0, selected - viewport + 1)
    visible = view[start : start + viewport]

    return Frame(
        headers=COLUMNS,
        widths=column_widths(view, max_cell_width) if widths is None else widths,
        rows=[format_cells(row, max_cell_width) for row in visible],
        window_start=start,
        selected_index=selected,
        scroll_offset=state.scroll_offset,
        row_height=state.row_height,
        total_rows=len(view),
        unfiltered_rows=len(view) if unfiltered_rows is None else unfiltered_rows,
        palette=state.palette,
        input_mode=state.input_mode,
        filter_text=state.filter_text,
        cursor=state.cursor,
        active_filter=state.active_filter,
        host=host,
    )


def format_bytes(size: float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:.1f}{unit}" if unit != "B" else f"{int(size)}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def scrollbar_position(frame: Frame, height: int) -> int:
    """Row of the scrollbar thumb within a track of the given height."""
    if height <= 1 or frame.total_rows <= 1:
        return 0
    max_offset = (frame.total_rows - 1) * frame.row_height
    fraction = min(1.0, frame.scroll_offset / max_offset)
    return round(fraction * (height - 1))


def title(frame: Frame) -> str:
    """Table title with row counts and the active filter."""
    if frame.active_filter:
        counts = f"{frame.total_rows}/{frame.unfiltered_rows}"
        return f"{TITLE} ({counts}) path ~ {frame.active_filter!r}"
    return f"{TITLE} ({frame.total_rows})"


def rows_table(frame: Frame) -> Table:
    """Header row plus the visible rows, styled with the frame's palette."""
    palette = frame.palette
    table = Table(
        title=title(frame),
        title_style=palette.title,
        header_style=palette.header,
        box=None,
        pad_edge=False,
        show_edge=False,
    )
    for i, (label, width) in enumerate(zip(frame.headers, frame.widths)):
        table.add_column(
            label,
            style=palette.columns[i % len(palette.columns)],
            width=width,
            no_wrap=True,
            justify="right" if label in ("PID", "CPU%") else "left",
        )

    for offset, cells in enumerate(frame.rows):
        is_selected = frame.window_start + offset == frame.selected_index
        table.add_row(*cells, style=palette.selected if is_selected else None)

    return table


def scrollbar(frame: Frame, height: int) -> Text:
    """A vertical scrollbar reflecting the frame's scroll offset."""
    height = max(1, height)
    thumb = scrollbar_position(frame, height) if frame.total_rows else None
    text = Text(style=frame.palette.scrollbar)
    for row in range(height):
        if row:
            text.append("\n")
        text.append(SCROLL_THUMB if row == thumb else SCROLL_TRACK)
    return text


def filter_bar(frame: Frame) -> Text:
    """The filter line; shows the edit cursor while editing."""
    if frame.input_mode is InputMode.EDITING:
        text = Text("Filter: ", style="bold")
        before = frame.filter_text[: frame.cursor]
        at = frame.filter_text[frame.cursor : frame.cursor + 1] or " "
        after = frame.filter_text[frame.cursor + 1 :]
        text.append(before)
        text.append(at, style="reverse")
        text.append(after)
        return text
    if frame.active_filter:
        return Text(f"Filter: {frame.active_filter}", style="dim")
    return Text("")


def footer(frame: Frame) -> Text:
    """Key hints for the current input mode."""
    hints = EDITING_HINTS if frame.input_mode is InputMode.EDITING else NORMAL_HINTS
    text = Text()
    for key, action in hints:
        if text:
            text.append("  ")
        text.append(key, style="bold")
        text.append(f" {action}")
    if frame.input_mode is InputMode.NORMAL:
        text.append(f"  [{frame.palette.name}]", style="dim")
    return text


def summary(host: HostSummary | None) -> Text:
    """
    Host banner: greeting, system identity, memory and swap usage.

    Disks, network interfaces and temperatures get one line each when the
    host reports any. Lines too long for the screen end in an ellipsis.
    """
    if host is None:
        return Text("Collecting host info...", style="dim")
    text = Text.assemble(
        (f"Hello, {host.user}!", "bold"),
        f"  {host.hostname} · {host.system} {host.kernel}",
        f" · {host.os_version}" if host.os_version else "",
        f" · {host.cpu_count} CPUs\n",
        ("Mem ", "bold"),
        f"{format_bytes(host.memory_used)}/{format_bytes(host.memory_total)}  ",
        ("Swp ", "bold"),
        f"{format_bytes(host.swap_used)}/{format_bytes(host.swap_total)}",
        no_wrap=True,
        overflow="ellipsis",
    )
    sections = (
        (
            "Disk",
            [
                f"{disk.mountpoint} {format_bytes(disk.used)}/{format_bytes(disk.total)}"
                for disk in host.disks
            ],
        ),
        (
            "Net",
            [
                f"{net.name} ↓{format_bytes(net.bytes_recv)} ↑{format_bytes(net.bytes_sent)}"
                for net in host.networks
            ],
        ),
        ("Temp", [f"{temp.label} {temp.current:.1f}°C" for temp in host.temperatures]),
    )
    for label, items in sections:
        if items:
            text.append("\n")
            text.append(f"{label} ", style="bold")
            text.append("  ".join(items))
    return text


def snapshot_view(frame: Frame) -> RenderableType:
    """Static rendering of a whole frame, for printing once to stdout."""
    return Group(summary(frame.host), Text(""), rows_table(frame))
