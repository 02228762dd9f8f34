"""Dashboard controller and the cooperative render/input loop."""

import logging
from collections.abc import Callable

from proctop.errors import DataAcquisitionError
from proctop.events import Event, EventSource, KeyEvent, RedrawEvent, TickEvent
from proctop.models import HostSummary, ProcessRow
from proctop.monitor import SnapshotSource, resolve_username as default_resolve_username
from proctop.render import Frame, Renderer, build_frame
from proctop.state import InputMode, ViewState
from proctop.table import DEFAULT_MAX_CELL_WIDTH, ProcessTable, column_widths

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q"})


class Dashboard:
    """
    Owns the process table and its view state.

    Every public operation leaves the view state consistent with the
    current filtered view: the selection is inside it (or None when it is
    empty) and the scroll offset follows the selection.
    """

    def __init__(
        self,
        source: SnapshotSource,
        resolve_username: Callable[[int], str] = default_resolve_username,
        host_probe: Callable[[], HostSummary] | None = None,
        row_height: int = 1,
        max_cell_width: int = DEFAULT_MAX_CELL_WIDTH,
        palette_index: int = 0,
    ) -> None:
        """
        Initialize the dashboard and take the first snapshot.

        Args:
            source: Where process snapshots come from.
            resolve_username: uid to login name lookup for the table.
            host_probe: Optional callable returning the host banner data.
            row_height: Scroll units per row.
            max_cell_width: Cells wider than this are truncated with '...'.
            palette_index: Starting palette.
        """
        self._source = source
        self._host_probe = host_probe
        self.max_cell_width = max_cell_width
        self.table = ProcessTable(resolve_username)
        self.host: HostSummary | None = None
        self._view_key: tuple[int, str] | None = None
        self._view: list[ProcessRow] = []
        self._widths: tuple[int, ...] = ()

        self.state = ViewState(row_height=row_height, palette_index=palette_index)

        self._refresh_data()
        self.state.reset_selection(len(self.view()))

        self._normal_keys: dict[str, Callable[[], None]] = {
            "down": self.move_next,
            "j": self.move_next,
            "up": self.move_previous,
            "k": self.move_previous,
            "right": self.next_palette,
            "l": self.next_palette,
            "left": self.previous_palette,
            "h": self.previous_palette,
            "slash": self.enter_filter_mode,
            "f": self.enter_filter_mode,
            "c": self.clear_filter,
        }
        self._editing_keys: dict[str, Callable[[], None]] = {
            "enter": self.submit_filter,
            "escape": self.cancel_filter,
            "backspace": self.state.delete_char,
            "left": self.state.move_cursor_left,
            "right": self.state.move_cursor_right,
            "home": self.state.move_cursor_home,
            "end": self.state.move_cursor_end,
        }

    # Data

    def view(self) -> list[ProcessRow]:
        """Rows matching the active filter, recomputed only when stale."""
        key = (self.table.generation, self.state.active_filter)
        if key != self._view_key:
            self._view = self.table.filtered_view(key[1])
            self._widths = column_widths(self._view, self.max_cell_width)
            self._view_key = key
        return self._view

    def widths(self) -> tuple[int, ...]:
        """Column widths of the current view, measured when the view changes."""
        self.view()
        return self._widths

    def _refresh_data(self) -> None:
        try:
            snapshot = self._source.get_snapshot()
        except DataAcquisitionError as exc:
            logger.warning("Snapshot failed, keeping previous rows: %s", exc)
        else:
            self.table.refresh(snapshot)
            logger.debug("Refreshed table with %d rows", len(self.table))

        if self._host_probe is not None:
            try:
                self.host = self._host_probe()
            except DataAcquisitionError as exc:
                logger.warning("Host summary failed: %s", exc)

    def refresh(self) -> None:
        """Take a new snapshot and re-clamp the selection to the new view."""
        self._refresh_data()
        self.state.clamp(len(self.view()))

    # Operations

    def move_next(self) -> None:
        self.state.move_next(len(self.view()))

    def move_previous(self) -> None:
        self.state.move_previous(len(self.view()))

    def next_palette(self) -> None:
        self.state.next_palette()

    def previous_palette(self) -> None:
        self.state.previous_palette()

    def enter_filter_mode(self) -> None:
        self.state.enter_filter_mode()

    def insert_char(self, char: str) -> None:
        self.state.insert_char(char)

    def submit_filter(self) -> None:
        """Apply the edited filter and clamp the selection to what remains."""
        if not self.state.is_editing:
            return
        self.state.submit_filter()
        self.state.clamp(len(self.view()))

    def cancel_filter(self) -> None:
        self.state.cancel_filter()

    def clear_filter(self) -> None:
        if self.state.is_editing:
            return
        self.state.clear_filter(len(self.table))

    # Loop plumbing

    def frame(self, viewport_height: int) -> Frame:
        """Lay out the current table and view state."""
        return build_frame(
            self.view(),
            self.state,
            viewport_height,
            self.max_cell_width,
            unfiltered_rows=len(self.table),
            host=self.host,
            widths=self.widths(),
        )

    def handle(self, event: Event) -> bool:
        """
        Apply one event.

        Returns:
            False when the event asks the dashboard to quit.
        """
        if isinstance(event, TickEvent):
            self.refresh()
            return True
        if isinstance(event, KeyEvent):
            return self._handle_key(event)
        if isinstance(event, RedrawEvent):
            return True
        logger.debug("Ignoring unknown event %r", event)
        return True

    def _handle_key(self, event: KeyEvent) -> bool:
        if self.state.input_mode is InputMode.EDITING:
            action = self._editing_keys.get(event.key)
            if action is not None:
                action()
            elif event.character and event.character.isprintable():
                self.insert_char(event.character)
            return True

        if event.key in QUIT_KEYS:
            return False
        action = self._normal_keys.get(event.key)
        if action is not None:
            action()
        return True


async def run_loop(dashboard: Dashboard, events: EventSource, renderer: Renderer) -> None:
    """
    Render, wait for an event, dispatch; until a quit key arrives.

    The renderer is closed on every exit path, including errors raised
    while rendering or dispatching.
    """
    try:
        while True:
            renderer.render(dashboard.frame(renderer.viewport_height))
            event = await events.next_event()
            if not dashboard.handle(event):
                logger.info("Quit requested")
                break
    finally:
        renderer.close()
