"""proctop - Main Textual application."""

import logging
from collections.abc import Callable

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Static

from proctop.config import Config
from proctop.engine import Dashboard, run_loop
from proctop.events import KeyEvent, QueueEventSource, RedrawEvent, TickEvent
from proctop.models import HostSummary
from proctop.monitor import (
    PsutilSnapshotSource,
    SnapshotSource,
    collect_host_summary,
    resolve_username,
)
from proctop.render import Frame, filter_bar, footer, rows_table, scrollbar, summary

logger = logging.getLogger(__name__)

# Title and header lines drawn above the first table row
TABLE_CHROME_LINES = 2


class ProcessView(Static, can_focus=True):
    """Focusable widget showing the table; forwards every key to the app."""

    class KeyPressed(Message):
        """Posted for each key press while the table has focus."""

        def __init__(self, key: str, character: str | None) -> None:
            super().__init__()
            self.key = key
            self.character = character

    def on_key(self, event: events.Key) -> None:
        """Turn the key into a KeyPressed message instead of a binding."""
        event.stop()
        event.prevent_default()
        character = event.character if event.is_printable else None
        self.post_message(self.KeyPressed(event.key, character))


class TextualRenderer:
    """Paints frames into the app's widgets; closing it exits the app."""

    def __init__(self, app: "ProctopApp") -> None:
        self._app = app

    @property
    def viewport_height(self) -> int:
        height = self._app.query_one("#process-rows", ProcessView).size.height
        return max(1, height - TABLE_CHROME_LINES)

    def render(self, frame: Frame) -> None:
        app = self._app
        rows = app.query_one("#process-rows", ProcessView)
        app.query_one("#host-summary", Static).update(summary(frame.host))
        rows.update(rows_table(frame))
        app.query_one("#scrollbar", Static).update(scrollbar(frame, rows.size.height))
        app.query_one("#filter-bar", Static).update(filter_bar(frame))
        app.query_one("#footer", Static).update(footer(frame))

    def close(self) -> None:
        self._app.exit()


class ProctopApp(App):
    """Main proctop application."""

    TITLE = "proctop"
    SUB_TITLE = "Process Table"

    CSS = """
    Screen {
        layout: vertical;
    }

    #host-summary {
        height: auto;
        max-height: 5;
        padding: 0 1;
        background: $surface;
    }

    #table-area {
        height: 1fr;
    }

    #process-rows {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
    }

    #scrollbar {
        width: 1;
        height: 1fr;
    }

    #filter-bar {
        height: 1;
        padding: 0 1;
    }

    #footer {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    """

    def __init__(
        self,
        config: Config | None = None,
        source: SnapshotSource | None = None,
        username_lookup: Callable[[int], str] = resolve_username,
        host_probe: Callable[[], HostSummary] | None = collect_host_summary,
    ) -> None:
        """
        Initialize the ProctopApp.

        Args:
            config: Settings; defaults when omitted.
            source: Snapshot source; psutil when omitted.
            username_lookup: uid to login name lookup.
            host_probe: Host banner data, or None to skip it.
        """
        super().__init__()
        self._config = config or Config()
        self._events = QueueEventSource()
        self.dashboard = Dashboard(
            source or PsutilSnapshotSource(),
            resolve_username=username_lookup,
            host_probe=host_probe,
            row_height=self._config.row_height,
            max_cell_width=self._config.max_cell_width,
            palette_index=self._config.palette_index,
        )

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(id="host-summary")
        yield Horizontal(
            ProcessView(id="process-rows"),
            Static(id="scrollbar"),
            id="table-area",
        )
        yield Static(id="filter-bar")
        yield Static(id="footer")

    def on_mount(self) -> None:
        """Start the refresh timer and the dashboard loop."""
        logger.info("Starting proctop, refreshing every %.1fs", self._config.refresh_rate)
        self.query_one(ProcessView).focus()
        self.set_interval(self._config.refresh_rate, self._tick)
        self.run_worker(self._drive(), name="dashboard-loop", exclusive=True)

    async def _drive(self) -> None:
        await run_loop(self.dashboard, self._events, TextualRenderer(self))

    def _tick(self) -> None:
        self._events.put(TickEvent())

    def on_resize(self, event: events.Resize) -> None:
        self._events.put(RedrawEvent())

    def on_process_view_key_pressed(self, message: ProcessView.KeyPressed) -> None:
        self._events.put(KeyEvent(message.key, message.character))

    def on_unmount(self) -> None:
        logger.info("proctop stopped")
