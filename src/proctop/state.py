"""View state: selection, scrolling, palette and the filter line editor."""

from enum import Enum

from proctop.palettes import PALETTES, Palette


class InputMode(Enum):
    """Which keys the dashboard is listening for."""

    NORMAL = "normal"
    EDITING = "editing"


class ViewState:
    """
    UI state that must stay consistent with the filtered view.

    Methods that depend on the view take its current length as row_count,
    so the invariants hold without this class knowing about the table.
    Editing operations are no-ops outside EDITING mode and vice versa.
    """

    def __init__(self, row_count: int = 0, row_height: int = 1, palette_index: int = 0) -> None:
        """
        Initialize the view state.

        Args:
            row_count: Rows in the initial view; selection starts at 0 if any.
            row_height: Scroll units per row, used to derive scroll_offset.
            palette_index: Starting palette, taken modulo the palette count.
        """
        self.row_height = max(1, row_height)
        self.palette_index = palette_index % len(PALETTES)
        self.filter_text = ""
        self.active_filter = ""
        self.cursor = 0
        self.input_mode = InputMode.NORMAL
        self.selected_index: int | None = None
        self.scroll_offset = 0
        self.reset_selection(row_count)

    @property
    def palette(self) -> Palette:
        """The current palette."""
        return PALETTES[self.palette_index]

    @property
    def is_editing(self) -> bool:
        return self.input_mode is InputMode.EDITING

    def _sync_scroll(self) -> None:
        if self.selected_index is None:
            self.scroll_offset = 0
        else:
            self.scroll_offset = self.selected_index * self.row_height

    def reset_selection(self, row_count: int) -> None:
        """Select the first row, or nothing when the view is empty."""
        self.selected_index = 0 if row_count > 0 else None
        self._sync_scroll()

    def clamp(self, row_count: int) -> None:
        """Pull the selection back inside a view of row_count rows."""
        if row_count <= 0:
            self.selected_index = None
        elif self.selected_index is not None and self.selected_index >= row_count:
            self.selected_index = row_count - 1
        self._sync_scroll()

    # Navigation

    def move_next(self, row_count: int) -> None:
        """Select the next row, wrapping to the first."""
        if row_count <= 0:
            return
        if self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = (self.selected_index + 1) % row_count
        self._sync_scroll()

    def move_previous(self, row_count: int) -> None:
        """Select the previous row, wrapping to the last."""
        if row_count <= 0:
            return
        if self.selected_index is None:
            self.selected_index = row_count - 1
        else:
            self.selected_index = (self.selected_index - 1) % row_count
        self._sync_scroll()

    def next_palette(self) -> None:
        self.palette_index = (self.palette_index + 1) % len(PALETTES)

    def previous_palette(self) -> None:
        self.palette_index = (self.palette_index - 1) % len(PALETTES)

    # Filter editing

    def enter_filter_mode(self) -> None:
        """Start editing the filter, resuming with the cursor at the end."""
        if self.is_editing:
            return
        self.input_mode = InputMode.EDITING
        self.cursor = len(self.filter_text)

    def insert_char(self, char: str) -> None:
        """Insert char at the cursor and advance it by one character."""
        if not self.is_editing or not char:
            return
        text = self.filter_text
        self.filter_text = text[: self.cursor] + char + text[self.cursor :]
        self.cursor += len(char)

    def delete_char(self) -> None:
        """Remove the character before the cursor."""
        if not self.is_editing or self.cursor == 0:
            return
        text = self.filter_text
        self.filter_text = text[: self.cursor - 1] + text[self.cursor :]
        self.cursor -= 1

    def move_cursor_left(self) -> None:
        if self.is_editing:
            self.cursor = max(0, self.cursor - 1)

    def move_cursor_right(self) -> None:
        if self.is_editing:
            self.cursor = min(len(self.filter_text), self.cursor + 1)

    def move_cursor_home(self) -> None:
        if self.is_editing:
            self.cursor = 0

    def move_cursor_end(self) -> None:
        if self.is_editing:
            self.cursor = len(self.filter_text)

    def submit_filter(self) -> str:
        """
        Commit the edit buffer as the active filter and leave editing.

        The caller must clamp() against the newly filtered view afterwards.

        Returns:
            The active filter text.
        """
        if self.is_editing:
            self.active_filter = self.filter_text
            self.input_mode = InputMode.NORMAL
        return self.active_filter

    def cancel_filter(self) -> None:
        """Leave editing, discarding uncommitted changes."""
        if not self.is_editing:
            return
        self.filter_text = self.active_filter
        self.cursor = len(self.filter_text)
        self.input_mode = InputMode.NORMAL

    def clear_filter(self, row_count: int) -> None:
        """Drop the filter; row_count is the length of the unfiltered view."""
        if self.is_editing:
            return
        self.filter_text = ""
        self.active_filter = ""
        self.cursor = 0
        self.reset_selection(row_count)
