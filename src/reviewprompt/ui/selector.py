"""Interactive comment selector built on Textual."""

from collections.abc import Sequence
from typing import ClassVar, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Vertical
from textual.widgets import Footer, Static

from ..core.comments import DEFAULT_MENTION
from ..core.models import FilteredComment

PREVIEW_LENGTH = 50
DONE_LABEL = "Done"
DEFAULT_HEADING = "Select comments:"
HELP_TEXT = "Use arrow keys to navigate, space to toggle selection, enter to choose, s to submit"


def format_comment_label(comment: FilteredComment, mention: str = DEFAULT_MENTION) -> str:
    """
    Build the one-line label shown for a comment.

    Args:
        comment: Comment to describe
        mention: Marker to hide from the preview

    Returns:
        ``<path>[:L<line>] - <preview>``, with "General" for comments
        that are not attached to a file
    """
    path = comment.path or "General"
    line = comment.line or comment.start_line
    location = f"{path}:L{line}" if line else path

    body = comment.body.replace(mention, "") if mention else comment.body
    preview = " ".join(body.split())
    if len(preview) > PREVIEW_LENGTH:
        preview = preview[:PREVIEW_LENGTH] + "..."

    return f"{location} - {preview}"


class SelectionState:
    """
    Cursor and toggle state over a fixed list of comments.

    Entries are the comments followed by a synthetic "Done" entry.
    Once submitted or cancelled, further transitions are ignored.
    """

    def __init__(self, comments: Sequence[FilteredComment]):
        self.comments: tuple[FilteredComment, ...] = tuple(comments)
        self.cursor = 0
        self.selected: set[int] = set()
        self.result: Optional[list[FilteredComment]] = None

    @property
    def done_index(self) -> int:
        return len(self.comments)

    @property
    def entry_count(self) -> int:
        return len(self.comments) + 1

    @property
    def finished(self) -> bool:
        return self.result is not None

    @property
    def on_done_entry(self) -> bool:
        return self.cursor == self.done_index

    def is_selected(self, index: int) -> bool:
        return index in self.selected

    def selected_comments(self) -> list[FilteredComment]:
        """Return the currently selected comments in original order."""
        return [c for i, c in enumerate(self.comments) if i in self.selected]

    def cursor_up(self) -> None:
        if not self.finished:
            self.cursor = max(0, self.cursor - 1)

    def cursor_down(self) -> None:
        if not self.finished:
            self.cursor = min(self.entry_count - 1, self.cursor + 1)

    def move_to(self, index: int) -> None:
        if not self.finished:
            self.cursor = min(max(0, index), self.entry_count - 1)

    def toggle(self) -> None:
        """Flip the selection of the browsed comment."""
        if self.finished or self.on_done_entry:
            return
        self.selected ^= {self.cursor}

    def activate(self) -> Optional[list[FilteredComment]]:
        """
        Choose the browsed entry.

        Returns:
            The selection when the Done entry was chosen, None otherwise
        """
        if self.finished:
            return self.result
        if self.on_done_entry:
            return self.submit()
        self.toggle()
        return None

    def submit(self) -> list[FilteredComment]:
        if not self.finished:
            self.result = self.selected_comments()
        return self.result

    def cancel(self) -> list[FilteredComment]:
        if not self.finished:
            self.result = []
        return self.result


class CommentSelectorApp(App[list[FilteredComment]]):
    """Full-screen multi-select list of comments."""

    CSS = """
    #heading {
        padding: 0 1;
    }

    #help {
        padding: 0 1 1 1;
    }

    #items {
        padding: 0 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("up,k", "cursor_up", "Up", show=False, priority=True),
        Binding("down,j", "cursor_down", "Down", show=False, priority=True),
        Binding("space", "toggle", "Toggle", priority=True),
        Binding("enter", "activate", "Choose", priority=True),
        Binding("s", "submit", "Submit"),
        Binding("escape,q", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        comments: Sequence[FilteredComment],
        heading: Optional[str] = None,
        mention: str = DEFAULT_MENTION,
    ):
        """
        Initialize the selector.

        Args:
            comments: Comments to choose from
            heading: Line shown above the list
            mention: Marker hidden from the comment previews
        """
        super().__init__()
        self.state = SelectionState(comments)
        self.heading = heading or DEFAULT_HEADING
        self.labels = [format_comment_label(c, mention) for c in self.state.comments]

    def compose(self) -> ComposeResult:
        """Compose the selector layout."""
        yield Static(Text(self.heading, style="bold cyan"), id="heading")
        yield Static(Text(HELP_TEXT, style="grey50"), id="help")
        with Vertical():
            yield Static(id="items")
        yield Footer()

    def on_mount(self) -> None:
        self.redraw()

    def render_entries(self) -> Text:
        """Render every entry; the cursor row is marked with ``>``."""
        text = Text()
        for index, label in enumerate(self.labels):
            pointer = ">" if index == self.state.cursor else " "
            box = "[x]" if self.state.is_selected(index) else "[ ]"
            style = "bold" if index == self.state.cursor else ""
            text.append(f"{pointer} {box} {label}\n", style=style)

        pointer = ">" if self.state.on_done_entry else " "
        style = "bold green" if self.state.on_done_entry else "green"
        text.append(f"{pointer} {DONE_LABEL}", style=style)
        return text

    def redraw(self) -> None:
        self.query_one("#items", Static).update(self.render_entries())

    def action_cursor_up(self) -> None:
        self.state.cursor_up()
        self.redraw()

    def action_cursor_down(self) -> None:
        self.state.cursor_down()
        self.redraw()

    def action_toggle(self) -> None:
        self.state.toggle()
        self.redraw()

    def action_activate(self) -> None:
        result = self.state.activate()
        if result is not None:
            self.exit(result)
        else:
            self.redraw()

    def action_submit(self) -> None:
        self.exit(self.state.submit())

    def action_cancel(self) -> None:
        self.exit(self.state.cancel())


def select_comments(
    comments: Sequence[FilteredComment],
    heading: Optional[str] = None,
    mention: str = DEFAULT_MENTION,
) -> list[FilteredComment]:
    """
    Let the user pick comments interactively.

    Args:
        comments: Comments to choose from
        heading: Line shown above the list
        mention: Marker hidden from the comment previews

    Returns:
        Chosen comments in original order; empty if nothing was chosen
        or the selector was closed
    """
    app = CommentSelectorApp(comments, heading=heading, mention=mention)
    result = app.run()
    return list(result or [])
