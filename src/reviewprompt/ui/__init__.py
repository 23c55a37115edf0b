"""Terminal user interface components for reviewprompt."""

from .display import DisplayManager
from .selector import CommentSelectorApp, SelectionState, select_comments

__all__ = ["DisplayManager", "CommentSelectorApp", "SelectionState", "select_comments"]
