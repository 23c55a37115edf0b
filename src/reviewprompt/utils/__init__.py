"""Utility modules for reviewprompt."""

from .clipboard import ClipboardManager
from .config import ConfigManager

__all__ = ["ClipboardManager", "ConfigManager"]
