"""Clipboard management with WSL2 support."""

import shutil
import subprocess
from typing import Optional

from .rich_logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 5.0  # seconds


class ClipboardManager:
    """Copy text to the system clipboard through a platform command."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize ClipboardManager.

        Args:
            timeout: Seconds to wait for the clipboard command
        """
        self.timeout = timeout
        self.clipboard_cmd = self._detect_clipboard_command()
        self.last_error: Optional[str] = None

    def _detect_clipboard_command(self) -> Optional[list[str]]:
        """
        Detect available clipboard command.

        Returns:
            Clipboard command as list of arguments or None
        """
        # Check for WSL
        try:
            with open("/proc/version") as f:
                if "microsoft" in f.read().lower():
                    if shutil.which("clip.exe"):
                        return ["clip.exe"]
                    if shutil.which("/mnt/c/Windows/System32/clip.exe"):
                        return ["/mnt/c/Windows/System32/clip.exe"]
        except OSError:
            pass

        # Check for macOS
        if shutil.which("pbcopy"):
            return ["pbcopy"]

        # Check for Wayland
        if shutil.which("wl-copy"):
            return ["wl-copy"]

        # Check for X11
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard"]

        if shutil.which("xsel"):
            return ["xsel", "--clipboard", "--input"]

        # Native Windows
        if shutil.which("clip"):
            return ["clip"]

        return None

    def copy(self, text: str) -> bool:
        """
        Copy text to clipboard.

        Args:
            text: Text to copy

        Returns:
            True if successful; on failure ``last_error`` holds the reason
        """
        self.last_error = None

        if not self.clipboard_cmd:
            self.last_error = "no clipboard command available"
            return False

        try:
            # Text goes through stdin, never through argv
            process = subprocess.Popen(
                self.clipboard_cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            process.communicate(input=text.encode("utf-8"), timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            # Reap the child to avoid zombies
            process.communicate()
            self.last_error = f"{self.clipboard_cmd[0]} timed out after {self.timeout}s"
            return False
        except (OSError, subprocess.SubprocessError) as e:
            self.last_error = str(e) or e.__class__.__name__
            return False

        if process.returncode != 0:
            self.last_error = f"{self.clipboard_cmd[0]} exited with status {process.returncode}"
            return False

        logger.debug("Copied text to clipboard", command=self.clipboard_cmd[0], chars=len(text))
        return True
