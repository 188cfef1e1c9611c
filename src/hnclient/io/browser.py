"""Open URLs with the platform's default handler."""

from __future__ import annotations

import logging
import subprocess
import sys

logger = logging.getLogger(__name__)


def browser_commands(url: str, platform: str | None = None) -> list[list[str]]:
    """Candidate launcher commands for url, in preference order."""
    platform = platform or sys.platform
    if platform == "darwin":
        return [["open", url]]
    if platform == "win32":
        return [["cmd", "/c", "start", "", url]]
    return [["xdg-open", url], ["gio", "open", url]]


def open_external(url: str) -> bool:
    """Launch url detached from the TUI. True if a launcher started."""
    for argv in browser_commands(url):
        try:
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.debug("launcher %s failed: %s", argv[0], exc)
            continue
        return True
    logger.warning("no launcher could open %s", url)
    return False
