"""
Dock Favorites - pin applications to the GNOME dock through gsettings
"""

import ast
import logging
from typing import List

logger = logging.getLogger(__name__)

SCHEMA = "org.gnome.shell"
KEY = "favorite-apps"


def parse_favorites(raw: str) -> List[str]:
    """
    Parse gsettings output for a string array.

    Handles the typed empty form "@as []" as well as "['a.desktop', 'b.desktop']".
    """
    text = (raw or '').strip()
    if text.startswith('@as'):
        text = text[3:].strip()
    if not text:
        return []
    try:
        value = ast.literal_eval(text)
    except (ValueError, SyntaxError):
        logger.warning(f"⚠️ Unrecognised favorite-apps value: {raw!r}")
        return []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value]


def format_favorites(items: List[str]) -> str:
    """Format a list the way gsettings expects it on the command line"""
    return "[" + ", ".join(repr(str(item)) for item in items) + "]"


class DockFavorites:
    """Reads and updates org.gnome.shell favorite-apps"""

    def __init__(self, shell_executor):
        self.shell_executor = shell_executor

    def available(self) -> bool:
        return self.shell_executor.command_exists('gsettings')

    def get_favorites(self) -> List[str]:
        result = self.shell_executor.run_command(['gsettings', 'get', SCHEMA, KEY], check=False, timeout=30)
        if result.returncode != 0:
            return []
        return parse_favorites(result.stdout)

    def set_favorites(self, items: List[str], check: bool = True) -> bool:
        result = self.shell_executor.run_command(
            ['gsettings', 'set', SCHEMA, KEY, format_favorites(items)], check=check, timeout=30
        )
        return result.returncode == 0

    def pin(self, desktop_id: str, required: bool = True) -> bool:
        """
        Append desktop_id to the favorites unless it is already pinned.

        With required=False a failing gsettings call only logs a warning.

        Returns:
            True if the dock now contains desktop_id
        """
        if not self.available():
            logger.warning("⚠️ gsettings not available, skipping dock pinning")
            return False

        favorites = self.get_favorites()
        if desktop_id in favorites:
            logger.info(f"{desktop_id} already in dock")
            return True

        if not self.set_favorites(favorites + [desktop_id], check=required):
            logger.warning(f"⚠️ Could not add {desktop_id} to dock")
            return False
        logger.info(f"✅ {desktop_id} added to dock")
        return True
