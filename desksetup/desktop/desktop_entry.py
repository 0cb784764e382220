"""
Desktop entry files and the desktop database
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)


def _join_list(values: Iterable[str]) -> str:
    return ''.join(f"{value};" for value in values)


class DesktopEntry:
    """A freedesktop.org [Desktop Entry] for an application"""

    def __init__(self, name: str, exec_command: str, icon, comment: Optional[str] = None,
                 categories: Iterable[str] = (), mime_types: Iterable[str] = (),
                 startup_wm_class: Optional[str] = None, keywords: Iterable[str] = (),
                 version: Optional[str] = "1.0", terminal: bool = False, single_window: bool = False):
        self.name = name
        self.exec_command = exec_command
        self.icon = str(icon)
        self.comment = comment
        self.categories = list(categories)
        self.mime_types = list(mime_types)
        self.startup_wm_class = startup_wm_class
        self.keywords = list(keywords)
        self.version = version
        self.terminal = terminal
        self.single_window = single_window

    def render(self) -> str:
        lines = ["[Desktop Entry]"]
        if self.version:
            lines.append(f"Version={self.version}")
        lines.append("Type=Application")
        lines.append(f"Name={self.name}")
        if self.comment:
            lines.append(f"Comment={self.comment}")
        lines.append(f"Exec={self.exec_command}")
        lines.append(f"Icon={self.icon}")
        lines.append(f"Terminal={'true' if self.terminal else 'false'}")
        if self.categories:
            lines.append(f"Categories={_join_list(self.categories)}")
        if self.startup_wm_class:
            lines.append(f"StartupWMClass={self.startup_wm_class}")
        if self.mime_types:
            lines.append(f"MimeType={_join_list(self.mime_types)}")
        if self.keywords:
            lines.append(f"Keywords={_join_list(self.keywords)}")
        if self.single_window:
            lines.append("X-GNOME-SingleWindow=true")
        return "\n".join(lines) + "\n"

    def write(self, path, executable: bool = True) -> Path:
        """Write the entry, marking it executable so GNOME trusts it"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding='utf-8')
        if executable:
            path.chmod(0o755)
        logger.info(f"Desktop entry created at {path}")
        return path


def update_desktop_database(shell_executor, directory, required: bool = True) -> bool:
    """
    Run update-desktop-database on directory.

    With required=False a missing tool or a failing run only logs a warning.
    """
    if not shell_executor.command_exists('update-desktop-database'):
        if required:
            raise InstallError("update-desktop-database is not installed (package desktop-file-utils)")
        logger.warning("⚠️ update-desktop-database not found, skipping")
        return False

    result = shell_executor.run_command(
        ['update-desktop-database', str(directory)], check=required, timeout=120
    )
    if result.returncode != 0:
        logger.warning(f"⚠️ update-desktop-database exited with {result.returncode}")
        return False
    return True
