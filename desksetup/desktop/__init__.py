"""
Desktop integration modules: desktop entries, MIME types, icons, dock and shell rc files
"""

from .desktop_entry import DesktopEntry, update_desktop_database
from .mime_registry import MimeTypeDefinition, MimeRegistry, render_mime_package
from .icon_manager import IconManager, placeholder_svg
from .dock_favorites import DockFavorites, parse_favorites, format_favorites
from .shell_rc import get_shell_config_file, ensure_snippet, write_launcher

__all__ = [
    'DesktopEntry',
    'update_desktop_database',
    'MimeTypeDefinition',
    'MimeRegistry',
    'render_mime_package',
    'IconManager',
    'placeholder_svg',
    'DockFavorites',
    'parse_favorites',
    'format_favorites',
    'get_shell_config_file',
    'ensure_snippet',
    'write_launcher',
]
