"""
Desktop application installers
"""

from .base import AppInstaller
from .cursor import CursorInstaller
from .bambu_studio import BambuStudioInstaller
from .cura import CuraInstaller
from .rubymine import RubyMineInstaller
from .dock_from_dash import DockFromDashInstaller

__all__ = [
    'AppInstaller',
    'CursorInstaller',
    'BambuStudioInstaller',
    'CuraInstaller',
    'RubyMineInstaller',
    'DockFromDashInstaller',
]
