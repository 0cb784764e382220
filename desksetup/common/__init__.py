"""
Common modules shared by the installers
"""

from .errors import InstallError
from .shell_executor import ShellExecutor
from .dependency_installer import DependencyInstaller
from .config_loader import ConfigLoader
from .logging_utils import setup_logging, log_banner
from .artifact_manager import ArtifactManager
from .state import InstallState

__all__ = [
    'InstallError',
    'ShellExecutor',
    'DependencyInstaller',
    'ConfigLoader',
    'setup_logging',
    'log_banner',
    'ArtifactManager',
    'InstallState',
]
