"""
Application installer base - shared flow for the desktop application installers
"""

import subprocess
import logging
from pathlib import Path

from desksetup.common.artifact_manager import ArtifactManager
from desksetup.common.dependency_installer import DependencyInstaller
from desksetup.common.errors import InstallError
from desksetup.common.logging_utils import log_banner
from desksetup.common.shell_executor import ShellExecutor
from desksetup.common.state import InstallState
from desksetup.desktop.desktop_entry import update_desktop_database
from desksetup.desktop.dock_favorites import DockFavorites
from desksetup.desktop.icon_manager import IconManager
from desksetup.desktop.mime_registry import MimeRegistry
from desksetup.http_client import HttpClient

logger = logging.getLogger(__name__)


class AppInstaller:
    """Base class: subclasses implement install() and return the installed version"""

    app_key = ""
    display_name = ""

    def __init__(self, settings, shell_executor=None, http_client=None, state=None):
        self.settings = settings
        self.debug_mode = settings.get('debug_mode', False)
        self.app_config = settings.get('apps', {}).get(self.app_key, {})

        self.shell_executor = shell_executor or ShellExecutor(self.debug_mode)
        self.http_client = http_client or HttpClient(timeout=settings.get('http_timeout', 60))
        self.state = state if state is not None else InstallState(settings['state_file'])

        self.dependency_installer = DependencyInstaller(self.shell_executor, self.debug_mode)
        self.artifact_manager = ArtifactManager(self.debug_mode)
        self.icon_manager = IconManager(self.shell_executor, self.http_client, self.debug_mode)
        self.mime_registry = MimeRegistry(self.shell_executor, settings['mime_dir'])
        self.dock = DockFavorites(self.shell_executor)

        self.home = Path(settings['home'])
        self.local_bin = Path(settings['local_bin'])
        self.applications_dir = Path(settings['applications_dir'])
        self.icons_dir = Path(settings['icons_dir'])
        self.cache_dir = Path(settings['cache_dir'])

        # Set by install() for the state record
        self.installed_location = None

    def install(self):
        raise NotImplementedError

    def run(self) -> int:
        """Run the installer and map the outcome to an exit code"""
        log_banner(f"Starting {self.display_name} installation...", logger)
        try:
            version = self.install()
        except InstallError as e:
            logger.error(f"❌ Error: {e}")
            if e.hint:
                logger.warning(f"⚠️ {e.hint}")
            return 1
        except subprocess.CalledProcessError as e:
            logger.error(f"❌ Installation failed: command exited with {e.returncode}: {e.cmd}")
            return 1
        except subprocess.TimeoutExpired as e:
            logger.error(f"❌ Installation failed: command timed out: {e.cmd}")
            return 1
        except OSError as e:
            logger.error(f"❌ Installation failed: {e}")
            return 1

        if version is not None:
            self.state.record_install(self.app_key, version, self.installed_location)
        return 0

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def ensure_directories(self, *directories):
        for directory in directories:
            Path(directory).mkdir(parents=True, exist_ok=True)

    def write_desktop_entry(self, entry, desktop_id, required: bool = True):
        """Write ~/.local/share/applications/<desktop_id> and refresh the desktop database"""
        logger.info("Creating desktop shortcut...")
        path = entry.write(self.applications_dir / desktop_id)
        update_desktop_database(self.shell_executor, self.applications_dir, required=required)
        return path

    def pin_to_dock(self, desktop_id, required: bool = True) -> bool:
        if not self.settings.get('pin_to_dock', True):
            logger.info("Dock pinning disabled in configuration")
            return False
        logger.info(f"Pinning {self.display_name} to dock...")
        return self.dock.pin(desktop_id, required=required)

    def restart_file_manager(self):
        """Quit Nautilus and start it again in the background so it picks up new icons"""
        if not self.settings.get('restart_file_manager', True):
            return
        if not self.shell_executor.command_exists('nautilus'):
            return
        result = self.shell_executor.run_command(['nautilus', '-q'], check=False, timeout=60)
        if result.returncode == 0:
            self.shell_executor.spawn_detached(['nautilus'])

    def refresh_desktop(self, thumbnails: bool = False):
        """Clear icon caches, refresh the user icon cache and restart the file manager"""
        logger.info("Updating icon cache...")
        self.icon_manager.clear_user_caches(self.cache_dir, thumbnails=thumbnails)
        self.icon_manager.update_icon_cache(self.icons_dir)
        self.restart_file_manager()
