"""
Dock from Dash Installer - GNOME Shell extension from extensions.gnome.org
"""

import logging
from pathlib import Path

from desksetup.apps.base import AppInstaller
from desksetup.common.artifact_manager import remove_path
from desksetup.common.environment import get_gnome_shell_version
from desksetup.common.errors import InstallError
from desksetup.release_client import GnomeExtensionsClient

logger = logging.getLogger(__name__)


class DockFromDashInstaller(AppInstaller):
    """Downloads the extension build matching the running GNOME Shell and enables it"""

    app_key = "dock_from_dash"
    display_name = "Dock from Dash extension"

    def __init__(self, settings, **kwargs):
        super().__init__(settings, **kwargs)
        self.uuid = self.app_config['uuid']
        self.extension_id = self.app_config['extension_id']
        self.extensions_dir = Path(settings['extensions_dir'])
        self.extension_dir = self.extensions_dir / self.uuid
        self.client = GnomeExtensionsClient(self.http_client, self.app_config['api_base'])

    def install_extension(self, archive: Path):
        if self.extension_dir.is_dir():
            logger.warning("⚠️ Removing existing installation...")
            remove_path(self.extension_dir)

        logger.info("Installing extension...")
        self.artifact_manager.extract_archive(archive, self.extension_dir)
        if not (self.extension_dir / "metadata.json").is_file():
            raise InstallError("Installation failed - metadata.json not found")

    def enable_extension(self):
        logger.info("Enabling extension...")
        self.shell_executor.run_command(['gnome-extensions', 'enable', self.uuid], timeout=60)

    def install(self):
        shell_version = get_gnome_shell_version(self.shell_executor)

        logger.info("Installing required dependencies...")
        self.dependency_installer.ensure_packages(self.app_config['system_packages'])
        missing = self.dependency_installer.missing_commands(self.app_config['required_commands'])
        if missing:
            raise InstallError(f"Required commands not found: {', '.join(missing)}",
                               hint="Install the GNOME Shell extension tools and try again")
        self.ensure_directories(self.extensions_dir)

        logger.info("Fetching extension metadata...")
        download_url = self.client.get_download_url(self.extension_id, shell_version)

        with self.artifact_manager.working_directory(prefix="extension_") as work_dir:
            logger.info(f"Downloading extension from: {download_url}")
            archive = self.http_client.download(download_url, work_dir / "extension.zip")
            self.install_extension(archive)

        self.enable_extension()
        self.installed_location = self.extension_dir

        logger.info("✅ Dock from Dash extension has been successfully installed!")
        logger.warning("⚠️ Note: You may need to restart GNOME Shell for the extension to take effect:")
        logger.warning("⚠️   - Press Alt+F2, type 'r', and press Enter (X11)")
        logger.warning("⚠️   - Or log out and log back in (Wayland)")
        logger.info("After restarting, hover over the bottom of your screen to access the dock!")
        return f"gnome-{shell_version}"
