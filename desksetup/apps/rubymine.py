"""
RubyMine Installer - JetBrains Ruby IDE from the official tar.gz release
"""

import os
import json
import shutil
import logging
from pathlib import Path
from typing import Optional

from desksetup.apps.base import AppInstaller
from desksetup.common.artifact_manager import make_executable, remove_path
from desksetup.common.environment import (
    OS_RELEASE_PATH, detect_distribution, detect_desktop_environment, is_gnome, path_contains
)
from desksetup.common.errors import InstallError
from desksetup.desktop.desktop_entry import DesktopEntry
from desksetup.desktop.shell_rc import write_launcher
from desksetup.release_client import JetBrainsReleaseClient

logger = logging.getLogger(__name__)

PLACEHOLDER_ICON = """<svg width="256" height="256" xmlns="http://www.w3.org/2000/svg">
  <rect width="256" height="256" rx="32" fill="#DD1100"/>
  <rect x="32" y="32" width="192" height="192" rx="16" fill="#000000"/>
  <text x="128" y="110" text-anchor="middle" dy=".3em" fill="#DD1100" font-family="Arial, sans-serif" font-size="32" font-weight="bold">Ruby</text>
  <text x="128" y="150" text-anchor="middle" dy=".3em" fill="#DD1100" font-family="Arial, sans-serif" font-size="32" font-weight="bold">Mine</text>
</svg>
"""


class InstallCancelled(Exception):
    """The user declined to reinstall the version that is already installed"""


class RubyMineInstaller(AppInstaller):
    """Installs the latest RubyMine release into ~/.local/bin/rubymine"""

    app_key = "rubymine"
    display_name = "RubyMine"

    def __init__(self, settings, assume_yes: bool = False, prompt=input, environ=None,
                 os_release_path: Optional[str] = None, **kwargs):
        super().__init__(settings, **kwargs)
        self.assume_yes = assume_yes
        self.prompt = prompt
        self.environ = os.environ if environ is None else environ
        self.os_release_path = os_release_path

        self.install_dir = self.local_bin / self.app_config['install_subdir']
        self.launcher_file = self.local_bin / self.app_config['launcher_name']
        self.desktop_id = self.app_config['desktop_id']
        self.release_client = JetBrainsReleaseClient(self.http_client, self.app_config['api_url'])

    @property
    def main_script(self) -> Path:
        return self.install_dir / "bin" / "rubymine.sh"

    def get_installed_version(self) -> Optional[str]:
        """Version from product-info.json, "unknown" if unreadable, None if absent"""
        product_info = self.install_dir / "product-info.json"
        if not product_info.is_file():
            return None
        try:
            with open(product_info, 'r', encoding='utf-8') as f:
                return json.load(f).get('version') or "unknown"
        except (OSError, ValueError):
            return "unknown"

    def confirm_reinstall(self) -> bool:
        if self.assume_yes:
            return True
        try:
            reply = self.prompt("Do you want to reinstall? (y/N): ")
        except EOFError:
            return False
        return reply.strip()[:1] in ('y', 'Y')

    def check_existing_installation(self, latest_version: str):
        """
        Remove a previous installation before installing again.

        Raises:
            InstallCancelled: when the latest version is installed and reinstalling is declined
        """
        if not self.main_script.is_file():
            return

        logger.warning(f"⚠️ RubyMine installation found at {self.install_dir}")
        installed_version = self.get_installed_version()
        if installed_version is None:
            logger.warning("⚠️ Cannot determine installed version. Proceeding with installation...")
        else:
            logger.info(f"Installed version: {installed_version}")
            if installed_version == latest_version:
                logger.info("✅ Latest version is already installed!")
                if not self.confirm_reinstall():
                    raise InstallCancelled()
            else:
                logger.info("A different version is installed. Proceeding with update...")

        logger.info("Removing existing installation...")
        remove_path(self.install_dir)

    def extract_release(self, download_url: str, version: str):
        with self.artifact_manager.working_directory(prefix="rubymine_") as work_dir:
            logger.info(f"Downloading RubyMine {version}...")
            filename = download_url.rstrip('/').rsplit('/', 1)[-1]
            archive = self.http_client.download(download_url, work_dir / filename)

            logger.info("Extracting RubyMine...")
            extract_dir = self.artifact_manager.extract_archive(archive, work_dir / "extracted")
            extracted = self.artifact_manager.find_directory(extract_dir, self.app_config['extracted_dir_pattern'])
            if extracted is None:
                raise InstallError("Could not find extracted RubyMine directory")
            logger.info(f"Found extracted directory: {extracted.name}")

            self.artifact_manager.move_directory_contents(extracted, self.install_dir)

        make_executable(self.main_script)
        logger.info(f"RubyMine installed to {self.install_dir}")

    def setup_icon(self) -> Path:
        logger.info("Setting up RubyMine icon...")
        for candidate in self.app_config['icon_candidates']:
            source = self.install_dir / candidate
            if source.is_file():
                logger.info(f"Found icon: {source}")
                icon_file = self.icons_dir / f"rubymine{source.suffix}"
                shutil.copyfile(source, icon_file)
                logger.info(f"Icon installed to {icon_file}")
                return icon_file

        logger.warning("⚠️ No icon found in RubyMine installation, creating placeholder...")
        icon_file = self.icons_dir / "rubymine.svg"
        icon_file.write_text(PLACEHOLDER_ICON, encoding='utf-8')
        return icon_file

    def build_desktop_entry(self, icon_file) -> DesktopEntry:
        return DesktopEntry(
            name="RubyMine",
            comment="Ruby and Rails IDE",
            exec_command=f"{self.main_script} %f",
            icon=icon_file,
            categories=["Development", "IDE"],
            startup_wm_class=self.app_config['startup_wm_class'],
            mime_types=self.app_config['mime_types'],
            keywords=["ruby", "rails", "ide", "jetbrains", "development"],
        )

    def create_cli_launcher(self) -> bool:
        logger.info("Creating command line launcher...")
        if self.launcher_file.is_dir():
            # Default layout: the install directory itself is ~/.local/bin/rubymine
            logger.warning(f"⚠️ {self.launcher_file} is the installation directory, skipping launcher")
            logger.info(f"Run RubyMine from the command line with: {self.main_script}")
            return False

        write_launcher(self.launcher_file, self.main_script)

        if not path_contains(self.local_bin, self.environ):
            logger.warning(f"⚠️ Note: Add {self.local_bin} to your PATH to use 'rubymine' command")
            logger.warning('⚠️ Add this line to your ~/.bashrc: export PATH="$HOME/.local/bin:$PATH"')
        else:
            logger.info("Command line launcher 'rubymine' is now available")
        return True

    def setup_dock_integration(self) -> bool:
        desktop = detect_desktop_environment(self.environ)
        logger.info(f"Detected desktop environment: {desktop}")
        if is_gnome(desktop):
            return self.pin_to_dock(self.desktop_id, required=False)

        logger.warning("⚠️ Desktop environment not specifically supported for dock integration")
        logger.info("RubyMine should appear in your applications menu")
        return False

    def install(self):
        detect_distribution(self.os_release_path or OS_RELEASE_PATH)

        release = self.release_client.get_latest(self.app_config['product_code'])
        try:
            self.check_existing_installation(release.version)
        except InstallCancelled:
            logger.info("Installation cancelled.")
            return None

        self.ensure_directories(self.install_dir, self.applications_dir, self.icons_dir)
        self.extract_release(release.download_url, release.version)
        self.installed_location = self.install_dir

        icon_file = self.setup_icon()
        self.write_desktop_entry(self.build_desktop_entry(icon_file), self.desktop_id, required=False)
        self.create_cli_launcher()
        self.refresh_desktop(thumbnails=True)
        pinned = self.setup_dock_integration()

        logger.info(f"✅ RubyMine {release.version} has been successfully installed!")
        logger.info(f"Installation location: {self.install_dir}")
        logger.info("You can now launch RubyMine from:")
        logger.info("  - Applications menu")
        logger.info("  - Command line: rubymine")
        logger.info(f"  - Direct execution: {self.main_script}")
        if pinned:
            logger.info("RubyMine has been added to your dock.")
        return release.version
