"""
Cursor Installer - AI-first code editor distributed as an AppImage
"""

import os
import re
import logging

from desksetup.apps.base import AppInstaller
from desksetup.common.environment import is_process_running
from desksetup.common.errors import InstallError
from desksetup.common.artifact_manager import make_executable
from desksetup.desktop.desktop_entry import DesktopEntry
from desksetup.desktop.shell_rc import get_shell_config_file, ensure_snippet
from desksetup.release_client import CursorReleaseClient

logger = logging.getLogger(__name__)

SHELL_FUNCTION_MARKER = "function cursor()"

SHELL_FUNCTION_TEMPLATE = """# Cursor AI IDE launcher function
function cursor() {{
    local args=""
    if [ $# -eq 0 ]; then
        args=$(pwd)
    else
        for arg in "$@"; do
            args="$args $arg"
        done
    fi
    local executable="{executable}"
    (nohup $executable --no-sandbox "$args" >/dev/null 2>&1 &)
}}"""

VERSION_PATTERN = re.compile(r'\d+\.\d+\.\d+')


class CursorInstaller(AppInstaller):
    """Downloads the latest Cursor AppImage and integrates it with the desktop"""

    app_key = "cursor"
    display_name = "Cursor"

    def __init__(self, settings, force: bool = False, environ=None, **kwargs):
        super().__init__(settings, **kwargs)
        self.force = force
        self.environ = os.environ if environ is None else environ

        self.install_dir = self.local_bin / self.app_config['install_subdir']
        self.appimage_file = self.install_dir / self.app_config['appimage_name']
        self.icon_file = self.icons_dir / self.app_config['icon_name']
        self.desktop_id = self.app_config['desktop_id']
        self.release_client = CursorReleaseClient(self.http_client, self.app_config['api_url'])

    def get_current_version(self) -> str:
        """Version reported by the installed AppImage, 'unknown' or 'not installed'"""
        if not self.appimage_file.is_file():
            return "not installed"
        result = self.shell_executor.run_command(
            [str(self.appimage_file), '--version'], check=False, timeout=120
        )
        match = VERSION_PATTERN.search(result.stdout or '')
        return match.group(0) if match else "unknown"

    def shell_function(self) -> str:
        return SHELL_FUNCTION_TEMPLATE.format(executable=self.appimage_file)

    def setup_shell_function(self) -> bool:
        """Add the cursor() launcher to the user's shell rc file"""
        config_file = get_shell_config_file(self.home, self.environ.get('SHELL'))
        logger.info(f"Checking for existing cursor function in {config_file}...")
        changed = ensure_snippet(config_file, SHELL_FUNCTION_MARKER, self.shell_function())
        if changed:
            logger.info(f"Please restart your terminal or run 'source {config_file}' to use the cursor command.")
        return changed

    def build_desktop_entry(self) -> DesktopEntry:
        return DesktopEntry(
            name="Cursor",
            comment="AI-first code editor",
            exec_command=f"{self.appimage_file} --no-sandbox %U",
            icon=self.icon_file,
            categories=["Development", "TextEditor", "IDE"],
            startup_wm_class=self.app_config['startup_wm_class'],
            mime_types=self.app_config['mime_types'],
            single_window=True,
        )

    def install(self):
        if is_process_running(self.app_config['appimage_name'], self.shell_executor):
            raise InstallError("Cursor is currently running.",
                               hint="Please close all instances of Cursor and try again.")

        self.ensure_directories(self.install_dir, self.applications_dir, self.icons_dir)

        release = self.release_client.get_latest(self.app_config['platform'], self.app_config['release_track'])
        current_version = self.get_current_version()
        logger.info(f"Installed version: {current_version}")

        if current_version == release.version and not self.force:
            logger.info(f"✅ Cursor {current_version} is already the latest version, skipping download")
        else:
            logger.info(f"Downloading Cursor version {release.version}...")
            with self.artifact_manager.working_directory(prefix="cursor_") as work_dir:
                download = self.http_client.download(release.download_url, work_dir / self.app_config['appimage_name'])
                self.artifact_manager.install_executable(download, self.appimage_file)
        make_executable(self.appimage_file)
        self.installed_location = self.appimage_file

        logger.info("Setting up icon...")
        if not self.icon_file.exists():
            self.http_client.download(self.app_config['icon_url'], self.icon_file)
        else:
            logger.info("Cursor icon already exists, skipping download.")

        self.write_desktop_entry(self.build_desktop_entry(), self.desktop_id)
        self.setup_shell_function()
        self.pin_to_dock(self.desktop_id)
        self.refresh_desktop()

        logger.info("✅ Cursor has been successfully installed and pinned to your dock!")
        logger.info("You can now launch it from the applications menu, the dock, or by typing 'cursor' in your terminal.")
        return release.version
