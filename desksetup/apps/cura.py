"""
Cura Installer - Ultimaker Cura AppImage with STL file associations
"""

import logging
from typing import Optional

from desksetup.apps.base import AppInstaller
from desksetup.common.artifact_manager import make_executable
from desksetup.desktop.desktop_entry import DesktopEntry
from desksetup.desktop.mime_registry import MimeTypeDefinition

logger = logging.getLogger(__name__)


class CuraInstaller(AppInstaller):
    """Installs a pinned Cura release; files already in place are not downloaded again"""

    app_key = "cura"
    display_name = "Ultimaker Cura"

    def __init__(self, settings, version: Optional[str] = None, url: Optional[str] = None, **kwargs):
        super().__init__(settings, **kwargs)
        self.version = version or self.app_config['version']
        self.appimage_url = url or self.app_config['appimage_url'].format(version=self.version)

        app_name = self.app_config['app_name']
        self.appimage_file = self.local_bin / f"{app_name}.AppImage"
        self.icon_dir = self.icons_dir / self.app_config['icon_subdir']
        self.icon_file = self.icon_dir / f"{app_name}.png"
        self.desktop_id = f"{app_name}.desktop"

    def build_desktop_entry(self) -> DesktopEntry:
        return DesktopEntry(
            name="Ultimaker Cura",
            exec_command=f"{self.appimage_file} %U",
            icon=self.icon_file,
            mime_types=list(self.app_config['mime_types']),
            categories=["Graphics", "3DPrinting"],
            version=None,
        )

    def download_files(self):
        if not self.appimage_file.is_file():
            logger.info(f"Downloading Cura AppImage ({self.version})...")
            self.http_client.download(self.appimage_url, self.appimage_file)
            make_executable(self.appimage_file)
        else:
            logger.info("Cura AppImage already exists, skipping download.")

        if not self.icon_file.is_file():
            logger.info("Downloading Cura icon...")
            self.http_client.download(self.app_config['icon_url'], self.icon_file)
        else:
            logger.info("Cura icon already exists, skipping download.")

    def register_mime_types(self):
        logger.info("Registering STL MIME types...")
        definitions = [
            MimeTypeDefinition(mime_type, comment, globs=["*.stl"])
            for mime_type, comment in self.app_config['mime_types'].items()
        ]
        self.mime_registry.write_package("ultimaker-cura", definitions)
        self.mime_registry.update_database()

    def install(self):
        self.ensure_directories(self.local_bin, self.applications_dir, self.icon_dir)
        self.download_files()
        self.installed_location = self.appimage_file

        logger.info("Creating desktop entry for Cura...")
        self.write_desktop_entry(self.build_desktop_entry(), self.desktop_id, required=False)
        self.register_mime_types()

        logger.info("Associating STL files with Cura...")
        mime_types = list(self.app_config['mime_types'])
        self.mime_registry.set_default(self.desktop_id, mime_types)

        logger.info("Verifying MIME type association...")
        self.mime_registry.verify_defaults(self.desktop_id, mime_types)

        logger.info("✅ Ultimaker Cura installation complete! You can now launch it from your application "
                    "menu and open STL files directly with Cura.")
        return self.version
