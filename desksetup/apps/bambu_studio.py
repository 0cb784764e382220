"""
Bambu Studio Installer - 3D printing slicer with STL file associations
"""

import re
import logging
from pathlib import Path
from typing import Optional

from desksetup.apps.base import AppInstaller
from desksetup.common.errors import InstallError
from desksetup.desktop.desktop_entry import DesktopEntry
from desksetup.desktop.icon_manager import placeholder_svg
from desksetup.desktop.mime_registry import MimeTypeDefinition
from desksetup.release_client import GitHubReleaseClient

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'^https?://')

STL_ICON_NAME = "model-stl"
# application-x-3dmf takes precedence over model-stl for .stl files in some themes
STL_ICON_ALIASES = [STL_ICON_NAME, "application-x-3dmf"]


def build_stl_definitions(mime_types, globs):
    """The STL MIME types Bambu Studio registers; model/stl also gets magic detection"""
    definitions = []
    for mime_type, comment in mime_types.items():
        definitions.append(MimeTypeDefinition(
            mime_type,
            comment,
            globs=globs,
            icon=STL_ICON_NAME,
            magic_string="solid" if mime_type == "model/stl" else None,
            localized=True,
        ))
    return definitions


class BambuStudioInstaller(AppInstaller):
    """Installs Bambu Studio from the latest GitHub release or a custom zip/AppImage URL"""

    app_key = "bambu_studio"
    display_name = "Bambu Studio"

    def __init__(self, settings, custom_url: Optional[str] = None, **kwargs):
        super().__init__(settings, **kwargs)
        self.custom_url = custom_url

        self.install_dir = self.local_bin / self.app_config['install_subdir']
        self.appimage_file = self.install_dir / self.app_config['appimage_name']
        self.icon_basename = self.app_config['icon_basename']
        self.desktop_id = self.app_config['desktop_id']
        self.github = GitHubReleaseClient(self.http_client)

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def ensure_dependencies(self):
        logger.info("Checking dependencies...")
        packages = self.dependency_installer.missing_packages(self.app_config['system_packages'])

        if not any(self.shell_executor.command_exists(tool) for tool in ('convert', 'inkscape', 'rsvg-convert')):
            logger.warning("⚠️ No image conversion tools found. Installing ImageMagick for icon processing...")
            packages.append("imagemagick")

        if packages and not self.dependency_installer.install_packages(packages):
            raise InstallError(f"Failed to install dependencies: {' '.join(packages)}")

        self.setup_webkit_compatibility()

    def setup_webkit_compatibility(self):
        """Point the WebKitGTK 4.0 sonames Bambu Studio links against at the 4.1 libraries"""
        logger.info("Setting up WebKit compatibility...")
        for link, target in self.app_config['webkit_symlinks']:
            if Path(link).exists():
                continue
            self.shell_executor.run_command(['ln', '-sf', target, link], sudo=True, timeout=60)

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def resolve_download(self):
        """
        Returns:
            Tuple of (version, download_url)
        """
        if self.custom_url:
            logger.warning(f"⚠️ Using custom download URL: {self.custom_url}")
            if not URL_PATTERN.match(self.custom_url):
                raise InstallError("Invalid URL format. Please provide a valid HTTP/HTTPS URL.")
            return "custom", self.custom_url

        logger.info("Fetching latest Bambu Studio release information...")
        release = self.github.get_latest_release(self.app_config['github_repo'])
        version = release['tag_name']
        download_url = self.github.find_asset(
            release, self.app_config['asset_keyword'], self.app_config['asset_extensions']
        )
        if not download_url:
            raise InstallError(f"No Ubuntu download found for version {version}",
                               hint="You can specify a custom download URL using: desksetup bambu-studio --url <URL>")
        return version, download_url

    def locate_appimage(self, download: Path, work_dir: Path) -> Path:
        """Find the AppImage inside a downloaded zip, or validate a direct AppImage"""
        if download.name.endswith('.zip'):
            logger.info("Extracting Bambu Studio from zip file...")
            extract_dir = self.artifact_manager.extract_archive(download, work_dir / "extracted")
            appimage = self.artifact_manager.find_file(extract_dir, "*.AppImage")
            if appimage is None:
                raise InstallError("No AppImage found in the downloaded zip archive",
                                   hint="Please check if the provided URL contains a valid Bambu Studio zip file.")
            logger.info(f"Found AppImage in zip: {appimage.name}")
            return appimage

        if download.name.endswith('.AppImage'):
            if not self.artifact_manager.is_elf_executable(download):
                raise InstallError("Downloaded file is not a valid AppImage")
            logger.info(f"Found AppImage: {download.name}")
            return download

        raise InstallError("Downloaded file is neither a zip nor an AppImage",
                           hint="Supported file types: .zip (containing AppImage) or .AppImage (direct)")

    # ------------------------------------------------------------------
    # Desktop integration
    # ------------------------------------------------------------------

    def existing_icon(self) -> Optional[Path]:
        for suffix in ('svg', 'png'):
            candidate = self.icons_dir / f"{self.icon_basename}.{suffix}"
            if candidate.exists():
                return candidate
        return None

    def setup_icon(self) -> Path:
        logger.info("Setting up icon...")
        icon = self.existing_icon()
        if icon is not None:
            logger.info("Bambu Studio icon already exists, skipping download.")
            return icon

        return self.icon_manager.fetch_icon(
            self.icons_dir,
            self.icon_basename,
            [(self.app_config['svg_icon_url'], 'svg'), (self.app_config['png_icon_url'], 'png')],
            placeholder=placeholder_svg("BS", "#4CAF50"),
        )

    def build_desktop_entry(self, icon_file) -> DesktopEntry:
        return DesktopEntry(
            name="Bambu Studio",
            comment="3D Printing Software",
            exec_command=f"{self.appimage_file} %U",
            icon=icon_file,
            categories=["Graphics", "3DGraphics", "Engineering"],
            startup_wm_class=self.app_config['startup_wm_class'],
            mime_types=list(self.app_config['mime_types']),
            single_window=True,
        )

    def register_mime_types(self):
        logger.info("Registering STL MIME types...")
        definitions = build_stl_definitions(self.app_config['mime_types'], self.app_config['stl_globs'])
        self.mime_registry.write_package("bambu-studio", definitions)
        self.mime_registry.update_database()

    def setup_stl_icons(self, icon_file: Path, work_dir: Path):
        """Use the application icon for STL files, per user and (optionally) in the system theme"""
        hicolor_dir = self.icons_dir / "hicolor"
        if self.shell_executor.command_exists('convert'):
            logger.info("Setting up MIME type icon for STL files...")
            self.icon_manager.install_mime_icons(
                icon_file, STL_ICON_ALIASES, hicolor_dir, self.app_config['mime_icon_sizes']
            )
        else:
            logger.warning("⚠️ Skipping MIME type icon setup (ImageMagick not available)")

        if not self.settings.get('replace_system_icons', True):
            return
        if icon_file.suffix != '.svg':
            logger.info("No SVG icon available, skipping system icon replacement.")
            return

        logger.info("Replacing system STL icons with Bambu Studio icon...")
        self.icon_manager.replace_theme_mime_icons(
            icon_file, self.app_config['system_icon_theme'], STL_ICON_NAME,
            self.app_config['system_icon_sizes'], work_dir
        )

    # ------------------------------------------------------------------

    def install(self):
        self.ensure_dependencies()
        self.ensure_directories(self.install_dir, self.applications_dir, self.icons_dir)

        version, download_url = self.resolve_download()

        with self.artifact_manager.working_directory(prefix="bambu_") as work_dir:
            logger.info(f"Downloading Bambu Studio {version}...")
            filename = download_url.split('?', 1)[0].rstrip('/').rsplit('/', 1)[-1]
            download = self.http_client.download(download_url, work_dir / filename)

            appimage = self.locate_appimage(download, work_dir)
            self.artifact_manager.install_executable(appimage, self.appimage_file)
            self.installed_location = self.appimage_file

            icon_file = self.setup_icon()
            self.write_desktop_entry(self.build_desktop_entry(icon_file), self.desktop_id)
            self.register_mime_types()
            self.setup_stl_icons(icon_file, work_dir)

        logger.info("Associating STL files with Bambu Studio...")
        self.mime_registry.set_default(self.desktop_id, list(self.app_config['mime_types']))

        self.pin_to_dock(self.desktop_id)
        self.refresh_desktop(thumbnails=True)

        logger.info("✅ Bambu Studio has been successfully installed and pinned to your dock!")
        logger.info("STL files are now associated with Bambu Studio.")
        return version
