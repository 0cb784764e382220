"""
Release API Clients - resolve the latest version and download URL of each application
"""

import logging
from collections import namedtuple
from typing import Dict, Iterable, Optional

from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)


ReleaseInfo = namedtuple('ReleaseInfo', ['version', 'download_url'])


class CursorReleaseClient:
    """Cursor download API client"""

    def __init__(self, http_client, api_url: str):
        self.http_client = http_client
        self.api_url = api_url

    def get_latest(self, platform: str = "linux-x64", track: str = "stable") -> ReleaseInfo:
        """
        Fetch the latest Cursor release for a platform

        Raises:
            InstallError: when the API does not return both a version and a URL
        """
        try:
            data = self.http_client.get_json(self.api_url, params={'platform': platform, 'releaseTrack': track})
        except InstallError as e:
            raise InstallError("Failed to fetch version information from API",
                               hint=str(e))

        data = data if isinstance(data, dict) else {}
        download_url = data.get('downloadUrl')
        version = data.get('version')
        if not download_url or not version:
            raise InstallError("Failed to fetch version information from API")

        logger.info(f"Latest Cursor version: {version}")
        return ReleaseInfo(version, download_url)


class GitHubReleaseClient:
    """GitHub releases API client"""

    def __init__(self, http_client, api_base: str = "https://api.github.com"):
        self.http_client = http_client
        self.api_base = api_base.rstrip('/')

    def get_latest_release(self, repo: str) -> Dict:
        """Fetch the latest release document of owner/name"""
        url = f"{self.api_base}/repos/{repo}/releases/latest"
        release = self.http_client.get_json(url)
        if not isinstance(release, dict) or not release.get('tag_name'):
            raise InstallError("Failed to get latest version information")
        logger.info(f"Latest version found: {release['tag_name']}")
        return release

    @staticmethod
    def find_asset(release: Dict, keyword: str, extensions: Iterable[str]) -> Optional[str]:
        """First asset URL that contains keyword and ends with one of extensions"""
        extensions = tuple(extensions)
        for asset in release.get('assets', []):
            url = asset.get('browser_download_url') or ''
            if keyword in url and url.endswith(extensions):
                return url
        return None


class JetBrainsReleaseClient:
    """JetBrains data services API client"""

    def __init__(self, http_client, api_url: str):
        self.http_client = http_client
        self.api_url = api_url

    def get_latest(self, code: str, product: str = "RubyMine") -> ReleaseInfo:
        """
        Fetch the latest release of a product code (e.g. RM for RubyMine)

        Raises:
            InstallError: when the release information cannot be fetched or parsed
        """
        logger.info(f"Fetching latest {product} release information...")
        data = self.http_client.get_json(self.api_url, params={'code': code, 'latest': 'true', 'type': 'release'})

        try:
            release = data[code][0]
            version = release['version']
            download_url = release['downloads']['linux']['link']
        except (KeyError, IndexError, TypeError):
            raise InstallError(f"Could not parse {product} release information")

        if not version or not download_url:
            raise InstallError(f"Could not parse {product} release information")

        logger.info(f"Latest {product} version: {version}")
        logger.info(f"Download URL: {download_url}")
        return ReleaseInfo(version, download_url)


class GnomeExtensionsClient:
    """extensions.gnome.org metadata client"""

    def __init__(self, http_client, api_base: str = "https://extensions.gnome.org"):
        self.http_client = http_client
        self.api_base = api_base.rstrip('/')

    def get_extension_info(self, pk: str, shell_version: Optional[str] = None) -> Dict:
        params = {'pk': pk}
        if shell_version:
            params['shell_version'] = shell_version
        try:
            data = self.http_client.get_json(f"{self.api_base}/extension-info/", params=params)
        except InstallError as e:
            logger.debug(f"EXTENSION_INFO_FAIL pk={pk} shell={shell_version} error={e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_download_url(self, pk: str, shell_version: str) -> str:
        """
        Resolve the download URL for a shell version, falling back to the
        extension's latest version when no shell-specific build is listed

        Raises:
            InstallError: when no compatible download exists
        """
        info = self.get_extension_info(pk, shell_version)
        if not info.get('download_url'):
            logger.warning(f"⚠️ Could not fetch metadata for GNOME {shell_version}, trying alternative method...")
            info = self.get_extension_info(pk)

        download_url = info.get('download_url')
        if not download_url:
            raise InstallError(
                f"Could not find a compatible version for GNOME Shell {shell_version}",
                hint=f"You may need to install this extension manually from: {self.api_base}/extension/{pk}/"
            )

        if download_url.startswith('/'):
            download_url = f"{self.api_base}{download_url}"
        return download_url
