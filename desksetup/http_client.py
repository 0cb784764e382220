"""
HTTP Client - JSON API requests and file downloads
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from desksetup import __version__
from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 256


class HttpClient:
    """Thin requests wrapper that turns transport failures into InstallError"""

    def __init__(self, timeout: int = 60, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = f'desksetup/{__version__}'

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None, stream: bool = False):
        try:
            response = self.session.get(url, params=params, timeout=self.timeout, stream=stream)
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            raise InstallError(f"Request failed for {url}: {e}")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch and decode a JSON document

        Raises:
            InstallError: on transport errors, HTTP errors or an invalid body
        """
        response = self._get(url, params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise InstallError(f"Invalid JSON from {url}: {e}")
        logger.debug(f"Fetched JSON from {url}")
        return data

    def get_text(self, url: str) -> str:
        return self._get(url).text

    def download(self, url: str, dest) -> Path:
        """
        Stream url into dest, creating parent directories.

        A partially written file is removed when the transfer fails.
        """
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading {url}")

        response = self._get(url, stream=True)
        written = 0
        try:
            with open(dest, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        except (requests.exceptions.RequestException, OSError) as e:
            if dest.exists():
                dest.unlink()
            raise InstallError(f"Download of {url} failed: {e}")
        finally:
            response.close()

        logger.info(f"✅ Downloaded {dest.name} ({written / (1024 * 1024):.1f} MiB)")
        return dest

    def try_download(self, url: str, dest) -> bool:
        """Download for optional resources: logs and returns False instead of raising"""
        try:
            self.download(url, dest)
            return True
        except InstallError as e:
            logger.warning(f"⚠️ {e}")
            return False
