import pytest

from desksetup.common.errors import InstallError
from desksetup.release_client import (
    CursorReleaseClient, GitHubReleaseClient, GnomeExtensionsClient, JetBrainsReleaseClient
)
from tests.conftest import FakeHttpClient

CURSOR_API = "https://www.cursor.com/api/download"
JETBRAINS_API = "https://data.services.jetbrains.com/products/releases"
EXTENSION_INFO = "https://extensions.gnome.org/extension-info/"


def test_cursor_latest():
    http = FakeHttpClient(json_data={CURSOR_API: {'version': '1.4.2', 'downloadUrl': 'https://dl/cursor.AppImage'}})

    release = CursorReleaseClient(http, CURSOR_API).get_latest("linux-x64", "stable")

    assert release.version == "1.4.2"
    assert release.download_url == "https://dl/cursor.AppImage"
    assert http.requests[0][1] == {'platform': 'linux-x64', 'releaseTrack': 'stable'}


def test_cursor_missing_fields():
    http = FakeHttpClient(json_data={CURSOR_API: {'version': '1.4.2'}})

    with pytest.raises(InstallError, match="Failed to fetch version information from API"):
        CursorReleaseClient(http, CURSOR_API).get_latest()


def test_github_latest_release_and_asset():
    release = {
        'tag_name': 'v02.02.00.85',
        'assets': [
            {'browser_download_url': 'https://gh/Bambu_Studio_win.zip'},
            {'browser_download_url': 'https://gh/Bambu_Studio_ubuntu-24.04_PR.zip'},
            {'browser_download_url': 'https://gh/Bambu_Studio_ubuntu-22.04.AppImage'},
        ],
    }
    http = FakeHttpClient(json_data={'https://api.github.com/repos/bambulab/BambuStudio/releases/latest': release})
    client = GitHubReleaseClient(http)

    fetched = client.get_latest_release("bambulab/BambuStudio")

    assert fetched['tag_name'] == 'v02.02.00.85'
    assert client.find_asset(fetched, "ubuntu", [".zip", ".AppImage"]) == 'https://gh/Bambu_Studio_ubuntu-24.04_PR.zip'
    assert client.find_asset(fetched, "fedora", [".zip"]) is None


def test_github_release_without_tag():
    http = FakeHttpClient(json_data={'https://api.github.com/repos/a/b/releases/latest': {'assets': []}})

    with pytest.raises(InstallError):
        GitHubReleaseClient(http).get_latest_release("a/b")


def test_jetbrains_latest():
    payload = {'RM': [{'version': '2024.3.2', 'downloads': {'linux': {'link': 'https://dl/RubyMine-2024.3.2.tar.gz'}}}]}
    http = FakeHttpClient(json_data={JETBRAINS_API: payload})

    release = JetBrainsReleaseClient(http, JETBRAINS_API).get_latest("RM")

    assert release.version == "2024.3.2"
    assert release.download_url.endswith("RubyMine-2024.3.2.tar.gz")
    assert http.requests[0][1] == {'code': 'RM', 'latest': 'true', 'type': 'release'}


def test_jetbrains_unparseable():
    http = FakeHttpClient(json_data={JETBRAINS_API: {'RM': []}})

    with pytest.raises(InstallError, match="Could not parse RubyMine release information"):
        JetBrainsReleaseClient(http, JETBRAINS_API).get_latest("RM")


def test_gnome_extension_url_is_made_absolute():
    key = (EXTENSION_INFO, (('pk', '4703'), ('shell_version', '46')))
    http = FakeHttpClient(json_data={key: {'download_url': '/download-extension/dock-from-dash.shell-extension.zip?version_tag=1'}})

    url = GnomeExtensionsClient(http).get_download_url("4703", "46")

    assert url == "https://extensions.gnome.org/download-extension/dock-from-dash.shell-extension.zip?version_tag=1"


def test_gnome_extension_falls_back_to_latest():
    fallback = (EXTENSION_INFO, (('pk', '4703'),))
    http = FakeHttpClient(json_data={fallback: {'download_url': 'https://cdn/ext.zip'}})

    assert GnomeExtensionsClient(http).get_download_url("4703", "99") == "https://cdn/ext.zip"
    assert len(http.requests) == 2


def test_gnome_extension_not_found():
    with pytest.raises(InstallError) as excinfo:
        GnomeExtensionsClient(FakeHttpClient()).get_download_url("4703", "46")

    assert "extensions.gnome.org/extension/4703" in excinfo.value.hint
