import io
import zipfile

from desksetup.apps.dock_from_dash import DockFromDashInstaller
from tests.conftest import FakeHttpClient, FakeShellExecutor

INFO_URL = "https://extensions.gnome.org/extension-info/"
DOWNLOAD_PATH = "/download-extension/dock-from-dash@fthx.github.com.shell-extension.zip?version_tag=61234"
UUID = "dock-from-dash@fthx.github.com"


def extension_zip(with_metadata=True):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        zf.writestr("extension.js", "export default class Extension {}")
        if with_metadata:
            zf.writestr("metadata.json", '{"uuid": "%s"}' % UUID)
    return buffer.getvalue()


def make_installer(settings, json_data=None, archive=None,
                   available=('gnome-shell', 'gnome-extensions', 'apt')):
    executor = FakeShellExecutor(available=available)
    executor.script(['gnome-shell', '--version'], stdout="GNOME Shell 46.0\n")
    executor.script(['dpkg-query'], stdout="install ok installed")
    if json_data is None:
        json_data = {(INFO_URL, (('pk', '4703'), ('shell_version', '46'))): {'download_url': DOWNLOAD_PATH}}
    http = FakeHttpClient(
        json_data=json_data,
        files={f"https://extensions.gnome.org{DOWNLOAD_PATH}": archive or extension_zip()},
    )
    installer = DockFromDashInstaller(settings, shell_executor=executor, http_client=http)
    return installer, executor, http


def test_install_and_enable(settings, home):
    installer, executor, _ = make_installer(settings)

    assert installer.run() == 0

    extension_dir = home / ".local/share/gnome-shell/extensions" / UUID
    assert (extension_dir / "metadata.json").is_file()
    assert ['gnome-extensions', 'enable', UUID] in executor.commands()
    assert installer.state.get('dock_from_dash')['version'] == "gnome-46"


def test_replaces_existing_installation(settings, home):
    extension_dir = home / ".local/share/gnome-shell/extensions" / UUID
    extension_dir.mkdir(parents=True)
    (extension_dir / "old.js").write_text("old")
    installer, _, _ = make_installer(settings)

    assert installer.run() == 0
    assert not (extension_dir / "old.js").exists()


def test_falls_back_to_latest_extension_version(settings):
    json_data = {(INFO_URL, (('pk', '4703'),)): {'download_url': DOWNLOAD_PATH}}
    installer, _, http = make_installer(settings, json_data=json_data)

    assert installer.run() == 0
    assert [params for url, params in http.requests if url == INFO_URL] == [
        {'pk': '4703', 'shell_version': '46'},
        {'pk': '4703'},
    ]


def test_no_compatible_version(settings):
    installer, executor, _ = make_installer(settings, json_data={})

    assert installer.run() == 1
    assert not executor.ran('gnome-extensions')


def test_archive_without_metadata(settings):
    installer, executor, _ = make_installer(settings, archive=extension_zip(with_metadata=False))

    assert installer.run() == 1
    assert not executor.ran('gnome-extensions')


def test_requires_gnome_shell(settings):
    installer, _, http = make_installer(settings, available=('apt',))

    assert installer.run() == 1
    assert http.requests == []


def test_installs_missing_extension_package(settings):
    installer, executor, _ = make_installer(settings)
    executor.script(['dpkg-query', '-W'], returncode=1)

    assert installer.run() == 0
    assert ['apt', 'install', '-y', 'gnome-shell-extensions'] in executor.commands()


def test_missing_gnome_extensions_tool(settings, home, caplog):
    installer, executor, http = make_installer(settings, available=('gnome-shell', 'apt'))

    assert installer.run() == 1
    assert "Required commands not found: gnome-extensions" in caplog.text
    assert http.requests == []
    assert not (home / ".local/share/gnome-shell/extensions" / UUID).exists()
