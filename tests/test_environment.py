import pytest

from desksetup.common import environment
from desksetup.common.errors import InstallError
from tests.conftest import FakeShellExecutor


def test_detect_distribution(tmp_path):
    os_release = tmp_path / "os-release"
    os_release.write_text('NAME="Ubuntu"\nID=ubuntu\nVERSION_CODENAME=noble\n# comment\n')

    assert environment.detect_distribution(os_release) == ("ubuntu", "Ubuntu")


def test_detect_distribution_missing_file(tmp_path):
    with pytest.raises(InstallError, match="Cannot detect distribution"):
        environment.detect_distribution(tmp_path / "nope")


def test_require_root_uses_executor():
    with pytest.raises(InstallError, match="must be run as root"):
        environment.require_root(FakeShellExecutor(root=False))

    environment.require_root(FakeShellExecutor(root=True))


@pytest.mark.parametrize("environ, expected", [
    ({'XDG_CURRENT_DESKTOP': 'ubuntu:GNOME'}, 'ubuntu:GNOME'),
    ({'DESKTOP_SESSION': 'plasma'}, 'plasma'),
    ({}, 'unknown'),
])
def test_detect_desktop_environment(environ, expected):
    assert environment.detect_desktop_environment(environ) == expected


def test_is_gnome():
    assert environment.is_gnome('ubuntu:GNOME')
    assert environment.is_gnome('gnome-xorg')
    assert not environment.is_gnome('KDE')


def test_parse_gnome_shell_version():
    assert environment.parse_gnome_shell_version("GNOME Shell 46.2\n") == "46"
    assert environment.parse_gnome_shell_version("GNOME Shell 47") == "47"
    assert environment.parse_gnome_shell_version("") is None


def test_get_gnome_shell_version_requires_gnome_shell():
    with pytest.raises(InstallError, match="GNOME Shell is not installed"):
        environment.get_gnome_shell_version(FakeShellExecutor())


def test_get_gnome_shell_version():
    executor = FakeShellExecutor(available={'gnome-shell'})
    executor.script(['gnome-shell', '--version'], stdout="GNOME Shell 46.0\n")

    assert environment.get_gnome_shell_version(executor) == "46"


def test_is_process_running():
    executor = FakeShellExecutor()
    executor.script(['pgrep', '-f', 'cursor.AppImage'], returncode=0)
    executor.script(['pgrep', '-f', 'other'], returncode=1)

    assert environment.is_process_running('cursor.AppImage', executor)
    assert not environment.is_process_running('other', executor)


def test_path_contains(tmp_path):
    bin_dir = tmp_path / ".local/bin"

    assert environment.path_contains(bin_dir, {'PATH': f"/usr/bin:{bin_dir}/"})
    assert not environment.path_contains(bin_dir, {'PATH': "/usr/bin"})
