import pytest

from desksetup.common.dependency_installer import DependencyInstaller
from desksetup.common.errors import InstallError
from tests.conftest import FakeShellExecutor


def make_installer(available=('apt', 'snap')):
    executor = FakeShellExecutor(available=available)
    return executor, DependencyInstaller(executor)


def test_missing_packages_uses_dpkg_status():
    executor, installer = make_installer()
    executor.script(['dpkg-query', '-W', '-f=${Status}', 'curl'], stdout="install ok installed")
    executor.script(['dpkg-query', '-W', '-f=${Status}', 'git'], returncode=1)

    assert installer.missing_packages(['curl', 'git']) == ['git']


def test_install_packages_updates_once_and_installs():
    executor, installer = make_installer()

    assert installer.install_packages(['curl', 'git'])
    assert installer.install_packages(['jq'])

    commands = executor.commands()
    assert commands.count(['apt', 'update']) == 1
    assert ['apt', 'install', '-y', 'curl', 'git'] in commands
    assert all(call['sudo'] for call in executor.calls)


def test_falls_back_to_apt_get():
    executor, installer = make_installer(available=('apt-get',))

    installer.install_packages(['curl'])

    assert ['apt-get', 'install', '-y', 'curl'] in executor.commands()


def test_no_package_manager():
    _, installer = make_installer(available=())

    with pytest.raises(InstallError):
        installer.install_packages(['curl'])


def test_install_failure_returns_false():
    executor, installer = make_installer()
    executor.script(['apt', 'install'], returncode=100, stderr="E: Unable to locate package nope")

    assert installer.install_packages(['nope']) is False


def test_unsafe_package_names_are_dropped():
    executor, installer = make_installer()

    installer.install_packages(['curl; rm -rf /', 'git', 'git'])

    assert ['apt', 'install', '-y', 'git'] in executor.commands()


def test_ensure_packages_raises_on_failure():
    executor, installer = make_installer()
    executor.script(['dpkg-query'], returncode=1)
    executor.script(['apt', 'install'], returncode=100)

    with pytest.raises(InstallError):
        installer.ensure_packages(['gnome-shell-extensions'])


def test_failure_reason_detection():
    _, installer = make_installer()

    assert installer._detect_failure_reason("E: Could not get lock /var/lib/dpkg/lock") == "lock_held"
    assert installer._detect_failure_reason("Temporary failure resolving 'archive'") == "network"
    assert installer._detect_failure_reason("something else") == "unknown"


def test_install_snap_classic():
    executor, installer = make_installer()

    assert installer.install_snap('code', classic=True)
    assert ['snap', 'install', 'code', '--classic'] in executor.commands()


def test_install_snap_without_snapd():
    _, installer = make_installer(available=('apt',))

    with pytest.raises(InstallError):
        installer.install_snap('flameshot')


def test_update_index_force_runs_again():
    executor, installer = make_installer()

    installer.update_index()
    installer.update_index(force=True)

    assert executor.commands().count(['apt', 'update']) == 2


def test_missing_commands_checks_path():
    executor, installer = make_installer(available=('apt', 'gnome-extensions'))

    assert installer.missing_commands(['gnome-extensions', 'jq', 'apt', 'xmllint']) == ['jq', 'xmllint']
    assert installer.missing_commands([]) == []
