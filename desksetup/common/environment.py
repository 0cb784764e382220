"""
Environment detection and validation module
"""

import os
import re
import logging
from pathlib import Path

from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"


def read_os_release(path=OS_RELEASE_PATH):
    """Parse an os-release file into a dictionary"""
    data = {}
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, value = line.split('=', 1)
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                value = value[1:-1]
            data[key.strip()] = value
    return data


def detect_distribution(path=OS_RELEASE_PATH):
    """
    Detect the running distribution.

    Returns:
        Tuple of (ID, NAME) from os-release

    Raises:
        InstallError: when os-release is missing
    """
    if not Path(path).is_file():
        raise InstallError(f"Cannot detect distribution. {path} not found.")

    info = read_os_release(path)
    distro_id = info.get('ID', 'unknown')
    distro_name = info.get('NAME', distro_id)
    logger.info(f"Detected distribution: {distro_name}")
    return distro_id, distro_name


def require_root(shell_executor=None):
    """Abort unless running as root"""
    is_root = shell_executor.is_root() if shell_executor is not None else os.geteuid() == 0
    if not is_root:
        raise InstallError("This script must be run as root (use sudo)")


def detect_desktop_environment(environ=None):
    """Return the current desktop environment name or 'unknown'"""
    environ = os.environ if environ is None else environ
    return environ.get('XDG_CURRENT_DESKTOP') or environ.get('DESKTOP_SESSION') or 'unknown'


def is_gnome(desktop):
    return 'gnome' in (desktop or '').lower()


def parse_gnome_shell_version(output):
    """Extract the major version from 'GNOME Shell 46.2' style output"""
    match = re.search(r'(\d+)\.\d+', output or '')
    if not match:
        match = re.search(r'(\d+)', output or '')
    return match.group(1) if match else None


def get_gnome_shell_version(shell_executor):
    """
    Get the major GNOME Shell version.

    Raises:
        InstallError: when gnome-shell is not installed or its version cannot be read
    """
    if not shell_executor.command_exists('gnome-shell'):
        raise InstallError("GNOME Shell is not installed. This extension requires GNOME Shell.")

    result = shell_executor.run_command(['gnome-shell', '--version'], check=False, timeout=60)
    version = parse_gnome_shell_version(result.stdout)
    if result.returncode != 0 or not version:
        raise InstallError("Could not determine the GNOME Shell version")

    logger.info(f"Detected GNOME Shell version: {version}")
    return version


def is_process_running(pattern, shell_executor):
    """Check for a running process whose command line matches pattern"""
    result = shell_executor.run_command(['pgrep', '-f', pattern], check=False, timeout=30)
    return result.returncode == 0


def path_contains(directory, environ=None):
    """Check whether a directory is listed on PATH"""
    environ = os.environ if environ is None else environ
    entries = [entry.rstrip('/') for entry in environ.get('PATH', '').split(os.pathsep) if entry]
    return str(directory).rstrip('/') in entries
