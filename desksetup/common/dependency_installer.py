"""
Dependency Installer Module - apt/apt-get package installation with snap support
"""

import re
import logging
from typing import List, Optional

from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """Debian/Ubuntu dependency installer with apt -> apt-get fallback"""

    def __init__(self, shell_executor, debug_mode: bool = False):
        self.shell_executor = shell_executor
        self.debug_mode = debug_mode
        self._apt_updated = False

    def is_package_installed(self, package: str) -> bool:
        """Check dpkg status for a single package"""
        result = self.shell_executor.run_command(
            ['dpkg-query', '-W', '-f=${Status}', package],
            check=False, timeout=60
        )
        return result.returncode == 0 and 'install ok installed' in (result.stdout or '')

    def missing_packages(self, packages: List[str]) -> List[str]:
        """Return the packages that dpkg does not report as installed"""
        return [pkg for pkg in self._clean_package_names(packages)
                if not self.is_package_installed(pkg)]

    def missing_commands(self, commands: List[str]) -> List[str]:
        """Return the commands that are not available on PATH"""
        return [cmd for cmd in commands if not self.shell_executor.command_exists(cmd)]

    def _detect_package_manager(self) -> str:
        if self.shell_executor.command_exists('apt'):
            return 'apt'
        if self.shell_executor.command_exists('apt-get'):
            return 'apt-get'
        raise InstallError("No supported package manager found (apt or apt-get)")

    def _detect_failure_reason(self, output: str) -> str:
        """Detect the reason for an apt failure"""
        output_lower = output.lower()

        if "unable to locate package" in output_lower or "has no installation candidate" in output_lower:
            return "target_not_found"
        elif "could not get lock" in output_lower or "unable to acquire the dpkg frontend lock" in output_lower:
            return "lock_held"
        elif "dpkg was interrupted" in output_lower:
            return "dpkg_interrupted"
        elif "temporary failure resolving" in output_lower or "failed to fetch" in output_lower:
            return "network"
        else:
            return "unknown"

    def _clean_package_names(self, packages: List[str]) -> List[str]:
        """Clean and validate package names"""
        clean_pkgs = []

        for pkg in packages:
            pkg_clean = (pkg or '').strip()

            if not pkg_clean:
                continue

            # Shell metacharacters never appear in Debian package names
            if any(x in pkg_clean for x in ['$', '{', '}', '(', ')', ';', '|', '&', '`', ' ']):
                logger.warning(f"⚠️ Skipping malformed package name: {pkg_clean!r}")
                continue

            if not re.search(r'[a-zA-Z0-9]', pkg_clean):
                continue

            clean_pkgs.append(pkg_clean)

        # Remove duplicates while preserving order
        seen = set()
        unique_pkgs = []
        for pkg in clean_pkgs:
            if pkg not in seen:
                seen.add(pkg)
                unique_pkgs.append(pkg)

        return unique_pkgs

    def update_index(self, manager: Optional[str] = None, force: bool = False) -> bool:
        """Refresh the package index once per run, or again after adding a repository"""
        if self._apt_updated and not force:
            return True

        manager = manager or self._detect_package_manager()
        result = self.shell_executor.run_command(
            [manager, 'update'], sudo=True, log_cmd=True, check=False, timeout=900
        )
        if result.returncode != 0:
            reason = self._detect_failure_reason((result.stdout or '') + "\n" + (result.stderr or ''))
            logger.warning(f"APT_UPDATE_FAIL=1 manager={manager} reason={reason}")
            return False

        self._apt_updated = True
        return True

    def install_packages(self, packages: List[str]) -> bool:
        """
        Install packages with apt, falling back to apt-get when apt is missing.

        Args:
            packages: List of package names to install

        Returns:
            True if installation successful, False otherwise
        """
        if not packages:
            return True

        clean_packages = self._clean_package_names(packages)

        if not clean_packages:
            logger.info("No valid packages to install after cleaning")
            return True

        manager = self._detect_package_manager()
        logger.info(f"Installing required dependencies: {' '.join(clean_packages)}")
        logger.info(f"DEP_INSTALL_START=1 count={len(clean_packages)} manager={manager}")

        self.update_index(manager)

        result = self.shell_executor.run_command(
            [manager, 'install', '-y'] + clean_packages,
            sudo=True,
            log_cmd=True,
            check=False,
            timeout=1800
        )

        if result.returncode == 0:
            logger.info(f"DEP_INSTALL_OK=1 manager={manager} count={len(clean_packages)}")
            return True

        combined_output = (result.stdout or '') + "\n" + (result.stderr or '')
        failure_reason = self._detect_failure_reason(combined_output)
        logger.error(f"DEP_INSTALL_FAIL=1 manager={manager} reason={failure_reason} exitcode={result.returncode}")
        return False

    def ensure_packages(self, packages: List[str]) -> List[str]:
        """
        Install only the packages that are missing.

        Returns:
            The packages that were installed

        Raises:
            InstallError: when the package manager reports a failure
        """
        missing = self.missing_packages(packages)
        if not missing:
            logger.info("✅ All required packages already installed")
            return []

        if not self.install_packages(missing):
            raise InstallError(f"Failed to install packages: {' '.join(missing)}")
        return missing

    def install_deb(self, deb_path) -> bool:
        """Install a local .deb file through apt so its dependencies are resolved"""
        manager = self._detect_package_manager()
        path_arg = str(deb_path)
        if not path_arg.startswith(('/', './')):
            path_arg = f"./{path_arg}"
        result = self.shell_executor.run_command(
            [manager, 'install', '-y', path_arg], sudo=True, log_cmd=True, check=False, timeout=1800
        )
        if result.returncode != 0:
            logger.error(f"DEB_INSTALL_FAIL=1 file={deb_path} exitcode={result.returncode}")
            return False
        return True

    def install_snap(self, name: str, classic: bool = False) -> bool:
        """Install a snap package"""
        if not self.shell_executor.command_exists('snap'):
            raise InstallError("snap is not available on this system")

        cmd = ['snap', 'install', name]
        if classic:
            cmd.append('--classic')

        result = self.shell_executor.run_command(cmd, sudo=True, log_cmd=True, check=False, timeout=1800)
        if result.returncode != 0:
            logger.error(f"SNAP_INSTALL_FAIL=1 snap={name} exitcode={result.returncode}")
            return False

        logger.info(f"SNAP_INSTALL_OK=1 snap={name}")
        return True
