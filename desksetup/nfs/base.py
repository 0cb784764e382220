"""
NFS setup base - root check, packages and exit code mapping shared by server and client
"""

import subprocess
import logging

from desksetup.common.dependency_installer import DependencyInstaller
from desksetup.common.environment import require_root
from desksetup.common.errors import InstallError
from desksetup.common.logging_utils import log_banner
from desksetup.common.shell_executor import ShellExecutor
from desksetup.nfs.fstab import FstabManager

logger = logging.getLogger(__name__)


class NfsSetup:
    """Subclasses implement setup()"""

    title = ""
    packages = []

    def __init__(self, settings, shell_executor=None):
        self.settings = settings
        self.debug_mode = settings.get('debug_mode', False)
        self.nfs_config = settings['nfs']
        self.shell_executor = shell_executor or ShellExecutor(self.debug_mode)
        self.dependency_installer = DependencyInstaller(self.shell_executor, self.debug_mode)
        self.fstab = FstabManager(self.shell_executor, self.nfs_config.get('fstab_path', '/etc/fstab'))

    @property
    def server_host(self) -> str:
        return self.nfs_config['server_host']

    def install_packages(self):
        if not self.dependency_installer.install_packages(list(self.packages)):
            raise InstallError(f"Failed to install packages: {' '.join(self.packages)}")

    def setup(self):
        raise NotImplementedError

    def run(self) -> int:
        log_banner(self.title, logger)
        try:
            require_root(self.shell_executor)
            self.setup()
        except InstallError as e:
            logger.error(f"❌ Error: {e}")
            if e.hint:
                logger.warning(f"⚠️ {e.hint}")
            return 1
        except subprocess.CalledProcessError as e:
            logger.error(f"❌ Command failed with exit code {e.returncode}: {e.cmd}")
            return 1
        except subprocess.TimeoutExpired as e:
            logger.error(f"❌ Command timed out: {e.cmd}")
            return 1
        except OSError as e:
            logger.error(f"❌ {e}")
            return 1
        return 0
