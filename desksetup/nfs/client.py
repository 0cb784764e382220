"""
NFS Client Setup - mounts the NAS shares persistently through fstab
"""

import logging
from pathlib import Path
from typing import List

from desksetup.nfs.base import NfsSetup
from desksetup.nfs.fstab import FstabEntry

logger = logging.getLogger(__name__)


class NfsClientSetup(NfsSetup):
    """Replaces any fstab lines for the server with the configured mounts"""

    title = "NFS Client Setup"
    packages = ["nfs-common"]

    def __init__(self, settings, shell_executor=None):
        super().__init__(settings, shell_executor)
        self.mounts = self.nfs_config['client_mounts']

    def mount_entries(self) -> List[FstabEntry]:
        return [
            FstabEntry(f"{self.server_host}:{mount['remote']}", mount['local'], "nfs",
                       self.nfs_config['mount_options'], 0, 0)
            for mount in self.mounts
        ]

    def create_mount_points(self):
        logger.info("Creating mount points...")
        for mount in self.mounts:
            Path(mount['local']).mkdir(parents=True, exist_ok=True)

    def configure_fstab(self):
        logger.info("Backing up fstab...")
        self.fstab.backup()

        logger.info("Adding NFS mounts to fstab...")
        self.fstab.remove_matching(f"{self.server_host}:")
        self.fstab.append_block(
            [entry.render() for entry in self.mount_entries()],
            comment=f"NFS mounts to {self.nfs_config['server_name']} ({self.server_host})"
        )

    def show_mounted_shares(self):
        result = self.shell_executor.run_command(['df', '-h'], check=False, timeout=60)
        logger.info("=== Mounted NFS Shares ===")
        for line in (result.stdout or '').splitlines():
            if self.server_host in line:
                logger.info(line)

    def setup(self):
        logger.info(f"Setting up NFS client to connect to {self.nfs_config['server_name']}...")
        logger.info("Installing NFS client...")
        self.install_packages()
        self.create_mount_points()
        self.configure_fstab()
        logger.info("Mounting NFS shares...")
        self.fstab.mount_all()
        self.show_mounted_shares()

        logger.info("✅ Client Setup Complete! NFS shares are now mounted and will persist after reboot.")
        logger.info("Access points:")
        for mount in self.mounts:
            logger.info(f"- {mount['local']} ({mount['description']})")
        common_root = Path(self.mounts[0]['local']).parent if self.mounts else Path("/mnt/nfs")
        logger.info(f"Open in Nautilus with: nautilus {common_root}/")
