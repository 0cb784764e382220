"""
NFS Server Setup - persistent partition mounts, bind mounts and exports
"""

import logging
from pathlib import Path

from desksetup.nfs.base import NfsSetup
from desksetup.nfs.fstab import FstabEntry

logger = logging.getLogger(__name__)


class NfsServerSetup(NfsSetup):
    """Mounts the data partitions and exports them over NFS"""

    title = "NFS Server Setup"
    packages = ["nfs-kernel-server", "nfs-common"]

    def __init__(self, settings, shell_executor=None):
        super().__init__(settings, shell_executor)
        self.disks = self.nfs_config['server_disks']
        self.exports_path = Path(self.nfs_config.get('exports_path', '/etc/exports'))

    def create_directories(self):
        logger.info("Creating mount points...")
        for disk in self.disks:
            Path(disk['mount_point']).mkdir(parents=True, exist_ok=True)
        logger.info("Creating NFS export directories...")
        for disk in self.disks:
            Path(disk['export_dir']).mkdir(parents=True, exist_ok=True)

    def partition_entry(self, disk) -> FstabEntry:
        return FstabEntry(disk['device'], disk['mount_point'], disk['fs_type'],
                          disk.get('options', 'defaults'), 0, disk.get('passno', 0))

    def bind_entry(self, disk) -> FstabEntry:
        return FstabEntry(disk['mount_point'], disk['export_dir'], "none", "bind", 0, 0)

    def configure_fstab(self) -> int:
        """Add partition and bind mounts that are not yet in fstab; returns how many were added"""
        logger.info("Adding persistent mounts to /etc/fstab...")
        self.fstab.backup()

        added = 0
        for disk in self.disks:
            if self.fstab.ensure_entry(self.partition_entry(disk), marker=disk['device']):
                added += 1
        for disk in self.disks:
            if self.fstab.ensure_entry(self.bind_entry(disk), marker=disk['export_dir']):
                added += 1
        return added

    def export_line(self, disk) -> str:
        return f"{disk['export_dir']} {self.nfs_config['export_network']}({self.nfs_config['export_options']})"

    def configure_exports(self) -> int:
        """Append an exports line for every export directory not already exported"""
        content = self.exports_path.read_text(encoding='utf-8') if self.exports_path.exists() else ""
        exported = {line.split()[0] for line in content.splitlines()
                    if line.strip() and not line.lstrip().startswith('#')}

        new_lines = [self.export_line(disk) for disk in self.disks if disk['export_dir'] not in exported]
        if not new_lines:
            logger.info(f"All export directories already listed in {self.exports_path}")
            return 0

        with open(self.exports_path, 'a', encoding='utf-8') as f:
            if content and not content.endswith("\n"):
                f.write("\n")
            for line in new_lines:
                f.write(line + "\n")
                logger.info(f"✅ Added export: {line}")
        return len(new_lines)

    def publish_exports(self):
        logger.info("Reloading NFS exports...")
        self.shell_executor.run_command(['exportfs', '-ra'], log_cmd=True, timeout=120)
        self.shell_executor.run_command(
            ['systemctl', 'enable', '--now', 'nfs-kernel-server'], log_cmd=True, timeout=300
        )
        result = self.shell_executor.run_command(['exportfs', '-v'], check=False, timeout=60)
        logger.info("=== Active NFS Exports ===")
        for line in (result.stdout or '').splitlines():
            logger.info(line)

    def setup(self):
        logger.info("Setting up persistent NFS shares for sdc partitions...")
        logger.info("Installing NFS server packages...")
        self.install_packages()
        self.create_directories()
        self.configure_fstab()
        self.fstab.mount_all()
        self.configure_exports()
        self.publish_exports()
        logger.info("✅ NFS server setup complete")
