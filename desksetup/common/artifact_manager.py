"""
Artifact manager - handles downloaded archives, executables and temporary directories
"""

import os
import shutil
import tarfile
import tempfile
import zipfile
import logging
from contextlib import contextmanager
from pathlib import Path

from desksetup.common.errors import InstallError

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"

TAR_SUFFIXES = ('.tar.gz', '.tgz', '.tar.bz2', '.tbz2', '.tar.xz', '.txz', '.tar')


class ArtifactManager:
    """Manages downloaded artifacts and files"""

    def __init__(self, debug_mode=False):
        self.debug_mode = debug_mode

    def extract_archive(self, archive, dest):
        """Extract a zip or tar archive into dest"""
        archive = Path(archive)
        dest = Path(dest)
        dest.mkdir(parents=True, exist_ok=True)
        name = archive.name.lower()

        try:
            if name.endswith('.zip'):
                with zipfile.ZipFile(archive) as zf:
                    zf.extractall(dest)
            elif name.endswith(TAR_SUFFIXES):
                with tarfile.open(archive) as tf:
                    if hasattr(tarfile, 'data_filter'):
                        tf.extractall(dest, filter='data')
                    else:
                        tf.extractall(dest)
            else:
                raise InstallError(f"Unsupported archive type: {archive.name}")
        except (zipfile.BadZipFile, tarfile.TarError) as e:
            raise InstallError(f"Failed to extract {archive.name}: {e}")

        logger.info(f"Extracted {archive.name} -> {dest}")
        return dest

    def find_file(self, directory, pattern):
        """Return the first file matching pattern anywhere below directory"""
        for candidate in sorted(Path(directory).rglob(pattern)):
            if candidate.is_file():
                return candidate
        return None

    def find_directory(self, directory, pattern):
        """Return the first top-level directory matching pattern"""
        for candidate in sorted(Path(directory).glob(pattern)):
            if candidate.is_dir():
                return candidate
        return None

    def install_executable(self, source, dest):
        """Move a file into place and mark it executable"""
        source = Path(source)
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists():
            dest.unlink()
        shutil.move(str(source), str(dest))
        dest.chmod(0o755)

        if self.debug_mode:
            logger.debug(f"Installed executable: {source.name} -> {dest}")
        else:
            logger.info(f"Installed {dest}")
        return dest

    def move_directory_contents(self, source, dest):
        """Move every entry of source into dest, replacing entries dest already has"""
        dest = Path(dest)
        dest.mkdir(parents=True, exist_ok=True)
        moved = []
        for entry in sorted(Path(source).iterdir()):
            target = dest / entry.name
            if target.exists() or target.is_symlink():
                remove_path(target)
            shutil.move(str(entry), str(target))
            moved.append(target)
        return moved

    @staticmethod
    def is_elf_executable(path):
        """Check the ELF magic bytes (AppImages are ELF binaries)"""
        try:
            with open(path, 'rb') as f:
                return f.read(4) == ELF_MAGIC
        except OSError:
            return False

    def cleanup_directory(self, directory):
        """Clean up a directory"""
        try:
            if Path(directory).exists():
                shutil.rmtree(directory, ignore_errors=True)
                logger.debug(f"Cleaned directory: {directory}")
        except OSError as e:
            logger.warning(f"Failed to clean directory {directory}: {e}")

    @contextmanager
    def working_directory(self, prefix="desksetup_"):
        """Temporary working directory that is always removed afterwards"""
        temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
        try:
            yield temp_dir
        finally:
            self.cleanup_directory(temp_dir)


def make_executable(path):
    """Add execute bits for user, group and others"""
    path = Path(path)
    mode = path.stat().st_mode
    path.chmod(mode | 0o111)
    return path


def remove_path(path):
    """Remove a file or directory tree, ignoring a missing path"""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        os.remove(path)
