"""
Fstab Manager - backs up and edits /etc/fstab
"""

import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class FstabEntry:
    """One fstab line: spec, mount point, type, options, dump, pass"""

    def __init__(self, spec: str, mount_point: str, fs_type: str, options: str = "defaults",
                 dump: int = 0, passno: int = 0):
        self.spec = spec
        self.mount_point = mount_point
        self.fs_type = fs_type
        self.options = options
        self.dump = dump
        self.passno = passno

    def render(self) -> str:
        return f"{self.spec} {self.mount_point} {self.fs_type} {self.options} {self.dump} {self.passno}"

    def __repr__(self):
        return f"FstabEntry({self.render()!r})"


class FstabManager:
    """Edits an fstab file in place; every change appends, nothing is rewritten silently"""

    def __init__(self, shell_executor, fstab_path="/etc/fstab"):
        self.shell_executor = shell_executor
        self.fstab_path = Path(fstab_path)

    def read(self) -> str:
        if not self.fstab_path.exists():
            return ""
        return self.fstab_path.read_text(encoding='utf-8')

    def backup(self, now: Optional[datetime] = None) -> Path:
        """Copy fstab to <fstab>.backup.YYYYmmdd_HHMMSS"""
        stamp = (now or datetime.now()).strftime('%Y%m%d_%H%M%S')
        backup_path = self.fstab_path.with_name(f"{self.fstab_path.name}.backup.{stamp}")
        shutil.copy2(self.fstab_path, backup_path)
        logger.info(f"FSTAB_BACKUP path={backup_path}")
        return backup_path

    def contains(self, text: str) -> bool:
        return text in self.read()

    def _append(self, text: str):
        content = self.read()
        with open(self.fstab_path, 'a', encoding='utf-8') as f:
            if content and not content.endswith("\n"):
                f.write("\n")
            f.write(text)

    def ensure_entry(self, entry: FstabEntry, marker: Optional[str] = None) -> bool:
        """
        Append entry unless marker (default: the entry's spec) already occurs in fstab.

        Returns:
            True if the entry was added
        """
        marker = marker or entry.spec
        if self.contains(marker):
            logger.info(f"{marker} already present in {self.fstab_path}")
            return False
        self._append(entry.render() + "\n")
        logger.info(f"✅ Added to fstab: {entry.render()}")
        return True

    def remove_matching(self, substring: str) -> int:
        """Drop every line containing substring; returns the number removed"""
        lines = self.read().splitlines(keepends=True)
        kept = [line for line in lines if substring not in line]
        removed = len(lines) - len(kept)
        if removed:
            self.fstab_path.write_text(''.join(kept), encoding='utf-8')
            logger.info(f"Removed {removed} fstab line(s) containing {substring!r}")
        return removed

    def append_block(self, lines: Iterable[str], comment: Optional[str] = None) -> List[str]:
        """Append a blank line, an optional comment and the given lines"""
        block = [str(line) for line in lines]
        text = "\n"
        if comment:
            text += f"# {comment}\n"
        text += "".join(f"{line}\n" for line in block)
        self._append(text)
        return block

    def mount_all(self):
        logger.info("Mounting filesystems...")
        self.shell_executor.run_command(['mount', '-a'], log_cmd=True, timeout=600)
