"""
MIME Registry - shared-mime-info packages and default application associations
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape, quoteattr

logger = logging.getLogger(__name__)

MIME_INFO_NAMESPACE = "http://www.freedesktop.org/standards/shared-mime-info"


class MimeTypeDefinition:
    """One <mime-type> element of a shared-mime-info package"""

    def __init__(self, mime_type: str, comment: str, globs: Iterable[str] = (),
                 icon: Optional[str] = None, magic_string: Optional[str] = None,
                 magic_priority: int = 50, localized: bool = False):
        self.mime_type = mime_type
        self.comment = comment
        self.globs = list(globs)
        self.icon = icon
        self.magic_string = magic_string
        self.magic_priority = magic_priority
        self.localized = localized

    def render(self, indent: str = "    ") -> List[str]:
        inner = indent * 2
        lines = [f"{indent}<mime-type type={quoteattr(self.mime_type)}>"]
        lines.append(f"{inner}<comment>{escape(self.comment)}</comment>")
        if self.localized:
            lines.append(f'{inner}<comment xml:lang="en">{escape(self.comment)}</comment>')
        for pattern in self.globs:
            lines.append(f"{inner}<glob pattern={quoteattr(pattern)}/>")
        if self.magic_string:
            lines.append(f'{inner}<magic priority="{int(self.magic_priority)}">')
            lines.append(f'{inner}{indent}<match value={quoteattr(self.magic_string)} type="string" offset="0"/>')
            lines.append(f"{inner}</magic>")
        if self.icon:
            lines.append(f"{inner}<icon name={quoteattr(self.icon)}/>")
        lines.append(f"{indent}</mime-type>")
        return lines


def render_mime_package(definitions: Iterable[MimeTypeDefinition]) -> str:
    """Render a complete shared-mime-info XML document"""
    lines = ['<?xml version="1.0"?>', f'<mime-info xmlns="{MIME_INFO_NAMESPACE}">']
    for definition in definitions:
        lines.extend(definition.render())
    lines.append("</mime-info>")
    return "\n".join(lines) + "\n"


class MimeRegistry:
    """Registers MIME types in the user's MIME database and sets default handlers"""

    def __init__(self, shell_executor, mime_dir):
        self.shell_executor = shell_executor
        self.mime_dir = Path(mime_dir)

    def write_package(self, name: str, definitions: Iterable[MimeTypeDefinition]) -> Path:
        packages_dir = self.mime_dir / "packages"
        packages_dir.mkdir(parents=True, exist_ok=True)
        package_file = packages_dir / f"{name}.xml"
        package_file.write_text(render_mime_package(definitions), encoding='utf-8')
        logger.info(f"MIME package written: {package_file}")
        return package_file

    def update_database(self):
        """Rebuild the user's MIME cache"""
        logger.info("Updating MIME database...")
        self.shell_executor.run_command(['update-mime-database', str(self.mime_dir)], timeout=300)

    def set_default(self, desktop_id: str, mime_types: Iterable[str]):
        for mime_type in mime_types:
            self.shell_executor.run_command(['xdg-mime', 'default', desktop_id, mime_type], timeout=60)
            logger.debug(f"MIME_DEFAULT_SET mime={mime_type} app={desktop_id}")

    def query_default(self, mime_type: str) -> str:
        result = self.shell_executor.run_command(
            ['xdg-mime', 'query', 'default', mime_type], check=False, timeout=60
        )
        return (result.stdout or '').strip()

    def verify_defaults(self, desktop_id: str, mime_types: Iterable[str]) -> bool:
        """Log the current default handler for each type; True when all match desktop_id"""
        all_ok = True
        for mime_type in mime_types:
            current = self.query_default(mime_type)
            if current == desktop_id:
                logger.info(f"✅ {mime_type} -> {current}")
            else:
                logger.warning(f"⚠️ {mime_type} -> {current or '(none)'} (expected {desktop_id})")
                all_ok = False
        return all_ok
