"""
Icon Manager - application icons, MIME type icons and icon caches
"""

import shutil
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from desksetup.common.artifact_manager import remove_path

logger = logging.getLogger(__name__)

CONVERTERS = ('inkscape', 'convert', 'rsvg-convert')


def placeholder_svg(label: str, fill: str, text_fill: str = "white", rounded: bool = False) -> str:
    """Simple square SVG with a text label, used when no icon can be fetched"""
    radius = ' rx="32"' if rounded else ''
    return (
        f'<svg width="256" height="256" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="256" height="256"{radius} fill="{fill}"/>'
        f'<text x="128" y="128" text-anchor="middle" dy=".3em" fill="{text_fill}" '
        f'font-family="Arial, sans-serif" font-size="24">{escape(label)}</text>'
        f'</svg>\n'
    )


class IconManager:
    """Downloads, converts and registers icons"""

    def __init__(self, shell_executor, http_client, debug_mode: bool = False):
        self.shell_executor = shell_executor
        self.http_client = http_client
        self.debug_mode = debug_mode

    @staticmethod
    def is_valid_svg(path) -> bool:
        """Non-empty file whose first line looks like XML or SVG"""
        path = Path(path)
        if not path.is_file() or path.stat().st_size == 0:
            return False
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            first_line = f.readline()
        return '<?xml' in first_line or '<svg' in first_line

    def fetch_icon(self, dest_dir, basename: str, candidates: Sequence[Tuple[str, str]],
                   placeholder: Optional[str] = None) -> Optional[Path]:
        """
        Install an icon from the first candidate that downloads correctly.

        Args:
            dest_dir: Icon directory
            basename: File name without extension
            candidates: (url, kind) pairs tried in order; kind is "svg" or "png"
            placeholder: SVG text written when every candidate fails

        Returns:
            Path of the installed icon, or None when nothing could be installed
        """
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)

        for url, kind in candidates:
            dest = dest_dir / f"{basename}.{kind}"
            if not self.http_client.try_download(url, dest):
                continue
            if kind == 'svg' and not self.is_valid_svg(dest):
                logger.error("Downloaded file is not a valid SVG")
                dest.unlink()
                continue
            logger.info(f"✅ Icon installed at: {dest}")
            return dest

        if placeholder is None:
            return None

        logger.warning("⚠️ No icon could be downloaded, creating placeholder icon")
        dest = dest_dir / f"{basename}.svg"
        dest.write_text(placeholder, encoding='utf-8')
        return dest

    def find_converter(self, source=None) -> Optional[str]:
        """First available image converter able to read the source"""
        is_svg = source is None or Path(source).suffix.lower() == '.svg'
        for converter in CONVERTERS:
            if converter == 'rsvg-convert' and not is_svg:
                continue
            if self.shell_executor.command_exists(converter):
                return converter
        return None

    def render_png(self, source, dest, size: int, converter: Optional[str] = None) -> bool:
        """Render source to a size x size PNG with a transparent background"""
        converter = converter or self.find_converter(source)
        if not converter:
            return False

        source, dest = str(source), str(dest)
        if converter == 'inkscape':
            cmd = ['inkscape', source, '--export-type=png', f'--export-filename={dest}',
                   f'--export-width={size}', f'--export-height={size}', '--export-background-opacity=0']
        elif converter == 'convert':
            cmd = ['convert', '-background', 'transparent', source, '-resize', f'{size}x{size}', dest]
        else:
            cmd = ['rsvg-convert', '-w', str(size), '-h', str(size), '-o', dest, source]

        result = self.shell_executor.run_command(cmd, check=False, timeout=120)
        if result.returncode != 0 or not Path(dest).exists():
            logger.warning(f"⚠️ {converter} could not render {source} at {size}px")
            return False
        return True

    def install_mime_icons(self, icon_file, icon_names: Sequence[str], hicolor_dir,
                           sizes: Iterable[int] = (48, 128, 256)) -> List[Path]:
        """
        Render icon_file into hicolor/<size>x<size>/mimetypes/<name>.png for every name.

        The first name is rendered; the others are copies of it.
        """
        converter = self.find_converter(icon_file)
        if not converter:
            logger.warning("⚠️ Skipping MIME type icon setup (no image conversion tool available)")
            return []

        written = []
        hicolor_dir = Path(hicolor_dir)
        for size in sizes:
            target_dir = hicolor_dir / f"{size}x{size}" / "mimetypes"
            target_dir.mkdir(parents=True, exist_ok=True)
            primary = target_dir / f"{icon_names[0]}.png"
            if not self.render_png(icon_file, primary, size, converter):
                continue
            written.append(primary)
            for alias in icon_names[1:]:
                alias_path = target_dir / f"{alias}.png"
                shutil.copyfile(primary, alias_path)
                written.append(alias_path)

        self.update_icon_cache(hicolor_dir)
        return written

    def replace_theme_mime_icons(self, svg_file, theme_dir, icon_name: str, sizes: Iterable[int],
                                 work_dir) -> int:
        """
        Overwrite an existing system theme MIME icon (and its @2x variant) at every size.

        Only icons the theme already ships are replaced.

        Returns:
            Number of icons replaced
        """
        converter = self.find_converter(svg_file)
        if not converter or converter == 'rsvg-convert':
            logger.warning("⚠️ Skipping system icon replacement (no image conversion tools available)")
            return 0

        theme_dir = Path(theme_dir)
        replaced = 0
        for size in sizes:
            for suffix, scale in (("", 1), ("@2x", 2)):
                target = theme_dir / f"{size}x{size}{suffix}" / "mimetypes" / f"{icon_name}.png"
                if not target.exists():
                    continue
                temp_icon = Path(work_dir) / f"system-{size}{suffix}.png"
                if not self.render_png(svg_file, temp_icon, size * scale, converter):
                    continue
                self.shell_executor.run_command(
                    ['install', '-m', '644', str(temp_icon), str(target)], sudo=True, timeout=60
                )
                temp_icon.unlink()
                replaced += 1

        if replaced:
            self.update_icon_cache(theme_dir, sudo=True)
            logger.info(f"✅ System {icon_name} icons replaced successfully! ({replaced})")
        else:
            logger.info(f"No system {icon_name} icons found to replace.")
        return replaced

    def update_icon_cache(self, directory, sudo: bool = False) -> bool:
        """Refresh a GTK icon cache; failures are never fatal"""
        if not self.shell_executor.command_exists('gtk-update-icon-cache'):
            return False
        result = self.shell_executor.run_command(
            ['gtk-update-icon-cache', '-f', '-t', str(directory)], sudo=sudo, check=False, timeout=300
        )
        return result.returncode == 0

    def clear_user_caches(self, cache_dir, thumbnails: bool = False):
        """Drop the KDE/GTK icon cache file and, optionally, cached thumbnails"""
        cache_dir = Path(cache_dir)
        targets = [cache_dir / "icon-cache.kcache"]
        if thumbnails:
            targets.append(cache_dir / "thumbnails")
        for target in targets:
            try:
                remove_path(target)
            except OSError as e:
                logger.warning(f"⚠️ Could not remove {target}: {e}")
