"""
Shell rc helpers - idempotent snippets in ~/.bashrc / ~/.zshrc and launcher scripts
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_shell_config_file(home, shell=None) -> Path:
    """Pick ~/.zshrc for zsh users and ~/.bashrc for everyone else; create it if missing"""
    home = Path(home)
    if (shell or '').endswith('/zsh') or shell == 'zsh':
        config_file = home / ".zshrc"
    else:
        config_file = home / ".bashrc"

    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.touch()
    return config_file


def ensure_snippet(config_file, marker: str, snippet: str) -> bool:
    """
    Append snippet to config_file unless marker already occurs in it.

    Returns:
        True if the file was changed
    """
    config_file = Path(config_file)
    content = config_file.read_text(encoding='utf-8') if config_file.exists() else ''
    if marker in content:
        logger.info(f"{marker!r} already present in {config_file}. No changes needed.")
        return False

    with open(config_file, 'a', encoding='utf-8') as f:
        f.write("\n" + snippet.rstrip("\n") + "\n")
    logger.info(f"✅ Added {marker!r} to {config_file}")
    return True


def write_launcher(path, target) -> Path:
    """Write a bash wrapper that execs target with all arguments"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "#!/bin/bash\n"
        f"# {path.name} command line launcher\n"
        f'exec "{target}" "$@"\n',
        encoding='utf-8'
    )
    path.chmod(0o755)
    return path
