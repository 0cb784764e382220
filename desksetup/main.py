#!/usr/bin/env python3
"""
desksetup command line entry point
"""

import sys
import logging
import argparse
from typing import List, Optional

from desksetup import __version__
from desksetup.apps import (
    BambuStudioInstaller, CuraInstaller, CursorInstaller, DockFromDashInstaller, RubyMineInstaller
)
from desksetup.common.config_loader import ConfigLoader
from desksetup.common.errors import InstallError
from desksetup.common.logging_utils import setup_logging
from desksetup.common.shell_executor import ShellExecutor
from desksetup.common.state import InstallState
from desksetup.http_client import HttpClient
from desksetup.nfs import NfsClientSetup, NfsServerSetup
from desksetup.workstation import WorkstationContext, WorkstationMenu, parse_choices

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="desksetup",
        description="Install desktop applications and provision Ubuntu workstations.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("--config", help="YAML configuration file (default: ~/.config/desksetup/config.yaml).")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    cursor = subparsers.add_parser("cursor", help="Install or update the Cursor editor.")
    cursor.add_argument("--force", action="store_true", help="Download even when the latest version is installed.")

    bambu = subparsers.add_parser("bambu-studio", help="Install Bambu Studio and associate STL files.")
    bambu.add_argument("-u", "--url", help="Custom download URL (zip containing an AppImage, or an AppImage).")

    cura = subparsers.add_parser("cura", help="Install Ultimaker Cura and associate STL files.")
    cura.add_argument("--version", dest="cura_version", help="Cura release to install.")
    cura.add_argument("--url", help="Override the AppImage download URL.")

    rubymine = subparsers.add_parser("rubymine", help="Install the latest RubyMine.")
    rubymine.add_argument("-y", "--yes", action="store_true", help="Reinstall the same version without asking.")

    subparsers.add_parser("dock-from-dash", help="Install the Dock from Dash GNOME Shell extension.")
    subparsers.add_parser("nfs-server", help="Set up the NFS server mounts and exports (root).")
    subparsers.add_parser("nfs-client", help="Mount the NFS shares on this machine (root).")

    workstation = subparsers.add_parser("workstation", help="Interactive workstation setup menu.")
    workstation.add_argument("--select", help="Comma-separated options to run without prompting, e.g. 1,3,5.")
    workstation.add_argument("--source-dir", help="Directory holding id_rsa and .bash_git (default: current directory).")

    subparsers.add_parser("status", help="Show what desksetup has installed.")
    return parser


def show_status(settings) -> int:
    apps = InstallState(settings['state_file']).all()
    if not apps:
        print("Nothing installed by desksetup yet.")
        return 0
    for app, info in sorted(apps.items()):
        print(f"{app}: {info.get('version', 'unknown')} ({info.get('location') or '-'}) "
              f"installed {info.get('installed_at', '?')}")
    return 0


def run_command(args, settings) -> int:
    """Dispatch a parsed command; returns the exit code"""
    executor = ShellExecutor(settings['debug_mode'])
    http_client = HttpClient(timeout=settings.get('http_timeout', 60))
    shared = {'shell_executor': executor, 'http_client': http_client}

    if args.command == "cursor":
        return CursorInstaller(settings, force=args.force, **shared).run()
    if args.command == "bambu-studio":
        return BambuStudioInstaller(settings, custom_url=args.url, **shared).run()
    if args.command == "cura":
        return CuraInstaller(settings, version=args.cura_version, url=args.url, **shared).run()
    if args.command == "rubymine":
        return RubyMineInstaller(settings, assume_yes=args.yes, **shared).run()
    if args.command == "dock-from-dash":
        return DockFromDashInstaller(settings, **shared).run()
    if args.command == "nfs-server":
        return NfsServerSetup(settings, shell_executor=executor).run()
    if args.command == "nfs-client":
        return NfsClientSetup(settings, shell_executor=executor).run()
    if args.command == "workstation":
        context = WorkstationContext(
            settings,
            source_dir=args.source_dir,
            cura_runner=lambda: CuraInstaller(settings, **shared).run(),
            **shared
        )
        choices = parse_choices(args.select) if args.select is not None else None
        return WorkstationMenu(context).run(choices)
    if args.command == "status":
        return show_status(settings)

    logger.error(f"Unknown command: {args.command}")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigLoader.load(args.config)
    except InstallError as e:
        setup_logging(args.debug)
        logger.error(f"❌ Configuration error: {e}")
        return 1

    if args.debug:
        settings['debug_mode'] = True
    setup_logging(settings['debug_mode'], settings.get('log_file'))
    logger.debug(f"desksetup {__version__} command={args.command} config={settings.get('config_file')}")

    try:
        return run_command(args, settings)
    except KeyboardInterrupt:
        logger.warning("⚠️ Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
