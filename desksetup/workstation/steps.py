"""
Workstation Steps - provisioning steps offered by the basic setup menu
"""

import os
import shutil
import logging
from pathlib import Path
from typing import Callable, Optional

from desksetup.common.artifact_manager import ArtifactManager
from desksetup.common.dependency_installer import DependencyInstaller
from desksetup.common.environment import OS_RELEASE_PATH, read_os_release
from desksetup.common.errors import InstallError
from desksetup.common.shell_executor import ShellExecutor
from desksetup.desktop.shell_rc import ensure_snippet
from desksetup.http_client import HttpClient

logger = logging.getLogger(__name__)

BASH_GIT_SNIPPET = """# Adding bash_git configuration
if [ -f ~/.bash_git ]; then
   . ~/.bash_git
fi"""

MISE_ACTIVATE_LINE = 'eval "$(mise activate bash)"'

DOCKER_KEYRING = "/etc/apt/keyrings/docker.gpg"
DOCKER_SOURCE_LIST = "/etc/apt/sources.list.d/docker.list"
BRAVE_KEYRING = "/usr/share/keyrings/brave-browser-archive-keyring.gpg"
BRAVE_SOURCE_LIST = "/etc/apt/sources.list.d/brave-browser-release.list"


class WorkstationContext:
    """Everything a provisioning step needs: settings, tools and where the user's files live"""

    def __init__(self, settings, shell_executor=None, http_client=None, source_dir=None,
                 cura_runner: Optional[Callable[[], int]] = None, os_release_path=OS_RELEASE_PATH):
        self.settings = settings
        self.config = settings['workstation']
        self.debug_mode = settings.get('debug_mode', False)
        self.home = Path(settings['home'])

        self.shell_executor = shell_executor or ShellExecutor(self.debug_mode)
        self.http_client = http_client or HttpClient(timeout=settings.get('http_timeout', 60))
        self.dependency_installer = DependencyInstaller(self.shell_executor, self.debug_mode)
        self.artifact_manager = ArtifactManager(self.debug_mode)

        self.source_dir = Path(source_dir) if source_dir else Path.cwd()
        self.cura_runner = cura_runner
        self.os_release_path = os_release_path

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"

    def apt_install(self, packages):
        if not self.dependency_installer.install_packages(list(packages)):
            raise InstallError(f"Failed to install packages: {' '.join(packages)}")

    def snap_install(self, name, classic=False):
        if not self.dependency_installer.install_snap(name, classic=classic):
            raise InstallError(f"Failed to install snap: {name}")

    def sudo_write(self, path, content: str):
        """Write a root-owned file through sudo tee"""
        self.shell_executor.run_command(['tee', str(path)], sudo=True, input_text=content, timeout=60)


# ------------------------------------------------------------------
# 1. Base setup
# ------------------------------------------------------------------

def install_base_setup(ctx: WorkstationContext):
    logger.info("Creating software-projects directory...")
    projects_dir = ctx.home / ctx.config['projects_dir']
    if not projects_dir.is_dir():
        projects_dir.mkdir(parents=True)
        logger.info(f"{projects_dir.name} directory created.")
    else:
        logger.info(f"{projects_dir.name} directory already exists.")

    logger.info("Installing base packages...")
    ctx.apt_install(ctx.config['base_packages'])

    for name, classic in ctx.config['snaps']:
        logger.info(f"Installing {name}...")
        ctx.snap_install(name, classic)

    copy_ssh_key(ctx)
    setup_bash_git(ctx)


def copy_ssh_key(ctx: WorkstationContext) -> bool:
    logger.info("Copying SSH key...")
    source = ctx.source_dir / "id_rsa"
    if not source.is_file():
        logger.error("Error: id_rsa file not found!")
        return False

    ssh_dir = ctx.home / ".ssh"
    ssh_dir.mkdir(parents=True, exist_ok=True)
    dest = ssh_dir / "id_rsa"
    if dest.exists():
        # An existing 0400 key cannot be overwritten in place
        dest.chmod(0o600)
    shutil.copyfile(source, dest)
    dest.chmod(0o400)
    logger.info("✅ SSH key copied successfully.")
    return True


def setup_bash_git(ctx: WorkstationContext):
    logger.info("Setting up bash_git configuration...")
    dest = ctx.home / ".bash_git"
    if dest.is_file():
        logger.info(".bash_git file already exists in home directory")
    else:
        source = ctx.source_dir / ".bash_git"
        if source.is_file():
            shutil.copyfile(source, dest)
            logger.info(".bash_git file copied to home directory")
        else:
            logger.error("Error: .bash_git file not found in current directory!")

    ensure_snippet(ctx.bashrc, "bash_git", BASH_GIT_SNIPPET)


# ------------------------------------------------------------------
# 2. mise, Ruby and Node.js
# ------------------------------------------------------------------

def find_mise(ctx: WorkstationContext) -> str:
    local_mise = ctx.home / ".local" / "bin" / "mise"
    if local_mise.is_file():
        return str(local_mise)
    found = shutil.which('mise')
    if not found:
        raise InstallError("mise was not found after installation",
                           hint=f"Expected it at {local_mise}")
    return found


def mise_use(ctx: WorkstationContext, mise: str, tool: str):
    ctx.shell_executor.run_command([mise, 'install', tool], log_cmd=True, timeout=3600)
    ctx.shell_executor.run_command([mise, 'use', '--global', tool], log_cmd=True, timeout=300)


def install_mise_ruby(ctx: WorkstationContext):
    logger.info("Installing Mise and latest Ruby...")
    ctx.apt_install(ctx.config['ruby_build_packages'])

    installer = ctx.http_client.get_text(ctx.config['mise_install_url'])
    ctx.shell_executor.run_command(['sh'], input_text=installer, log_cmd=True, timeout=600,
                                   extra_env={'HOME': str(ctx.home)})
    ensure_snippet(ctx.bashrc, MISE_ACTIVATE_LINE, MISE_ACTIVATE_LINE)

    mise = find_mise(ctx)
    mise_use(ctx, mise, ctx.config['ruby_version'])
    logger.info("Installing Node.js using Mise...")
    mise_use(ctx, mise, ctx.config['node_version'])


# ------------------------------------------------------------------
# 3. PostgreSQL
# ------------------------------------------------------------------

def install_postgres(ctx: WorkstationContext):
    logger.info("Installing PostgreSQL...")
    ctx.apt_install(["postgresql", "postgresql-client"])

    password = str(ctx.config['postgres_password']).replace("'", "''")
    ctx.shell_executor.run_command(
        ['psql', '-c', f"ALTER USER postgres PASSWORD '{password}';"],
        user='postgres', cwd='/tmp', timeout=120
    )
    logger.info("✅ postgres user password set")


# ------------------------------------------------------------------
# 4. Docker
# ------------------------------------------------------------------

def get_architecture(ctx: WorkstationContext) -> str:
    result = ctx.shell_executor.run_command(['dpkg', '--print-architecture'], timeout=60)
    return result.stdout.strip()


def get_codename(ctx: WorkstationContext) -> str:
    """Release codename from os-release, falling back to lsb_release"""
    if Path(ctx.os_release_path).is_file():
        info = read_os_release(ctx.os_release_path)
        codename = info.get('UBUNTU_CODENAME') or info.get('VERSION_CODENAME')
        if codename:
            return codename
    result = ctx.shell_executor.run_command(['lsb_release', '-cs'], timeout=60)
    return result.stdout.strip()


def install_docker(ctx: WorkstationContext):
    logger.info("Installing Docker...")
    ctx.shell_executor.run_command(['mkdir', '-p', str(Path(DOCKER_KEYRING).parent)], sudo=True, timeout=60)

    with ctx.artifact_manager.working_directory(prefix="docker_") as work_dir:
        key_file = ctx.http_client.download(ctx.config['docker_gpg_url'], work_dir / "docker.asc")
        ctx.shell_executor.run_command(
            ['gpg', '--batch', '--yes', '--dearmor', '-o', DOCKER_KEYRING, str(key_file)],
            sudo=True, timeout=120
        )

    source = (f"deb [arch={get_architecture(ctx)} signed-by={DOCKER_KEYRING}] "
              f"{ctx.config['docker_repo_url']} {get_codename(ctx)} stable\n")
    ctx.sudo_write(DOCKER_SOURCE_LIST, source)

    ctx.dependency_installer.update_index(force=True)
    ctx.apt_install(ctx.config['docker_packages'])


# ------------------------------------------------------------------
# 5. Browsers
# ------------------------------------------------------------------

def install_browsers(ctx: WorkstationContext):
    logger.info("Installing Brave Browser and Google Chrome...")

    with ctx.artifact_manager.working_directory(prefix="browsers_") as work_dir:
        keyring = ctx.http_client.download(ctx.config['brave_keyring_url'], work_dir / "brave.gpg")
        ctx.shell_executor.run_command(['install', '-m', '644', str(keyring), BRAVE_KEYRING],
                                       sudo=True, timeout=60)
        ctx.sudo_write(BRAVE_SOURCE_LIST, f"deb [signed-by={BRAVE_KEYRING}] {ctx.config['brave_repo']}\n")
        ctx.dependency_installer.update_index(force=True)
        ctx.apt_install(["brave-browser"])

        deb_url = ctx.config['chrome_deb_url']
        deb_file = ctx.http_client.download(deb_url, work_dir / deb_url.rsplit('/', 1)[-1])
        if not ctx.dependency_installer.install_deb(deb_file):
            raise InstallError("Failed to install Google Chrome")


# ------------------------------------------------------------------
# 6. IDEs
# ------------------------------------------------------------------

def install_ides(ctx: WorkstationContext):
    logger.info("Installing VS Code and RubyMine...")
    for name, classic in ctx.config['ide_snaps']:
        ctx.snap_install(name, classic)


# ------------------------------------------------------------------
# 7. LastPass
# ------------------------------------------------------------------

def install_lastpass(ctx: WorkstationContext):
    logger.info("Installing LastPass...")
    with ctx.artifact_manager.working_directory(prefix="lastpass_") as work_dir:
        archive = work_dir / "lplinux.tar.bz2"
        if not ctx.http_client.try_download(ctx.config['lastpass_url'], archive):
            logger.error("Error: LastPass download failed!")
            return

        ctx.artifact_manager.extract_archive(archive, work_dir)
        script = ctx.artifact_manager.find_file(work_dir, "install_lastpass.sh")
        if script is None:
            logger.error("Error: install_lastpass.sh not found!")
            return

        os.chmod(script, 0o755)
        ctx.shell_executor.run_command(['bash', str(script)], cwd=script.parent, log_cmd=True,
                                       capture=False, timeout=1800)


# ------------------------------------------------------------------
# 8. Cura
# ------------------------------------------------------------------

def install_cura(ctx: WorkstationContext):
    logger.info("Installing Cura...")
    if ctx.cura_runner is None:
        raise InstallError("No Cura installer configured")
    if ctx.cura_runner() != 0:
        raise InstallError("Cura installation failed")


# ------------------------------------------------------------------
# Everything, in menu order
# ------------------------------------------------------------------

ALL_STEPS = [
    install_base_setup,
    install_mise_ruby,
    install_postgres,
    install_docker,
    install_browsers,
    install_ides,
    install_lastpass,
    install_cura,
]
