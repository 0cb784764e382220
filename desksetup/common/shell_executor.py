"""
Shell Executor Module - Handles shell command execution with comprehensive logging
"""

import os
import shlex
import shutil
import subprocess
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class ShellExecutor:
    """Handles shell command execution with comprehensive logging and timeout"""

    def __init__(self, debug_mode: bool = False):
        self.debug_mode = debug_mode

    @staticmethod
    def is_root() -> bool:
        """True when the current process already has root privileges"""
        return os.geteuid() == 0

    @staticmethod
    def command_exists(name: str) -> bool:
        """Check whether an executable is reachable on PATH"""
        return shutil.which(name) is not None

    def _with_privileges(self, cmd, shell: bool, user=None, sudo: bool = False, cwd=None):
        """Wrap a command in sudo when it has to run as root or as another user"""
        if user:
            prefix = ['sudo', '-u', user]
            if shell:
                return prefix + ['bash', '-c', f'cd "{cwd}" && {cmd}'], False
            return prefix + list(cmd), False

        if sudo and not self.is_root():
            if shell:
                return f"sudo {cmd}", True
            return ['sudo'] + list(cmd), False

        return cmd, shell

    def _describe(self, cmd) -> str:
        if isinstance(cmd, (list, tuple)):
            return ' '.join(shlex.quote(str(part)) for part in cmd)
        return str(cmd)

    def run_command(self, cmd, cwd=None, capture=True, check=True, shell=False, user=None,
                   sudo=False, log_cmd=False, timeout=1800, extra_env=None, input_text=None):
        """Run command with comprehensive logging, timeout, and optional extra environment variables"""
        if cwd is None:
            cwd = Path.cwd()

        full_cmd, use_shell = self._with_privileges(cmd, shell, user=user, sudo=sudo, cwd=cwd)
        cmd_text = self._describe(full_cmd)

        if log_cmd or self.debug_mode:
            logger.info(f"RUNNING COMMAND: {cmd_text}")

        # Prepare environment
        env = os.environ.copy()
        if extra_env:
            env.update(extra_env)
        env['LC_ALL'] = 'C'

        try:
            result = subprocess.run(
                full_cmd,
                cwd=str(cwd),
                shell=use_shell,
                capture_output=capture,
                text=True,
                check=check,
                env=env,
                timeout=timeout,
                input=input_text
            )
        except subprocess.TimeoutExpired:
            logger.error(f"⚠️ Command timed out after {timeout} seconds: {cmd_text}")
            raise
        except subprocess.CalledProcessError as e:
            logger.error(f"❌ Command failed: {cmd_text} (exit {e.returncode})")
            if e.stderr:
                logger.error(f"STDERR: {e.stderr.strip()[:2000]}")
            raise

        if log_cmd or self.debug_mode:
            if result.stdout:
                logger.debug(f"STDOUT: {result.stdout[:500]}")
            if result.stderr:
                logger.debug(f"STDERR: {result.stderr[:500]}")
            logger.debug(f"EXIT CODE: {result.returncode}")

        if result.returncode != 0 and self.debug_mode:
            logger.debug(f"COMMAND FAILED: {cmd_text}")
            if result.stderr:
                logger.debug(f"FULL STDERR (truncated):\n{result.stderr[:2000]}")

        return result

    def spawn_detached(self, cmd):
        """Start a background process in its own session and do not wait for it"""
        cmd_text = self._describe(cmd)
        if self.debug_mode:
            logger.info(f"SPAWNING DETACHED: {cmd_text}")

        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True
            )
            return True
        except OSError as e:
            logger.warning(f"⚠️ Could not start {cmd_text}: {e}")
            return False
