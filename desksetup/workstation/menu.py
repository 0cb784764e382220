"""
Workstation Menu - interactive selection of provisioning steps
"""

import subprocess
import logging
from typing import List, Optional

from desksetup.common.errors import InstallError
from desksetup.workstation import steps

logger = logging.getLogger(__name__)

EXIT_OPTION = "10"
ALL_OPTION = "9"

MENU_OPTIONS = [
    ("1", "Base Setup (includes software-projects directory, SSH key, bash_git config, and Flameshot)",
     steps.install_base_setup),
    ("2", "Mise and Latest Ruby (Includes Node.js)", steps.install_mise_ruby),
    ("3", "PostgreSQL", steps.install_postgres),
    ("4", "Docker", steps.install_docker),
    ("5", "Browsers (Brave & Chrome)", steps.install_browsers),
    ("6", "VS Code & RubyMine", steps.install_ides),
    ("7", "LastPass", steps.install_lastpass),
    ("8", "Install Cura", steps.install_cura),
    (ALL_OPTION, "Install All", None),
    (EXIT_OPTION, "Exit", None),
]

STEPS_BY_OPTION = {key: step for key, _, step in MENU_OPTIONS if step is not None}


def parse_choices(text: str) -> List[str]:
    """Split "1, 3,5" into ["1", "3", "5"], dropping empty entries"""
    choices = []
    for part in (text or '').split(','):
        option = ''.join(part.split())
        if option:
            choices.append(option)
    return choices


def render_menu() -> str:
    lines = ["Select options to install (comma-separated, e.g., 1,3,5):"]
    lines.extend(f"{key}) {label}" for key, label, _ in MENU_OPTIONS)
    return "\n".join(lines)


class WorkstationMenu:
    """Runs the selected steps; a failing step is logged and the remaining ones still run"""

    def __init__(self, context, input_func=input, output_func=print):
        self.context = context
        self.input_func = input_func
        self.output_func = output_func
        self.failed_steps = []

    def run_step(self, step) -> bool:
        name = step.__name__
        logger.info(f"STEP_START={name}")
        try:
            step(self.context)
        except InstallError as e:
            logger.error(f"❌ {name} failed: {e}")
            if e.hint:
                logger.warning(f"⚠️ {e.hint}")
        except subprocess.CalledProcessError as e:
            logger.error(f"❌ {name} failed: command exited with {e.returncode}: {e.cmd}")
        except subprocess.TimeoutExpired as e:
            logger.error(f"❌ {name} failed: command timed out: {e.cmd}")
        except OSError as e:
            logger.error(f"❌ {name} failed: {e}")
        else:
            logger.info(f"STEP_OK={name}")
            return True

        self.failed_steps.append(name)
        return False

    def run_option(self, option: str) -> bool:
        """
        Run one menu option.

        Returns:
            False when the option asks the menu to exit
        """
        if option == EXIT_OPTION:
            logger.info("Exiting...")
            return False
        if option == ALL_OPTION:
            for step in steps.ALL_STEPS:
                self.run_step(step)
            return True

        step = STEPS_BY_OPTION.get(option)
        if step is None:
            logger.warning(f"Invalid option: {option}")
        else:
            self.run_step(step)
        return True

    def run_choices(self, choices) -> bool:
        for option in choices:
            if not self.run_option(option):
                return False
        return True

    def run(self, choices: Optional[List[str]] = None) -> int:
        """
        Run the given choices once, or prompt until Exit or end of input.

        Returns:
            0 when every step succeeded, 1 otherwise
        """
        if choices is not None:
            self.run_choices(choices)
        else:
            while True:
                self.output_func(render_menu())
                try:
                    text = self.input_func("Enter your choices: ")
                except EOFError:
                    break
                if not self.run_choices(parse_choices(text)):
                    break

        if self.failed_steps:
            logger.error(f"❌ Failed steps: {', '.join(self.failed_steps)}")
            return 1
        return 0
