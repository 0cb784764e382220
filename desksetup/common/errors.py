"""
Error types raised by the installers
"""


class InstallError(RuntimeError):
    """An explicit installation check failed; the command exits with status 1"""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message)
        self.hint = hint
