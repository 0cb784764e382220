"""
NFS server and client setup
"""

from .fstab import FstabEntry, FstabManager
from .server import NfsServerSetup
from .client import NfsClientSetup

__all__ = [
    'FstabEntry',
    'FstabManager',
    'NfsServerSetup',
    'NfsClientSetup',
]
