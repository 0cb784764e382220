"""
Workstation provisioning: the basic setup menu and its steps
"""

from .steps import WorkstationContext, ALL_STEPS
from .menu import WorkstationMenu, parse_choices

__all__ = [
    'WorkstationContext',
    'ALL_STEPS',
    'WorkstationMenu',
    'parse_choices',
]
