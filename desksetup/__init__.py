"""
desksetup - desktop application installers, NFS setup and workstation provisioning
"""

__version__ = "1.0.0"
