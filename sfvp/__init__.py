"""
SolidFire Docker volume driver.

This package provisions SolidFire Element volumes for a container host and
attaches, formats and mounts them over iSCSI.
"""

__version__ = "1.3.2"
__all__ = ["daemon", "sfapi"]
