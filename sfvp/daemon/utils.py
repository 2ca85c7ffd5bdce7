"""Utility functions for the SolidFire Docker volume driver."""

import os

from sfvp.sfapi.exceptions import SolidFireException


def canonical_name(name: str) -> str:
    """Translate a Docker volume name into the name stored on the cluster.

    Element volume names may not contain underscores, so they are replaced by
    hyphens. The translation is one-way.
    """
    return name.replace("_", "-")


def get_mount_point_for_volume(base_path: str, volume_name: str) -> str:
    """Generate mount point path for a volume.

    Args:
        base_path: Base directory for mounts (e.g., /var/lib/solidfire/mount)
        volume_name: Name as requested by Docker, before canonicalization

    Returns:
        Full path to mount point
    """
    return os.path.join(base_path, volume_name)


def ensure_mount_base_exists(base_path: str) -> None:
    """Create the mount base directory if it is missing.

    Raises:
        SolidFireException: If directory creation fails
    """
    try:
        os.makedirs(base_path, mode=0o755, exist_ok=True)
    except OSError as e:
        raise SolidFireException(f"Failed to create mount directory {base_path}: {e}")
