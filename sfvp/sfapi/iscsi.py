"""Host-side iSCSI attachment, filesystem and mount operations."""

import os
import subprocess
import time
from typing import List

from oslo_log import log as logging

from .exceptions import HostOperationError
from .models import AttachmentHandle, Volume

LOG = logging.getLogger(__name__)

DEFAULT_ISCSI_PORT = 3260
DEFAULT_FS_TYPE = "ext4"

# mkfs flag that skips the interactive "whole device" confirmation
_FORCE_FLAGS = {
    "ext2": "-F",
    "ext3": "-F",
    "ext4": "-F",
    "xfs": "-f",
    "btrfs": "-f",
}


def _run(cmd: List[str], timeout: int = 30) -> subprocess.CompletedProcess:
    """Run a command, raising HostOperationError on failure."""
    LOG.debug("Running command: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise HostOperationError(f"Command timed out after {timeout}s: {' '.join(cmd)}", command=cmd)
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr or e.stdout or str(e)
        raise HostOperationError(f"Command failed: {' '.join(cmd)}: {error_msg}", command=cmd, stderr=e.stderr)
    except OSError as e:
        # Binary missing or not executable
        raise HostOperationError(f"Failed to run {cmd[0]}: {e}", command=cmd)


def is_mounted(mount_point: str) -> bool:
    """Check if path is mounted.

    Args:
        mount_point: Path to check

    Returns:
        True if mounted, False otherwise
    """
    try:
        with open("/proc/mounts", "r") as f:
            for line in f:
                parts = line.split()
                if len(parts) >= 2 and parts[1] == mount_point:
                    return True
        return False
    except OSError:
        result = subprocess.run(
            ["mountpoint", "-q", mount_point],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0


class ISCSIHost:
    """Attach Element volumes to this host over iSCSI and manage their mounts.

    Args:
        svip: Storage virtual IP of the cluster, with or without port
        attach_wait: Seconds to wait for the by-path device link after login
    """

    def __init__(self, svip: str, attach_wait: int = 10):
        self.svip = svip
        self.attach_wait = attach_wait

    @property
    def portal(self) -> str:
        if ":" in self.svip:
            return self.svip
        return f"{self.svip}:{DEFAULT_ISCSI_PORT}"

    def device_link(self, iqn: str) -> str:
        return f"/dev/disk/by-path/ip-{self.portal}-iscsi-{iqn}-lun-0"

    def attach_volume(self, volume: Volume, iface: str = "default") -> AttachmentHandle:
        """Log in to the volume's target and return its local device.

        Logging in to an already attached volume is a no-op.

        Raises:
            HostOperationError: Discovery, login or device wait failed
        """
        if not volume.iqn:
            raise HostOperationError(f"Volume {volume.name} has no IQN, unable to attach")

        path = self.device_link(volume.iqn)
        if os.path.exists(path):
            LOG.debug("Volume %s already attached at %s", volume.name, path)
            return AttachmentHandle(path, os.path.realpath(path))

        _run(["iscsiadm", "-m", "discovery", "-t", "sendtargets", "-p", self.portal, "-I", iface])
        _run(["iscsiadm", "-m", "node", "-p", self.portal, "-T", volume.iqn, "-I", iface, "--login"])

        for attempt in range(self.attach_wait + 1):
            if os.path.exists(path):
                break
            if attempt < self.attach_wait:
                time.sleep(1)
        else:
            raise HostOperationError(f"Device {path} did not appear after {self.attach_wait}s")

        device = os.path.realpath(path)
        LOG.info("Attached volume %s: %s -> %s", volume.name, path, device)
        return AttachmentHandle(path, device)

    def detach_volume(self, volume: Volume) -> None:
        """Log out of the volume's target and drop its node record.

        Raises:
            HostOperationError: Logout failed for a reason other than no session
        """
        if not volume.iqn:
            LOG.warning("Volume %s has no IQN, nothing to detach", volume.name)
            return

        try:
            _run(["iscsiadm", "-m", "node", "-T", volume.iqn, "-p", self.portal, "--logout"])
        except HostOperationError as e:
            if "no matching sessions" not in (e.stderr or e.message).lower():
                raise
            LOG.debug("No iSCSI session for %s", volume.iqn)

        result = subprocess.run(
            ["iscsiadm", "-m", "node", "-T", volume.iqn, "-p", self.portal, "-o", "delete"],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            LOG.debug("Node record for %s not removed: %s", volume.iqn, result.stderr)

    def get_fs_type(self, device: str) -> str:
        """Return the filesystem type on ``device``, or "" when there is none.

        Raises:
            HostOperationError: blkid failed for another reason
        """
        cmd = ["blkid", "-s", "TYPE", "-o", "value", device]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise HostOperationError(f"Failed to run blkid: {e}", command=cmd)
        if result.returncode == 0:
            return result.stdout.strip()
        # blkid exits 2 when no filesystem signature was found
        if result.returncode == 2 and not result.stderr:
            return ""
        raise HostOperationError(f"Failed to probe filesystem on {device}: {result.stderr}", stderr=result.stderr)

    def format_volume(self, device: str, fs_type: str = DEFAULT_FS_TYPE) -> None:
        cmd = ["mkfs", "-t", fs_type]
        force = _FORCE_FLAGS.get(fs_type)
        if force:
            cmd.append(force)
        cmd.append(device)

        _run(cmd, timeout=300)
        LOG.info("Formatted %s with %s", device, fs_type)

    def mount(self, device: str, mount_point: str) -> None:
        """Mount ``device`` at ``mount_point``; a no-op if already mounted.

        Raises:
            HostOperationError: Mount directory could not be created, or mount failed
        """
        try:
            os.makedirs(mount_point, exist_ok=True)
        except OSError as e:
            raise HostOperationError(f"Failed to create mount point {mount_point}: {e}")

        if is_mounted(mount_point):
            LOG.debug("%s already mounted", mount_point)
            return

        _run(["mount", device, mount_point])

    def umount(self, mount_point: str) -> None:
        if not is_mounted(mount_point):
            return

        try:
            _run(["umount", mount_point], timeout=10)
        except HostOperationError as e:
            if "not mounted" not in (e.stderr or e.message).lower():
                raise
