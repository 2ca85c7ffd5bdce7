"""Attach, format and mount volumes on this host, and the reverse."""

from oslo_log import log as logging

from sfvp.sfapi import exceptions as sf_exceptions
from sfvp.sfapi.client import ElementClient
from sfvp.sfapi.iscsi import DEFAULT_FS_TYPE, ISCSIHost

from .utils import canonical_name, get_mount_point_for_volume

LOG = logging.getLogger(__name__)


class AttachmentOrchestrator:
    """Drive a provisioned volume to mounted and back.

    Nothing is recorded between calls: each operation looks the volume up
    again and asks the host for its current state.

    Args:
        client: Element API client
        host: iSCSI/filesystem host operations
        account_id: Tenant account owning the volumes
        mount_point: Base directory for volume mounts
        initiator_iface: iSCSI initiator interface used for login
        fs_type: Filesystem created on devices that have none
    """

    def __init__(
        self,
        client: ElementClient,
        host: ISCSIHost,
        account_id: int,
        mount_point: str,
        initiator_iface: str = "default",
        fs_type: str = DEFAULT_FS_TYPE,
    ):
        self.client = client
        self.host = host
        self.account_id = account_id
        self.mount_point = mount_point
        self.initiator_iface = initiator_iface
        self.fs_type = fs_type

    def mount(self, name: str) -> str:
        """Attach, format if blank, and mount the volume for ``name``.

        A failure after the attach leaves the device attached; a later
        unmount cleans it up.

        Returns:
            Mount path

        Raises:
            VolumeNotFound: No such volume
            AttachmentInvariantError: Attach returned no path or device
            HostOperationError: Attach, format or mount failed
        """
        LOG.info("Mounting volume %s", name)
        try:
            volume = self.client.get_volume_by_name(canonical_name(name), self.account_id)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to retrieve volume by name in mount operation: %s: %s", name, e)
            raise

        try:
            path, device = self.host.attach_volume(volume, self.initiator_iface)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to perform iscsi attach of volume %s: %s", name, e)
            raise

        if not path or not device:
            LOG.error("Missing path or device after attach of %s (path=%r, device=%r)", name, path, device)
            raise sf_exceptions.AttachmentInvariantError(
                f"Attach of volume {name} reported success without a device (path={path!r}, device={device!r})"
            )
        LOG.debug("Attached volume at (path, devfile): %s, %s", path, device)

        if not self.host.get_fs_type(device):
            LOG.info("No filesystem on %s, formatting with %s", device, self.fs_type)
            try:
                self.host.format_volume(device, self.fs_type)
            except sf_exceptions.SolidFireException as e:
                LOG.error("Failed to format device %s: %s", device, e)
                raise

        mount_path = get_mount_point_for_volume(self.mount_point, name)
        try:
            self.host.mount(device, mount_path)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to mount volume %s at %s: %s", name, mount_path, e)
            raise

        return mount_path

    def unmount(self, name: str) -> None:
        """Unmount (best-effort) then detach the volume for ``name``.

        Raises:
            VolumeNotFound: No such volume
            HostOperationError: Detach failed
        """
        LOG.info("Unmounting volume %s", name)
        mount_path = get_mount_point_for_volume(self.mount_point, name)
        try:
            self.host.umount(mount_path)
        except sf_exceptions.SolidFireException as e:
            LOG.warning("Failed to unmount %s, continuing with detach: %s", mount_path, e)

        volume = self.client.get_volume_by_name(canonical_name(name), self.account_id)
        self.host.detach_volume(volume)
