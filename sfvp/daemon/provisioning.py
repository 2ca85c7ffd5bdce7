"""Volume provisioning: idempotent create, clone and remove."""

from typing import Dict, Iterable, Optional

from oslo_log import log as logging

from sfvp import __version__
from sfvp.sfapi import exceptions as sf_exceptions
from sfvp.sfapi.client import ElementClient
from sfvp.sfapi.iscsi import ISCSIHost
from sfvp.sfapi.models import Volume, VolumeType
from sfvp.sfapi.qos import resolve_qos

from .options import CreateOptions
from .utils import canonical_name

LOG = logging.getLogger(__name__)

PLATFORM = "Docker-SFVP"


class VolumeProvisioner:
    """Create, clone and delete Element volumes for one tenant account.

    Args:
        client: Element API client
        host: Host operations used to detach a volume before deletion
        account_id: Tenant account owning every volume
        default_vol_size: Size in bytes used when a request names none
        volume_types: Named QoS catalog
    """

    def __init__(
        self,
        client: ElementClient,
        host: ISCSIHost,
        account_id: int,
        default_vol_size: int,
        volume_types: Iterable[VolumeType] = (),
    ):
        self.client = client
        self.host = host
        self.account_id = account_id
        self.default_vol_size = default_vol_size
        self.volume_types = tuple(volume_types)

    def _attributes(self, name: str) -> Dict[str, str]:
        return {
            "platform": PLATFORM,
            "SFVP-Version": __version__,
            "DockerName": name,
        }

    def _volume_exists(self, volume_name: str) -> bool:
        try:
            volume = self.client.get_volume_by_name(volume_name, self.account_id)
        except sf_exceptions.VolumeNotFound:
            return False
        except sf_exceptions.DuplicateVolumeName:
            LOG.warning("More than one active volume named %s, treating it as existing", volume_name)
            return True
        return volume.volume_id != 0

    def create(self, name: str, options: CreateOptions) -> Optional[Volume]:
        """Create (or clone) the volume for a Docker volume name.

        Returns None without touching the cluster when a volume with the
        canonical name already exists in the tenant.

        Raises:
            SolidFireException: Lookup, clone or create failed
        """
        volume_name = canonical_name(name)
        LOG.debug("Options passed in to create %s: %s", name, options)

        if self._volume_exists(volume_name):
            LOG.info("Found existing volume by name: %s", name)
            return None

        if options.size is not None:
            size = options.size
            LOG.info("Received size request in create: %s", size)
        else:
            size = self.default_vol_size
            LOG.info("Creating with default size of: %s", size)

        if options.is_clone:
            return self.clone(name, size, options)

        qos = resolve_qos(options.type, options.qos, self.volume_types)
        volume = self.client.create_volume(
            name=volume_name,
            account_id=self.account_id,
            total_size=size,
            qos=qos,
            attributes=self._attributes(name),
        )
        LOG.info("Created volume %s (id=%s, size=%s)", volume_name, volume.volume_id, size)
        return volume

    def clone(self, name: str, size_floor: int, options: CreateOptions) -> Volume:
        """Clone a volume or snapshot into a new volume named after ``name``.

        The clone is never smaller than its source. When a non-default QoS is
        requested it is applied after the clone; if that fails the clone is
        left in place and CloneQoSError is raised.

        Raises:
            VolumeNotFound: Source volume missing
            SnapshotNotFound: Source snapshot missing
            CloneQoSError: Clone created but QoS update failed
        """
        LOG.info("Clone volume %s (from=%s, fromSnapshot=%s)", name, options.from_volume, options.from_snapshot)
        attributes = self._attributes(name)
        snapshot_id = None

        if options.from_snapshot:
            try:
                snapshot = self.client.get_snapshot(name=options.from_snapshot)
            except sf_exceptions.SolidFireException as e:
                LOG.error("Failed to retrieve snapshot %s: %s", options.from_snapshot, e)
                raise
            source_id = snapshot.volume_id
            snapshot_id = snapshot.snapshot_id
            source_size = snapshot.total_size
            attributes["From-Snapshot"] = str(snapshot_id)
        else:
            try:
                source = self.client.get_volume_by_name(options.from_volume, self.account_id)
            except sf_exceptions.SolidFireException as e:
                LOG.error("Failed to retrieve source volume %s: %s", options.from_volume, e)
                raise
            source_id = source.volume_id
            source_size = source.total_size
            attributes["From-Volume"] = str(source_id)

        new_size = max(size_floor, source_size)

        try:
            volume = self.client.clone_volume(
                volume_id=source_id,
                name=canonical_name(name),
                new_account_id=self.account_id,
                new_size=new_size,
                snapshot_id=snapshot_id,
                attributes=attributes,
            )
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to clone volume: %s", e)
            raise

        qos = resolve_qos(options.type, options.qos, self.volume_types)
        if not qos.is_default():
            try:
                self.client.modify_volume(volume.volume_id, qos=qos)
            except sf_exceptions.SolidFireException as e:
                LOG.error("Failed to update QoS on cloned volume %s: %s", volume.volume_id, e)
                raise sf_exceptions.CloneQoSError(
                    f"Cloned volume {volume.volume_id} created but QoS update failed: {e}",
                    volume_id=volume.volume_id,
                    code=getattr(e, "code", None),
                    name=getattr(e, "name", None),
                )

        LOG.info("Cloned volume %s (id=%s, size=%s)", canonical_name(name), volume.volume_id, new_size)
        return volume

    def remove(self, name: str) -> None:
        """Detach (best-effort) and delete the volume for a Docker name.

        Raises:
            VolumeNotFound: No such volume; nothing is detached or deleted
            SolidFireException: Delete failed
        """
        volume_name = canonical_name(name)
        try:
            volume = self.client.get_volume_by_name(volume_name, self.account_id)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to retrieve volume named %s during remove: %s", name, e)
            raise

        try:
            self.host.detach_volume(volume)
        except sf_exceptions.SolidFireException as e:
            LOG.warning("Failed to detach volume %s before delete: %s", name, e)

        try:
            self.client.delete_volume(volume.volume_id)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Error encountered during delete of %s: %s", name, e)
            raise

        LOG.info("Deleted volume %s (id=%s)", volume_name, volume.volume_id)
