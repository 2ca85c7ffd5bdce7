"""SolidFire Docker volume driver.

This driver provides the Docker volume lifecycle (create, remove, mount,
unmount, path, get, list, capabilities) on top of SolidFire Element
clusters using iSCSI as the transport protocol.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from oslo_log import log as logging

from sfvp import __version__
from sfvp.sfapi import client as sf_client
from sfvp.sfapi import exceptions as sf_exceptions
from sfvp.sfapi import iscsi as sf_iscsi
from sfvp.sfapi.models import VolumeInfo

from . import configuration as sf_config
from .attachment import AttachmentOrchestrator
from .locks import NamedLockTable
from .options import CreateOptions
from .provisioning import VolumeProvisioner
from .utils import canonical_name, ensure_mount_base_exists, get_mount_point_for_volume

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Element account every volume of this driver belongs to."""

    account_id: int
    name: str


def resolve_tenant(client: sf_client.ElementClient, tenant_name: str) -> TenantContext:
    """Look up the tenant account, creating it when it does not exist.

    Raises:
        SolidFireException: Lookup failed for another reason, or create failed
    """
    try:
        account = client.get_account_by_name(tenant_name)
        account_id = account.account_id
    except sf_exceptions.AccountNotFound:
        LOG.info("Tenant account %s not found, creating it", tenant_name)
        account_id = client.add_account(tenant_name)

    LOG.debug("Set tenant ID: %s", account_id)
    return TenantContext(account_id=account_id, name=tenant_name)


class SolidFireDriver:
    """Docker volume driver backed by a SolidFire Element cluster.

    Create, Mount and Unmount hold a lock on the volume's canonical name for
    their whole duration. Remove, Path, Get and List take no lock.

    Version history:
        1.3.2 - Per-name locking, typed create options
    """

    VERSION = __version__

    def __init__(
        self,
        config: sf_config.DriverConfig,
        client: Optional[sf_client.ElementClient] = None,
        host: Optional[sf_iscsi.ISCSIHost] = None,
    ):
        """Initialize the driver and resolve its tenant account.

        Args:
            config: Driver configuration
            client: Element client (built from config when omitted)
            host: Host operations (built from config when omitted)

        Raises:
            ConfigurationError: Required settings are missing
            SolidFireException: Tenant account could not be established, or
                the mount directory could not be created
        """
        config.validate()
        self.config = config

        self.client = client or sf_client.ElementClient(
            endpoint=config.endpoint,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
        )
        self.host = host or sf_iscsi.ISCSIHost(svip=config.svip)

        try:
            self.tenant = resolve_tenant(self.client, config.tenant_name)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed init, unable to establish tenant %s: %s", config.tenant_name, e)
            raise

        ensure_mount_base_exists(config.mount_point)

        self.mount_point = config.mount_point
        self._locks = NamedLockTable()

        self.provisioner = VolumeProvisioner(
            client=self.client,
            host=self.host,
            account_id=self.tenant.account_id,
            default_vol_size=config.default_vol_size,
            volume_types=config.volume_types,
        )
        self.attacher = AttachmentOrchestrator(
            client=self.client,
            host=self.host,
            account_id=self.tenant.account_id,
            mount_point=config.mount_point,
            initiator_iface=config.initiator_iface,
        )

        LOG.debug("Driver initialized with the following settings: %s", config)
        LOG.info(
            "SolidFire Docker driver initialized (version=%s, tenant=%s, account_id=%s, mount_point=%s)",
            self.VERSION,
            self.tenant.name,
            self.tenant.account_id,
            self.mount_point,
        )

    @classmethod
    def from_config_file(cls, path: Optional[Path] = None) -> "SolidFireDriver":
        """Load configuration (see configuration.load_config) and build a driver."""
        return cls(sf_config.load_config(path))

    def create(self, name: str, options: Optional[Mapping[str, Any]] = None) -> None:
        """Create a volume, or clone one when ``from``/``fromSnapshot`` is set.

        Creating a name that already exists succeeds without changes.

        Raises:
            InvalidVolumeOptions: Options failed validation
            SolidFireException: Provisioning failed
        """
        LOG.info("Create volume %s on solidfire", name)
        create_options = CreateOptions.from_request(options)

        with self._locks.hold(canonical_name(name)):
            self.provisioner.create(name, create_options)

    def remove(self, name: str) -> None:
        """Detach and delete a volume.

        Raises:
            VolumeNotFound: No such volume
            SolidFireException: Delete failed
        """
        LOG.info("Remove/Delete volume: %s", name)
        self.provisioner.remove(name)

    def path(self, name: str) -> str:
        """Return the mount path of a volume (no lookup)."""
        path = get_mount_point_for_volume(self.mount_point, name)
        LOG.debug("Path for volume %s reported as: %s", name, path)
        return path

    def mount(self, name: str) -> str:
        """Attach, format if needed and mount a volume.

        Returns:
            Mount path
        """
        with self._locks.hold(canonical_name(name)):
            return self.attacher.mount(name)

    def unmount(self, name: str) -> None:
        """Unmount and detach a volume."""
        with self._locks.hold(canonical_name(name)):
            self.attacher.unmount(name)

    def get(self, name: str) -> VolumeInfo:
        """Look up a volume and report its name and mount path.

        Raises:
            VolumeNotFound: No such volume
        """
        LOG.info("Get volume: %s", name)
        try:
            volume = self.client.get_volume_by_name(canonical_name(name), self.tenant.account_id)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to retrieve volume named %s during get: %s", name, e)
            raise
        return VolumeInfo(name=volume.name, mountpoint=self.path(name))

    def list(self) -> List[VolumeInfo]:
        """List the tenant's active volumes."""
        LOG.info("List volumes for tenant %s", self.tenant.name)
        try:
            volumes = self.client.list_volumes_for_account(self.tenant.account_id)
        except sf_exceptions.SolidFireException as e:
            LOG.error("Failed to retrieve volume list: %s", e)
            raise

        result = []
        for volume in volumes:
            if not volume.is_active or volume.account_id != self.tenant.account_id:
                continue
            docker_name = volume.attributes.get("DockerName") or volume.name
            result.append(VolumeInfo(name=volume.name, mountpoint=self.path(docker_name)))
        return result

    def capabilities(self) -> Dict[str, Any]:
        return {"scope": "global"}
