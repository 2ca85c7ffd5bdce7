"""
Pydantic models for Element API objects.

Field aliases follow the Element JSON-RPC wire names so results can be
validated straight from the ``result`` payload.
"""

from typing import Any, Dict, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QoSProfile(BaseModel):
    """Minimum/maximum/burst IOPS triple.

    The all-zero profile means "leave the cluster default QoS in place".
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    min_iops: int = Field(0, alias="minIOPS")
    max_iops: int = Field(0, alias="maxIOPS")
    burst_iops: int = Field(0, alias="burstIOPS")

    def is_default(self) -> bool:
        return self == QoSProfile()

    def to_params(self) -> Dict[str, int]:
        return self.model_dump(by_alias=True)


class VolumeType(BaseModel):
    """Named QoS profile from the configured type catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    qos: QoSProfile = QoSProfile()


class Account(BaseModel):
    """Element tenant account."""

    model_config = ConfigDict(populate_by_name=True)

    account_id: int = Field(..., alias="accountID")
    username: str
    status: Optional[str] = None


class Volume(BaseModel):
    """Element volume."""

    model_config = ConfigDict(populate_by_name=True)

    volume_id: int = Field(0, alias="volumeID")
    name: str = ""
    account_id: int = Field(0, alias="accountID")
    status: str = ""
    total_size: int = Field(0, alias="totalSize")
    iqn: Optional[str] = None
    qos: Optional[QoSProfile] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("attributes", mode="before")
    def _null_attributes(cls, v: Any) -> Any:
        return v or {}

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class Snapshot(BaseModel):
    """Element snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    snapshot_id: int = Field(0, alias="snapshotID")
    volume_id: int = Field(0, alias="volumeID")
    name: str = ""
    total_size: int = Field(0, alias="totalSize")
    status: Optional[str] = None


class VolumeInfo(BaseModel):
    """Name and mount path reported back to the container host."""

    name: str
    mountpoint: str


class AttachmentHandle(NamedTuple):
    """Local by-path link and resolved block device of an attached volume."""

    path: str
    device: str
