"""
Pydantic model for volume create options.

Docker passes ``--opt`` values as a flat string mapping whose keys users type
in any case (``Size``, ``FROMSNAPSHOT`` ...). They are validated once here.
"""

from typing import Any, Mapping, Optional

from oslo_log import log as logging
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sfvp.sfapi.exceptions import InvalidVolumeOptions

from .utils import canonical_name

LOG = logging.getLogger(__name__)

# Decimal gigabyte, the unit of the ``size`` option
GB = 1000 ** 3

_OPTION_KEYS = {
    "size": "size",
    "type": "type",
    "qos": "qos",
    "from": "from_volume",
    "fromsnapshot": "from_snapshot",
}


class CreateOptions(BaseModel):
    """Validated options of a volume create request."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    size: Optional[int] = Field(None, description="Requested size in bytes")
    type: Optional[str] = Field(None, description="Named volume type (QoS profile)")
    qos: Optional[str] = Field(None, description="Explicit min,max,burst IOPS")
    from_volume: Optional[str] = Field(None, description="Clone source volume name")
    from_snapshot: Optional[str] = Field(None, description="Clone source snapshot name")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        normalized = {}
        for key, value in data.items():
            field = _OPTION_KEYS.get(str(key).lower())
            if field is None:
                LOG.debug("Ignoring unrecognized volume option %s", key)
                continue
            normalized[field] = value
        return normalized

    @field_validator("size", mode="before")
    @classmethod
    def validate_size(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            size_gb = int(str(v).strip())
        except ValueError:
            raise ValueError(f"size must be an integer number of GB, got {v!r}")
        if size_gb <= 0:
            raise ValueError("size must be greater than 0")
        return size_gb * GB

    @field_validator("type", "qos", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Optional[str]:
        if v is None or str(v).strip() == "":
            return None
        return str(v).strip()

    @field_validator("from_volume", "from_snapshot", mode="before")
    @classmethod
    def canonical_source(cls, v: Any) -> Optional[str]:
        if v is None or str(v).strip() == "":
            return None
        return canonical_name(str(v).strip())

    @property
    def is_clone(self) -> bool:
        return bool(self.from_volume or self.from_snapshot)

    @classmethod
    def from_request(cls, options: Optional[Mapping[str, Any]]) -> "CreateOptions":
        """Validate a raw option mapping.

        Raises:
            InvalidVolumeOptions: If an option value is invalid
        """
        try:
            return cls.model_validate(dict(options or {}))
        except ValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            raise InvalidVolumeOptions(f"Invalid volume options: {errors}")
