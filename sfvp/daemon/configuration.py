"""
Configuration loader for the SolidFire Docker volume driver.

The driver reads the JSON document used by earlier releases of the plugin
(keys such as ``TenantName``, ``EndPoint``, ``SVIP`` and ``Types``). Keys are
matched case-insensitively.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from sfvp.sfapi.exceptions import ConfigurationError
from sfvp.sfapi.models import QoSProfile, VolumeType

DEFAULT_CONFIG_PATH = Path("/var/lib/solidfire/solidfire.json")
DEFAULT_MOUNT_POINT = "/var/lib/solidfire/mount"

GIB = 1024 ** 3


@dataclass(frozen=True)
class DriverConfig:
    tenant_name: str = ""
    endpoint: str = ""
    svip: str = ""
    default_vol_size_gib: int = 1
    mount_point: str = DEFAULT_MOUNT_POINT
    initiator_iface: str = "default"
    volume_types: Tuple[VolumeType, ...] = ()
    verify_ssl: bool = False
    timeout: int = 30

    @property
    def default_vol_size(self) -> int:
        """Default volume size in bytes."""
        return self.default_vol_size_gib * GIB

    def validate(self) -> None:
        """
        Raise ConfigurationError naming the first missing required setting.
        """
        for field_name, key in (("tenant_name", "TenantName"), ("endpoint", "EndPoint"), ("svip", "SVIP")):
            if not getattr(self, field_name):
                raise ConfigurationError(f"{key} required in SolidFire Docker config")
        if self.default_vol_size_gib <= 0:
            raise ConfigurationError("DefaultVolSz must be a positive number of GiB")


def _config_path() -> Path:
    env = os.environ.get("SF_CONFIG_FILE")
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _lower_keys(section: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in section.items()}


def _parse_volume_type(entry: Dict[str, Any]) -> VolumeType:
    entry = _lower_keys(entry)
    qos = _lower_keys(entry.get("qos") or {})
    return VolumeType(
        name=str(entry.get("type", "")),
        qos=QoSProfile(
            min_iops=int(qos.get("miniops", 0)),
            max_iops=int(qos.get("maxiops", 0)),
            burst_iops=int(qos.get("burstiops", 0)),
        ),
    )


def parse_config(data: Dict[str, Any]) -> DriverConfig:
    """
    Build a DriverConfig from an already decoded configuration document.

    Empty values fall back to defaults; required settings are not checked here
    (see DriverConfig.validate).
    """
    section = _lower_keys(data)

    def _get(key: str, default: str) -> str:
        value = section.get(key)
        if value in (None, ""):
            return default
        return str(value).strip()

    def _get_int(key: str, default: int) -> int:
        raw = section.get(key)
        if raw in (None, "", 0):
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid integer for {key}: {raw!r}")

    def _get_bool(key: str, default: bool) -> bool:
        raw = section.get(key)
        if raw in (None, ""):
            return default
        if isinstance(raw, bool):
            return raw
        value = str(raw).strip().lower()
        if value in ("true", "yes", "1"):
            return True
        if value in ("false", "no", "0"):
            return False
        raise ConfigurationError(f"Invalid boolean for {key}: {raw!r}")

    try:
        volume_types = tuple(_parse_volume_type(t) for t in section.get("types") or [])
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid Types section: {e}")

    return DriverConfig(
        tenant_name=_get("tenantname", ""),
        endpoint=_get("endpoint", ""),
        svip=_get("svip", ""),
        default_vol_size_gib=_get_int("defaultvolsz", 1),
        mount_point=_get("mountpoint", DEFAULT_MOUNT_POINT),
        initiator_iface=_get("initiatoriface", "default"),
        volume_types=volume_types,
        verify_ssl=_get_bool("verifyssl", False),
        timeout=_get_int("timeout", 30),
    )


def load_config(path: Optional[Path] = None) -> DriverConfig:
    """
    Load config from ``path``, else `SF_CONFIG_FILE`, else
    `/var/lib/solidfire/solidfire.json`.

    Unlike optional runtime settings, a missing or unreadable file is an error:
    the driver cannot reach a cluster without it.
    """
    config_path = Path(path) if path else _config_path()
    try:
        with open(config_path, "r", encoding="utf-8") as file:
            data = json.load(file)
    except OSError as e:
        raise ConfigurationError(f"Error processing config file {config_path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error parsing config file {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")

    return parse_config(data)
