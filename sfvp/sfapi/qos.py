"""QoS resolution for volume create and clone requests."""

from typing import Iterable, Optional

from oslo_log import log as logging

from .models import QoSProfile, VolumeType

LOG = logging.getLogger(__name__)


def parse_qos_triple(qos_triple: str) -> QoSProfile:
    """Parse ``"min,max,burst"`` into a QoS profile.

    Missing or non-integer fields become 0 instead of failing the request.
    """
    fields = [f.strip() for f in qos_triple.split(",")]
    values = []
    for index in range(3):
        raw = fields[index] if index < len(fields) else ""
        try:
            values.append(int(raw))
        except ValueError:
            LOG.warning("Ignoring invalid QoS field %d (%r) in %r, using 0", index, raw, qos_triple)
            values.append(0)

    return QoSProfile(min_iops=values[0], max_iops=values[1], burst_iops=values[2])


def resolve_qos(
    type_name: Optional[str],
    qos_triple: Optional[str],
    volume_types: Iterable[VolumeType],
) -> QoSProfile:
    """Merge a named volume type and an explicit IOPS triple.

    The explicit triple is applied first and a matching named type then
    overwrites it. With neither, the default (all-zero) profile is returned.

    Args:
        type_name: Volume type name, matched case-insensitively
        qos_triple: ``"min,max,burst"`` IOPS string
        volume_types: Configured type catalog

    Returns:
        Resolved QoS profile
    """
    qos = QoSProfile()

    if qos_triple:
        qos = parse_qos_triple(qos_triple)
        LOG.info("Received qos option and set QoS: %s", qos)

    if type_name:
        for volume_type in volume_types:
            if volume_type.name.lower() == type_name.lower():
                qos = volume_type.qos
                LOG.info("Received type option %s and set QoS: %s", type_name, qos)
                break
        else:
            LOG.warning("Volume type %s is not in the configured catalog", type_name)

    return qos
