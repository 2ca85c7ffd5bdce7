"""Custom exceptions for the SolidFire Docker volume driver."""

from typing import Optional


class SolidFireException(Exception):
    """Base exception for SolidFire driver errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(SolidFireException):
    """Driver configuration is missing or invalid."""

    pass


class InvalidVolumeOptions(SolidFireException):
    """Volume create options could not be validated."""

    pass


class ElementConnectionError(SolidFireException):
    """Failed to connect to the Element API endpoint."""

    pass


class ElementTimeout(SolidFireException):
    """Element API request timed out."""

    pass


class ElementAPIError(SolidFireException):
    """Element API returned an error response."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        name: Optional[str] = None,
        response_data: Optional[dict] = None,
    ):
        super().__init__(message)
        self.code = code
        self.name = name
        self.response_data = response_data


class CloneQoSError(ElementAPIError):
    """A clone was created but its QoS could not be applied."""

    def __init__(self, message: str, volume_id: int, code: Optional[int] = None, name: Optional[str] = None):
        super().__init__(message, code=code, name=name)
        self.volume_id = volume_id


class NotFound(SolidFireException):
    """Requested object does not exist on the cluster."""

    pass


class AccountNotFound(NotFound):
    """Account not found."""

    pass


class VolumeNotFound(NotFound):
    """Volume not found."""

    pass


class SnapshotNotFound(NotFound):
    """Snapshot not found."""

    pass


class DuplicateVolumeName(SolidFireException):
    """More than one active volume carries the requested name."""

    pass


class HostOperationError(SolidFireException):
    """A local attach, format or mount command failed."""

    def __init__(self, message: str, command: Optional[list] = None, stderr: Optional[str] = None):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class AttachmentInvariantError(HostOperationError):
    """Attach reported success without a device path."""

    pass
