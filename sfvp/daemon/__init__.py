"""Docker volume lifecycle driver."""

from .driver import SolidFireDriver, TenantContext

__all__ = ["SolidFireDriver", "TenantContext"]
