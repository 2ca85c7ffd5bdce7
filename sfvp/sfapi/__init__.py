"""Element API client and host-side iSCSI operations."""
