"""Proxmox VE VM property parsing and encoding, request bodies, and read-only data source helpers."""

__version__ = "0.9.1"
__all__ = [
    "vm_general",
    "vm_devices",
    "vm_storage",
    "vm_requests",
    "schema",
    "datasources_cluster",
    "datasources_pool",
    "datasources_roles",
    "datasources_storage",
]