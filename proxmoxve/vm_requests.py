"""Request and response bodies for QEMU virtual machine API calls.

Request bodies turn themselves into :class:`QueryValues` form parameters.
Response bodies are built from the decoded JSON the API returns.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from proxmoxve.vm_devices import (
    PCIDevice,
    SharedMemory,
    SMBIOS,
    SpiceEnhancements,
    StartupOrder,
    USBDevice,
    VGADevice,
    WatchdogDevice,
    encode_pci_devices,
    encode_serial_devices,
    encode_usb_devices,
)
from proxmoxve.vm_general import (
    Agent,
    AudioDevice,
    CloudInitConfig,
    CPUEmulation,
    EFIDisk,
    NetworkDevice,
    NUMADevice,
    QueryValues,
    encode_audio_devices,
    encode_network_devices,
    encode_numa_devices,
)
from proxmoxve.vm_storage import StorageDevice, encode_storage_devices


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def _add_scalars(values: QueryValues, pairs: Iterable[tuple[str, Any]]) -> None:
    """Add every pair whose value is not None."""
    for key, value in pairs:
        if value is not None:
            values.add(key, _format_scalar(value))


def _to_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in ("1", "true")


def _to_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _to_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _to_str(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass
class CloneRequest:
    """Body of a virtual machine clone request."""

    vmid_new: int
    bandwidth_limit: int | None = None
    description: str | None = None
    full_copy: bool | None = None
    name: str | None = None
    pool_id: str | None = None
    snapshot_name: str | None = None
    target_node_name: str | None = None
    target_storage: str | None = None
    target_storage_format: str | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("bwlimit", self.bandwidth_limit),
                ("description", self.description),
                ("full", self.full_copy),
                ("name", self.name),
                ("pool", self.pool_id),
                ("snapname", self.snapshot_name),
                ("target", self.target_node_name),
                ("storage", self.target_storage),
                ("format", self.target_storage_format),
                ("newid", self.vmid_new),
            ),
        )
        return values


@dataclass
class CreateRequest:
    """Body of a virtual machine create or update request."""

    acpi: bool | None = None
    agent: Agent | None = None
    allow_reboot: bool | None = None
    audio_devices: list[AudioDevice] = field(default_factory=list)
    autostart: bool | None = None
    backup_file: str | None = None
    bandwidth_limit: int | None = None
    bios: str | None = None
    boot_disk: str | None = None
    boot_order: str | None = None
    cdrom: str | None = None
    cloud_init_config: CloudInitConfig | None = None
    cpu_architecture: str | None = None
    cpu_cores: int | None = None
    cpu_emulation: CPUEmulation | None = None
    cpu_limit: int | None = None
    cpu_sockets: int | None = None
    cpu_units: int | None = None
    dedicated_memory: int | None = None
    delete: list[str] = field(default_factory=list)
    deletion_protection: bool | None = None
    description: str | None = None
    efi_disk: EFIDisk | None = None
    floating_memory: int | None = None
    floating_memory_shares: int | None = None
    freeze: bool | None = None
    hook_script: str | None = None
    hotplug: list[str] = field(default_factory=list)
    hugepages: str | None = None
    ide_devices: dict[str, StorageDevice] = field(default_factory=dict)
    keyboard_layout: str | None = None
    kvm_arguments: str | None = None
    kvm_enabled: bool | None = None
    local_time: bool | None = None
    lock: str | None = None
    machine: str | None = None
    migrate_downtime: float | None = None
    migrate_speed: int | None = None
    name: str | None = None
    network_devices: list[NetworkDevice] = field(default_factory=list)
    numa_devices: list[NUMADevice] = field(default_factory=list)
    numa_enabled: bool | None = None
    os_type: str | None = None
    overwrite: bool | None = None
    pci_devices: list[PCIDevice] = field(default_factory=list)
    pool_id: str | None = None
    revert: str | None = None
    sata_devices: dict[str, StorageDevice] = field(default_factory=dict)
    scsi_devices: dict[str, StorageDevice] = field(default_factory=dict)
    scsi_hardware: str | None = None
    serial_devices: list[str] = field(default_factory=list)
    shared_memory: SharedMemory | None = None
    skip_lock: bool | None = None
    smbios: SMBIOS | None = None
    spice_enhancements: SpiceEnhancements | None = None
    start_date: str | None = None
    start_on_boot: bool | None = None
    startup_order: StartupOrder | None = None
    tablet_device_enabled: bool | None = None
    tags: str | None = None
    template: bool | None = None
    time_drift_fix_enabled: bool | None = None
    usb_devices: list[USBDevice] = field(default_factory=list)
    vga_device: VGADevice | None = None
    virtual_cpu_count: int | None = None
    virtual_io_devices: dict[str, StorageDevice] = field(default_factory=dict)
    vm_generation_id: str | None = None
    vmid: int | None = None
    vm_state_datastore_id: str | None = None
    watchdog_device: WatchdogDevice | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("acpi", self.acpi),
                ("reboot", self.allow_reboot),
                ("autostart", self.autostart),
                ("archive", self.backup_file),
                ("bwlimit", self.bandwidth_limit),
                ("bios", self.bios),
                ("bootdisk", self.boot_disk),
                ("boot", self.boot_order),
                ("cdrom", self.cdrom),
                ("arch", self.cpu_architecture),
                ("cores", self.cpu_cores),
                ("cpulimit", self.cpu_limit),
                ("sockets", self.cpu_sockets),
                ("cpuunits", self.cpu_units),
                ("memory", self.dedicated_memory),
                # Deletion protection travels under the same name as overwrite.
                ("force", self.deletion_protection),
                ("description", self.description),
                ("balloon", self.floating_memory),
                ("shares", self.floating_memory_shares),
                ("freeze", self.freeze),
                ("hookscript", self.hook_script),
                ("hugepages", self.hugepages),
                ("keyboard", self.keyboard_layout),
                ("args", self.kvm_arguments),
                ("kvm", self.kvm_enabled),
                ("localtime", self.local_time),
                ("lock", self.lock),
                ("machine", self.machine),
                ("migrate_downtime", self.migrate_downtime),
                ("migrate_speed", self.migrate_speed),
                ("name", self.name),
                ("numa", self.numa_enabled),
                ("ostype", self.os_type),
                ("force", self.overwrite),
                ("pool", self.pool_id),
                ("revert", self.revert),
                ("scsihw", self.scsi_hardware),
                ("skiplock", self.skip_lock),
                ("startdate", self.start_date),
                ("onboot", self.start_on_boot),
                ("tablet", self.tablet_device_enabled),
                ("tags", self.tags),
                ("template", self.template),
                ("tdf", self.time_drift_fix_enabled),
                ("vcpus", self.virtual_cpu_count),
                ("vmgenid", self.vm_generation_id),
                ("vmid", self.vmid),
                ("vmstatestorage", self.vm_state_datastore_id),
            ),
        )

        if self.delete:
            values.add("delete", ",".join(self.delete))
        if self.hotplug:
            values.add("hotplug", ",".join(self.hotplug))

        for key, item in (
            ("agent", self.agent),
            ("cloudinit", self.cloud_init_config),
            ("cpu", self.cpu_emulation),
            ("efidisk0", self.efi_disk),
            ("ivshmem", self.shared_memory),
            ("smbios1", self.smbios),
            ("spice_enhancements", self.spice_enhancements),
            ("startup", self.startup_order),
            ("vga", self.vga_device),
            ("watchdog", self.watchdog_device),
        ):
            if item is not None:
                item.encode_values(key, values)

        encode_audio_devices(self.audio_devices, "audio", values)
        encode_network_devices(self.network_devices, "net", values)
        encode_numa_devices(self.numa_devices, "numa", values)
        encode_pci_devices(self.pci_devices, "hostpci", values)
        encode_serial_devices(self.serial_devices, "serial", values)
        encode_usb_devices(self.usb_devices, "usb", values)
        for devices in (
            self.ide_devices,
            self.sata_devices,
            self.scsi_devices,
            self.virtual_io_devices,
        ):
            encode_storage_devices(devices, values)
        return values


@dataclass
class MigrateRequest:
    """Body of a virtual machine migration request."""

    target_node: str
    online_migration: bool | None = None
    target_storage: str | None = None
    with_local_disks: bool | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("online", self.online_migration),
                ("target", self.target_node),
                ("targetstorage", self.target_storage),
                ("with-local-disks", self.with_local_disks),
            ),
        )
        return values


@dataclass
class MoveDiskRequest:
    """Body of a virtual machine move disk request."""

    disk: str
    target_storage: str
    bandwidth_limit: int | None = None
    delete_original_disk: bool | None = None
    digest: str | None = None
    target_storage_format: str | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("bwlimit", self.bandwidth_limit),
                ("delete", self.delete_original_disk),
                ("digest", self.digest),
                ("disk", self.disk),
                ("storage", self.target_storage),
                ("format", self.target_storage_format),
            ),
        )
        return values


@dataclass
class RebootRequest:
    """Body of a virtual machine reboot request."""

    timeout: int | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(values, (("timeout", self.timeout),))
        return values


@dataclass
class ResizeDiskRequest:
    """Body of a virtual machine resize disk request."""

    disk: str
    size: str
    digest: str | None = None
    skip_lock: bool | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("digest", self.digest),
                ("disk", self.disk),
                ("size", self.size),
                ("skiplock", self.skip_lock),
            ),
        )
        return values


@dataclass
class ShutdownRequest:
    """Body of a virtual machine shutdown request."""

    force_stop: bool | None = None
    keep_active: bool | None = None
    skip_lock: bool | None = None
    timeout: int | None = None

    def encode(self) -> QueryValues:
        values = QueryValues()
        _add_scalars(
            values,
            (
                ("forceStop", self.force_stop),
                ("keepActive", self.keep_active),
                ("skipLock", self.skip_lock),
                ("timeout", self.timeout),
            ),
        )
        return values


@dataclass
class VMStatus:
    """Current status of a virtual machine."""

    agent_enabled: bool | None = None
    cpu_count: float | None = None
    lock: str | None = None
    memory_allocation: int | None = None
    name: str | None = None
    pid: int | None = None
    qmp_status: str | None = None
    root_disk_size: int | None = None
    spice_support: bool | None = None
    status: str = ""
    tags: str | None = None
    uptime: int | None = None
    vmid: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VMStatus:
        return cls(
            agent_enabled=_to_bool(data.get("agent")),
            cpu_count=_to_float(data.get("cpus")),
            lock=_to_str(data.get("lock")),
            memory_allocation=_to_int(data.get("maxmem")),
            name=_to_str(data.get("name")),
            pid=_to_int(data.get("pid")),
            qmp_status=_to_str(data.get("qmpstatus")),
            root_disk_size=_to_int(data.get("maxdisk")),
            spice_support=_to_bool(data.get("spice")),
            status=str(data.get("status") or ""),
            tags=_to_str(data.get("tags")),
            uptime=_to_int(data.get("uptime")),
            vmid=_to_int(data.get("vmid")),
        )


@dataclass
class InterfaceAddress:
    """An IP address reported by the guest agent."""

    address: str = ""
    prefix: int = 0
    type: str = ""


@dataclass
class InterfaceStatistics:
    """Traffic counters of a guest network interface."""

    rx_bytes: int = 0
    rx_dropped: int = 0
    rx_errors: int = 0
    rx_packets: int = 0
    tx_bytes: int = 0
    tx_dropped: int = 0
    tx_errors: int = 0
    tx_packets: int = 0


_STATISTICS_KEYS = {
    "rx-bytes": "rx_bytes",
    "rx-dropped": "rx_dropped",
    "rx-errs": "rx_errors",
    "rx-packets": "rx_packets",
    "tx-bytes": "tx_bytes",
    "tx-dropped": "tx_dropped",
    "tx-errs": "tx_errors",
    "tx-packets": "tx_packets",
}


@dataclass
class NetworkInterface:
    """A guest network interface reported by the QEMU agent."""

    mac_address: str = ""
    name: str = ""
    statistics: InterfaceStatistics | None = None
    ip_addresses: list[InterfaceAddress] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NetworkInterface:
        statistics = None
        raw_stats = data.get("statistics")
        if raw_stats is not None:
            statistics = InterfaceStatistics(
                **{attr: int(raw_stats.get(key, 0)) for key, attr in _STATISTICS_KEYS.items()}
            )
        addresses = None
        raw_addresses = data.get("ip-addresses")
        if raw_addresses is not None:
            addresses = [
                InterfaceAddress(
                    address=str(item.get("ip-address", "")),
                    prefix=int(item.get("prefix", 0)),
                    type=str(item.get("ip-address-type", "")),
                )
                for item in raw_addresses
            ]
        return cls(
            mac_address=str(data.get("hardware-address", "")),
            name=str(data.get("name", "")),
            statistics=statistics,
            ip_addresses=addresses,
        )


def parse_network_interfaces(body: Mapping[str, Any] | str | bytes) -> list[NetworkInterface]:
    """Read the interfaces from a QEMU agent ``network-get-interfaces`` response body."""
    if isinstance(body, (str, bytes)):
        body = json.loads(body)
    data = body.get("data") or {}
    results = data.get("result") or []
    return [NetworkInterface.from_dict(item) for item in results]