"""QEMU virtual machine property types: PCI, serial, shared memory, SMBIOS, SPICE,
startup order, USB, VGA, VirtIO and watchdog devices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from proxmoxve.vm_general import (
    PropertyError,
    QueryValues,
    _parse_int,
    flag,
    split_properties,
)


@dataclass
class PCIDevice:
    """Host PCI device passed through to the guest."""

    device_ids: list[str] = field(default_factory=list)
    mdev: str | None = None
    pci_express: bool | None = None
    rombar: bool | None = None
    rom_file: str | None = None
    xvga: bool | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"host={';'.join(self.device_ids)}"]
        if self.mdev is not None:
            parts.append(f"mdev={self.mdev}")
        if self.pci_express is not None:
            parts.append(flag("pcie", self.pci_express))
        if self.rombar is not None:
            parts.append(flag("rombar", self.rombar))
        if self.rom_file is not None:
            parts.append(f"romfile={self.rom_file}")
        if self.xvga is not None:
            parts.append(flag("x-vga", self.xvga))
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> PCIDevice:
        device = cls()
        for pair in split_properties(text):
            if len(pair) == 1:
                raise PropertyError(f"missing value for PCI property {pair[0]!r}")
            if len(pair) != 2:
                continue
            name, value = pair
            if name == "host":
                device.device_ids = value.split(";")
            elif name == "mdev":
                device.mdev = value
            elif name == "pcie":
                device.pci_express = value == "1"
            elif name == "rombar":
                device.rombar = value == "1"
            elif name == "romfile":
                device.rom_file = value
            elif name == "x-vga":
                device.xvga = value == "1"
        return device


def encode_pci_devices(devices: Iterable[PCIDevice], key: str, values: QueryValues) -> None:
    """Add every PCI device under ``<key><index>``."""
    for index, device in enumerate(devices):
        device.encode_values(f"{key}{index}", values)


def encode_serial_devices(devices: Iterable[str], key: str, values: QueryValues) -> None:
    """Add every serial device under ``<key><index>``."""
    for index, device in enumerate(devices):
        values.add(f"{key}{index}", device)


@dataclass
class SharedMemory:
    """Inter-VM shared memory settings."""

    name: str | None = None
    size: int = 0

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"size={self.size}"]
        if self.name is not None:
            parts.append(f"name={self.name}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> SharedMemory:
        memory = cls()
        for pair in split_properties(text):
            if len(pair) != 2:
                continue
            name, value = pair
            if name == "name":
                memory.name = value
            elif name == "size":
                memory.size = _parse_int(value, name)
        return memory


_SMBIOS_FIELDS = (
    ("family", "family"),
    ("manufacturer", "manufacturer"),
    ("product", "product"),
    ("serial", "serial"),
    ("sku", "sku"),
    ("uuid", "uuid"),
    ("version", "version"),
)


@dataclass
class SMBIOS:
    """SMBIOS type 1 settings."""

    base64: bool | None = None
    family: str | None = None
    manufacturer: str | None = None
    product: str | None = None
    serial: str | None = None
    sku: str | None = None
    uuid: str | None = None
    version: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = []
        if self.base64 is not None:
            parts.append(flag("base64", self.base64))
        for name, attribute in _SMBIOS_FIELDS:
            value = getattr(self, attribute)
            if value is not None:
                parts.append(f"{name}={value}")
        if parts:
            values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> SMBIOS:
        smbios = cls()
        attributes = dict(_SMBIOS_FIELDS)
        for pair in split_properties(text):
            if len(pair) != 2:
                continue
            name, value = pair
            if name == "base64":
                smbios.base64 = value == "1"
            elif name in attributes:
                setattr(smbios, attributes[name], value)
        return smbios


@dataclass
class SpiceEnhancements:
    """SPICE enhancement settings."""

    folder_sharing: bool | None = None
    video_streaming: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = []
        if self.folder_sharing is not None:
            parts.append(flag("foldersharing", self.folder_sharing))
        if self.video_streaming is not None:
            parts.append(f"videostreaming={self.video_streaming}")
        if parts:
            values.add(key, ",".join(parts))


@dataclass
class StartupOrder:
    """Startup and shutdown ordering."""

    down: int | None = None
    order: int | None = None
    up: int | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [
            f"{name}={value}"
            for name, value in (("order", self.order), ("up", self.up), ("down", self.down))
            if value is not None
        ]
        if parts:
            values.add(key, ",".join(parts))


@dataclass
class USBDevice:
    """Host USB device passed through to the guest."""

    host_device: str = ""
    usb3: bool | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"host={self.host_device}"]
        if self.usb3 is not None:
            parts.append(flag("usb3", self.usb3))
        values.add(key, ",".join(parts))


def encode_usb_devices(devices: Iterable[USBDevice], key: str, values: QueryValues) -> None:
    """Add every USB device under ``<key><index>``."""
    for index, device in enumerate(devices):
        device.encode_values(f"{key}{index}", values)


@dataclass
class VGADevice:
    """Display adapter settings."""

    memory: int | None = None
    type: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = []
        if self.memory is not None:
            parts.append(f"memory={self.memory}")
        if self.type is not None:
            parts.append(f"type={self.type}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> VGADevice:
        vga = cls()
        if text == "":
            return vga
        for pair in split_properties(text):
            if len(pair) == 1:
                vga.type = pair[0]
            elif len(pair) == 2:
                name, value = pair
                if name == "memory":
                    vga.memory = _parse_int(value, name)
                elif name == "type":
                    vga.type = value
        return vga


@dataclass
class VirtualIODevice:
    """VirtIO block device settings."""

    aio: str | None = None
    backup_enabled: bool | None = None
    enabled: bool = False
    file_volume: str = ""

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"file={self.file_volume}"]
        if self.aio is not None:
            parts.append(f"aio={self.aio}")
        if self.backup_enabled is not None:
            parts.append(flag("backup", self.backup_enabled))
        values.add(key, ",".join(parts))


def encode_virtio_devices(devices: Iterable[VirtualIODevice], key: str, values: QueryValues) -> None:
    """Add each enabled VirtIO device under ``<key><index>``."""
    for index, device in enumerate(devices):
        if device.enabled:
            device.encode_values(f"{key}{index}", values)


@dataclass
class WatchdogDevice:
    """Watchdog device settings."""

    action: str | None = None
    model: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"model={self.model if self.model is not None else ''}"]
        if self.action is not None:
            parts.append(f"action={self.action}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> WatchdogDevice:
        watchdog = cls()
        if text == "":
            return watchdog
        for pair in split_properties(text):
            if len(pair) == 1:
                watchdog.model = pair[0]
            elif len(pair) == 2:
                name, value = pair
                if name == "action":
                    watchdog.action = value
                elif name == "model":
                    watchdog.model = value
        return watchdog