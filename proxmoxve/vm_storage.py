"""QEMU storage device properties shared by IDE, SATA, SCSI and VirtIO disks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from proxmoxve.vm_general import QueryValues, _parse_int, flag, split_properties


def _extension(path: str) -> str:
    """Return the file name extension of ``path``, dot included, or ''."""
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


_INT_FIELDS = {
    "mbps_rd": "max_read_speed_mbps",
    "mbps_rd_max": "burstable_read_speed_mbps",
    "mbps_wr": "max_write_speed_mbps",
    "mbps_wr_max": "burstable_write_speed_mbps",
}

_STR_FIELDS = {
    "aio": "aio",
    "media": "media",
    "size": "size",
    "format": "format",
    "discard": "discard",
}

_BOOL_FIELDS = {
    "backup": "backup_enabled",
    "iothread": "iothread",
    "ssd": "ssd",
}


@dataclass
class StorageDevice:
    """A disk attached to a virtual machine."""

    aio: str | None = None
    backup_enabled: bool | None = None
    burstable_read_speed_mbps: int | None = None
    burstable_write_speed_mbps: int | None = None
    discard: str | None = None
    enabled: bool = False
    file_volume: str = ""
    format: str | None = None
    iothread: bool | None = None
    ssd: bool | None = None
    max_read_speed_mbps: int | None = None
    max_write_speed_mbps: int | None = None
    media: str | None = None
    size: str | None = None
    interface: str | None = None
    id: str | None = None
    file_id: str | None = None
    size_int: int | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"file={self.file_volume}"]
        if self.aio is not None:
            parts.append(f"aio={self.aio}")
        if self.backup_enabled is not None:
            parts.append(flag("backup", self.backup_enabled))
        for name, value in (
            ("mbps_rd_max", self.burstable_read_speed_mbps),
            ("mbps_wr_max", self.burstable_write_speed_mbps),
            ("mbps_rd", self.max_read_speed_mbps),
            ("mbps_wr", self.max_write_speed_mbps),
        ):
            if value is not None:
                parts.append(f"{name}={value}")
        if self.media is not None:
            parts.append(f"media={self.media}")
        if self.size is not None:
            parts.append(f"size={self.size}")
        if self.iothread is not None:
            parts.append(flag("iothread", self.iothread))
        if self.ssd is not None:
            parts.append(flag("ssd", self.ssd))
        if self.discard:
            parts.append(f"discard={self.discard}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> StorageDevice:
        device = cls()
        for pair in split_properties(text):
            if len(pair) == 1:
                device.file_volume = pair[0]
                ext = _extension(pair[0])
                if ext:
                    device.format = ext[1:]
            elif len(pair) == 2:
                name, value = pair
                if name == "file":
                    device.file_volume = value
                elif name in _INT_FIELDS:
                    setattr(device, _INT_FIELDS[name], _parse_int(value, name))
                elif name in _STR_FIELDS:
                    setattr(device, _STR_FIELDS[name], value)
                elif name in _BOOL_FIELDS:
                    setattr(device, _BOOL_FIELDS[name], value == "1")
        device.enabled = True
        return device


def encode_storage_devices(devices: Mapping[str, StorageDevice], values: QueryValues) -> None:
    """Add each enabled device under its own key, such as ``scsi0``."""
    for key, device in devices.items():
        if device.enabled:
            device.encode_values(key, values)