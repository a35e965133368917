"""QEMU virtual machine property types: agent, audio, cloud-init, CPU, EFI, network and NUMA.

Proxmox VE transports most VM properties as comma separated ``key=value``
lists.  Each type here can turn itself into such a list and add it to a
:class:`QueryValues` collection, and most can be parsed back from one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator
from urllib.parse import quote_plus, unquote_plus

_INT_RE = re.compile(r"[+-]?[0-9]+")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class PropertyError(ValueError):
    """Raised when a property string cannot be parsed."""


class QueryValues:
    """An ordered multi-map of form parameters."""

    def __init__(self) -> None:
        self._data: dict[str, list[str]] = {}

    def add(self, key: str, value: str) -> None:
        """Append a value to the list stored under ``key``."""
        self._data.setdefault(key, []).append(value)

    def get(self, key: str) -> str | None:
        """Return the first value stored under ``key``, or None."""
        values = self._data.get(key)
        return values[0] if values else None

    def get_all(self, key: str) -> list[str]:
        """Return every value stored under ``key``."""
        return list(self._data.get(key, []))

    def encode(self) -> str:
        """Return the values as a URL query string, sorted by key."""
        return "&".join(
            f"{quote_plus(key, safe='')}={quote_plus(value, safe='')}"
            for key in sorted(self._data)
            for value in self._data[key]
        )

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


def split_properties(text: str) -> list[list[str]]:
    """Split ``a=b,c`` into ``[["a", "b"], ["c"]]``, trimming each pair."""
    return [pair.strip().split("=") for pair in text.split(",")]


def flag(name: str, value: bool) -> str:
    """Render a boolean property as ``name=1`` or ``name=0``."""
    return f"{name}={1 if value else 0}"


def _parse_int(text: str, name: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise PropertyError(f"invalid integer for {name}: {text!r}")
    return int(text)


def _parse_float(text: str, name: str) -> float:
    if "_" in text:
        raise PropertyError(f"invalid number for {name}: {text!r}")
    try:
        return float(text)
    except ValueError as exc:
        raise PropertyError(f"invalid number for {name}: {text!r}") from exc


@dataclass
class Agent:
    """QEMU guest agent settings."""

    enabled: bool | None = None
    trim_cloned_disks: bool | None = None
    type: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = []
        if self.enabled is not None:
            parts.append(flag("enabled", self.enabled))
        if self.trim_cloned_disks is not None:
            parts.append(flag("fstrim_cloned_disks", self.trim_cloned_disks))
        if self.type is not None:
            parts.append(f"type={self.type}")
        if parts:
            values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> Agent:
        agent = cls()
        for pair in split_properties(text):
            if len(pair) == 1:
                agent.enabled = pair[0] == "1"
            elif len(pair) == 2:
                name, value = pair
                if name == "enabled":
                    agent.enabled = value == "1"
                elif name == "fstrim_cloned_disks":
                    agent.trim_cloned_disks = value == "1"
                elif name == "type":
                    agent.type = value
        return agent


@dataclass
class AudioDevice:
    """QEMU audio device settings."""

    device: str = ""
    driver: str | None = None
    enabled: bool = False

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"device={self.device}"]
        if self.driver is not None:
            parts.append(f"driver={self.driver}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> AudioDevice:
        audio = cls()
        for pair in split_properties(text):
            if len(pair) == 2:
                name, value = pair
                if name == "device":
                    audio.device = value
                elif name == "driver":
                    audio.driver = value
        return audio


def encode_audio_devices(devices: Iterable[AudioDevice], key: str, values: QueryValues) -> None:
    """Add each enabled audio device under ``<key><index>``."""
    for index, device in enumerate(devices):
        if device.enabled:
            device.encode_values(f"{key}{index}", values)


@dataclass
class CloudInitFiles:
    """Custom cloud-init snippet volumes."""

    meta_volume: str | None = None
    network_volume: str | None = None
    user_volume: str | None = None
    vendor_volume: str | None = None

    @classmethod
    def parse(cls, text: str) -> CloudInitFiles:
        files = cls()
        attributes = {
            "meta": "meta_volume",
            "network": "network_volume",
            "user": "user_volume",
            "vendor": "vendor_volume",
        }
        for pair in split_properties(text):
            if len(pair) == 2 and pair[0] in attributes:
                setattr(files, attributes[pair[0]], pair[1])
        return files


@dataclass
class CloudInitIPConfig:
    """Cloud-init IP configuration of one interface."""

    gateway_ipv4: str | None = None
    gateway_ipv6: str | None = None
    ipv4: str | None = None
    ipv6: str | None = None

    @classmethod
    def parse(cls, text: str) -> CloudInitIPConfig:
        config = cls()
        attributes = {
            "gw": "gateway_ipv4",
            "gw6": "gateway_ipv6",
            "ip": "ipv4",
            "ip6": "ipv6",
        }
        for pair in split_properties(text):
            if len(pair) == 2 and pair[0] in attributes:
                setattr(config, attributes[pair[0]], pair[1])
        return config


def parse_ssh_keys(text: str) -> list[str]:
    """Decode a URL-escaped, newline separated list of SSH keys."""
    if _BAD_ESCAPE_RE.search(text):
        raise PropertyError(f"invalid URL escape in SSH keys: {text!r}")
    decoded = unquote_plus(text)
    if decoded == "":
        return []
    return decoded.strip().split("\n")


@dataclass
class CloudInitConfig:
    """Cloud-init settings; encoded as several top-level parameters."""

    files: CloudInitFiles | None = None
    ip_config: list[CloudInitIPConfig] = field(default_factory=list)
    nameserver: str | None = None
    password: str | None = None
    search_domain: str | None = None
    ssh_keys: list[str] | None = None
    type: str | None = None
    username: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        if self.files is not None:
            volumes = [
                f"{name}={volume}"
                for name, volume in (
                    ("meta", self.files.meta_volume),
                    ("network", self.files.network_volume),
                    ("user", self.files.user_volume),
                    ("vendor", self.files.vendor_volume),
                )
                if volume is not None
            ]
            if volumes:
                values.add("cicustom", ",".join(volumes))

        for index, config in enumerate(self.ip_config):
            parts = [
                f"{name}={address}"
                for name, address in (
                    ("gw", config.gateway_ipv4),
                    ("gw6", config.gateway_ipv6),
                    ("ip", config.ipv4),
                    ("ip6", config.ipv6),
                )
                if address is not None
            ]
            if parts:
                values.add(f"ipconfig{index}", ",".join(parts))

        if self.nameserver is not None:
            values.add("nameserver", self.nameserver)
        if self.password is not None:
            values.add("cipassword", self.password)
        if self.search_domain is not None:
            values.add("searchdomain", self.search_domain)
        if self.ssh_keys is not None:
            escaped = quote_plus("\n".join(self.ssh_keys), safe="")
            values.add("sshkeys", escaped.replace("+", "%20"))
        if self.type is not None:
            values.add("citype", self.type)
        if self.username is not None:
            values.add("ciuser", self.username)


@dataclass
class CPUEmulation:
    """QEMU CPU emulation settings."""

    flags: list[str] | None = None
    hidden: bool | None = None
    hv_vendor_id: str | None = None
    type: str = ""

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"cputype={self.type}"]
        if self.flags:
            parts.append(f"flags={';'.join(self.flags)}")
        if self.hidden is not None:
            parts.append(flag("hidden", self.hidden))
        if self.hv_vendor_id is not None:
            parts.append(f"hv-vendor-id={self.hv_vendor_id}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> CPUEmulation:
        if text == "":
            raise PropertyError("unexpected empty string")
        cpu = cls()
        for pair in split_properties(text):
            if len(pair) == 1:
                cpu.type = pair[0]
            elif len(pair) == 2:
                name, value = pair
                if name == "cputype":
                    cpu.type = value
                elif name == "flags":
                    cpu.flags = value.split(";") if value else []
                elif name == "hidden":
                    cpu.hidden = value == "1"
                elif name == "hv-vendor-id":
                    cpu.hv_vendor_id = value
        return cpu


@dataclass
class EFIDisk:
    """QEMU EFI disk settings."""

    disk_size: int | None = None
    file_volume: str = ""
    format: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"file={self.file_volume}"]
        if self.format is not None:
            parts.append(f"format={self.format}")
        if self.disk_size is not None:
            parts.append(f"size={self.disk_size}")
        values.add(key, ",".join(parts))


@dataclass
class NetworkDevice:
    """QEMU network device settings."""

    model: str = ""
    bridge: str | None = None
    enabled: bool = False
    firewall: bool | None = None
    link_down: bool | None = None
    mac_address: str | None = None
    queues: int | None = None
    rate_limit: float | None = None
    tag: int | None = None
    mtu: int | None = None
    trunks: list[int] = field(default_factory=list)

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"model={self.model}"]
        if self.bridge is not None:
            parts.append(f"bridge={self.bridge}")
        if self.firewall is not None:
            parts.append(flag("firewall", self.firewall))
        if self.link_down is not None:
            parts.append(flag("link_down", self.link_down))
        if self.mac_address is not None:
            parts.append(f"macaddr={self.mac_address}")
        if self.queues is not None:
            parts.append(f"queues={self.queues}")
        if self.rate_limit is not None:
            parts.append(f"rate={self.rate_limit:f}")
        if self.tag is not None:
            parts.append(f"tag={self.tag}")
        if self.mtu is not None:
            parts.append(f"mtu={self.mtu}")
        if self.trunks:
            parts.append(f"trunks={';'.join(str(trunk) for trunk in self.trunks)}")
        values.add(key, ",".join(parts))

    @classmethod
    def parse(cls, text: str) -> NetworkDevice:
        device = cls()
        for pair in split_properties(text):
            if len(pair) != 2:
                continue
            name, value = pair
            if name == "bridge":
                device.bridge = value
            elif name == "firewall":
                device.firewall = value == "1"
            elif name == "link_down":
                device.link_down = value == "1"
            elif name == "macaddr":
                device.mac_address = value
            elif name == "model":
                device.model = value
            elif name == "queues":
                device.queues = _parse_int(value, name)
            elif name == "rate":
                device.rate_limit = _parse_float(value, name)
            elif name == "mtu":
                device.mtu = _parse_int(value, name)
            elif name == "tag":
                device.tag = _parse_int(value, name)
            elif name == "trunks":
                device.trunks = [_parse_int(trunk, name) for trunk in value.split(";")]
            else:
                device.mac_address = value
                device.model = name
        device.enabled = True
        return device


def encode_network_devices(devices: Iterable[NetworkDevice], key: str, values: QueryValues) -> None:
    """Add each enabled network device under ``<key><index>``."""
    for index, device in enumerate(devices):
        if device.enabled:
            device.encode_values(f"{key}{index}", values)


@dataclass
class NUMADevice:
    """QEMU NUMA node settings."""

    cpu_ids: list[str] = field(default_factory=list)
    host_node_names: list[str] | None = None
    memory: float | None = None
    policy: str | None = None

    def encode_values(self, key: str, values: QueryValues) -> None:
        parts = [f"cpus={';'.join(self.cpu_ids)}"]
        if self.host_node_names is not None:
            parts.append(f"hostnodes={';'.join(self.host_node_names)}")
        if self.memory is not None:
            parts.append(f"memory={self.memory:f}")
        if self.policy is not None:
            parts.append(f"policy={self.policy}")
        values.add(key, ",".join(parts))


def encode_numa_devices(devices: Iterable[NUMADevice], key: str, values: QueryValues) -> None:
    """Add every NUMA device under ``<key><index>``."""
    for index, device in enumerate(devices):
        device.encode_values(f"{key}{index}", values)