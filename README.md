# proxmoxve

Helpers for working with the Proxmox Virtual Environment API from Python.

The package covers two areas.

- **VM property strings.** Proxmox describes QEMU virtual machine settings as
  comma-separated `key=value` strings, such as
  `local-lvm:vm-100-disk-0,ssd=1,size=8G`. The dataclasses in
  `proxmoxve.vm_general`, `proxmoxve.vm_devices` and `proxmoxve.vm_storage`
  parse these strings and write them back out as form parameters.
  `proxmoxve.vm_requests` builds request bodies for clone, create/update,
  migrate, move-disk, reboot, resize-disk and shutdown. It also reads VM status
  responses and guest-agent network interface responses.
- **Data sources.** `proxmoxve.schema` is a small schema model built from
  `ValueType`, `Schema`, `Resource` and `ResourceData`. The `datasources_*`
  modules define read-only data sources for cluster aliases, pools, roles,
  datastores, DNS settings and the hosts file.

## Installation

```
pip install .
```

The package has no runtime dependencies. To install pytest as well:

```
pip install ".[test]"
```

## Parsing and encoding VM properties

```python
from proxmoxve.vm_general import QueryValues
from proxmoxve.vm_storage import StorageDevice

disk = StorageDevice.parse("local-lvm:vm-2041-disk-0,discard=on,ssd=1,iothread=1,size=8G")
assert disk.file_volume == "local-lvm:vm-2041-disk-0"
assert disk.size == "8G"
assert disk.enabled

values = QueryValues()
disk.encode_values("scsi0", values)
print(values.get("scsi0"))
print(values.encode())  # URL query string, keys sorted
```

`QueryValues` is an ordered multi-map with these methods:

- `add(key, value)`
- `get(key)`, which returns the first value or `None`
- `get_all(key)`
- `encode()`

Each device type has an `encode_values(key, values)` method. These types also
have a `parse(text)` class method:

- `Agent`, `AudioDevice`, `CPUEmulation`, `NetworkDevice` in `proxmoxve.vm_general`
- `PCIDevice`, `SharedMemory`, `SMBIOS`, `VGADevice`, `WatchdogDevice` in `proxmoxve.vm_devices`
- `StorageDevice` in `proxmoxve.vm_storage`

`CloudInitFiles` and `CloudInitIPConfig` can only be parsed. `CloudInitConfig`
writes them back as several top-level parameters: `cicustom`, `ipconfigN`,
`nameserver`, `sshkeys` and others. `parse_ssh_keys` decodes the URL-escaped
`sshkeys` value.

Devices held in a list are encoded under numbered keys by these helpers:

- `encode_audio_devices`, `encode_network_devices`, `encode_virtio_devices`
  add only the devices whose `enabled` is true.
- `encode_numa_devices`, `encode_pci_devices`, `encode_usb_devices`,
  `encode_serial_devices` add every device.

For example, `encode_network_devices(devices, "net", values)` adds `net0`,
`net1`, and so on. `encode_storage_devices(devices, values)` takes a mapping
such as `{"scsi0": disk}` and adds each enabled device under its own key.

A malformed value raises `PropertyError`, which is a `ValueError`. Examples are
a non-numeric `queues`, an empty CPU string, or a bad escape in SSH keys.

## Building requests

```python
from proxmoxve.vm_requests import CloneRequest, CreateRequest, parse_network_interfaces

request = CloneRequest(vmid_new=200, name="web-01", full_copy=True)
print(request.encode().encode())  # bwlimit=...&full=1&name=web-01&newid=200

create = CreateRequest(name="web-02", cpu_cores=2, dedicated_memory=2048)
params = create.encode()

interfaces = parse_network_interfaces('{"data": {"result": []}}')
```

Every request class has an `encode()` method that returns `QueryValues`. When
`encode()` writes booleans, it writes them as `1` or `0`.

`VMStatus.from_dict` reads a status response. `NetworkInterface.from_dict` and
`parse_network_interfaces` read guest-agent interface data.

## Data sources

Each data source has a definition function that returns a `Resource` and a
read function. The read function fills a `ResourceData` through a client object
that you supply:

| Module | Definitions | Read functions | Client calls |
| --- | --- | --- | --- |
| `datasources_cluster` | `cluster_alias_data_source`, `cluster_aliases_data_source` | `read_cluster_alias`, `read_cluster_aliases` | `get_alias`, `list_pools` |
| `datasources_pool` | `pool_data_source`, `pools_data_source` | `read_pool`, `read_pools` | `get_pool`, `list_pools` |
| `datasources_roles` | `role_data_source`, `roles_data_source` | `read_role`, `read_roles` | `get_role`, `list_roles` |
| `datasources_storage` | `datastores_data_source`, `dns_data_source`, `hosts_data_source` | `read_datastores`, `read_dns`, `read_hosts` | `list_datastores`, `get_dns`, `get_hosts` |

Note that `read_cluster_aliases` lists its ids through the client's
`list_pools` call.

```python
from proxmoxve.datasources_pool import pool_data_source, read_pool
from proxmoxve.schema import ResourceData

resource = pool_data_source()
data = ResourceData(resource, {"pool_id": "production"})
read_pool(data, client)
print(data.id, data.get("members"))
```

On a `Resource`:

- `required_keys()` and `computed_keys()` list attribute names.
- `nested(key)` returns the schema of an attribute's elements.

On a `ResourceData`:

- `get(key)` returns the value, or the zero value of the attribute's type when
  the attribute is unset.
- `set(key, value)` checks the value against the attribute's type.
- `set_id(value)` sets the id.

`parse_hosts_file(text)` in `proxmoxve.datasources_storage` works on its own.
It turns a hosts file into a list of `{"address": ..., "hostnames": [...]}`
entries and skips comment lines and blank lines.

## What the package does not do

The package does not talk to a Proxmox server. It contains no HTTP client,
authentication or session handling. Each read function works only through the
client object you pass in, which must provide the calls listed above. There is
no command-line tool.

## Running the tests

```
pytest
```