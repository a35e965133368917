"""Data sources for node datastores, DNS settings and hosts files."""

from __future__ import annotations

from typing import Any

from proxmoxve.schema import Resource, ResourceData, Schema, ValueType

DATASTORES_ACTIVE = "active"
DATASTORES_CONTENT_TYPES = "content_types"
DATASTORES_DATASTORE_IDS = "datastore_ids"
DATASTORES_ENABLED = "enabled"
DATASTORES_NODE_NAME = "node_name"
DATASTORES_SHARED = "shared"
DATASTORES_SPACE_AVAILABLE = "space_available"
DATASTORES_SPACE_TOTAL = "space_total"
DATASTORES_SPACE_USED = "space_used"
DATASTORES_TYPES = "types"

DNS_DOMAIN = "domain"
DNS_NODE_NAME = "node_name"
DNS_SERVERS = "servers"

HOSTS_ADDRESSES = "addresses"
HOSTS_DIGEST = "digest"
HOSTS_ENTRIES = "entries"
HOSTS_ENTRIES_ADDRESS = "address"
HOSTS_ENTRIES_HOSTNAMES = "hostnames"
HOSTS_HOSTNAMES = "hostnames"
HOSTS_NODE_NAME = "node_name"


def _computed_list(description: str, elem: Schema | Resource) -> Schema:
    return Schema(ValueType.LIST, description=description, computed=True, elem=elem)


def datastores_data_source() -> Resource:
    """Return the schema of the datastores data source."""
    return Resource(
        schema={
            DATASTORES_ACTIVE: _computed_list(
                "Whether a datastore is active", Schema(ValueType.BOOL)
            ),
            DATASTORES_CONTENT_TYPES: _computed_list(
                "The allowed content types",
                Schema(ValueType.LIST, elem=Schema(ValueType.STRING)),
            ),
            DATASTORES_DATASTORE_IDS: _computed_list(
                "The datastore id", Schema(ValueType.STRING)
            ),
            DATASTORES_ENABLED: _computed_list(
                "Whether a datastore is enabled", Schema(ValueType.BOOL)
            ),
            DATASTORES_NODE_NAME: Schema(
                ValueType.STRING, description="The node name", required=True
            ),
            DATASTORES_SHARED: _computed_list(
                "Whether a datastore is shared", Schema(ValueType.BOOL)
            ),
            DATASTORES_SPACE_AVAILABLE: _computed_list(
                "The available space in bytes", Schema(ValueType.INT)
            ),
            DATASTORES_SPACE_TOTAL: _computed_list(
                "The total space in bytes", Schema(ValueType.INT)
            ),
            DATASTORES_SPACE_USED: _computed_list(
                "The used space in bytes", Schema(ValueType.INT)
            ),
            DATASTORES_TYPES: _computed_list("The storage type", Schema(ValueType.STRING)),
        },
        read=read_datastores,
    )


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


def read_datastores(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the datastores of the node named by ``node_name``."""
    node_name = data.get(DATASTORES_NODE_NAME)
    datastores = client.list_datastores(node_name)

    data.set_id(f"{node_name}_datastores")
    data.set(DATASTORES_ACTIVE, [bool(_or(d.active, True)) for d in datastores])
    data.set(
        DATASTORES_CONTENT_TYPES,
        [sorted(d.content_types) if d.content_types is not None else [] for d in datastores],
    )
    data.set(DATASTORES_DATASTORE_IDS, [d.id for d in datastores])
    data.set(DATASTORES_ENABLED, [bool(_or(d.enabled, True)) for d in datastores])
    data.set(DATASTORES_SHARED, [bool(_or(d.shared, True)) for d in datastores])
    data.set(DATASTORES_SPACE_AVAILABLE, [_or(d.space_available, 0) for d in datastores])
    data.set(DATASTORES_SPACE_TOTAL, [_or(d.space_total, 0) for d in datastores])
    data.set(DATASTORES_SPACE_USED, [_or(d.space_used, 0) for d in datastores])
    data.set(DATASTORES_TYPES, [d.type for d in datastores])


def dns_data_source() -> Resource:
    """Return the schema of the DNS data source."""
    return Resource(
        schema={
            DNS_DOMAIN: Schema(
                ValueType.STRING, description="The DNS search domain", computed=True
            ),
            DNS_NODE_NAME: Schema(ValueType.STRING, description="The node name", required=True),
            DNS_SERVERS: _computed_list("The DNS servers", Schema(ValueType.STRING)),
        },
        read=read_dns,
    )


def read_dns(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the DNS settings of the node named by ``node_name``."""
    node_name = data.get(DNS_NODE_NAME)
    dns = client.get_dns(node_name)

    data.set_id(f"{node_name}_dns")
    data.set(DNS_DOMAIN, _or(dns.search_domain, ""))
    data.set(
        DNS_SERVERS,
        [server for server in (dns.server1, dns.server2, dns.server3) if server is not None],
    )


def hosts_data_source() -> Resource:
    """Return the schema of the hosts file data source."""
    entries = Resource(
        schema={
            HOSTS_ENTRIES_ADDRESS: Schema(
                ValueType.STRING, description="The address", computed=True
            ),
            HOSTS_ENTRIES_HOSTNAMES: _computed_list("The hostnames", Schema(ValueType.STRING)),
        }
    )
    return Resource(
        schema={
            HOSTS_ADDRESSES: _computed_list("The addresses", Schema(ValueType.STRING)),
            HOSTS_DIGEST: Schema(ValueType.STRING, description="The SHA1 digest", computed=True),
            HOSTS_ENTRIES: _computed_list("The host entries", entries),
            HOSTS_HOSTNAMES: _computed_list(
                "The hostnames", Schema(ValueType.LIST, elem=Schema(ValueType.STRING))
            ),
            HOSTS_NODE_NAME: Schema(
                ValueType.STRING, description="The node name", required=True
            ),
        },
        read=read_hosts,
    )


def parse_hosts_file(text: str) -> list[dict[str, Any]]:
    """Parse a hosts file into entries of ``address`` and ``hostnames``.

    Lines starting with ``#`` and lines that do not start with an address
    are skipped.
    """
    entries = []
    for line in text.split("\n"):
        if line.startswith("#"):
            continue
        fields = line.replace("\t", " ").split(" ")
        if fields[0] == "":
            continue
        entries.append(
            {
                HOSTS_ENTRIES_ADDRESS: fields[0],
                HOSTS_ENTRIES_HOSTNAMES: [name for name in fields[1:] if name],
            }
        )
    return entries


def read_hosts(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the hosts file of the node named by ``node_name``."""
    node_name = data.get(HOSTS_NODE_NAME)
    hosts = client.get_hosts(node_name)

    data.set_id(f"{node_name}_hosts")
    entries = parse_hosts_file(hosts.data)
    data.set(HOSTS_ADDRESSES, [entry[HOSTS_ENTRIES_ADDRESS] for entry in entries])
    data.set(HOSTS_DIGEST, _or(hosts.digest, ""))
    data.set(HOSTS_ENTRIES, entries)
    data.set(HOSTS_HOSTNAMES, [entry[HOSTS_ENTRIES_HOSTNAMES] for entry in entries])