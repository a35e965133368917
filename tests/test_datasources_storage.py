from types import SimpleNamespace

import pytest

from proxmoxve.datasources_storage import (
    DATASTORES_ACTIVE,
    DATASTORES_CONTENT_TYPES,
    DATASTORES_DATASTORE_IDS,
    DATASTORES_ENABLED,
    DATASTORES_NODE_NAME,
    DATASTORES_SHARED,
    DATASTORES_SPACE_AVAILABLE,
    DATASTORES_SPACE_TOTAL,
    DATASTORES_SPACE_USED,
    DATASTORES_TYPES,
    DNS_DOMAIN,
    DNS_NODE_NAME,
    DNS_SERVERS,
    HOSTS_ADDRESSES,
    HOSTS_DIGEST,
    HOSTS_ENTRIES,
    HOSTS_ENTRIES_ADDRESS,
    HOSTS_ENTRIES_HOSTNAMES,
    HOSTS_HOSTNAMES,
    HOSTS_NODE_NAME,
    datastores_data_source,
    dns_data_source,
    hosts_data_source,
    parse_hosts_file,
    read_datastores,
    read_dns,
    read_hosts,
)
from proxmoxve.schema import ResourceData, ValueType


def _types(resource):
    return {key: item.type for key, item in resource.schema.items()}


class FakeClient:
    def __init__(self, datastores=None, dns=None, hosts=None):
        self.datastores = datastores or []
        self.dns = dns
        self.hosts = hosts
        self.calls = []

    def list_datastores(self, node_name):
        self.calls.append(("list_datastores", node_name))
        return self.datastores

    def get_dns(self, node_name):
        self.calls.append(("get_dns", node_name))
        return self.dns

    def get_hosts(self, node_name):
        self.calls.append(("get_hosts", node_name))
        return self.hosts


def test_datastores_schema():
    s = datastores_data_source()
    assert s.required_keys() == [DATASTORES_NODE_NAME]
    assert s.computed_keys() == sorted(
        [
            DATASTORES_ACTIVE,
            DATASTORES_CONTENT_TYPES,
            DATASTORES_DATASTORE_IDS,
            DATASTORES_ENABLED,
            DATASTORES_SHARED,
            DATASTORES_SPACE_AVAILABLE,
            DATASTORES_SPACE_TOTAL,
            DATASTORES_SPACE_USED,
            DATASTORES_TYPES,
        ]
    )
    assert _types(s) == {
        DATASTORES_ACTIVE: ValueType.LIST,
        DATASTORES_CONTENT_TYPES: ValueType.LIST,
        DATASTORES_DATASTORE_IDS: ValueType.LIST,
        DATASTORES_ENABLED: ValueType.LIST,
        DATASTORES_NODE_NAME: ValueType.STRING,
        DATASTORES_SHARED: ValueType.LIST,
        DATASTORES_SPACE_AVAILABLE: ValueType.LIST,
        DATASTORES_SPACE_TOTAL: ValueType.LIST,
        DATASTORES_SPACE_USED: ValueType.LIST,
        DATASTORES_TYPES: ValueType.LIST,
    }
    assert s.read is read_datastores


def test_dns_schema():
    s = dns_data_source()
    assert s.required_keys() == [DNS_NODE_NAME]
    assert s.computed_keys() == sorted([DNS_DOMAIN, DNS_SERVERS])
    assert _types(s) == {
        DNS_DOMAIN: ValueType.STRING,
        DNS_NODE_NAME: ValueType.STRING,
        DNS_SERVERS: ValueType.LIST,
    }


def test_hosts_schema():
    s = hosts_data_source()
    assert s.required_keys() == [HOSTS_NODE_NAME]
    assert s.computed_keys() == sorted(
        [HOSTS_ADDRESSES, HOSTS_DIGEST, HOSTS_ENTRIES, HOSTS_HOSTNAMES]
    )
    assert _types(s) == {
        HOSTS_ADDRESSES: ValueType.LIST,
        HOSTS_DIGEST: ValueType.STRING,
        HOSTS_ENTRIES: ValueType.LIST,
        HOSTS_HOSTNAMES: ValueType.LIST,
        HOSTS_NODE_NAME: ValueType.STRING,
    }
    entries = s.nested(HOSTS_ENTRIES)
    assert entries.computed_keys() == sorted([HOSTS_ENTRIES_ADDRESS, HOSTS_ENTRIES_HOSTNAMES])
    assert _types(entries) == {
        HOSTS_ENTRIES_ADDRESS: ValueType.STRING,
        HOSTS_ENTRIES_HOSTNAMES: ValueType.LIST,
    }


def test_read_datastores_with_values_and_defaults():
    full = SimpleNamespace(
        active=False,
        content_types=["iso", "images", "backup"],
        id="local",
        enabled=False,
        shared=False,
        space_available=10,
        space_total=30,
        space_used=20,
        type="dir",
    )
    empty = SimpleNamespace(
        active=None,
        content_types=None,
        id="nfs",
        enabled=None,
        shared=None,
        space_available=None,
        space_total=None,
        space_used=None,
        type="nfs",
    )
    client = FakeClient(datastores=[full, empty])
    data = ResourceData(datastores_data_source(), {DATASTORES_NODE_NAME: "pve"})
    read_datastores(data, client)

    assert client.calls == [("list_datastores", "pve")]
    assert data.id == "pve_datastores"
    assert data.get(DATASTORES_ACTIVE) == [False, True]
    assert data.get(DATASTORES_CONTENT_TYPES) == [["backup", "images", "iso"], []]
    assert data.get(DATASTORES_DATASTORE_IDS) == ["local", "nfs"]
    assert data.get(DATASTORES_ENABLED) == [False, True]
    assert data.get(DATASTORES_SHARED) == [False, True]
    assert data.get(DATASTORES_SPACE_AVAILABLE) == [10, 0]
    assert data.get(DATASTORES_SPACE_TOTAL) == [30, 0]
    assert data.get(DATASTORES_SPACE_USED) == [20, 0]
    assert data.get(DATASTORES_TYPES) == ["dir", "nfs"]


def test_read_dns_collects_present_servers():
    dns = SimpleNamespace(
        search_domain="example.com", server1="192.0.2.1", server2=None, server3="192.0.2.3"
    )
    data = ResourceData(dns_data_source(), {DNS_NODE_NAME: "pve"})
    read_dns(data, FakeClient(dns=dns))
    assert data.id == "pve_dns"
    assert data.get(DNS_DOMAIN) == "example.com"
    assert data.get(DNS_SERVERS) == ["192.0.2.1", "192.0.2.3"]


def test_read_dns_defaults():
    dns = SimpleNamespace(search_domain=None, server1=None, server2=None, server3=None)
    data = ResourceData(dns_data_source(), {DNS_NODE_NAME: "node1"})
    read_dns(data, FakeClient(dns=dns))
    assert data.get(DNS_DOMAIN) == ""
    assert data.get(DNS_SERVERS) == []


def test_parse_hosts_file():
    text = "# comment\n127.0.0.1\tlocalhost  localhost.localdomain\n\n  indented\n::1 ip6-localhost\n"
    assert parse_hosts_file(text) == [
        {"address": "127.0.0.1", "hostnames": ["localhost", "localhost.localdomain"]},
        {"address": "::1", "hostnames": ["ip6-localhost"]},
    ]


def test_parse_hosts_file_address_without_names():
    assert parse_hosts_file("192.0.2.5") == [{"address": "192.0.2.5", "hostnames": []}]


def test_read_hosts():
    hosts = SimpleNamespace(
        data="127.0.0.1 localhost\n192.0.2.10 pve.example.com pve\n", digest="abc123"
    )
    data = ResourceData(hosts_data_source(), {HOSTS_NODE_NAME: "pve"})
    read_hosts(data, FakeClient(hosts=hosts))
    assert data.id == "pve_hosts"
    assert data.get(HOSTS_ADDRESSES) == ["127.0.0.1", "192.0.2.10"]
    assert data.get(HOSTS_DIGEST) == "abc123"
    assert data.get(HOSTS_HOSTNAMES) == [["localhost"], ["pve.example.com", "pve"]]
    assert data.get(HOSTS_ENTRIES) == [
        {"address": "127.0.0.1", "hostnames": ["localhost"]},
        {"address": "192.0.2.10", "hostnames": ["pve.example.com", "pve"]},
    ]


def test_read_hosts_missing_digest():
    hosts = SimpleNamespace(data="", digest=None)
    data = ResourceData(hosts_data_source(), {HOSTS_NODE_NAME: "pve"})
    read_hosts(data, FakeClient(hosts=hosts))
    assert data.get(HOSTS_DIGEST) == ""
    assert data.get(HOSTS_ADDRESSES) == []


def test_read_propagates_client_error():
    class FailingClient:
        def get_dns(self, node_name):
            raise RuntimeError("unreachable")

    data = ResourceData(dns_data_source(), {DNS_NODE_NAME: "pve"})
    with pytest.raises(RuntimeError, match="unreachable"):
        read_dns(data, FailingClient())
    assert data.id == ""