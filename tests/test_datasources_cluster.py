from types import SimpleNamespace

import pytest

from proxmoxve.datasources_cluster import (
    cluster_alias_data_source,
    cluster_aliases_data_source,
    read_cluster_alias,
    read_cluster_aliases,
)
from proxmoxve.schema import ResourceData, ValueType


class FakeClient:
    def __init__(self, alias=None, pools=()):
        self.alias = alias
        self.pools = list(pools)
        self.requested = []

    def get_alias(self, alias_id):
        self.requested.append(alias_id)
        if self.alias is None:
            raise LookupError(alias_id)
        return self.alias

    def list_pools(self):
        return self.pools


def test_alias_schema():
    s = cluster_alias_data_source()
    assert s.required_keys() == ["name"]
    assert s.computed_keys() == ["cidr", "comment"]
    assert {key: item.type for key, item in s.schema.items()} == {
        "name": ValueType.STRING,
        "cidr": ValueType.STRING,
        "comment": ValueType.STRING,
    }
    assert s.read is read_cluster_alias


def test_aliases_schema():
    s = cluster_aliases_data_source()
    assert s.computed_keys() == ["alias_ids"]
    assert s.schema["alias_ids"].type is ValueType.LIST
    assert s.read is read_cluster_aliases


def test_read_alias_sets_values():
    client = FakeClient(alias=SimpleNamespace(cidr="10.0.0.0/8", comment="office"))
    data = ResourceData(cluster_alias_data_source(), {"name": "office-net"})
    read_cluster_alias(data, client)
    assert client.requested == ["office-net"]
    assert data.id == "office-net"
    assert data.get("cidr") == "10.0.0.0/8"
    assert data.get("comment") == "office"


def test_read_alias_without_comment_uses_empty_string():
    client = FakeClient(alias=SimpleNamespace(cidr="192.168.1.1", comment=None))
    data = ResourceData(cluster_alias_data_source(), {"name": "host"})
    data.set("comment", "stale")
    read_cluster_alias(data, client)
    assert data.get("comment") == ""


def test_read_alias_propagates_client_error():
    data = ResourceData(cluster_alias_data_source(), {"name": "missing"})
    with pytest.raises(LookupError):
        read_cluster_alias(data, FakeClient())
    assert data.id == ""


def test_read_aliases_lists_ids():
    client = FakeClient(pools=[SimpleNamespace(id="a"), SimpleNamespace(id="b")])
    data = ResourceData(cluster_aliases_data_source())
    read_cluster_aliases(data, client)
    assert data.id == "aliases"
    assert data.get("alias_ids") == ["a", "b"]