from types import SimpleNamespace

import pytest

from proxmoxve.datasources_roles import (
    read_role,
    read_roles,
    role_data_source,
    roles_data_source,
)
from proxmoxve.schema import ResourceData, ValueType


class FakeClient:
    def __init__(self, privileges=None, roles=(), missing=False):
        self.privileges = privileges
        self.roles = list(roles)
        self.missing = missing

    def get_role(self, role_id):
        if self.missing:
            raise LookupError(role_id)
        return self.privileges

    def list_roles(self):
        return self.roles


def test_role_schema():
    s = role_data_source()
    assert s.required_keys() == ["role_id"]
    assert s.computed_keys() == ["privileges"]
    assert {key: item.type for key, item in s.schema.items()} == {
        "role_id": ValueType.STRING,
        "privileges": ValueType.SET,
    }


def test_roles_schema():
    s = roles_data_source()
    assert s.computed_keys() == ["privileges", "role_ids", "special"]
    assert {key: item.type for key, item in s.schema.items()} == {
        "privileges": ValueType.LIST,
        "role_ids": ValueType.LIST,
        "special": ValueType.LIST,
    }


def test_read_role_privileges():
    data = ResourceData(role_data_source(), {"role_id": "auditor"})
    read_role(data, FakeClient(privileges=["VM.Audit", "Sys.Audit", "VM.Audit"]))
    assert data.id == "auditor"
    assert data.get("privileges") == {"VM.Audit", "Sys.Audit"}


def test_read_role_without_privileges():
    data = ResourceData(role_data_source(), {"role_id": "empty"})
    read_role(data, FakeClient(privileges=None))
    assert data.get("privileges") == frozenset()


def test_read_role_error_propagates():
    data = ResourceData(role_data_source(), {"role_id": "missing"})
    with pytest.raises(LookupError):
        read_role(data, FakeClient(missing=True))


def test_read_roles():
    roles = [
        SimpleNamespace(id="Administrator", privileges=["Sys.Audit"], special=True),
        SimpleNamespace(id="custom", privileges=None, special=None),
    ]
    data = ResourceData(roles_data_source())
    read_roles(data, FakeClient(roles=roles))
    assert data.id == "roles"
    assert data.get("role_ids") == ["Administrator", "custom"]
    assert data.get("privileges") == [frozenset({"Sys.Audit"}), frozenset()]
    assert data.get("special") == [True, False]