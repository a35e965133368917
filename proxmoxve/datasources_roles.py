"""Data sources for access roles."""

from __future__ import annotations

from typing import Any

from proxmoxve.schema import Resource, ResourceData, Schema, ValueType

ROLE_ID = "role_id"
ROLE_PRIVILEGES = "privileges"

ROLES_PRIVILEGES = "privileges"
ROLES_ROLE_IDS = "role_ids"
ROLES_SPECIAL = "special"


def role_data_source() -> Resource:
    """Return the schema of the single role data source."""
    return Resource(
        schema={
            ROLE_ID: Schema(ValueType.STRING, description="The role id", required=True),
            ROLE_PRIVILEGES: Schema(
                ValueType.SET,
                description="The role privileges",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
        },
        read=read_role,
    )


def read_role(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the privileges of the role named by ``role_id``."""
    role_id = data.get(ROLE_ID)
    privileges = client.get_role(role_id)

    data.set_id(role_id)
    data.set(ROLE_PRIVILEGES, frozenset(privileges or ()))


def roles_data_source() -> Resource:
    """Return the schema of the role list data source."""
    return Resource(
        schema={
            ROLES_PRIVILEGES: Schema(
                ValueType.LIST,
                description="The role privileges",
                computed=True,
                elem=Schema(ValueType.SET, elem=Schema(ValueType.STRING)),
            ),
            ROLES_ROLE_IDS: Schema(
                ValueType.LIST,
                description="The role ids",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
            ROLES_SPECIAL: Schema(
                ValueType.LIST,
                description="Whether the role is special (built-in)",
                computed=True,
                elem=Schema(ValueType.BOOL),
            ),
        },
        read=read_roles,
    )


def read_roles(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with every role's id, privileges and special flag."""
    roles = client.list_roles()

    data.set_id("roles")
    data.set(ROLES_PRIVILEGES, [frozenset(role.privileges or ()) for role in roles])
    data.set(ROLES_ROLE_IDS, [role.id for role in roles])
    data.set(
        ROLES_SPECIAL,
        [role.special if role.special is not None else False for role in roles],
    )