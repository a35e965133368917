"""Data sources for resource pools."""

from __future__ import annotations

from typing import Any

from proxmoxve.schema import Resource, ResourceData, Schema, ValueType

POOL_COMMENT = "comment"
POOL_MEMBERS = "members"
POOL_MEMBERS_DATASTORE_ID = "datastore_id"
POOL_MEMBERS_ID = "id"
POOL_MEMBERS_NODE_NAME = "node_name"
POOL_MEMBERS_TYPE = "type"
POOL_MEMBERS_VM_ID = "vm_id"
POOL_POOL_ID = "pool_id"

POOLS_POOL_IDS = "pool_ids"


def pool_data_source() -> Resource:
    """Return the schema of the single pool data source."""
    members = Resource(
        schema={
            POOL_MEMBERS_DATASTORE_ID: Schema(
                ValueType.STRING, description="The datastore id", computed=True
            ),
            POOL_MEMBERS_ID: Schema(ValueType.STRING, description="The member id", computed=True),
            POOL_MEMBERS_NODE_NAME: Schema(
                ValueType.STRING, description="The node name", computed=True
            ),
            POOL_MEMBERS_TYPE: Schema(
                ValueType.STRING, description="The member type", computed=True
            ),
            POOL_MEMBERS_VM_ID: Schema(
                ValueType.INT, description="The virtual machine id", computed=True
            ),
        }
    )
    return Resource(
        schema={
            POOL_COMMENT: Schema(ValueType.STRING, description="The pool comment", computed=True),
            POOL_MEMBERS: Schema(
                ValueType.LIST, description="The pool members", computed=True, elem=members
            ),
            POOL_POOL_ID: Schema(ValueType.STRING, description="The pool id", required=True),
        },
        read=read_pool,
    )


def read_pool(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the pool named by its ``pool_id`` attribute."""
    pool_id = data.get(POOL_POOL_ID)
    pool = client.get_pool(pool_id)

    data.set_id(pool_id)
    data.set(POOL_COMMENT, pool.comment if pool.comment is not None else "")
    data.set(
        POOL_MEMBERS,
        [
            {
                POOL_MEMBERS_ID: member.id,
                POOL_MEMBERS_NODE_NAME: member.node,
                POOL_MEMBERS_DATASTORE_ID: (
                    member.datastore_id if member.datastore_id is not None else ""
                ),
                POOL_MEMBERS_TYPE: member.type,
                POOL_MEMBERS_VM_ID: member.vmid if member.vmid is not None else 0,
            }
            for member in pool.members or []
        ],
    )


def pools_data_source() -> Resource:
    """Return the schema of the pool list data source."""
    return Resource(
        schema={
            POOLS_POOL_IDS: Schema(
                ValueType.LIST,
                description="The pool ids",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
        },
        read=read_pools,
    )


def read_pools(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the ids of all pools."""
    pools = client.list_pools()
    data.set_id("pools")
    data.set(POOLS_POOL_IDS, [pool.id for pool in pools])