"""Data sources for cluster firewall aliases."""

from __future__ import annotations

from typing import Any

from proxmoxve.schema import Resource, ResourceData, Schema, ValueType

DEFAULT_ALIAS_COMMENT = ""

ALIAS_NAME = "name"
ALIAS_CIDR = "cidr"
ALIAS_COMMENT = "comment"

ALIASES_ALIAS_IDS = "alias_ids"


def cluster_alias_data_source() -> Resource:
    """Return the schema of the single alias data source."""
    return Resource(
        schema={
            ALIAS_NAME: Schema(ValueType.STRING, description="Alias name", required=True),
            ALIAS_CIDR: Schema(ValueType.STRING, description="IP/CIDR block", computed=True),
            ALIAS_COMMENT: Schema(ValueType.STRING, description="Alias comment", computed=True),
        },
        read=read_cluster_alias,
    )


def read_cluster_alias(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the alias named by its ``name`` attribute."""
    alias_id = data.get(ALIAS_NAME)
    alias = client.get_alias(alias_id)

    data.set_id(alias_id)
    data.set(ALIAS_CIDR, alias.cidr)
    data.set(
        ALIAS_COMMENT,
        alias.comment if alias.comment is not None else DEFAULT_ALIAS_COMMENT,
    )


def cluster_aliases_data_source() -> Resource:
    """Return the schema of the alias list data source."""
    return Resource(
        schema={
            ALIASES_ALIAS_IDS: Schema(
                ValueType.LIST,
                description="Alias IDs",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
        },
        read=read_cluster_aliases,
    )


def read_cluster_aliases(data: ResourceData, client: Any) -> None:
    """Fill ``data`` with the ids of the listed entries."""
    entries = client.list_pools()
    data.set_id("aliases")
    data.set(ALIASES_ALIAS_IDS, [entry.id for entry in entries])