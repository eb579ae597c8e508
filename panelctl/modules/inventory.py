"""
Server inventory backed by a YAML file.

The inventory lists the daemon nodes and the servers placed on them::

    nodes:
      - id: 5
        name: node-a
        fqdn: a.example.com
        scheme: https
        daemon_listen: 8080
        daemon_secret: changeme
    servers:
      - id: 1
        uuid: 8f1a4c52-0d7e-4c1e-9d55-3b1f4ad0c001
        name: alpha
        node: 5
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from jsonschema import validate, ValidationError

from .models import Node, Target

logger = logging.getLogger(__name__)

INVENTORY_SCHEMA = {
    "type": "object",
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "minimum": 0},
                    "name": {"type": "string"},
                    "fqdn": {"type": "string"},
                    "scheme": {"enum": ["http", "https"]},
                    "daemon_listen": {"type": "integer", "minimum": 1, "maximum": 65535},
                    "daemon_secret": {"type": "string"},
                },
                "required": ["id", "name", "fqdn"],
            },
        },
        "servers": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "minimum": 0},
                    "uuid": {"type": "string"},
                    "name": {"type": "string"},
                    "node": {"type": "integer", "minimum": 0},
                },
                "required": ["id", "uuid", "name", "node"],
            },
        },
    },
    "required": ["nodes", "servers"],
}


class InventoryError(Exception):
    """Raised when the inventory cannot be loaded or is inconsistent."""
    pass


class Inventory:
    """In-memory view of the nodes and servers listed in the inventory file."""

    def __init__(self, nodes: List[Node], servers: List[Target]):
        self.nodes: Dict[int, Node] = {node.id: node for node in nodes}
        self.servers: Tuple[Target, ...] = tuple(servers)

    def get_data_for_reinstall(
        self,
        server_id: Optional[int] = None,
        node_id: Optional[int] = None,
    ) -> Tuple[Target, ...]:
        """Return the servers to reinstall.

        A server id takes precedence over a node id. With neither, every
        server in the inventory is returned. Unknown ids give an empty tuple.
        """
        if server_id is not None:
            return tuple(s for s in self.servers if s.id == server_id)[:1]
        if node_id is not None:
            return tuple(s for s in self.servers if s.node_id == node_id)
        return self.servers

    @classmethod
    def from_dict(cls, data: dict) -> "Inventory":
        try:
            validate(instance=data, schema=INVENTORY_SCHEMA)
        except ValidationError as e:
            raise InventoryError(f"Invalid inventory: {e.message}") from e

        nodes = [
            Node(
                id=entry["id"],
                name=entry["name"],
                fqdn=entry["fqdn"],
                scheme=entry.get("scheme", "https"),
                daemon_listen=entry.get("daemon_listen", 8080),
                daemon_secret=entry.get("daemon_secret", ""),
            )
            for entry in data["nodes"]
        ]
        by_id = {node.id: node for node in nodes}

        servers = []
        for entry in data["servers"]:
            node = by_id.get(entry["node"])
            if node is None:
                raise InventoryError(
                    f"Server {entry['id']} ({entry['name']}) references unknown node {entry['node']}"
                )
            servers.append(Target(id=entry["id"], uuid=entry["uuid"], name=entry["name"], node=node))

        return cls(nodes, servers)


def load_inventory(path: Union[str, Path]) -> Inventory:
    """Load and validate the inventory file at ``path``.

    Raises:
        InventoryError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise InventoryError(f"Inventory file not found: {path}")

    logger.debug(f"Loading inventory from {path}")
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InventoryError(f"Failed to parse inventory {path}: {e}") from e

    if data is None:
        data = {"nodes": [], "servers": []}

    inventory = Inventory.from_dict(data)
    logger.debug(f"Loaded {len(inventory.nodes)} nodes and {len(inventory.servers)} servers")
    return inventory
