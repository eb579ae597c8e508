"""
Data models for panel servers and the nodes that host them.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """A daemon host. Servers belong to exactly one node."""
    id: int
    name: str
    fqdn: str
    scheme: str = 'https'
    daemon_listen: int = 8080
    daemon_secret: str = field(default='', repr=False)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.fqdn}:{self.daemon_listen}/v1"


@dataclass(frozen=True)
class Target:
    """A server that can be reinstalled through its node's daemon."""
    id: int
    uuid: str
    name: str
    node: Node

    @property
    def node_id(self) -> int:
        return self.node.id


@dataclass(frozen=True)
class ActionSucceeded:
    """The daemon accepted the request."""
    status_code: int = 204


@dataclass(frozen=True)
class ActionFailed:
    """The request did not go through.

    ``kind`` is one of ``connectivity``, ``rejected`` or ``timeout``.
    """
    kind: str
    detail: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        return self.detail


@dataclass
class BatchReport:
    """Outcome of one bulk run."""
    attempted: int = 0
    succeeded: int = 0
    failures: List[Tuple[Target, str]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict:
        return {
            'attempted': self.attempted,
            'succeeded': self.succeeded,
            'failures': [
                {
                    'id': target.id,
                    'name': target.name,
                    'node': target.node.name,
                    'message': message,
                }
                for target, message in self.failures
            ],
        }
