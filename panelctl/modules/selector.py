"""
Resolve which servers a bulk action applies to.
"""
import logging
import re
from typing import Any, Optional, Protocol, Tuple

from .models import Target

logger = logging.getLogger(__name__)

_INTEGERISH = re.compile(r"[0-9]+")


class InvalidArgument(ValueError):
    """Raised when a server or node identifier is not a non-negative integer."""
    pass


class TargetRepository(Protocol):
    def get_data_for_reinstall(
        self, server_id: Optional[int] = None, node_id: Optional[int] = None
    ) -> Tuple[Target, ...]:
        ...


def parse_identifier(value: Any, message: str) -> Optional[int]:
    """Return ``value`` as an int, or None when it is None.

    ``message`` is formatted with the offending value when it is not a
    non-negative integer or a string of decimal digits. Integral floats and
    strings such as ``"1.0"`` are rejected as well, which is stricter than
    the panel's own integerish check.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidArgument(message % (value,))
    if isinstance(value, int):
        if value < 0:
            raise InvalidArgument(message % (value,))
        return value
    if isinstance(value, str) and _INTEGERISH.fullmatch(value.strip()):
        return int(value.strip())
    raise InvalidArgument(message % (value,))


def validate_criteria(server_id: Any = None, node_id: Any = None) -> Tuple[Optional[int], Optional[int]]:
    """Parse the selection criteria, raising InvalidArgument on bad input."""
    server = parse_identifier(
        server_id, "Value passed in server argument must be null or an integer, received %s."
    )
    node = parse_identifier(
        node_id, "Value passed in node option must be null or integer, received %s."
    )
    return server, node


def select_targets(
    repository: TargetRepository,
    server_id: Any = None,
    node_id: Any = None,
) -> Tuple[Target, ...]:
    """Return the servers to act on.

    Args:
        repository: Source of servers
        server_id: Single server to select; wins over ``node_id``
        node_id: Select every server on this node

    Returns:
        Ordered tuple of targets, possibly empty

    Raises:
        InvalidArgument: If either identifier is not integer-like
    """
    server, node = validate_criteria(server_id, node_id)

    if server is not None:
        targets = repository.get_data_for_reinstall(server_id=server)
        logger.debug(f"Selected server {server}: {len(targets)} match(es)")
        return tuple(targets)
    if node is not None:
        targets = repository.get_data_for_reinstall(node_id=node)
        logger.debug(f"Selected {len(targets)} server(s) on node {node}")
        return tuple(targets)

    targets = repository.get_data_for_reinstall()
    logger.debug(f"Selected all {len(targets)} server(s)")
    return tuple(targets)
