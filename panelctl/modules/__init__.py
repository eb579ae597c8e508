"""
Server management modules.
"""
from .bulk import BulkRunner, ConsoleReporter, NullReporter, ReinstallCommand
from .daemon import DaemonClient
from .inventory import Inventory, InventoryError, load_inventory
from .selector import InvalidArgument, select_targets

__all__ = [
    'BulkRunner',
    'ConsoleReporter',
    'NullReporter',
    'ReinstallCommand',
    'DaemonClient',
    'Inventory',
    'InventoryError',
    'load_inventory',
    'InvalidArgument',
    'select_targets',
]
