"""
Server commands
===============

Reinstall a single server, all servers on a node, or every server in the
inventory by asking each node's daemon to reinstall it.

Environment Variables:
- PANELCTL_INVENTORY: path to the inventory YAML (default: inventory.yaml)
- DAEMON_TIMEOUT / DAEMON_CONNECT_TIMEOUT: daemon request timeouts in seconds
"""
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config
from ..modules.bulk import AssumeYes, ConsoleReporter, PromptConfirmation, ReinstallCommand
from ..modules.daemon import DaemonClient
from ..modules.inventory import InventoryError, load_inventory
from ..modules.selector import InvalidArgument, select_targets, validate_criteria

# Initialize console for rich output
console = Console()

logger = logging.getLogger(__name__)

app = typer.Typer(help="Server commands")


def _load_repository(inventory: Optional[Path]):
    path = inventory or Path(Config.INVENTORY_PATH)
    try:
        return load_inventory(path)
    except InventoryError as e:
        console.print(f"❌ {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=1)


@app.command("reinstall")
def reinstall_cmd(
    server: Optional[str] = typer.Argument(None, help="The ID of the server to reinstall."),
    node: Optional[str] = typer.Option(
        None,
        "--node",
        help="ID of the node to reinstall all servers on. Ignored if server is passed.",
    ),
    inventory: Optional[Path] = typer.Option(
        None,
        "--inventory",
        "-i",
        help="Path to the inventory file (defaults to $PANELCTL_INVENTORY)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Reinstall a single server, all servers on a node, or all servers."""
    # Validate ids before touching the inventory or the network
    try:
        validate_criteria(server, node)
    except InvalidArgument as e:
        console.print(f"❌ {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=2)

    try:
        Config.validate()
    except ValueError as e:
        console.print(f"❌ {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=1)

    command = ReinstallCommand(
        repository=_load_repository(inventory),
        client=DaemonClient(),
        confirmation=AssumeYes() if yes else PromptConfirmation(),
        reporter=ConsoleReporter(console),
    )

    report = command.execute(server_id=server, node_id=node)
    if report is None:
        console.print("❌ Reinstall cancelled.")
        raise typer.Exit()


@app.command("list")
def list_cmd(
    server: Optional[str] = typer.Argument(None, help="Show only this server ID."),
    node: Optional[str] = typer.Option(None, "--node", help="Show only servers on this node ID."),
    inventory: Optional[Path] = typer.Option(
        None,
        "--inventory",
        "-i",
        help="Path to the inventory file (defaults to $PANELCTL_INVENTORY)",
    ),
):
    """List the servers a reinstall with the same arguments would touch."""
    repository = _load_repository(inventory)
    try:
        targets = select_targets(repository, server_id=server, node_id=node)
    except InvalidArgument as e:
        console.print(f"❌ {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(code=2)

    if not targets:
        console.print("No servers matched.")
        return

    table = Table(title="Servers")
    table.add_column("ID", justify="right")
    table.add_column("UUID")
    table.add_column("Name")
    table.add_column("Node")
    for target in targets:
        table.add_row(str(target.id), target.uuid, target.name, f"{target.node.name} ({target.node.id})")
    console.print(table)
