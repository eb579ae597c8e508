import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from panelctl.config import Config
from panelctl.modules.bulk import AssumeYes, NullReporter, ReinstallCommand
from panelctl.modules.daemon import DaemonClient
from panelctl.modules.inventory import Inventory, InventoryError, load_inventory

logger = logging.getLogger(__name__)

router = APIRouter()


class ReinstallRequest(BaseModel):
    server: Optional[int] = Field(None, ge=0, description="The ID of the server to reinstall.")
    node: Optional[int] = Field(None, ge=0, description="ID of the node to reinstall all servers on.")
    confirm: bool = False


class ReinstallFailure(BaseModel):
    id: int
    name: str
    node: str
    message: str


class ReinstallResponse(BaseModel):
    status: str
    attempted: int = 0
    succeeded: int = 0
    failures: List[ReinstallFailure] = []


def get_inventory() -> Inventory:
    try:
        return load_inventory(Path(Config.INVENTORY_PATH))
    except InventoryError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_daemon_client() -> DaemonClient:
    return DaemonClient()


@router.post("/servers/reinstall", response_model=ReinstallResponse)
def reinstall_servers(
    req: ReinstallRequest,
    inventory: Inventory = Depends(get_inventory),
    client: DaemonClient = Depends(get_daemon_client),
):
    if not req.confirm:
        return ReinstallResponse(status="cancelled")

    command = ReinstallCommand(
        repository=inventory,
        client=client,
        confirmation=AssumeYes(),
        reporter=NullReporter(),
    )
    report = command.execute(server_id=req.server, node_id=req.node)
    logger.info(f"API reinstall: {report.succeeded}/{report.attempted} succeeded")
    return ReinstallResponse(status="completed", **report.to_dict())
