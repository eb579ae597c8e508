from fastapi import FastAPI
from dotenv import load_dotenv

from panelctl import __version__
from panelctl.api.middleware import AuthMiddleware
from panelctl.api.routes import servers
from panelctl.logging import setup_logger

load_dotenv()
logger = setup_logger("panelctl.api")

app = FastAPI(title="panelctl", version=__version__)
app.add_middleware(AuthMiddleware)

app.include_router(servers.router)

logger.debug("API routes registered")
