"""
Daemon API client used to trigger server actions on a node.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple, Union

import requests

from .. import __version__
from ..config import Config
from ..utils import redact_sensitive_data
from .models import ActionFailed, ActionSucceeded, Target

# Configure logger at module level
logger = logging.getLogger(__name__)

ActionResult = Union[ActionSucceeded, ActionFailed]

MAX_DETAIL_LENGTH = 200


# Custom exceptions
class DaemonError(Exception):
    """Base exception for daemon client errors."""
    kind = "connectivity"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DaemonConnectionError(DaemonError):
    """Exception raised when the daemon cannot be reached."""
    kind = "connectivity"


class DaemonRejectedError(DaemonError):
    """Exception raised when the daemon answers with an error status."""
    kind = "rejected"


class DaemonTimeoutError(DaemonError):
    """Exception raised when the daemon does not answer in time."""
    kind = "timeout"


def _error_detail(response: requests.Response) -> str:
    """Pull a readable error out of a daemon response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("error"):
        text = str(body["error"])
    else:
        text = (response.text or "").strip() or response.reason or "no response body"

    if len(text) > MAX_DETAIL_LENGTH:
        text = text[:MAX_DETAIL_LENGTH] + "..."
    return f"{response.status_code} {text}"


class DaemonClient:
    """Client for the node daemon HTTP API.

    Each call is bound to one server: the daemon identifies it through the
    ``X-Access-Server`` header and authenticates the panel with the node's
    daemon secret.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[Tuple[float, float]] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout or Config.timeouts()
        self.logger = logging.getLogger(f"{__name__}.DaemonClient")

    def headers_for(self, target: Target) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": f"panelctl/{__version__}",
            "X-Access-Server": target.uuid,
            "X-Access-Token": target.node.daemon_secret,
        }

    def send(
        self,
        target: Target,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """Send one request to ``target``'s daemon.

        Raises:
            DaemonTimeoutError: If the daemon did not answer within the timeout
            DaemonConnectionError: On any other transport failure
            DaemonRejectedError: If the daemon returned a non-2xx status
        """
        url = f"{target.node.base_url}/{endpoint.lstrip('/')}"
        headers = self.headers_for(target)
        self.logger.debug(
            f"{method} {url} headers={json.dumps(redact_sensitive_data(headers))}"
        )

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=payload if payload is not None else {},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise DaemonTimeoutError(f"Request to {url} timed out: {e}") from e
        except requests.RequestException as e:
            raise DaemonConnectionError(f"Could not reach daemon at {url}: {e}") from e
        except (ValueError, UnicodeError) as e:
            # Header values http.client cannot encode, e.g. a non latin-1 uuid or secret
            raise DaemonConnectionError(f"Could not send request to {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise DaemonRejectedError(_error_detail(response), status_code=response.status_code)

        return response

    def reinstall(self, target: Target) -> ActionResult:
        """Ask the daemon to reinstall ``target``.

        Failures are returned as :class:`ActionFailed`, never raised.
        """
        try:
            response = self.send(target, "POST", "server/reinstall")
        except DaemonError as e:
            self.logger.debug(f"Reinstall of server {target.id} failed ({e.kind}): {e}")
            return ActionFailed(kind=e.kind, detail=str(e), status_code=e.status_code)

        self.logger.debug(f"Reinstall of server {target.id} accepted ({response.status_code})")
        return ActionSucceeded(status_code=response.status_code)
