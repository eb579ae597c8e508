"""Configuration management for the panelctl application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration with sensible defaults."""

    # Inventory of nodes and servers
    INVENTORY_PATH: str = os.getenv("PANELCTL_INVENTORY", "inventory.yaml")

    # Daemon HTTP timeouts (in seconds)
    DAEMON_TIMEOUT: float = float(os.getenv("DAEMON_TIMEOUT", "30"))
    DAEMON_CONNECT_TIMEOUT: float = float(os.getenv("DAEMON_CONNECT_TIMEOUT", "10"))

    # API
    API_KEY: str = os.getenv("PANELCTL_API_KEY", "panelctl-secret")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Security
    REDACT_KEYS: tuple = ("daemon_secret", "token", "api_key", "secret", "password")

    @classmethod
    def validate(cls) -> None:
        """Validate timeout configuration."""
        invalid = [
            name for name, value in (
                ("DAEMON_TIMEOUT", cls.DAEMON_TIMEOUT),
                ("DAEMON_CONNECT_TIMEOUT", cls.DAEMON_CONNECT_TIMEOUT),
            )
            if value <= 0
        ]
        if invalid:
            raise ValueError(f"Timeouts must be positive: {', '.join(invalid)}")

    @classmethod
    def timeouts(cls) -> tuple:
        """Return the (connect, read) timeout pair used for daemon calls."""
        return (cls.DAEMON_CONNECT_TIMEOUT, cls.DAEMON_TIMEOUT)

# Don't validate on import to allow for dynamic configuration
# Call Config.validate() explicitly when needed
