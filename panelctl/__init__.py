"""panelctl - bulk server management for game panel daemons."""

__version__ = "0.1.0"
