"""Best-effort captive portal detection and login."""

__version__ = "0.1.0"
