from .logging_config import setup_logging
from .settings import DEFAULT_USER_AGENT, Settings, load_settings

__all__ = ["DEFAULT_USER_AGENT", "Settings", "load_settings", "setup_logging"]
