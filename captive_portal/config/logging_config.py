import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(iface)s] %(message)s"


class IfaceFilter(logging.Filter):
    """Stamp every record with the interface label for ``LOG_FORMAT``."""

    def __init__(self, iface: str) -> None:
        super().__init__()
        self.iface = iface or "unknown"

    def filter(self, record: logging.LogRecord) -> bool:
        record.iface = self.iface
        return True


def setup_logging(
    log_level: str = "INFO",
    iface: str = "",
    log_dir: Optional[Path] = None,
    debug: bool = False,
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{datetime.now():%Y-%m-%d}.log"
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    iface_filter = IfaceFilter(iface)
    for handler in handlers:
        handler.addFilter(iface_filter)

    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # urllib3 is noisy at DEBUG; only let it through when explicitly asked
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)
