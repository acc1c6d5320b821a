import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    email: str = ""
    fullname: str = ""
    company: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    debug: bool = False
    iface: str = ""
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    workdir: Optional[Path] = None
    keep_workdir: bool = False


def _getenv_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name, str(default)).strip().lower()
    return value in ("1", "true", "yes", "y", "on")


def _getenv_path(environ: Mapping[str, str], name: str) -> Optional[Path]:
    value = environ.get(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        environ = os.environ

    return Settings(
        email=environ.get("EMAIL", "").strip(),
        fullname=environ.get("FULLNAME", "").strip(),
        company=environ.get("COMPANY", "").strip(),
        user_agent=environ.get("UA", "").strip() or DEFAULT_USER_AGENT,
        debug=_getenv_bool(environ, "DEBUG", False),
        iface=environ.get("IFACE", "").strip(),
        log_level=environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        log_dir=_getenv_path(environ, "LOG_DIR"),
        workdir=_getenv_path(environ, "WORKDIR"),
        keep_workdir=_getenv_bool(environ, "KEEP_WORKDIR", False),
    )
