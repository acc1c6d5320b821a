import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from http.cookiejar import MozillaCookieJar
from pathlib import Path
from typing import Dict, Iterator, Optional

import requests
import urllib3

from .config.settings import Settings

# captive portals routinely serve self-signed or mismatched certificates
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)

COOKIE_FILE = "cookies.txt"
PORTAL_PAGE_FILE = "portal.html"
POST_RESPONSE_FILE = "post-response.html"
GRANT_RESPONSE_FILE = "grant.html"
MAX_ARTIFACT_BYTES = 256 * 1024


def mask_value(value: str, keep: int = 2) -> str:
    if not value:
        return ""
    if len(value) <= keep * 2:
        return "*" * len(value)
    return f"{value[:keep]}***{value[-keep:]}"


def header_block(response: Optional[requests.Response]) -> str:
    """Render a response's status line and headers as raw header text."""
    if response is None:
        return ""
    lines = [f"HTTP {response.status_code} {response.reason or ''}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n"


@dataclass
class SessionContext:
    settings: Settings
    workdir: Path
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.session.headers.update({"User-Agent": self.settings.user_agent})
        self.session.verify = False

    @property
    def cookie_path(self) -> Path:
        return self.workdir / COOKIE_FILE

    def request(
        self,
        method: str,
        url: str,
        timeout: float,
        allow_redirects: bool = True,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> Optional[requests.Response]:
        """Issue one request through the shared session.

        Transport failures are logged and reported as ``None``; callers treat
        that as a negative answer.
        """
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=timeout,
                allow_redirects=allow_redirects,
                verify=False,
            )
        except requests.RequestException as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            return None
        finally:
            self.save_cookies()

        logger.debug(
            "%s %s -> status=%s final_url=%s",
            method,
            url,
            response.status_code,
            response.url,
        )
        return response

    def save_cookies(self) -> None:
        jar = MozillaCookieJar(str(self.cookie_path))
        for cookie in self.session.cookies:
            jar.set_cookie(cookie)
        try:
            jar.save(ignore_discard=True, ignore_expires=True)
        except OSError as exc:
            logger.warning("Failed to write cookie jar %s: %s", self.cookie_path, exc)

    def save_artifact(self, name: str, text: str) -> Optional[Path]:
        path = self.workdir / name
        payload = (text or "").encode("utf-8", errors="ignore")[:MAX_ARTIFACT_BYTES]
        try:
            path.write_bytes(payload)
        except OSError as exc:
            logger.warning("Failed to save %s: %s", path, exc)
            return None
        logger.debug("Saved %s (%d bytes)", path, len(payload))
        return path


@contextmanager
def open_session(settings: Settings) -> Iterator[SessionContext]:
    """Yield a fresh session whose work area is removed on every exit path."""
    parent = None
    if settings.workdir is not None:
        settings.workdir.mkdir(parents=True, exist_ok=True)
        parent = str(settings.workdir)
    workdir = Path(tempfile.mkdtemp(prefix="captive-", dir=parent))
    context = SessionContext(settings=settings, workdir=workdir)
    logger.debug("Work directory: %s", workdir)
    try:
        yield context
    finally:
        context.session.close()
        if settings.keep_workdir:
            logger.info("Keeping work directory: %s", workdir)
        else:
            shutil.rmtree(workdir, ignore_errors=True)
