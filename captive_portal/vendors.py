"""Vendor fast paths that grant access without the generic form submit.

Each negotiator recognises its vendor from the portal URL and replays the
vendor's own grant protocol. Adding a vendor means adding a subclass to
``NEGOTIATORS``.
"""

import abc
import enum
import logging
import re
from typing import Optional

from .extract import extract_header, normalize_url
from .session import GRANT_RESPONSE_FILE, SessionContext, header_block

logger = logging.getLogger(__name__)

GRANT_TIMEOUT = 10


class FastPathResult(enum.Enum):
    NOT_APPLICABLE = "not_applicable"
    APPLIED = "applied"


class FastPathNegotiator(abc.ABC):
    name = ""
    signature: Optional[re.Pattern] = None

    def matches(self, portal_url: str) -> bool:
        if self.signature is None or not portal_url:
            return False
        return bool(self.signature.search(portal_url))

    @abc.abstractmethod
    def attempt(self, context: SessionContext, portal_url: str) -> FastPathResult:
        """Run the vendor grant; ``NOT_APPLICABLE`` when the portal lacks it."""


def escape_continue_url(value: str) -> str:
    return value.replace('"', "%22").replace(" ", "%20")


def build_grant_url(portal_url: str, continue_url: str) -> str:
    escaped = escape_continue_url(continue_url)
    match = re.search(r"^(.*)/splash/([^/]+)/", portal_url)
    if match:
        prefix, token = match.group(1), match.group(2)
        return f"{prefix}/splash/{token}/grant?continue_url={escaped}"
    return f"{portal_url.rstrip('/')}/grant?continue_url={escaped}"


class MerakiNegotiator(FastPathNegotiator):
    """Cisco Meraki splash pages (``*.network-auth.com``).

    The "Continue to the Internet" button issues an XHR HEAD for the
    ``Continue-Url`` header, then loads ``/grant?continue_url=...``.
    """

    name = "meraki"
    signature = re.compile(r"network-auth\.com|meraki", re.IGNORECASE)

    def attempt(self, context: SessionContext, portal_url: str) -> FastPathResult:
        logger.info("Attempting Meraki-style Continue-Url flow...")
        response = context.request(
            "HEAD",
            portal_url,
            timeout=GRANT_TIMEOUT,
            allow_redirects=False,
            headers={"X-Requested-With": "XMLHttpRequest"},
        )
        continue_url = normalize_url(extract_header(header_block(response), "Continue-Url"))
        if not continue_url:
            logger.info("No Continue-Url header found; Meraki fast-path not applicable.")
            return FastPathResult.NOT_APPLICABLE

        grant_url = build_grant_url(portal_url, continue_url)
        logger.info("Grant URL: %s", grant_url)
        grant = context.request("GET", grant_url, timeout=GRANT_TIMEOUT)
        if grant is not None:
            context.save_artifact(GRANT_RESPONSE_FILE, grant.text)
        return FastPathResult.APPLIED


NEGOTIATORS: tuple[FastPathNegotiator, ...] = (MerakiNegotiator(),)


def find_negotiator(portal_url: str) -> Optional[FastPathNegotiator]:
    for negotiator in NEGOTIATORS:
        if negotiator.matches(portal_url):
            return negotiator
    return None
