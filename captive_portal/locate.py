import logging
from typing import Optional
from urllib.parse import urljoin

from .extract import extract_header, find_portal_link, normalize_url
from .session import PORTAL_PAGE_FILE, SessionContext, header_block

logger = logging.getLogger(__name__)

# plain HTTP so the portal can intercept it
TRIGGER_URL = "http://example.com/"
TRIGGER_TIMEOUT = 8
FETCH_TIMEOUT = 10

PORTAL_KEYWORDS = ("splash", "login", "portal", "guest", "captive", "network-auth")


def redirect_location(context: SessionContext) -> str:
    logger.info("Attempting to trigger captive portal redirect...")
    response = context.request("HEAD", TRIGGER_URL, timeout=TRIGGER_TIMEOUT, allow_redirects=False)
    location = normalize_url(extract_header(header_block(response), "Location"))
    if location:
        return urljoin(TRIGGER_URL, location)
    return ""


def scan_trigger_body(context: SessionContext) -> Optional[str]:
    logger.info("No redirect Location header; attempting to fetch trigger URL body.")
    response = context.request("GET", TRIGGER_URL, timeout=FETCH_TIMEOUT)
    if response is None:
        return None
    html = response.text or ""
    context.save_artifact(PORTAL_PAGE_FILE, html)
    return find_portal_link(html, PORTAL_KEYWORDS)


def locate_portal(context: SessionContext) -> Optional[str]:
    """Find the portal URL from the redirect, falling back to the page body."""
    location = redirect_location(context)
    if location:
        return location
    return scan_trigger_body(context)
