import logging

from .session import SessionContext

logger = logging.getLogger(__name__)

GOOGLE_CHECK_204 = "http://connectivitycheck.gstatic.com/generate_204"
GOOGLE_CHECK_204_ALT = "http://clients3.google.com/generate_204"
APPLE_CHECK = "http://captive.apple.com/hotspot-detect.html"

PROBE_TIMEOUT = 5


def _no_content(context: SessionContext, url: str) -> bool:
    response = context.request("GET", url, timeout=PROBE_TIMEOUT, allow_redirects=False)
    if response is None:
        return False
    logger.debug("Probe %s status=%s", url, response.status_code)
    return response.status_code == 204


def _apple_success(context: SessionContext) -> bool:
    response = context.request("GET", APPLE_CHECK, timeout=PROBE_TIMEOUT, allow_redirects=False)
    if response is None:
        return False
    return "success" in (response.text or "").lower()


def has_internet(context: SessionContext) -> bool:
    """Return True when any connectivity check shows an open network.

    Portals often intercept one provider's check domain but not another's,
    so a single failed check is never conclusive.
    """
    if _no_content(context, GOOGLE_CHECK_204):
        return True
    if _no_content(context, GOOGLE_CHECK_204_ALT):
        return True
    return _apple_success(context)
