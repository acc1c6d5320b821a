"""Detect a captive portal and try to get through it.

One pass per invocation: probe, locate the portal, try a vendor fast path,
fall back to a generic form submit, probe again. Re-run to retry.
"""

import enum
import logging
from typing import Optional

from .config import Settings, load_settings, setup_logging
from .form import submit_generic_form
from .locate import locate_portal
from .probe import has_internet
from .session import SessionContext, open_session
from .vendors import FastPathResult, find_negotiator

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    ALREADY_CONNECTED = ("already-connected", 0)
    CONNECTED_VENDOR = ("connected-via-vendor-fast-path", 0)
    CONNECTED_GENERIC = ("connected-via-generic-submit", 0)
    PORTAL_NOT_FOUND = ("portal-not-found", 2)
    STILL_BLOCKED = ("still-blocked", 3)

    def __init__(self, label: str, exit_code: int) -> None:
        self.label = label
        self.exit_code = exit_code


def try_fast_path(context: SessionContext, portal_url: str) -> bool:
    negotiator = find_negotiator(portal_url)
    if negotiator is None:
        return False

    if negotiator.attempt(context, portal_url) is FastPathResult.NOT_APPLICABLE:
        return False

    if has_internet(context):
        return True
    logger.info("%s fast-path attempted; internet still blocked. Continuing...", negotiator.name)
    return False


def run(context: SessionContext) -> Outcome:
    logger.info("Starting captive portal check")
    if has_internet(context):
        logger.info("Internet already available. Nothing to do.")
        return Outcome.ALREADY_CONNECTED

    portal_url = locate_portal(context)
    if not portal_url:
        logger.error("Could not determine portal URL.")
        return Outcome.PORTAL_NOT_FOUND
    logger.info("Detected portal URL: %s", portal_url)

    if try_fast_path(context, portal_url):
        logger.info("Access obtained via vendor fast-path.")
        return Outcome.CONNECTED_VENDOR

    submit_generic_form(context, portal_url)

    if has_internet(context):
        logger.info("Internet access obtained.")
        return Outcome.CONNECTED_GENERIC

    logger.error("Still behind captive portal (or network requires manual steps).")
    if context.settings.keep_workdir:
        logger.error("Check %s for captured HTML and responses.", context.workdir)
    else:
        logger.error("Re-run with KEEP_WORKDIR=1 to keep captured HTML and responses.")
    return Outcome.STILL_BLOCKED


def main(settings: Optional[Settings] = None) -> int:
    if settings is None:
        settings = load_settings()
    setup_logging(
        log_level=settings.log_level,
        iface=settings.iface,
        log_dir=settings.log_dir,
        debug=settings.debug,
    )

    with open_session(settings) as context:
        outcome = run(context)

    logger.info("Outcome: %s (exit %d)", outcome.label, outcome.exit_code)
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
