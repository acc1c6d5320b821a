import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from .config.settings import Settings
from .extract import find_input_named, hidden_inputs, resolve_form_action
from .session import PORTAL_PAGE_FILE, POST_RESPONSE_FILE, SessionContext, mask_value

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10
SUBMIT_TIMEOUT = 10

CONSENT_FIELDS = ("terms", "accept", "agree", "policy", "aup")

EMAIL_ALIASES = ("email", "mail")
FULLNAME_ALIASES = ("name", "fullname", "full_name")
COMPANY_ALIASES = ("company", "org", "organization")


@dataclass
class PostData:
    pairs: List[Tuple[str, str]] = field(default_factory=list)

    def add(self, key: str, value: str) -> None:
        self.pairs.append((key, value))

    def keys(self) -> List[str]:
        return [key for key, _ in self.pairs]

    def serialize(self) -> str:
        return "&".join(f"{key}={value}" for key, value in self.pairs)

    def encode(self) -> bytes:
        # bytes so the transport never falls back to latin-1 for str bodies
        return self.serialize().encode("utf-8")


def escape_hidden_value(value: str) -> str:
    return value.replace("&", "%26").replace("+", "%2B")


def escape_identity_value(value: str) -> str:
    return value.replace("&", "%26").replace("+", " ").replace(" ", "%20")


def build_post_data(html: str, settings: Settings) -> PostData:
    data = PostData()

    for name, value in hidden_inputs(html):
        data.add(name, escape_hidden_value(value))

    for name in CONSENT_FIELDS:
        if find_input_named(html, (name,)):
            data.add(name, "on")

    for value, aliases in (
        (settings.email, EMAIL_ALIASES),
        (settings.fullname, FULLNAME_ALIASES),
        (settings.company, COMPANY_ALIASES),
    ):
        if not value:
            continue
        field_name = find_input_named(html, aliases)
        if field_name:
            logger.debug("Filling %s=%s", field_name, mask_value(value))
            data.add(field_name, escape_identity_value(value))

    return data


def fetch_portal_page(context: SessionContext, portal_url: str) -> Tuple[str, str]:
    """Return ``(html, final_url)`` for the portal page; empty html on failure."""
    logger.info("Fetching portal page: %s", portal_url)
    response = context.request("GET", portal_url, timeout=FETCH_TIMEOUT)
    if response is None:
        return "", portal_url
    html = response.text or ""
    context.save_artifact(PORTAL_PAGE_FILE, html)
    return html, response.url or portal_url


def submit_generic_form(context: SessionContext, portal_url: str) -> bool:
    """Accept-the-terms style submit of the portal's first form.

    Returns whether the POST got any response at all; whether it worked is
    decided by probing connectivity afterwards.
    """
    html, page_url = fetch_portal_page(context, portal_url)
    action_url = resolve_form_action(html, page_url)
    data = build_post_data(html, context.settings)

    logger.info("Submitting generic form to: %s", action_url)
    logger.debug("Form fields: %s", ",".join(data.keys()) or "none")
    response = context.request(
        "POST",
        action_url,
        timeout=SUBMIT_TIMEOUT,
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        data=data.encode(),
    )
    if response is None:
        return False
    logger.debug("Form submit status=%s", response.status_code)
    context.save_artifact(POST_RESPONSE_FILE, response.text)
    return True
