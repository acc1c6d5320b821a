"""Best-effort header and HTML attribute extraction.

Captive portal markup is messy, so none of this tries to be a compliant
parser: tags are found with permissive patterns and a miss is reported as
``None`` (or ``""``) rather than raised.
"""

import re
from typing import Iterable, Iterator, Optional, Tuple
from urllib.parse import urljoin

ATTR_VALUE = r"""("[^"]*"|'[^']*'|[^\s"'>]+)"""

_URL_RE = re.compile(r"""https?://[^"'\s<>)]+""", re.IGNORECASE)
_INPUT_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE)


def extract_header(header_block: str, name: str) -> Optional[str]:
    if not header_block or not name:
        return None

    prefix = name.lower() + ":"
    lines = header_block.split("\n")
    for idx, line in enumerate(lines):
        if not line.lower().startswith(prefix):
            continue
        value = line[len(prefix):].strip(" \t")
        # folded header lines
        for nextline in lines[idx + 1:]:
            if nextline[:1] not in (" ", "\t"):
                break
            value = value.rstrip("\r") + nextline.lstrip(" \t")
        return value.replace("\r", "").strip()
    return None


def normalize_url(raw: Optional[str]) -> str:
    if not raw:
        return ""
    return re.sub(r'[>"]+$', "", re.sub(r'^[<"]+', "", raw.strip()))


def _unquote_attr(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def tag_attribute(tag_text: str, attribute: str) -> Optional[str]:
    """Read one attribute from a single tag's text (``<input ...>``)."""
    match = re.search(
        rf"(?:^|[\s<]){re.escape(attribute)}\s*=\s*{ATTR_VALUE}",
        tag_text,
        re.IGNORECASE,
    )
    if not match:
        return None
    return _unquote_attr(match.group(1))


def find_tag_attribute(
    html: str,
    tag: str,
    attribute: str,
    first_tag_only: bool = True,
) -> Optional[str]:
    """Return ``attribute`` of the first ``<tag>`` carrying it.

    With ``first_tag_only`` the scan stops at the first ``<tag>`` whether or
    not it has the attribute, which is how form actions are read: a first
    form with no action means "post back to this page", never "use the
    second form's action".
    """
    if not html:
        return None
    for match in re.finditer(rf"<{re.escape(tag)}\b[^>]*>", html, re.IGNORECASE):
        value = tag_attribute(match.group(0), attribute)
        if value is not None or first_tag_only:
            return value
    return None


def extract_form_action(html: str) -> str:
    return (find_tag_attribute(html, "form", "action") or "").strip()


def extract_base_href(html: str) -> Optional[str]:
    href = find_tag_attribute(html, "base", "href", first_tag_only=False)
    if href is None:
        return None
    return href.strip() or None


def resolve_form_action(html: str, page_url: str) -> str:
    action = extract_form_action(html)
    if not action:
        return page_url
    if re.match(r"^https?://", action, re.IGNORECASE):
        return action
    base_href = extract_base_href(html)
    return urljoin(base_href or page_url, action)


def iter_input_tags(html: str) -> Iterator[str]:
    if not html:
        return
    for match in _INPUT_RE.finditer(html):
        yield match.group(0)


def hidden_inputs(html: str) -> Iterator[Tuple[str, str]]:
    for tag_text in iter_input_tags(html):
        input_type = (tag_attribute(tag_text, "type") or "").strip().lower()
        name = tag_attribute(tag_text, "name") or ""
        if input_type != "hidden" or not name:
            continue
        yield name, tag_attribute(tag_text, "value") or ""


def find_input_named(html: str, names: Iterable[str]) -> Optional[str]:
    """Return the actual name of the first input matching one of ``names``.

    The page is searched for any element carrying the name, not only
    ``<input>``, so ``<select name="org">`` and friends count too.
    """
    wanted = {n.lower() for n in names}
    if not html or not wanted:
        return None
    for match in re.finditer(rf"(?:^|[\s<])name\s*=\s*{ATTR_VALUE}", html, re.IGNORECASE):
        name = _unquote_attr(match.group(1)).strip()
        if name.lower() in wanted:
            return name
    return None


def find_portal_link(text: str, keywords: Iterable[str]) -> Optional[str]:
    keywords = tuple(k.lower() for k in keywords)
    if not text:
        return None
    for line in text.splitlines():
        for match in _URL_RE.finditer(line):
            url = match.group(0)
            lowered = url.lower()
            if any(k in lowered for k in keywords):
                return url
    return None
