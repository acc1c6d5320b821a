"""Tests for vendor fast-path negotiation."""

import pytest

from captive_portal.session import GRANT_RESPONSE_FILE
from captive_portal.vendors import (
    FastPathNegotiator,
    FastPathResult,
    MerakiNegotiator,
    build_grant_url,
    find_negotiator,
)
from tests.conftest import make_response

PORTAL = "https://n1.network-auth.com/splash/ABC123/"


class TestGrantUrl:
    def test_splash_token(self):
        url = build_grant_url(PORTAL, "http://neverssl.com/")
        assert url == "https://n1.network-auth.com/splash/ABC123/grant?continue_url=http://neverssl.com/"

    def test_splash_with_query(self):
        url = build_grant_url("https://n1.network-auth.com/acme/splash/T0K/?mac=aa", "http://x/")
        assert url == "https://n1.network-auth.com/acme/splash/T0K/grant?continue_url=http://x/"

    def test_fallback_appends_grant(self):
        url = build_grant_url("https://meraki.example/portal/", "http://x/a b")
        assert url == "https://meraki.example/portal/grant?continue_url=http://x/a%20b"

    def test_quote_escaping(self):
        assert build_grant_url(PORTAL, 'http://x/"q"').endswith('continue_url=http://x/%22q%22')


class TestMatching:
    def test_signature(self):
        assert find_negotiator("https://N1.Network-Auth.com/splash/x/") is not None
        assert isinstance(find_negotiator("http://wifi.meraki.example/"), MerakiNegotiator)

    def test_other_vendor(self):
        assert find_negotiator("http://10.0.0.1/guest/portal") is None
        assert find_negotiator("") is None

    def test_base_requires_attempt(self):
        with pytest.raises(TypeError):
            FastPathNegotiator()

        class Partial(FastPathNegotiator):
            name = "partial"

        with pytest.raises(TypeError):
            Partial()


class TestMerakiAttempt:
    def test_grant_flow(self, context, fake_session):
        fake_session.routes[("HEAD", PORTAL)] = make_response(
            200, headers={"Continue-Url": "http://neverssl.com/"}
        )
        grant = "https://n1.network-auth.com/splash/ABC123/grant?continue_url=http://neverssl.com/"
        fake_session.routes[("GET", grant)] = make_response(200, "<html>granted</html>")

        result = MerakiNegotiator().attempt(context, PORTAL)

        assert result is FastPathResult.APPLIED
        method, url, kwargs = fake_session.calls[0]
        assert (method, url) == ("HEAD", PORTAL)
        assert kwargs["headers"] == {"X-Requested-With": "XMLHttpRequest"}
        assert kwargs["allow_redirects"] is False
        assert fake_session.urls("GET") == [grant]
        assert (context.workdir / GRANT_RESPONSE_FILE).read_text(encoding="utf-8") == "<html>granted</html>"

    def test_no_continue_url(self, context, fake_session):
        fake_session.routes[("HEAD", PORTAL)] = make_response(200)
        assert MerakiNegotiator().attempt(context, PORTAL) is FastPathResult.NOT_APPLICABLE
        assert fake_session.urls("GET") == []

    def test_head_fails(self, context, fake_session):
        assert MerakiNegotiator().attempt(context, PORTAL) is FastPathResult.NOT_APPLICABLE
