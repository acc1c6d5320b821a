"""Shared fixtures: a scripted stand-in for ``requests.Session``."""

from typing import Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from captive_portal.config import Settings
from captive_portal.session import SessionContext


def make_response(
    status: int = 200,
    text: str = "",
    headers: Optional[dict] = None,
    url: str = "",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    response.url = url
    response.reason = "OK" if status == 200 else ""
    return response


class FakeSession(requests.Session):
    """Answers requests from a route table instead of the network.

    A route maps ``(method, url)`` to a response, an exception instance, or a
    list of those served in order (the last one repeats). Unknown routes
    raise ``requests.ConnectionError`` like an unreachable host would.
    """

    def __init__(self, routes: Optional[dict] = None) -> None:
        super().__init__()
        self.routes = dict(routes or {})
        self.calls: list = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        answer = self.routes.get((method, url))
        if isinstance(answer, list):
            answer = answer.pop(0) if len(answer) > 1 else answer[0]
        if answer is None:
            raise requests.ConnectionError(f"no route for {method} {url}")
        if isinstance(answer, Exception):
            raise answer
        if not answer.url:
            answer.url = url
        return answer

    def urls(self, method: Optional[str] = None) -> list:
        return [url for m, url, _ in self.calls if method is None or m == method]


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def context(tmp_path, settings, fake_session):
    return SessionContext(settings=settings, workdir=tmp_path, session=fake_session)
