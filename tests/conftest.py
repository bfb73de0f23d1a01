"""Fixtures — fake HTTP session serving canned pages."""

import threading
from unittest.mock import MagicMock

import pytest
import requests


class FakeSession:
    """Stands in for requests.Session; serves registered URLs, 404 for the rest."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.headers = {}
        self._lock = threading.Lock()

    def add(self, url, body="", status=200):
        self.routes[url] = (status, body)

    def fail(self, url, exc):
        self.routes[url] = exc

    def get(self, url, timeout=None, allow_redirects=True):
        with self._lock:
            self.calls.append((url, timeout))
        route = self.routes.get(url, (404, "Not Found"))
        if isinstance(route, Exception):
            raise route
        status, body = route
        resp = MagicMock(spec=requests.Response)
        resp.status_code = status
        resp.text = body
        return resp

    def fetched(self):
        return [url for url, _ in self.calls]

    def close(self):
        pass


@pytest.fixture
def session():
    return FakeSession()


def doc_page(title, body, links=()):
    """Minimal documentation page with enough text to pass the content gate."""
    anchors = "".join(f'<a href="{href}">link</a> ' for href in links)
    filler = "This paragraph pads the main region well past the minimum length. " * 3
    return (
        f"<html><head><title>{title} | Docs</title></head><body>"
        f"<nav><a href=\"/nav-only\">Nav</a></nav>"
        f"<main><h1>{title}</h1><p>{body}</p><p>{filler}</p>{anchors}</main>"
        f"<footer>Copyright footer</footer></body></html>"
    )


@pytest.fixture
def make_page():
    return doc_page
