"""
Shared fixtures: an in-process stand-in for the customer service and a
pre-seeded credential store.
"""
import json

import httpx
import pytest

from login_service.auth.credentials import CredentialStore
from login_service.auth.directory import CustomerDirectory
from login_service.auth.models import Credential

BASE_URL = "http://accounts"
SEARCH_PATH = "/customers/search/findByUsername"


class FakeCustomerService:
    """
    Answers the search and creation endpoints and records every request.

    Use fail() and unreachable() to make a path misbehave.
    """

    def __init__(self):
        self.requests = []
        self.matches = []
        self.statuses = {}
        self.errors = {}
        self.raw_bodies = {}
        self.locations = {
            "/addresses": f"{BASE_URL}/addresses/57a98d98e4b00679b4a830b0",
            "/cards": f"{BASE_URL}/cards/57a98d98e4b00679b4a830b1",
            "/customers": f"{BASE_URL}/customers/57a98d98e4b00679b4a830b2",
        }

    def add_match(self, username, href):
        self.matches.append({"username": username, "_links": {"customer": {"href": href}}})

    def fail(self, path, status_code):
        self.statuses[path] = status_code

    def unreachable(self, path):
        self.errors[path] = "connection refused"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.errors:
            raise httpx.ConnectError(self.errors[path], request=request)
        if path in self.statuses:
            return httpx.Response(self.statuses[path])
        if path in self.raw_bodies:
            return httpx.Response(200, content=self.raw_bodies[path])
        if path == SEARCH_PATH:
            return httpx.Response(200, json={"_embedded": {"customer": self.matches}})
        location = self.locations.get(path)
        headers = {"Location": location} if location else {}
        return httpx.Response(201, headers=headers)

    @property
    def paths(self):
        return [r.url.path for r in self.requests]

    def body_sent_to(self, path):
        for r in self.requests:
            if r.url.path == path:
                return json.loads(r.content)
        return None

    def directory(self) -> CustomerDirectory:
        client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))
        return CustomerDirectory(client)


@pytest.fixture
def customer_service():
    return FakeCustomerService()


@pytest.fixture
def credential_store():
    return CredentialStore([
        Credential(id="1", name="alice", password="pw1"),
        Credential(id="2", name="bob", password="pw2"),
    ])


@pytest.fixture
def registration_body():
    return {
        "address": {"street": "Whitelees Road", "number": "246", "country": "United Kingdom", "city": "Glasgow"},
        "card": {"longNum": "5544154011345918", "expires": "08/19", "ccv": "958"},
        "customer": {
            "firstName": "Carol",
            "lastName": "Jones",
            "username": "carol",
            "password": "secret",
        },
    }
