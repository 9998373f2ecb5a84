"""
Client for the customer directory and its creation endpoints.

This module provides the four remote capabilities the service depends on:
- Search customers by username
- Create an address
- Create a card
- Create a customer
"""
import json
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from login_service.base_microservice import BaseMicroservice
from login_service.config import ServiceConfig
from login_service.auth.exceptions import (
    DirectoryUnavailable, DownstreamUnavailable, ResourceRejected
)
from login_service.auth.models import (
    Address, Card, CustomerProfile, DirectorySearchResult
)

CUSTOMER_SEARCH_PATH = "/customers/search/findByUsername"
CUSTOMERS_PATH = "/customers"
ADDRESSES_PATH = "/addresses"
CARDS_PATH = "/cards"


def build_async_client(
    config: ServiceConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create the shared HTTP client for downstream calls.

    Every call is bounded by the configured timeout.
    """
    return httpx.AsyncClient(
        base_url=config.customer_service_url,
        timeout=httpx.Timeout(config.downstream_timeout),
        headers={"Accept": "application/json"},
        transport=transport,
    )


class CustomerDirectory:
    """
    Thin wrapper over httpx for the customer service endpoints.

    Each method issues exactly one request; nothing is retried.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.service = BaseMicroservice("directory")

    async def aclose(self):
        await self.client.aclose()

    async def find_customer_by_username(self, username: str) -> DirectorySearchResult:
        """
        Search the directory for customers with the given username.

        Raises:
            DirectoryUnavailable: On transport failure, a non-2xx status or
                a body that does not decode into the search result shape
        """
        self.service.logger.debug(f"GET {CUSTOMER_SEARCH_PATH}?username={username}")
        try:
            response = await self.client.get(CUSTOMER_SEARCH_PATH, params={"username": username})
        except httpx.HTTPError as e:
            raise DirectoryUnavailable(f"Customer search failed: {e}") from e

        if not response.is_success:
            raise DirectoryUnavailable(
                f"Customer search returned status {response.status_code}"
            )

        try:
            result = DirectorySearchResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DirectoryUnavailable(f"Undecodable customer search response: {e}") from e

        self.service.logger.debug(f"Received {len(result.customers)} customer(s) for {username}")
        return result

    async def create_address(self, address: Address) -> str:
        """POST an address; returns the Location of the created resource."""
        response = await self._post("address", ADDRESSES_PATH, address.model_dump(by_alias=True))
        return self._location(response, "address")

    async def create_card(self, card: Card) -> str:
        """POST a card; returns the Location of the created resource."""
        response = await self._post("card", CARDS_PATH, card.model_dump(by_alias=True))
        return self._location(response, "card")

    async def create_customer(self, customer: CustomerProfile) -> Optional[str]:
        """
        POST a customer record.

        Any 2xx status is success. The Location header is returned when the
        service provides one.
        """
        body = customer.model_dump(by_alias=True, exclude_none=True)
        response = await self._post("customer", CUSTOMERS_PATH, body)
        return response.headers.get("Location")

    async def _post(self, stage: str, path: str, body: Dict[str, Any]) -> httpx.Response:
        self.service.logger.debug(f"POSTing {json.dumps(_redact(body))} to {path}")
        try:
            response = await self.client.post(path, json=body)
        except httpx.HTTPError as e:
            raise DownstreamUnavailable(stage, f"POST {path} failed: {e}") from e

        if not response.is_success:
            raise ResourceRejected(
                stage,
                f"POST {path} returned status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _location(response: httpx.Response, stage: str) -> str:
        location = response.headers.get("Location")
        if not location:
            raise ResourceRejected(
                stage,
                "creation response carried no Location header",
                status_code=response.status_code,
            )
        return location


def _redact(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Hide card numbers, security codes and passwords in debug output.

    Only top-level keys are masked; nested objects are logged as-is.
    """
    hidden = {"longNum", "ccv", "password"}
    return {k: ("***" if k in hidden and v else v) for k, v in body.items()}


def build_directory(
    config: ServiceConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CustomerDirectory:
    return CustomerDirectory(build_async_client(config, transport=transport))
