"""
Data contracts for the login service.

This module defines pydantic models for:
- Credentials loaded from the credential file
- Registration payloads and the entities forwarded downstream
- Directory search results
- Login responses
"""
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credential(BaseModel):
    """A username/password pair allowed to log in."""
    id: str = ""
    name: str = Field(..., min_length=1)
    password: str


class Address(BaseModel):
    """Address entity forwarded to the addresses endpoint."""
    model_config = ConfigDict(extra="allow")

    street: str = ""
    number: str = ""
    country: str = ""
    city: str = ""


class Card(BaseModel):
    """Payment card entity forwarded to the cards endpoint."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    long_num: str = Field("", alias="longNum")
    expires: str = ""
    ccv: str = ""


class CustomerProfile(BaseModel):
    """Customer record forwarded to the customers endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    username: str = Field(..., min_length=1)
    password: Optional[str] = None
    addresses: List[str] = []
    cards: List[str] = []


class RegistrationPayload(BaseModel):
    """Body of POST /register."""
    address: Address
    card: Card
    customer: CustomerProfile

    @field_validator("customer")
    @classmethod
    def customer_must_have_password(cls, v):
        if not v.password:
            raise ValueError("customer.password is required")
        return v


class CustomerLink(BaseModel):
    href: str


class CustomerLinks(BaseModel):
    customer: CustomerLink


class DirectoryCustomer(BaseModel):
    """One record of the directory's search-by-username result."""
    username: str = ""
    links: CustomerLinks = Field(..., alias="_links")


class EmbeddedCustomers(BaseModel):
    customer: List[DirectoryCustomer] = []


class DirectorySearchResult(BaseModel):
    """Nested search response: {"_embedded": {"customer": [...]}}."""
    embedded: EmbeddedCustomers = Field(default_factory=EmbeddedCustomers, alias="_embedded")

    @property
    def customers(self) -> List[DirectoryCustomer]:
        return self.embedded.customer


class CustomerDirectoryEntry(BaseModel):
    """Canonical identity resolved for a username."""
    username: str
    customer_link: str
    id: str


class LoginResponse(BaseModel):
    """Body returned by a successful POST /login."""
    username: str
    customer: str
    id: str

    @classmethod
    def from_entry(cls, entry: CustomerDirectoryEntry) -> "LoginResponse":
        return cls(username=entry.username, customer=entry.customer_link, id=entry.id)


class RegistrationStage(IntEnum):
    """Ordered progress marker for a registration."""
    STARTED = 0
    ADDRESS_CREATED = 1
    CARD_CREATED = 2
    CUSTOMER_CREATED = 3


class RegistrationProgress(BaseModel):
    """How far a registration got, and the links it produced on the way."""
    stage: RegistrationStage = RegistrationStage.STARTED
    address_link: Optional[str] = None
    card_link: Optional[str] = None

    @property
    def orphaned_links(self) -> List[str]:
        """Links created before a failure; nothing cleans these up."""
        if self.stage == RegistrationStage.CUSTOMER_CREATED:
            return []
        return [link for link in (self.address_link, self.card_link) if link]


class RegistrationResult(BaseModel):
    username: str
    customer_link: Optional[str] = None
    progress: RegistrationProgress
