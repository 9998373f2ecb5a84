"""
Resolution of a username to its canonical customer identity.
"""
from urllib.parse import urlsplit

from login_service.base_microservice import BaseMicroservice
from login_service.auth.directory import CustomerDirectory
from login_service.auth.exceptions import CustomerNotFound, MalformedCustomerLink
from login_service.auth.models import CustomerDirectoryEntry


def customer_id_from_link(link: str) -> str:
    """
    Return the final path segment of a customer link.

    "http://accounts/customers/42" -> "42"

    Raises:
        MalformedCustomerLink: If the path has no final segment
    """
    customer_id = urlsplit(link).path.split("/")[-1]
    if not customer_id:
        raise MalformedCustomerLink(link)
    return customer_id


class IdentityResolver:
    """
    Looks a username up in the customer directory.

    When the directory returns several matches the first one in list order
    wins; there is no ranking.
    """

    def __init__(self, directory: CustomerDirectory):
        self.directory = directory
        self.service = BaseMicroservice("identity")

    async def resolve(self, username: str) -> CustomerDirectoryEntry:
        """
        Resolve a username to a directory entry.

        Args:
            username: Authenticated username

        Returns:
            CustomerDirectoryEntry for the first match

        Raises:
            CustomerNotFound: If the directory has no match
            MalformedCustomerLink: If the matched link has no path segment
            DirectoryUnavailable: If the directory cannot be queried
        """
        result = await self.directory.find_customer_by_username(username)
        if not result.customers:
            raise CustomerNotFound(username)

        match = result.customers[0]
        link = match.links.customer.href
        customer_id = customer_id_from_link(link)
        self.service.logger.debug(f"Customer id: {customer_id}")
        return CustomerDirectoryEntry(
            username=match.username,
            customer_link=link,
            id=customer_id,
        )
