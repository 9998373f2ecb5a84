"""
Registration orchestration.

A registration creates three downstream resources in a fixed order:

    address -> card -> customer

Each step consumes the link produced by the previous ones. There is no
compensation: when a later step fails, resources created by earlier steps
stay behind and are reported through RegistrationProgress.orphaned_links.
"""
from login_service.base_microservice import BaseMicroservice
from login_service.auth.credentials import CredentialStore
from login_service.auth.directory import CustomerDirectory
from login_service.auth.exceptions import RegistrationFailed, UsernameTaken
from login_service.auth.models import (
    Credential, RegistrationPayload, RegistrationProgress, RegistrationResult,
    RegistrationStage
)


class RegistrationOrchestrator:
    """
    Runs the address, card and customer creation calls for a new user and
    records the credential once all three succeed.
    """

    def __init__(self, directory: CustomerDirectory, credential_store: CredentialStore):
        self.directory = directory
        self.credential_store = credential_store
        self.service = BaseMicroservice("registration")

    async def register(self, payload: RegistrationPayload) -> RegistrationResult:
        """
        Register a new customer.

        Args:
            payload: Address, card and customer profile

        Returns:
            RegistrationResult with the created customer link and progress

        Raises:
            DownstreamUnavailable: If a creation endpoint cannot be reached
            ResourceRejected: If a creation endpoint rejects the entity
            UsernameTaken: If the username is already registered
        """
        progress = RegistrationProgress()
        username = payload.customer.username
        password = payload.customer.password

        if self.credential_store.contains(username):
            self.service.log_event("registration.failed", {
                "username": username,
                "stage": "credential",
                "reached": progress.stage.name,
            })
            raise UsernameTaken(username, progress)

        try:
            progress.address_link = await self.directory.create_address(payload.address)
            progress.stage = RegistrationStage.ADDRESS_CREATED

            progress.card_link = await self.directory.create_card(payload.card)
            progress.stage = RegistrationStage.CARD_CREATED

            customer = payload.customer.model_copy(update={
                "password": None,
                "addresses": [progress.address_link],
                "cards": [progress.card_link],
            })
            customer_link = await self.directory.create_customer(customer)
            progress.stage = RegistrationStage.CUSTOMER_CREATED

            # append re-checks the name under the store lock
            self.credential_store.append(Credential(id="", name=username, password=password))
        except RegistrationFailed as e:
            e.progress = progress
            self.service.log_event("registration.failed", {
                "username": username,
                "stage": e.stage,
                "reached": progress.stage.name,
                "orphaned": progress.orphaned_links,
            })
            raise

        self.service.log_event("registration.completed", {
            "username": username,
            "customer": customer_link,
        })
        return RegistrationResult(
            username=username,
            customer_link=customer_link,
            progress=progress,
        )
