"""
Exceptions raised by the credential store, the customer directory client
and the registration orchestrator. Handlers translate them to status codes.
"""
from typing import Optional


class LoginServiceError(Exception):
    """Base class for all service errors."""


class CredentialSourceError(LoginServiceError):
    """The credential file could not be read or parsed."""


class DirectoryError(LoginServiceError):
    """Identity resolution against the customer directory failed."""


class CustomerNotFound(DirectoryError):
    def __init__(self, username: str):
        super().__init__(f"No customer found for username '{username}'")
        self.username = username


class MalformedCustomerLink(DirectoryError):
    def __init__(self, link: str):
        super().__init__(f"Customer link has no path segment: '{link}'")
        self.link = link


class DirectoryUnavailable(DirectoryError):
    """Transport failure, error status or undecodable search response."""


class RegistrationFailed(LoginServiceError):
    """
    A creation step of the registration failed.

    Carries the step that failed and the progress reached before it, so
    resources created by earlier steps can be reported.
    """
    def __init__(self, stage: str, message: str, progress=None):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.progress = progress


class DownstreamUnavailable(RegistrationFailed):
    """The creation endpoint could not be reached."""


class ResourceRejected(RegistrationFailed):
    """The creation endpoint answered, but not with a usable success."""
    def __init__(self, stage: str, message: str, progress=None, status_code: Optional[int] = None):
        super().__init__(stage, message, progress)
        self.status_code = status_code


class UsernameTaken(RegistrationFailed):
    """A credential with this username already exists."""
    def __init__(self, username: str, progress=None):
        super().__init__("credential", f"Username '{username}' already registered", progress)
        self.username = username
