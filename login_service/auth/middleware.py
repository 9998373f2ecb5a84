"""
Authentication dependencies.

This module provides FastAPI dependencies for:
- Extracting HTTP Basic credentials
- Reaching the service components stored on the application state
"""
import binascii
from base64 import b64decode
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from login_service.auth.credentials import CredentialStore
from login_service.auth.directory import CustomerDirectory
from login_service.auth.identity import IdentityResolver
from login_service.auth.registration import RegistrationOrchestrator

UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Basic"}


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers=UNAUTHORIZED_HEADERS,
    )


class UTF8HTTPBasic(HTTPBasic):
    """
    HTTP Basic scheme decoding user-pass as UTF-8 (RFC 7617 charset="UTF-8").

    Usernames and passwords may be any Unicode text. Returns None when no
    Basic header is present.
    """

    async def __call__(self, request: Request) -> Optional[HTTPBasicCredentials]:
        authorization = request.headers.get("Authorization")
        scheme, param = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != "basic":
            return None
        try:
            data = b64decode(param, validate=True).decode("utf-8")
        except (ValueError, UnicodeDecodeError, binascii.Error):
            raise unauthorized()
        username, separator, password = data.partition(":")
        if not separator:
            raise unauthorized()
        return HTTPBasicCredentials(username=username, password=password)


basic_scheme = UTF8HTTPBasic(auto_error=False)


async def basic_credentials(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
) -> HTTPBasicCredentials:
    """
    Dependency returning the Basic auth credentials of the request.

    Raises:
        HTTPException: 401 if no Basic Authorization header is present
    """
    if credentials is None:
        raise unauthorized()
    return credentials


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_directory(request: Request) -> CustomerDirectory:
    return request.app.state.directory


def get_identity_resolver(
    directory: CustomerDirectory = Depends(get_directory),
) -> IdentityResolver:
    return IdentityResolver(directory)


def get_registration_orchestrator(
    directory: CustomerDirectory = Depends(get_directory),
    credential_store: CredentialStore = Depends(get_credential_store),
) -> RegistrationOrchestrator:
    return RegistrationOrchestrator(directory, credential_store)
