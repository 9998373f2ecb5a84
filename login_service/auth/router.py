"""
Authentication router.

This module provides the FastAPI router for:
- Login with HTTP Basic credentials
- Registration of new customers
"""
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.security import HTTPBasicCredentials

from login_service.base_microservice import BaseMicroservice
from login_service.config import ServiceConfig
from login_service.auth.credentials import CredentialStore
from login_service.auth.directory import build_directory
from login_service.auth.exceptions import (
    CustomerNotFound, DirectoryError, DownstreamUnavailable, RegistrationFailed,
    UsernameTaken
)
from login_service.auth.identity import IdentityResolver
from login_service.auth.middleware import (
    basic_credentials, get_credential_store, get_identity_resolver,
    get_registration_orchestrator, unauthorized
)
from login_service.auth.models import LoginResponse, RegistrationPayload
from login_service.auth.registration import RegistrationOrchestrator

router = APIRouter(tags=["auth"])

base_service = BaseMicroservice("auth")


async def start_auth_service(app: FastAPI, config: ServiceConfig):
    """
    Initialize the auth components that were not injected.

    Returns the components created here, so the caller can close them.

    Raises:
        CredentialSourceError: If the credential file cannot be loaded
    """
    created = []
    if getattr(app.state, "credential_store", None) is None:
        app.state.credential_store = CredentialStore.load(config.credentials_file)
        base_service.log_event("credentials.loaded", {
            "source": config.credentials_file,
            "count": len(app.state.credential_store),
        })
    if getattr(app.state, "directory", None) is None:
        app.state.directory = build_directory(config)
        created.append(app.state.directory)
    base_service.log_event("service.startup", {
        "service": "auth",
        "customer_service_url": config.customer_service_url,
    })
    return created


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: HTTPBasicCredentials = Depends(basic_credentials),
    credential_store: CredentialStore = Depends(get_credential_store),
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    """
    Authenticate with Basic credentials and resolve the customer identity.

    Returns:
        {username, customer, id} for the first directory match
    """
    username = credentials.username
    base_service.logger.debug(f"Lookup for user {username}")

    if not credential_store.validate(username, credentials.password):
        base_service.log_event("user.login.failed", {
            "username": username,
            "reason": "invalid credentials",
        })
        raise unauthorized()

    try:
        entry = await resolver.resolve(username)
    except CustomerNotFound:
        base_service.log_event("user.login.failed", {
            "username": username,
            "reason": "no customer found",
        })
        raise unauthorized()
    except DirectoryError as e:
        base_service.log_error(e, context="Customer lookup")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Customer directory unavailable",
        )

    base_service.log_event("user.login", {"username": entry.username, "id": entry.id})
    return LoginResponse.from_entry(entry)


@router.post("/register")
async def register(
    request: Request,
    orchestrator: RegistrationOrchestrator = Depends(get_registration_orchestrator),
):
    """
    Create address, card and customer for a new user.

    Returns an empty 200; the caller logs in afterwards to get its identity.
    """
    try:
        payload = RegistrationPayload.model_validate(await request.json())
    except ValueError as e:
        base_service.log_error(e, context="Registration body")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed registration body",
        )

    try:
        await orchestrator.register(payload)
    except UsernameTaken as e:
        base_service.log_error(e, context="User registration")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )
    except RegistrationFailed as e:
        context = "Downstream unreachable" if isinstance(e, DownstreamUnavailable) else "Downstream rejected"
        base_service.log_error(e, context=context)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{e.stage.capitalize()} not created",
        )

    return Response(status_code=status.HTTP_200_OK)
