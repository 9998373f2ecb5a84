"""
Process configuration for the login service.

All environment lookups happen here; the rest of the service receives a
resolved ServiceConfig.
"""
import os
from typing import Optional

from pydantic import BaseModel, Field

PROD_CREDENTIALS_FILE = "/config/users.json"
DEV_CREDENTIALS_FILE = "./users.json"
PROD_CUSTOMER_SERVICE_URL = "http://accounts"
DEV_CUSTOMER_SERVICE_URL = "http://localhost:8082"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ServiceConfig(BaseModel):
    """Resolved settings for one service process."""
    port: int = 8084
    dev: bool = False
    verbose: bool = False
    log_level: str = "INFO"
    credentials_file: str = PROD_CREDENTIALS_FILE
    customer_service_url: str = PROD_CUSTOMER_SERVICE_URL
    downstream_timeout: float = Field(10.0, gt=0)

    @classmethod
    def from_env(
        cls,
        port: Optional[int] = None,
        dev: Optional[bool] = None,
        verbose: Optional[bool] = None,
    ) -> "ServiceConfig":
        """
        Build a config from environment variables.

        Explicit arguments (command line flags) win over the environment.
        Mode-dependent defaults are resolved here so that no other module
        needs to know about dev vs. production.
        """
        dev = _env_flag("DEV_MODE") if dev is None else dev
        verbose = _env_flag("VERBOSE") if verbose is None else verbose
        if port is None:
            port = int(os.getenv("PORT", "8084"))

        default_level = "DEBUG" if (dev or verbose) else "INFO"
        return cls(
            port=port,
            dev=dev,
            verbose=verbose,
            log_level=os.getenv("LOG_LEVEL", default_level).upper(),
            credentials_file=os.getenv(
                "CREDENTIALS_FILE",
                DEV_CREDENTIALS_FILE if dev else PROD_CREDENTIALS_FILE,
            ),
            customer_service_url=os.getenv(
                "CUSTOMER_SERVICE_URL",
                DEV_CUSTOMER_SERVICE_URL if dev else PROD_CUSTOMER_SERVICE_URL,
            ).rstrip("/"),
            downstream_timeout=float(os.getenv("DOWNSTREAM_TIMEOUT_SECONDS", "10")),
        )
