import os
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

logger = logging.getLogger("login_service")


def configure_logging(level: Optional[str] = None):
    """
    Configure root logging once for the process.
    Level falls back to LOG_LEVEL from the environment.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.setLevel(getattr(logging, level, logging.INFO))


class MCPResponse(JSONResponse):
    """
    Standard envelope for the informational endpoints.
    """
    def __init__(self, data: Any = None, message: str = "success", status: str = "ok", **kwargs):
        content = {
            "status": status,
            "message": message,
            "data": data,
        }
        super().__init__(content=content, **kwargs)


class BaseMicroservice:
    """
    Base class shared by the service components. Provides:
    - Event/error logging
    - Standard response envelope
    """
    def __init__(self, service_name: str = "login"):
        self.service_name = service_name
        self.logger = logger.getChild(service_name)

    def mcp_response(self, data: Any = None, message: str = "success", status: str = "ok"):
        """
        Return a standard envelope response.
        """
        return MCPResponse(data=data, message=message, status=status)

    def log_event(self, event: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "service": self.service_name,
            "event": event,
            "data": details or {},
        }
        self.logger.info(f"EVENT: {json.dumps(log_data, default=str)}")
        return log_data

    def log_error(self, error: Exception, context: str = "") -> Dict[str, Any]:
        error_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "service": self.service_name,
            "error": str(error),
            "error_type": error.__class__.__name__,
            "context": context or "unknown",
        }
        self.logger.error(f"ERROR: {json.dumps(error_data, default=str)}")
        return error_data

