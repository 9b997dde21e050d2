import os
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("microservice")

Base = declarative_base()


def create_session_factory(database_url: str) -> Tuple[AsyncEngine, async_sessionmaker]:
    """
    Build an async engine and a session factory bound to it.
    The caller owns the engine and must dispose it on shutdown.
    """
    engine = create_async_engine(database_url, echo=False)
    return engine, async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


class MCPResponse(JSONResponse):
    """
    Standard MCP protocol response for all API endpoints.
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
    Base class for all microservices. Provides:
    - Error/event logging
    - MCP protocol response
    """
    def __init__(self, service_name: str = "microservice"):
        self.service_name = service_name
        self.logger = logger

    def mcp_response(self, data: Any = None, message: str = "success", status: str = "ok", status_code: int = 200):
        """
        Return a standard MCP protocol response.
        """
        return MCPResponse(data=data, message=message, status=status, status_code=status_code)

    def log_event(self, event: str, details: Optional[Dict[str, Any]] = None):
        self.logger.info(f"EVENT: {event} | Service: {self.service_name} | Details: {details}")

    def log_error(self, error: Exception, context: str = ""):
        self.logger.error(f"ERROR: {str(error)} | Service: {self.service_name} | Context: {context}")
