"""
HTTP server for hits-search.

This module exposes the search service over HTTP.
"""

import time
import uuid
from typing import Callable, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hits_search import __version__
from hits_search.backend.client import SearchClient, SearchClientConfig
from hits_search.config.config import Config
from hits_search.search.response import SearchResponse
from hits_search.search.service import HitsSearchService
from hits_search.search.state import SearchState
from hits_search.utils.errors import NotFoundError, setup_error_handlers
from hits_search.utils.logging import get_logger

logger = get_logger(__name__)


class ServerStatus(BaseModel):
    """Model representing server status information."""

    status: str
    version: str
    uptime: float
    environment: str
    disjunctive_faceting: bool


class SearchServer:
    """
    HTTP front end for the search service.

    ``POST /search`` takes a search state and returns the merged response.
    """

    def __init__(self, config: Config, service: Optional[HitsSearchService] = None):
        """
        Initialize the server.

        Args:
            config: Application configuration
            service: Search service, built from the configuration when omitted
        """
        self.config = config
        self.service = service or self._create_service(config)
        self.app = FastAPI(
            title="hits-search",
            description="Faceted search with disjunctive facet counts",
            version=__version__,
            debug=config.debug,
        )
        self._setup_middleware()
        self._setup_routes()
        setup_error_handlers(self.app)
        self._start_time = time.monotonic()
        logger.info("Search server initialized")

    @staticmethod
    def _create_service(config: Config) -> HitsSearchService:
        client = SearchClient(SearchClientConfig(**config.backend.model_dump()))
        return HitsSearchService(
            client,
            disjunctive_faceting_enabled=config.search.disjunctive_faceting,
        )

    def _setup_middleware(self) -> None:
        """Configure middleware for the FastAPI application."""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.config.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def log_requests(request: Request, call_next: Callable) -> Response:
            """Log incoming requests and responses."""
            logger.debug(f"Request: {request.method} {request.url.path}")
            response = await call_next(request)
            logger.debug(f"Response: {response.status_code}")
            return response

        @self.app.middleware("http")
        async def add_correlation_id(request: Request, call_next: Callable) -> Response:
            """Add correlation ID to requests for tracking."""
            request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

    def _setup_routes(self) -> None:
        """Configure API routes for the FastAPI application."""

        @self.app.get("/")
        async def root() -> Dict[str, str]:
            """Root endpoint returning basic server information."""
            return {
                "server": "hits-search",
                "version": __version__,
                "status": "running",
            }

        @self.app.get("/health")
        async def health() -> Dict[str, str]:
            """Health check endpoint for monitoring."""
            return {"status": "healthy"}

        @self.app.get("/status")
        async def status() -> ServerStatus:
            """Status endpoint providing detailed server information."""
            return ServerStatus(
                status="running",
                version=__version__,
                uptime=self.uptime,
                environment=self.config.environment,
                disjunctive_faceting=self.service.disjunctive_faceting_enabled,
            )

        @self.app.post("/search", response_model=SearchResponse)
        async def search(state: SearchState) -> SearchResponse:
            """Run a search and return the merged response."""
            return await self.service.search(state)

        @self.app.get("/{path:path}")
        async def catch_all(path: str) -> Dict[str, str]:
            """Catch-all route for undefined paths."""
            raise NotFoundError(f"Resource not found: {path}")

    @property
    def uptime(self) -> float:
        return time.monotonic() - self._start_time

    def run(self) -> None:
        """Start the server using the configured settings."""
        uvicorn.run(
            app=self.app,
            host=self.config.server.host,
            port=self.config.server.port,
            workers=self.config.server.workers,
            reload=self.config.server.reload,
            log_level=self.config.logging.level.lower(),
            timeout_keep_alive=self.config.server.request_timeout,
        )


def create_server(config: Config, service: Optional[HitsSearchService] = None) -> SearchServer:
    """
    Create a new search server instance.

    Args:
        config: Application configuration
        service: Optional search service to use instead of the configured one

    Returns:
        Configured SearchServer instance
    """
    return SearchServer(config, service)
