"""
FastAPI application entrypoint.

Registers routers, configures CORS, initializes telemetry,
and creates service instances on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ragchat.core.config import Settings, get_settings
from ragchat.core.telemetry import setup_telemetry
from ragchat.routers import chat, health
from ragchat.services.openai_client import AzureOpenAIChatClient
from ragchat.services.rag import RAGOrchestrator

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Build the application around an already loaded settings object."""

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        """
        Application lifespan handler.
        Missing configuration aborts startup before any request is served.
        """
        logging.basicConfig(level=settings.log_level)
        tracer_provider = setup_telemetry(
            settings.applicationinsights_connection_string, application.version
        )

        completion_client = AzureOpenAIChatClient(settings)
        try:
            application.state.rag_orchestrator = RAGOrchestrator(settings, completion_client)
            logger.info("Search-grounded chat API started.")
            yield
        finally:
            await completion_client.close()
            tracer_provider.shutdown()
            logger.info("Search-grounded chat API shutting down.")

    application = FastAPI(
        title="Search-Grounded Chat API",
        description="Chat completions grounded on an Azure AI Search index.",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(health.router)
    application.include_router(chat.router)
    return application


def get_app() -> FastAPI:
    """Factory for ``uvicorn --factory ragchat.main:get_app``."""
    return create_app(get_settings())
