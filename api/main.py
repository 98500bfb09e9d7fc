"""
FastAPI Service for the Tool-Augmented Chat Assistant

Provides the REST endpoint that takes a user message, runs it through the
chat loop and returns the final reply.
"""

import os
from datetime import datetime, UTC
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.shared.errors import InvalidRequest
from agents.shared.file_logger import configure_service_logging
from agents.shared.schemas import ChatRequest, ChatResponse, ErrorResponse
from orchestrator.main import Orchestrator
from orchestrator.settings import Settings

# Initialize logging
logger = configure_service_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    output_dir=os.getenv("LOG_DIR") or None
)

MESSAGE_REQUIRED = "Message is required"
INTERNAL_ERROR = "Internal Server Error"


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error).model_dump())


def create_app(orchestrator: Optional[Orchestrator] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Pre-built components; built from the environment at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown"""
        logger.info("Starting up...")

        if app.state.orchestrator is None:
            try:
                settings = Settings()
                for problem in settings.validate():
                    logger.warning(f"Configuration: {problem}")

                app.state.orchestrator = Orchestrator(settings)
            except Exception as e:
                # Keep serving so /health can report the problem
                logger.error(f"Could not initialize orchestrator: {e}", exc_info=True)
                app.state.orchestrator = None

        yield

        logger.info("Shutting down...")

    app = FastAPI(
        title="Tool-Augmented Chat API",
        version="1.0.0",
        description="Chat with a language model that can call blockchain toolkit tools",
        lifespan=lifespan
    )
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify allowed origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        if request.url.path == "/chat":
            return error_response(400, MESSAGE_REQUIRED)
        return JSONResponse(status_code=422, content={"detail": exc.errors()})

    @app.get("/")
    async def root():
        """Root endpoint - API info"""
        return {
            "message": "Tool-Augmented Chat API",
            "version": "1.0.0",
            "endpoints": {
                "health": "/health",
                "chat": "/chat",
                "tools": "/tools"
            }
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        orch = request.app.state.orchestrator
        return {
            "status": "healthy" if orch else "degraded",
            "timestamp": datetime.now(UTC).isoformat(),
            "model": "ready" if orch else "unconfigured",
            "tools": len(orch.registry) if orch else 0
        }

    @app.get("/tools")
    async def list_tools(request: Request):
        """Tools the model may call"""
        orch = request.app.state.orchestrator
        tools = orch.registry.list() if orch else []
        return {
            "tools": [
                {"name": tool.name, "description": tool.description}
                for tool in tools
            ]
        }

    @app.post(
        "/chat",
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
    )
    async def chat(body: ChatRequest, request: Request):
        """
        Send a message to the assistant.

        The model may call toolkit tools before answering; the response carries
        only the final reply.
        """
        try:
            if not body.message:
                raise InvalidRequest(MESSAGE_REQUIRED)

            logger.info(f"Received message: {body.message[:200]}")

            orch = request.app.state.orchestrator
            if orch is None:
                raise RuntimeError("Orchestrator is not initialized")

            reply = await orch.handle(body.message)
            return ChatResponse(reply=reply)

        except InvalidRequest as e:
            return error_response(400, str(e))

        except Exception as e:
            logger.error(f"Error handling chat request: {e}", exc_info=True)
            return error_response(500, INTERNAL_ERROR)

    return app


app = create_app()


# For running with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
