"""
FastAPI Application - Main web application setup
===============================================

This module creates and configures the FastAPI application
with all necessary routes, middleware, templates and error handlers.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.templating import Jinja2Templates
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from core.config import Config, load_config
from core.exceptions import MediAIError
from core.logging import setup_logging, get_logger
from core.store import MemoryStore
from services.responder import ResponseSelector
from services.analysis import ConsultationAnalyzer
from services.records import PatientRegistry, RecordingLog
from services.reports import ReportRenderer

logger = get_logger("web.app")


def create_app(
    config: Optional[Config] = None,
    selector: Optional[ResponseSelector] = None,
    patients: Optional[PatientRegistry] = None,
    recordings: Optional[RecordingLog] = None,
    debug: bool = False
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Every collaborator can be injected; whatever is omitted is built
    from the configuration. Stores live as long as the app.

    Args:
        config: Application configuration
        selector: Response selector for the chat endpoint
        patients: Patient registry
        recordings: Recording log
        debug: Enable debug mode

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = load_config()

    setup_logging(
        log_dir=config.log_dir or None,
        log_level="DEBUG" if debug else "INFO",
        console_output=True
    )

    if selector is None:
        selector = ResponseSelector.from_config(config)

    if patients is None:
        patients = PatientRegistry(MemoryStore("patients", label="Patient"))
        if config.store.seed_sample_patients:
            patients.seed_samples()

    if recordings is None:
        recordings = RecordingLog(MemoryStore("recordings", label="Recording"))

    app = FastAPI(
        title=config.app_name,
        description="Keyword-driven medical assistant demo",
        version=config.version,
        debug=debug or config.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ui.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    templates_dir = Path(__file__).parent / "templates"
    templates = Jinja2Templates(directory=str(templates_dir))

    app.state.config = config
    app.state.selector = selector
    app.state.analyzer = ConsultationAnalyzer(selector.rules_engine.templates)
    app.state.patients = patients
    app.state.recordings = recordings
    app.state.reports = ReportRenderer()
    app.state.templates = templates

    from .routes import router as main_router
    app.include_router(main_router, prefix="")

    @app.exception_handler(MediAIError)
    async def mediai_exception_handler(request: Request, exc: MediAIError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path}: {exc}")
        else:
            logger.info(f"{request.url.path}: {exc.message}", extra=exc.details)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"{request.url.path}: malformed request")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) if debug else "Internal server error"}
        )

    logger.info("Web application created")

    return app


def run_app(
    host: str = "127.0.0.1",
    port: int = 8080,
    debug: bool = False,
    config: Optional[Config] = None
) -> None:
    """
    Run the web application server.

    Args:
        host: Host address to bind
        port: Port to listen on
        debug: Enable debug mode
        config: Application configuration
    """
    if config is None:
        config = load_config()

    app = create_app(config=config, debug=debug)

    logger.info(f"Starting web server on {host}:{port}")

    import uvicorn
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if debug else "info"
    )
