# -*- coding: utf-8 -*-
"""
medscribe API - Main application entry point.

Orchestrates the routes; business logic lives in services, routes and utils.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medscribe.config import settings
from medscribe.config.logging_config import setup_logging

# Import routers
from medscribe.routes import health, ingest, nlp, sessions
from medscribe.routes import print as print_routes

setup_logging(settings.LOG_LEVEL)

# Create FastAPI app
app = FastAPI(
    title="medscribe API",
    version="1.0.0",
    description="Medical transcription documentation API: transcript -> validated clinical record",
)

# Configure CORS
allow_origins = settings.CORS_ALLOWED if isinstance(settings.CORS_ALLOWED, list) else [settings.CORS_ALLOWED]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(ingest.router, tags=["ingest"])
app.include_router(nlp.router, tags=["nlp"])
app.include_router(sessions.router, tags=["sessions"])
app.include_router(print_routes.router, prefix="/print", tags=["print"])


def run():
    import uvicorn
    uvicorn.run(
        "medscribe.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL,
        reload=False
    )


if __name__ == "__main__":
    run()
