"""Main entry point for the KrishiMitra API server."""

from dotenv import load_dotenv
load_dotenv()  # Load .env into environment variables

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from krishimitra.api.middleware import RequestLoggingMiddleware
from krishimitra.api.routes.chat import router as chat_router
from krishimitra.api.routes.speech import router as speech_router
from krishimitra.config.settings import settings
from krishimitra.logging import configure_production_logging

configure_production_logging()

logger = structlog.get_logger()

app = FastAPI(title="KrishiMitra Agricultural Assistant API")

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)
app.include_router(speech_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


def main():
    """Run the API server."""
    logger.info(
        "Starting API server",
        host=settings.api_host,
        port=settings.api_port,
        environment=settings.environment,
        web_search=bool(settings.tavily_api_key),
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info" if settings.environment == "production" else "warning",
    )


if __name__ == "__main__":
    main()
