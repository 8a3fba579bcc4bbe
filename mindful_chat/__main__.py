import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.cors import CORSMiddleware
from mindful_chat.db import check_connection, init_db
from mindful_chat.routes.chat.route import router as chat_router
from mindful_chat.settings import config

# Configure logging
logging.basicConfig(level=config.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Chat history tables ready")
    yield


def initialize_app() -> FastAPI:
    app = FastAPI(
        title="Mindful Chat API",
        description="Supportive mental-wellbeing chat assistant backed by Gemini",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.include_router(chat_router, prefix="/api", tags=["chat"])
    return app


def add_middlewares(app: FastAPI):
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def time_request(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed * 1000:.1f}ms"
        )
        return response


app = initialize_app()
add_middlewares(app)


@app.get("/")
async def root():
    return {"service": "Mindful Chat API", "docs": app.docs_url}


@app.get("/health")
def health_check():
    # Readiness follows the database.
    if not check_connection():
        return JSONResponse(
            status_code=503, content={"status": "degraded", "database": "unavailable"}
        )
    return {"status": "healthy", "database": "ok"}


if __name__ == "__main__":
    logger.info("Starting Mindful Chat API server...")
    import uvicorn

    uvicorn.run(
        "mindful_chat.__main__:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
