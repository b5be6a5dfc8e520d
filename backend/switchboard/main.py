# switchboard/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from switchboard.api import messages, realtime
from switchboard.core.config import settings
from switchboard.core.errors import DomainError
from switchboard.core.presence import registry
from switchboard.core.rate_limit import limiter
from switchboard.utils.logger import setup_logger

setup_logger()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing signing secret is fatal, not a per-connection error
    settings.require_jwt_secret()
    logger.info("Switchboard started, allowed origins: %s", settings.allowed_origins)
    yield
    registry.clear()
    logger.info("Switchboard stopped")


app = FastAPI(
    title="Switchboard",
    version="1.0.0",
    description="Direct messaging and real-time delivery backend",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Register routers
app.include_router(messages.router, tags=["Messages"])
app.include_router(realtime.router, tags=["Realtime"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
