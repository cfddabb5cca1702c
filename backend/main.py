import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from models.responses import ErrorResponse
from models.schemas.scoring_config import REFERENCE_CONFIG
from services.hit_store import get_hit_store

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await get_hit_store().ensure_labels(REFERENCE_CONFIG.tier_labels)
    except Exception:
        logger.exception("Could not seed tier hit store; counting may report missing tiers")
    yield


app = FastAPI(
    title="Photo Quality API",
    description="AI-powered photo quality evaluation",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    body = ErrorResponse(error="Invalid request body", message=str(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump())


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
