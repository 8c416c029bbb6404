# rewardjar/main.py - COMPLETE MAIN FILE
import logging
from datetime import datetime, UTC

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rewardjar.api import reward, token, transaction
from rewardjar.config import settings
from rewardjar.database import init_db
from rewardjar.schemas.common import failure
from rewardjar.services.exceptions import RewardJarError, ValidationError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
init_db()

# Initialize FastAPI app
app = FastAPI(title="Reward Jar API")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %d", request.method, request.url.path, response.status_code)
    return response


# ======================
# ERROR ENVELOPES
# ======================
def _envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=failure(error).model_dump(exclude_none=True),
    )


@app.exception_handler(RewardJarError)
async def reward_jar_error_handler(request: Request, exc: RewardJarError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.error_code, exc.details)
    else:
        logger.info("%s %s rejected: %s %s", request.method, request.url.path, exc.error_code, exc.details)
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Validation error")
    else:
        message = "Validation error"
    return await reward_jar_error_handler(request, ValidationError(message, {"errors": len(errors)}))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _envelope(exc.status_code, "Endpoint not found")
    return _envelope(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# API routers
app.include_router(token.router)        # /api/tokens/*
app.include_router(reward.router)       # /api/rewards/*
app.include_router(transaction.router)  # /api/transactions/*


@app.get("/health")
@app.get("/api/health")
def health_check():
    return {
        "success": True,
        "message": "Reward Jar API is running!",
        "timestamp": datetime.now(UTC).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rewardjar.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
