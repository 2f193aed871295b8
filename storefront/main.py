import uvicorn as uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis
import logging

from storefront.config.settings import settings
from storefront.config.database import startDB
from storefront.dependencies.rateLimitDependencies import rate_limited
from storefront.routes import userRoute, productRoute, cartRoute, checkOutRoute

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Initialize FastAPI app with lifespan context
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database connection and models (startup logic)
    await startDB()
    logger.info(f"✅ Connected to MongoDB database '{settings.MONGO_DATABASE}'")

    # Initialize rate limiter
    redis_connection = None
    if settings.RATE_LIMITING_ENABLED:
        redis_connection = redis.from_url(settings.REDIS_URL, encoding="utf-8")
        await FastAPILimiter.init(redis_connection)

    yield

    if redis_connection is not None:
        await redis_connection.close()


app = FastAPI(
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc"
)


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler that formats all errors consistently"""
    error_response = {
        "error": {
            "type": exc.__class__.__name__,
            "message": "An error occurred",
            "detail": str(exc),
            "path": request.url.path,
        }
    }

    status_code = 500

    # Handle HTTP exceptions (404, 401, etc.), FastAPI's own subclass included
    if isinstance(exc, HTTPException):
        status_code = exc.status_code
        error_response["error"]["detail"] = exc.detail
        # Structured details (checkout redirect, fastapi-users reasons) carry their own message
        if isinstance(exc.detail, dict):
            error_response["error"]["message"] = (
                exc.detail.get("message") or exc.detail.get("reason") or error_response["error"]["message"]
            )
        else:
            error_response["error"]["message"] = exc.detail

    # Handle validation errors
    elif isinstance(exc, RequestValidationError):
        status_code = 422
        error_response["error"]["message"] = "Validation error"
        error_response["error"]["detail"] = jsonable_errors(exc)

    # Log unexpected errors
    if status_code == 500:
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        error_response["error"]["message"] = "Internal server error"
        # Don't expose internal details in production
        error_response["error"]["detail"] = "Please contact support"

    return JSONResponse(
        status_code=status_code,
        content=error_response,
        headers=getattr(exc, "headers", None),
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic puts the raised ValueError into ctx, which is not JSON serializable
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


# Register the handler for all exceptions
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Session-Id"],
)

app.include_router(userRoute.router,
                   dependencies=rate_limited(times=100, seconds=60))
app.include_router(productRoute.router, tags=['products'], prefix='/api/v1',
                   dependencies=rate_limited(times=100, seconds=60))
app.include_router(cartRoute.router, tags=['cart'], prefix='/api/v1',
                   dependencies=rate_limited(times=100, seconds=60))
app.include_router(checkOutRoute.router, tags=['checkout'], prefix='/api/v1',
                   dependencies=rate_limited(times=30, seconds=60))


@app.get("/api/healthchecker", dependencies=rate_limited(times=100, seconds=60))
def root():
    return {"message": f"Welcome to {settings.PLATFORM_NAME}"}


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=not settings.is_production)
