"""
Mini LinkedIn API
Main FastAPI application: users, posts, likes, comments and discovery
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pymongo.errors import PyMongoError
from contextlib import asynccontextmanager
from datetime import datetime
import logging

from .config import settings
from .database import mongodb
from .exceptions import AppException, UnexpectedError
from .schemas import ErrorResponse
from .middlewares import RequestLoggerMiddleware
from .api.routes import auth_router, posts_router, users_router

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    await mongodb.connect()
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} started on port {settings.PORT}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await mongodb.disconnect()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Professional networking API: profiles, posts, likes, comments and discovery",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)
app.add_middleware(RequestLoggerMiddleware)


def _error_response(status_code: int, **fields) -> JSONResponse:
    """Render the failure envelope, omitting empty fields"""
    body = ErrorResponse(**fields)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _server_error(exc: Exception) -> JSONResponse:
    error = UnexpectedError()
    return _error_response(
        error.status_code,
        message=error.message,
        error=str(exc) if settings.DEBUG else None,
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    return _error_response(exc.status_code, message=exc.message, errors=exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        # Drop the request part ("body", "query", "path") from the location
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        errors.append({
            "field": ".".join(loc),
            "message": err["msg"].removeprefix("Value error, "),
        })

    return _error_response(status.HTTP_400_BAD_REQUEST, message="Validation errors", errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, message="API endpoint not found", path=request.url.path)
    return _error_response(exc.status_code, message=str(exc.detail))


@app.exception_handler(PyMongoError)
async def database_exception_handler(request: Request, exc: PyMongoError):
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    return _server_error(exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _server_error(exc)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "endpoints": {
            "auth": f"{settings.API_PREFIX}/auth",
            "users": f"{settings.API_PREFIX}/users",
            "posts": f"{settings.API_PREFIX}/posts",
        },
        "timestamp": datetime.utcnow().isoformat()
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "database": "connected" if mongodb.db is not None else "disconnected",
        "timestamp": datetime.utcnow().isoformat()
    }


# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(posts_router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "linkedin_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
