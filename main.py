from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fupisha.config import settings
from fupisha.dependencies import get_app_logger, get_store
from fupisha.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    OperationTimeoutError,
    StoreError,
)
from fupisha.store import StoreFactory
from fupisha.api.v1 import auth, urls, redirect


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Connects and migrates; any failure stops the server from starting
    get_store()
    yield
    StoreFactory.clear_instance()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener service built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan
)


######## Translate store errors into client responses

STATUS_BY_ERROR = (
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidInputError, 422),
    (OperationTimeoutError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content={"detail": exc.message})

    get_app_logger().error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal store error"},
    )


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(auth.router, prefix="/api/v1")
app.include_router(urls.router, prefix="/api/v1")
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
