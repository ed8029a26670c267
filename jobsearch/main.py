"""
Job Search App - Main Application

FastAPI backend with:
- MongoDB for users, companies, jobs and applications
- Cloudinary for resume files
- JWT identity in the `token` header
- Uniform JSON errors: {"message": ...}

Run: uvicorn jobsearch.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobsearch.api.routes import api_router
from jobsearch.core.config import get_settings
from jobsearch.core.errors import AppError, error_response
from jobsearch.core.logger import get_logger, setup_logging
from jobsearch.db.mongodb import get_database, init_mongo_indexes, test_mongo_connection

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Search App",
    description="""
    A job-board backend.

    ## Features
    - **Users**: Sign up, sign in, profile management, OTP password reset
    - **Companies**: Company profiles owned by a Company_HR user
    - **Jobs**: Post, search and filter jobs
    - **Applications**: Apply to a job with a resume upload

    ## Authentication
    Send the credential returned by `/user/SignIn` in the `token` header.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLING
# ============================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown paths, and known paths with an unsupported method, are not found."""
    if exc.status_code in (404, 405):
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        return error_response(AppError(f"{url} not found", 404))
    return error_response(AppError(str(exc.detail), exc.status_code))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = [
        f'"{".".join(str(part) for part in err["loc"][1:]) or "value"}" {err["msg"]}'
        for err in exc.errors()
    ]
    return error_response(AppError(messages, 400))


@app.middleware("http")
async def catch_unhandled_errors(request: Request, call_next):
    """Anything the handlers above did not claim becomes a 500."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(AppError(str(e) or "Internal Server Error", 500))


# Include API routes
app.include_router(api_router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes(get_database())
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
    }


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run("jobsearch.main:app", host=settings.host, port=settings.port, reload=settings.debug)
