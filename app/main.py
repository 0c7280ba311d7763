"""
DP Travels Backend - Main Application
FastAPI entry point: static site, enquiry endpoints and destination catalog
"""

from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging
import time

from app.config import settings
from app.rate_limiter import limiter, rate_limit_exceeded_handler
from app.routes.enquiries import router as enquiries_router
from app.routes.destinations import router as destinations_router
from app.services.email_service import get_mail_dispatcher
from app.services.validation_service import RequestValidationFailure

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "script-src 'self' https://cdn.jsdelivr.net https://cdnjs.cloudflare.com 'unsafe-inline'",
    "style-src 'self' https://cdn.jsdelivr.net https://fonts.googleapis.com 'unsafe-inline'",
    "font-src 'self' https://fonts.gstatic.com",
    "img-src 'self' data: https://cdn.jsdelivr.net https://cdnjs.cloudflare.com",
    "frame-src 'self' https://www.google.com",
    "connect-src 'self'",
    "object-src 'none'",
])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info("DP Travels Backend starting...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Rate limit: {settings.rate_limit if settings.rate_limit_enabled else 'disabled'}")

    dispatcher = get_mail_dispatcher()
    provider = dispatcher.provider
    if provider.is_configured():
        logger.info(f"Mail provider: {provider.name} -> {dispatcher.recipient}")
        await dispatcher.verify()
    else:
        logger.warning(f"Mail provider: {provider.name} not configured")

    yield

    logger.info("DP Travels Backend shutting down...")
    await dispatcher.close()
    get_mail_dispatcher.cache_clear()


# Create FastAPI application
app = FastAPI(
    title="DP Travels API",
    description="""
    ## DP Travels website backend

    Relays contact queries and cab bookings from the website to the business inbox.

    - **Enquiries**: `/send-query`, `/send-booking` and the destination page forms
    - **Destinations**: destination descriptions and cab prices for the booking form
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    return response


# Exception handlers
@app.exception_handler(RequestValidationFailure)
async def request_validation_failure_handler(request: Request, exc: RequestValidationFailure):
    content = {"success": False, "error": exc.message}
    if exc.missing:
        content["missing"] = exc.missing
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request.", "details": str(exc.errors())},
    )


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    content = {"success": False, "error": "Internal Server Error"}
    if settings.debug:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(enquiries_router)
app.include_router(destinations_router)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# Root endpoint
@app.get("/", tags=["Site"], include_in_schema=False)
async def root():
    """Website landing page with the booking and contact forms"""
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check"""
    provider = get_mail_dispatcher().provider
    return {
        "status": "ok",
        "message": "Server alive",
        "services": {
            "api": "ok",
            "mail": provider.name if provider.is_configured() else "not_configured",
        }
    }


# Run with: uvicorn app.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
