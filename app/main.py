import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS, BUSINESS_NAME
from .domain.pricing.catalog import catalog_provider
from .domain.pricing.router import router as pricing_router
from .domain.quotes.router import router as quotes_router
from .domain.reports.router import router as reports_router
from .errors import QuoteAppError, StorageError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce noise from HTTP client libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        catalog = catalog_provider.get()
        logger.info(f"Pricing catalog loaded ({len(catalog)} entries)")
    except QuoteAppError as e:
        logger.warning(f"Pricing catalog unavailable - quote calculation will fail: {e.message}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title=f"{BUSINESS_NAME} Quotes API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(QuoteAppError)
async def quote_app_exception_handler(request: Request, exc: QuoteAppError):
    """Map domain errors to HTTP responses"""
    if isinstance(exc, StorageError):
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": "Failed to process quote"})

    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(pricing_router)
app.include_router(quotes_router)
app.include_router(reports_router)


@app.get("/")
def root():
    return {"message": f"{BUSINESS_NAME} Quotes API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
