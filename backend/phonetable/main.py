"""
Phone Table Extractor API v1.0
FastAPI service exposing the phone table extraction engine
Enhanced with rate limiting, structured logging, and standardized error handling
"""

import os
import time
import warnings
from datetime import datetime

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Rate limiting
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

# Import our modules
from phonetable.config import get_settings
from phonetable.engine import TableExtractionEngine
from phonetable.errors import ExtractionError, StructureAmbiguityWarning
from phonetable.exceptions import TextTooLargeException, http_exception_for
from phonetable.logging_config import setup_logging
from phonetable.schemas import APIResponse, ErrorResponse, ExtractRequest

# Get settings
settings = get_settings()

logger = setup_logging(settings)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# FastAPI app initialization
app = FastAPI(
    title=settings.app_name,
    description="Extract Singapore phone records and row metadata from table-like text",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS configuration
allowed_origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# API Router for versioning
api_router = APIRouter(prefix="/api/v1")

engine = TableExtractionEngine(settings)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Render HTTP errors as ErrorResponse bodies"""
    detail = exc.detail
    error = detail.get('error_type', 'error') if isinstance(detail, dict) else str(detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            path=request.url.path,
            timestamp=datetime.now().isoformat()
        ).model_dump(),
        headers=getattr(exc, "headers", None)
    )


# ==================== EXTRACTION ENDPOINTS ====================

@api_router.post("/extract")
@limiter.limit(settings.extract_rate_limit)
async def extract_records(request: Request, payload: ExtractRequest):
    """
    Extract phone records and metadata from table text

    Rate Limited: 30 requests per minute

    Args:
        payload: Text, optional source file name and page splitting flag

    Returns:
        APIResponse with records and the extraction report

    Raises:
        HTTPException 400: Input is not usable text
        HTTPException 413: Text exceeds the configured size limit
        HTTPException 422: Text is empty or holds no phone records
    """
    if len(payload.text) > settings.max_text_length:
        raise TextTooLargeException(len(payload.text), settings.max_text_length)

    start_time = time.time()
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", StructureAmbiguityWarning)
            result = engine.extract(payload.text, payload.source_file, split_pages=payload.split_pages)
    except ExtractionError as e:
        logger.warning(f"Extraction failed for {payload.source_file or 'request'}: {e.message}")
        raise http_exception_for(e)

    processing_ms = round((time.time() - start_time) * 1000, 2)
    return APIResponse(
        success=True,
        message=f"Extracted {len(result.records)} phone records",
        data={
            "records": [record.model_dump(mode="json") for record in result.records],
            "report": result.report.model_dump(mode="json")
        },
        meta={
            "processing_time_ms": processing_ms,
            "warnings": [str(w.message) for w in caught if issubclass(w.category, StructureAmbiguityWarning)]
        }
    ).model_dump()


app.include_router(api_router)


@app.get("/ping")
async def ping():
    """Fast ping endpoint for keep-alive"""
    return {"status": "ok", "timestamp": datetime.now().isoformat()}


@app.get("/health")
@limiter.limit(settings.general_rate_limit)
async def health_check(request: Request):
    """
    Health check endpoint for monitoring

    Rate Limited: 100 requests per minute
    """
    return APIResponse(
        success=True,
        data={
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": datetime.now().isoformat(),
            "components": {
                "engine": "ready",
                "default_region": settings.default_region
            }
        },
        message="Service is running normally"
    ).model_dump()


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
