"""
FastAPI service for UK Address Parser.

REST API for address parsing with:
- Single and batch parsing endpoints
- Swagger documentation
- Health checks
- CORS support
"""

import logging
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from uk_address_parser import (
    AddressParser,
    ParsedAddress,
    ParseRequest,
    ParseResponse,
    __version__,
)
from uk_address_parser.schemas import (
    BatchParseRequest,
    BatchParseResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

# Global parser instance; the gazetteer is loaded once and shared by all requests
parser: AddressParser | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the gazetteer on startup."""
    global parser

    try:
        parser = AddressParser.from_env()
    except (ValueError, OSError) as e:
        logger.error(f"Gazetteer not loaded, parsing disabled: {e}")

    yield

    # Cleanup
    parser = None


# Create FastAPI app
app = FastAPI(
    title="UK Address Parser API",
    description="""
    API for parsing unstructured UK postal addresses into structured fields.

    ## Fields
    - postcode, street, dependent_street, number, estate
    - name, floor, flat, lines
    - county, city, town, locality

    Each result carries an inferred geocode and ordered `errors` / `warnings`
    describing how confident each extraction is.

    ## Example
    ```json
    POST /parse
    {"address": "10 Downing Street, London SW1A 2AA"}
    ```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_timing_header(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
    return response


@app.get("/", response_model=HealthResponse, tags=["Health"])
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Service status and gazetteer availability."""
    return HealthResponse(
        status="healthy",
        gazetteer_loaded=parser is not None,
        version=__version__,
    )


@app.post("/parse", response_model=ParseResponse, tags=["Parsing"])
async def parse_address(request: ParseRequest):
    """
    Parse a single address.

    **Example Response:**
    ```json
    {
        "success": true,
        "result": {
            "address": "10 Downing Street, London SW1A 2AA",
            "postcode": "SW1A 2AA",
            "street": "Downing Street",
            "number": "10",
            "city": "London",
            "errors": [],
            "warnings": []
        },
        "parse_time_ms": 0.8
    }
    ```
    """
    if parser is None:
        raise HTTPException(status_code=503, detail="Parser not initialized")

    return parser.parse_with_timing(request.address)


@app.post("/parse/batch", response_model=BatchParseResponse, tags=["Parsing"])
async def parse_batch(request: BatchParseRequest):
    """
    Parse multiple addresses in a single request.

    **Limits:**
    - Maximum 100 addresses per request
    """
    if parser is None:
        raise HTTPException(status_code=503, detail="Parser not initialized")

    try:
        return parser.parse_batch(request.addresses)
    except Exception as e:
        logger.exception("Batch parse failed")
        raise HTTPException(status_code=500, detail=str(e))


# Simple GET endpoint for testing
@app.get("/parse/{address:path}", response_model=ParsedAddress, tags=["Parsing"])
async def parse_address_get(address: str):
    """
    Parse address via GET request (for testing).

    Note: Use POST /parse for production - this endpoint is for quick testing only.
    """
    if parser is None:
        raise HTTPException(status_code=503, detail="Parser not initialized")

    try:
        return parser.parse(address)
    except Exception as e:
        logger.exception(f"Failed to parse {address!r}")
        raise HTTPException(status_code=500, detail=str(e))


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(app, host="0.0.0.0", port=port)
