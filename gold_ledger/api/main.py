# gold_ledger/api/main.py

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
import uvicorn
import logging
from decimal import getcontext

from gold_ledger.api.v1.router import router as v1_router
from gold_ledger.core.config.settings import settings
from gold_ledger.core.exceptions import (
    BatchMemberError,
    LedgerError,
    NotFoundError,
    OverdraftError,
    SelectionStateError,
)
from gold_ledger.core.models.response import ErrorResponse

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(settings.APP_NAME)

# Set global Decimal precision at application startup
getcontext().prec = settings.DECIMAL_PRECISION

# Rejected intents leave the ledger untouched; the status code tells the client why.
ERROR_STATUS_CODES: dict[type[LedgerError], int] = {
    OverdraftError: 422,
    NotFoundError: 404,
    BatchMemberError: 409,
    SelectionStateError: 409,
}

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG_MODE,
    description="API for recording gold buy lots and sales, including batch sells, "
                "and reporting realized profit."
)

app.include_router(v1_router, prefix=settings.API_V1_STR)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        400
    )
    logger.warning(f"Rejected {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    body = ErrorResponse(error_type=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/", include_in_schema=False)
async def root():
    """Redirects to the API documentation."""
    return RedirectResponse(url="/docs")

# Entry point for running with Uvicorn directly (for development)
if __name__ == "__main__":
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} in {'DEBUG' if settings.DEBUG_MODE else 'PRODUCTION'} mode...")
    uvicorn.run(
        "gold_ledger.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG_MODE,
        log_level=settings.LOG_LEVEL.lower()
    )
