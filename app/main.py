"""
FACTURA-PE — Main API Application
FastAPI backend for SUNAT electronic invoicing in Peru.

Flow:
  1. POST /api/v1/invoices/totals    → Totals by IGV affectation + amount in words
  2. POST /api/v1/invoices/document  → Document payload for the XML builder
  3. GET  /api/v1/catalogs/...       → SUNAT catalogs (07, 02)

Architecture:
  - Totals are computed by a pure engine (app.sunat.totals) with the tax
    parameters injected from settings; no shared mutable state
  - XML generation, signing and submission to SUNAT happen downstream
"""

import logging

import jwt
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.core.config import settings, get_sunat_url
from app.dependencies import get_invoice_service
from app.routers.invoice_router import create_invoice_router
from app.schemas.models import ErrorResponse, HealthResponse
from app.services.invoice_service import InvoiceServiceError
from app.sunat.amount_words import UnsupportedAmountError

# ─────────────────────────────────────────────────────────────
# LOGGING
# ─────────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("factura-pe")


# ─────────────────────────────────────────────────────────────
# RATE LIMITING
# ─────────────────────────────────────────────────────────────

def _get_rate_limit_key(request: Request) -> str:
    """Rate limit by token subject if a bearer token is present, else by IP."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        try:
            # Sin verificar firma: solo se usa como clave de rate limit
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return get_remote_address(request)
        return payload.get("sub") or get_remote_address(request)
    return get_remote_address(request)


limiter = Limiter(key_func=_get_rate_limit_key, default_limits=["60/minute"])


# ─────────────────────────────────────────────────────────────
# FASTAPI APP
# ─────────────────────────────────────────────────────────────

app = FastAPI(
    title="FACTURA-PE API",
    description=(
        "Backend API para facturación electrónica SUNAT en Perú. "
        "Calcula totales por tipo de afectación del IGV, ICBPER y "
        "leyenda en letras, y arma el comprobante para su firma y envío."
    ),
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# ─────────────────────────────────────────────────────────────
# GLOBAL EXCEPTION HANDLERS
# ─────────────────────────────────────────────────────────────

@app.exception_handler(UnsupportedAmountError)
async def amount_error_handler(request: Request, exc: UnsupportedAmountError):
    logger.warning(f"Monto no soportado: {exc.message}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="AMOUNT_ERROR", detail=exc.message, code="UNSUPPORTED_AMOUNT",
        ).model_dump(),
    )


@app.exception_handler(InvoiceServiceError)
async def invoice_error_handler(request: Request, exc: InvoiceServiceError):
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="INVOICE_ERROR", detail=exc.message, code=exc.code,
        ).model_dump(),
    )


# ─────────────────────────────────────────────────────────────
# HEALTH CHECK
# ─────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["Sistema"])
async def health_check():
    """Verificar estado del servicio."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "environment": settings.sunat_environment.value,
        "sunat_bill_service_url": get_sunat_url("bill_service"),
    }


app.include_router(create_invoice_router(get_invoice_service=get_invoice_service))


# ENTRYPOINT
# ─────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
