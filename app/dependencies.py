"""
FACTURA-PE: Dependencias FastAPI
=================================
Inyección de configuración tributaria y servicios.
"""
from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.services.invoice_service import InvoiceService
from app.sunat.totals import TotalsConfig


# ── Singletons ──

@lru_cache()
def get_totals_config() -> TotalsConfig:
    """Parámetros tributarios tomados de Settings (inmutables)."""
    return TotalsConfig(
        currency=settings.default_currency,
        igv_rate=settings.igv_rate,
        icbper_unit_rate=settings.icbper_unit_rate,
        amount_precision=settings.amount_precision,
    )


def get_invoice_service(
    config: TotalsConfig = Depends(get_totals_config),
) -> InvoiceService:
    """Servicio de comprobantes con la configuración inyectada."""
    return InvoiceService(config=config)
