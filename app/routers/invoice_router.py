"""
FACTURA-PE: Router de Comprobantes
==================================
Endpoints REST para cálculo de totales, armado del comprobante
y catálogos SUNAT.
"""
from fastapi import APIRouter, Depends

from app.schemas.models import (
    CatalogEntry,
    DocumentRequest,
    TotalsRequest,
    TotalsResponse,
)
from app.sunat.catalogs import (
    CATALOGO_01_TIPO_DOCUMENTO,
    CATALOGO_02_MONEDA,
    CATALOGO_07_TIPO_AFECTACION_IGV,
)


def create_invoice_router(get_invoice_service) -> APIRouter:
    """
    Crea router de comprobantes con inyección de dependencias.

    Args:
        get_invoice_service: Dependency que retorna InvoiceService
    """
    router = APIRouter(prefix="/api/v1", tags=["Comprobantes"])

    # ── TOTALES ──

    @router.post("/invoices/totals", response_model=TotalsResponse)
    async def calculate_totals(
        data: TotalsRequest,
        service=Depends(get_invoice_service),
    ):
        """Calcular totales por afectación, IGV, ICBPER y monto en letras."""
        items = [item.model_dump(mode="json") for item in data.items]
        totals = service.calculate(items, data.currency)
        return totals.to_dict()

    # ── COMPROBANTE ──

    @router.post("/invoices/document")
    async def build_document(
        data: DocumentRequest,
        service=Depends(get_invoice_service),
    ):
        """Armar el comprobante listo para el constructor XML / envío a SUNAT."""
        header = data.model_dump(mode="json", exclude={"items"})
        items = [item.model_dump(mode="json") for item in data.items]
        return service.build_document(header, items)

    # ── CATÁLOGOS ──

    @router.get("/catalogs/tax-affectation", response_model=list[CatalogEntry])
    async def list_tax_affectation():
        """Catálogo 07: tipos de afectación del IGV."""
        return [
            {"code": str(code), "description": desc}
            for code, desc in CATALOGO_07_TIPO_AFECTACION_IGV.items()
        ]

    @router.get("/catalogs/currencies", response_model=list[CatalogEntry])
    async def list_currencies():
        """Catálogo 02: monedas."""
        return [
            {"code": code, "description": label}
            for code, label in CATALOGO_02_MONEDA.items()
        ]

    @router.get("/catalogs/document-types", response_model=list[CatalogEntry])
    async def list_document_types():
        """Catálogo 01: tipos de comprobante."""
        return [
            {"code": code, "description": name}
            for code, name in CATALOGO_01_TIPO_DOCUMENTO.items()
        ]

    return router
