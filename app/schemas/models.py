"""
FACTURA-PE Pydantic Schemas
Request/response models for the API.
"""

from __future__ import annotations
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional, Union
from enum import Enum


# ─────────────────────────────────────────────────────────────
# ENUMS
# ─────────────────────────────────────────────────────────────

class TipoDocumento(str, Enum):
    """CAT-01: Tipo de comprobante"""
    FACTURA = "01"
    BOLETA = "03"
    NOTA_CREDITO = "07"
    NOTA_DEBITO = "08"


class TipoDocIdentidad(str, Enum):
    """CAT-06: Tipo de documento de identidad"""
    SIN_RUC = "0"
    DNI = "1"
    CARNET_EXTRANJERIA = "4"
    RUC = "6"
    PASAPORTE = "7"


# ─────────────────────────────────────────────────────────────
# INVOICE LINES / TOTALS
# ─────────────────────────────────────────────────────────────

class LineItemRequest(BaseModel):
    """One invoice detail row."""
    code: Optional[str] = Field(None, description="Código interno del producto")
    description: str = Field("", max_length=500)
    unit: str = Field("NIU", description="CAT-03: unidad de medida (NIU=unidad, ZZ=servicio)")
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, description="Valor unitario sin IGV")
    tax_affectation_code: Optional[Union[int, float, str]] = Field(
        10, description="CAT-07: 10=Gravado, 20=Exonerado, 30=Inafecto, 40=Exportación; otros=Gratuito"
    )
    icbper: bool = Field(False, description="Afecto al impuesto a la bolsa plástica")


class TotalsRequest(BaseModel):
    items: list[LineItemRequest] = Field(default_factory=list)
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="CAT-02 (ISO 4217)")

    model_config = {"json_schema_extra": {
        "examples": [{
            "items": [
                {"description": "Servicio", "quantity": 1, "unit_price": "100.00", "tax_affectation_code": 10},
                {"description": "Libro", "quantity": 2, "unit_price": "50.00", "tax_affectation_code": 20},
            ],
            "currency": "PEN",
        }]
    }}


class TotalsResponse(BaseModel):
    """Invoice totals; amounts as decimal strings."""
    currency: str
    total_taxable: str
    total_exonerated: str
    total_unaffected: str
    total_export: str
    total_free: str
    total_igv: str
    total_icbper: str
    total_price: str
    legend: str
    unclassified_codes: list[Optional[Union[int, str]]] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────
# DOCUMENT PAYLOAD (handed to the external XML builder)
# ─────────────────────────────────────────────────────────────

class PartyRequest(BaseModel):
    """Emisor o cliente del comprobante."""
    tipo_doc: TipoDocIdentidad = TipoDocIdentidad.RUC
    num_doc: str = Field(..., min_length=1, max_length=15)
    razon_social: str = Field(..., min_length=1, max_length=250)
    nombre_comercial: Optional[str] = None
    direccion: Optional[str] = None
    ubigeo: Optional[str] = Field(None, min_length=6, max_length=6)


class DocumentRequest(BaseModel):
    tipo_doc: TipoDocumento = TipoDocumento.FACTURA
    serie: str = Field(..., min_length=4, max_length=4, examples=["F001"])
    correlativo: int = Field(..., ge=1, le=99_999_999)
    fecha_emision: Optional[str] = Field(None, description="YYYY-MM-DD (por defecto, hoy en Lima)")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    company: PartyRequest
    client: PartyRequest
    items: list[LineItemRequest] = Field(..., min_length=1)


class CatalogEntry(BaseModel):
    code: str
    description: str


# ─────────────────────────────────────────────────────────────
# GENERIC
# ─────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str
    code: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check."""
    status: str = "ok"
    version: str
    environment: str
    sunat_bill_service_url: str
