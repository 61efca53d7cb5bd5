"""
FACTURA-PE — Catálogos SUNAT
============================
Códigos oficiales usados por el motor de totales.
Fuente: Anexo 8 - Catálogo de códigos (Resolución 097-2012/SUNAT y
modificatorias), UBL 2.1.
"""
import re
from enum import Enum


class TaxCategory(str, Enum):
    """Agrupación de operaciones según su afectación al IGV."""
    TAXABLE = "gravado"
    EXONERATED = "exonerado"
    UNAFFECTED = "inafecto"
    EXPORT = "exportacion"
    FREE = "gratuito"


# ─────────────────────────────────────────────────────────────
# CATÁLOGO N° 07 - TIPO DE AFECTACIÓN DEL IGV
# ─────────────────────────────────────────────────────────────

CATALOGO_07_TIPO_AFECTACION_IGV: dict[int, str] = {
    10: "Gravado - Operación Onerosa",
    11: "Gravado - Retiro por premio",
    12: "Gravado - Retiro por donación",
    13: "Gravado - Retiro",
    14: "Gravado - Retiro por publicidad",
    15: "Gravado - Bonificaciones",
    16: "Gravado - Retiro por entrega a trabajadores",
    17: "Gravado - IVAP",
    20: "Exonerado - Operación Onerosa",
    21: "Exonerado - Transferencia Gratuita",
    30: "Inafecto - Operación Onerosa",
    31: "Inafecto - Retiro por Bonificación",
    32: "Inafecto - Retiro",
    33: "Inafecto - Retiro por Muestras Médicas",
    34: "Inafecto - Retiro por Convenio Colectivo",
    35: "Inafecto - Retiro por premio",
    36: "Inafecto - Retiro por publicidad",
    37: "Inafecto - Transferencia gratuita",
    40: "Exportación de Bienes o Servicios",
}

# Únicos códigos onerosos; el resto del catálogo son transferencias gratuitas.
ONEROUS_CODES: dict[int, TaxCategory] = {
    10: TaxCategory.TAXABLE,
    20: TaxCategory.EXONERATED,
    30: TaxCategory.UNAFFECTED,
    40: TaxCategory.EXPORT,
}


# ─────────────────────────────────────────────────────────────
# CATÁLOGO N° 05 - CÓDIGOS DE TRIBUTOS
# ─────────────────────────────────────────────────────────────

CATALOGO_05_TRIBUTOS: dict[str, dict[str, str]] = {
    "1000": {"nombre": "IGV", "codigo_internacional": "VAT", "descripcion": "Impuesto General a las Ventas"},
    "7152": {"nombre": "ICBPER", "codigo_internacional": "OTH", "descripcion": "Impuesto a la bolsa plástica"},
    "9995": {"nombre": "EXP", "codigo_internacional": "FRE", "descripcion": "Exportación"},
    "9996": {"nombre": "GRA", "codigo_internacional": "FRE", "descripcion": "Gratuito"},
    "9997": {"nombre": "EXO", "codigo_internacional": "VAT", "descripcion": "Exonerado"},
    "9998": {"nombre": "INA", "codigo_internacional": "FRE", "descripcion": "Inafecto"},
}

TRIBUTO_POR_CATEGORIA: dict[TaxCategory, str] = {
    TaxCategory.TAXABLE: "1000",
    TaxCategory.EXONERATED: "9997",
    TaxCategory.UNAFFECTED: "9998",
    TaxCategory.EXPORT: "9995",
    TaxCategory.FREE: "9996",
}


# ─────────────────────────────────────────────────────────────
# CATÁLOGO N° 02 - TIPO DE MONEDA (ISO 4217)
# ─────────────────────────────────────────────────────────────

CATALOGO_02_MONEDA: dict[str, str] = {
    "PEN": "SOLES",
    "USD": "DOLARES AMERICANOS",
    "EUR": "EUROS",
}


# ─────────────────────────────────────────────────────────────
# CATÁLOGO N° 01 - TIPO DE DOCUMENTO
# ─────────────────────────────────────────────────────────────

CATALOGO_01_TIPO_DOCUMENTO: dict[str, str] = {
    "01": "FACTURA",
    "03": "BOLETA DE VENTA",
    "07": "NOTA DE CREDITO",
    "08": "NOTA DE DEBITO",
}

# CATÁLOGO N° 52 - Leyenda "monto en letras"
LEYENDA_MONTO_EN_LETRAS = "1000"

INTEGER_CODE = re.compile(r"-?[0-9]+")


def parse_affectation_code(code) -> int | None:
    """Normaliza un código de afectación (int o str numérico). None si no es entero."""
    if code is None or isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, float):
        return int(code) if code.is_integer() else None
    text = str(code).strip()
    if INTEGER_CODE.fullmatch(text):
        return int(text)
    return None


def is_catalogued(code) -> bool:
    """True si el código existe en el Catálogo 07."""
    return parse_affectation_code(code) in CATALOGO_07_TIPO_AFECTACION_IGV


def currency_label(currency: str | None) -> str:
    """
    Nombre legal de la moneda para la leyenda.
    Ej: "PEN" → "SOLES". Monedas fuera del catálogo usan su propio código.
    """
    if not currency:
        return CATALOGO_02_MONEDA["PEN"]
    code = currency.upper().strip()
    return CATALOGO_02_MONEDA.get(code, code)
