"""
FACTURA-PE — SUNAT Utilities
Helper functions for document identifiers and RUC validation.
"""

import re
from datetime import datetime, timedelta, timezone

RUC_WEIGHTS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)
RUC_PREFIXES = ("10", "15", "16", "17", "20")

SERIE_PATTERNS = {
    "01": re.compile(r"^F[A-Z0-9]{3}$"),      # Factura
    "03": re.compile(r"^B[A-Z0-9]{3}$"),      # Boleta
    "07": re.compile(r"^[FB][A-Z0-9]{3}$"),   # Nota de crédito
    "08": re.compile(r"^[FB][A-Z0-9]{3}$"),   # Nota de débito
}


def format_document_number(serie: str, correlativo: int) -> str:
    """
    Número de comprobante: SSSS-NNNNNNNN (serie + correlativo de 8 dígitos).
    Ej: ("F001", 1) → "F001-00000001"
    """
    return f"{serie}-{str(correlativo).zfill(8)}"


def current_pe_datetime() -> tuple[str, str]:
    """
    Get current date and time in Peru (UTC-5) format.
    Returns: (fecha "YYYY-MM-DD", hora "HH:MM:SS")
    """
    pe_time = datetime.now(timezone.utc) - timedelta(hours=5)
    return pe_time.strftime("%Y-%m-%d"), pe_time.strftime("%H:%M:%S")


def validate_ruc(ruc: str) -> bool:
    """
    RUC validation: 11 digits, known prefix, módulo 11 check digit.
    - 10: persona natural
    - 15, 16, 17: sector público / no domiciliados
    - 20: persona jurídica
    """
    if not ruc or len(ruc) != 11 or not ruc.isdigit():
        return False
    if ruc[:2] not in RUC_PREFIXES:
        return False
    total = sum(int(d) * w for d, w in zip(ruc[:10], RUC_WEIGHTS))
    check = 11 - (total % 11)
    if check == 10:
        check = 0
    elif check == 11:
        check = 1
    return check == int(ruc[10])


def validate_serie(tipo_doc: str, serie: str) -> bool:
    """Serie de 4 caracteres: F### para facturas, B### para boletas."""
    pattern = SERIE_PATTERNS.get(tipo_doc)
    if not pattern or not serie:
        return False
    return bool(pattern.match(serie.upper()))
