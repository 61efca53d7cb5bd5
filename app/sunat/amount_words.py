"""
FACTURA-PE — Monto en letras
============================
Leyenda 1000 (Catálogo 52): importe total expresado en letras.

Formato: "<ENTERO EN LETRAS> CON <cc>/100 <MONEDA>"
  218.00 PEN → "DOSCIENTOS DIECIOCHO CON 00/100 SOLES"
  1.00 PEN   → "UNO CON 00/100 SOLES"
  21000 USD  → "VEINTIUN MIL CON 00/100 DOLARES AMERICANOS"

Límite soportado: parte entera hasta 999,999,999,999
(NOVECIENTOS NOVENTA Y NUEVE MIL ... MILLONES ...).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.sunat.catalogs import currency_label

MAX_SUPPORTED_AMOUNT = 999_999_999_999

CENT = Decimal("0.01")

UNIDADES = ["", "UNO", "DOS", "TRES", "CUATRO", "CINCO",
            "SEIS", "SIETE", "OCHO", "NUEVE"]
ESPECIALES = ["DIEZ", "ONCE", "DOCE", "TRECE", "CATORCE", "QUINCE",
              "DIECISEIS", "DIECISIETE", "DIECIOCHO", "DIECINUEVE"]
VEINTES = ["VEINTE", "VEINTIUNO", "VEINTIDOS", "VEINTITRES", "VEINTICUATRO",
           "VEINTICINCO", "VEINTISEIS", "VEINTISIETE", "VEINTIOCHO", "VEINTINUEVE"]
DECENAS = ["", "", "", "TREINTA", "CUARENTA", "CINCUENTA",
           "SESENTA", "SETENTA", "OCHENTA", "NOVENTA"]
CENTENAS = ["", "CIENTO", "DOSCIENTOS", "TRESCIENTOS", "CUATROCIENTOS",
            "QUINIENTOS", "SEISCIENTOS", "SETECIENTOS", "OCHOCIENTOS", "NOVECIENTOS"]


class UnsupportedAmountError(Exception):
    """Raised when an amount cannot be expressed in words."""
    def __init__(self, message: str, amount=None):
        self.message = message
        self.amount = amount
        super().__init__(self.message)


def _apocope(words: str) -> str:
    # "UNO" pierde la vocal delante de MIL/MILLON(ES): VEINTIUN MIL, UN MILLON
    return words[:-1] if words.endswith("UNO") else words


def _below_hundred(n: int) -> str:
    if n < 10:
        return UNIDADES[n]
    if n < 20:
        return ESPECIALES[n - 10]
    if n < 30:
        return VEINTES[n - 20]
    d, u = divmod(n, 10)
    return f"{DECENAS[d]} Y {UNIDADES[u]}" if u else DECENAS[d]


def _below_thousand(n: int) -> str:
    if n == 100:
        return "CIEN"
    c, r = divmod(n, 100)
    parts = []
    if c:
        parts.append(CENTENAS[c])
    if r:
        parts.append(_below_hundred(r))
    return " ".join(parts)


def _below_million(n: int) -> str:
    miles, r = divmod(n, 1000)
    parts = []
    if miles == 1:
        parts.append("MIL")
    elif miles > 1:
        parts.append(f"{_apocope(_below_thousand(miles))} MIL")
    if r:
        parts.append(_below_thousand(r))
    return " ".join(parts)


def integer_to_words(n: int) -> str:
    """Entero no negativo (<= MAX_SUPPORTED_AMOUNT) en letras mayúsculas."""
    if n < 0 or n > MAX_SUPPORTED_AMOUNT:
        raise UnsupportedAmountError(
            f"Monto fuera de rango para conversión a letras: {n} "
            f"(máximo {MAX_SUPPORTED_AMOUNT})", amount=n,
        )
    if n == 0:
        return "CERO"
    millones, r = divmod(n, 1_000_000)
    parts = []
    if millones == 1:
        parts.append("UN MILLON")
    elif millones > 1:
        parts.append(f"{_apocope(_below_million(millones))} MILLONES")
    if r:
        parts.append(_below_million(r))
    return " ".join(parts)


def amount_in_words(amount, currency: str = "PEN") -> str:
    """
    Convierte un importe a la leyenda legal en letras.

    Args:
        amount: Decimal, int, float o str numérico (se redondea a céntimos)
        currency: Código ISO 4217 (Catálogo 02)

    Raises:
        UnsupportedAmountError: importe negativo, no finito o mayor al límite.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        raise UnsupportedAmountError(f"Monto no numérico: {amount!r}", amount=amount)

    if not value.is_finite() or value < 0 or value >= MAX_SUPPORTED_AMOUNT + 1:
        raise UnsupportedAmountError(
            f"Monto fuera de rango para conversión a letras: {amount} "
            f"(máximo {MAX_SUPPORTED_AMOUNT})", amount=amount,
        )

    value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    entero = int(value)
    centavos = int((value - entero) * 100)
    return f"{integer_to_words(entero)} CON {centavos:02d}/100 {currency_label(currency)}"
