"""
FACTURA-PE: Motor de Totales
============================
Calcula los totales de un comprobante a partir de sus líneas.

Flujo (función pura, sin I/O ni estado global):
  1. classify        → código de afectación (Cat. 07) → TaxCategory
  2. aggregate       → subtotal e IGV por categoría, ICBPER aparte
  3. finalize        → truncamiento SUNAT por categoría + total a pagar
  4. amount_in_words → leyenda 1000
  5. assemble_totals → InvoiceTotals inmutable

REGLAS CRITICAS:
- Subtotal por categoría: floor(valor * 10) / 10 (trunca, nunca redondea hacia arriba)
- El truncamiento se aplica ANTES de sumar el total a pagar
- IGV (18%) solo para operaciones gravadas (10) y de exportación (40)
- ICBPER = cantidad * tarifa unitaria, independiente de la afectación
- Códigos desconocidos (o nulos) caen en Gratuitas; nunca es error
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Any, Iterable, NamedTuple

from app.sunat.amount_words import (
    MAX_SUPPORTED_AMOUNT,
    UnsupportedAmountError,
    amount_in_words,
)
from app.sunat.catalogs import (
    LEYENDA_MONTO_EN_LETRAS,
    ONEROUS_CODES,
    TaxCategory,
    is_catalogued,
    parse_affectation_code,
)

ZERO = Decimal("0")
TENTH = Decimal("0.1")


def to_decimal(value) -> Decimal:
    """float/int/str → Decimal sin arrastrar error binario (vía str)."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


@dataclass(frozen=True)
class TotalsConfig:
    """Parámetros tributarios inyectados en cada cálculo."""
    currency: str = "PEN"
    igv_rate: Decimal = Decimal("0.18")
    icbper_unit_rate: Decimal = Decimal("0.50")
    amount_precision: Decimal = Decimal("0.01")
    igv_categories: tuple[TaxCategory, ...] = (TaxCategory.TAXABLE, TaxCategory.EXPORT)

    def __post_init__(self):
        object.__setattr__(self, "igv_rate", to_decimal(self.igv_rate))
        object.__setattr__(self, "icbper_unit_rate", to_decimal(self.icbper_unit_rate))
        object.__setattr__(self, "amount_precision", to_decimal(self.amount_precision))

    def money(self, value) -> Decimal:
        return to_decimal(value).quantize(self.amount_precision, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineItem:
    """Línea de detalle. line_total siempre se deriva, nunca se recibe."""
    quantity: Decimal
    unit_price: Decimal
    tax_affectation_code: Any = 10
    icbper: bool = False
    code: str | None = None
    description: str = ""
    unit: str = "NIU"

    def __post_init__(self):
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price))

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        return cls(
            quantity=data.get("quantity", 1),
            unit_price=data["unit_price"],
            tax_affectation_code=data.get("tax_affectation_code"),
            icbper=bool(data.get("icbper", False)),
            code=data.get("code"),
            description=data.get("description", ""),
            unit=data.get("unit", "NIU"),
        )


@dataclass
class TaxCategoryBucket:
    sub_total: Decimal = ZERO
    tax_amount: Decimal = ZERO

    def add(self, amount: Decimal, tax: Decimal = ZERO) -> None:
        self.sub_total += amount
        self.tax_amount += tax


def new_buckets() -> dict[TaxCategory, TaxCategoryBucket]:
    return {category: TaxCategoryBucket() for category in TaxCategory}


class Aggregation(NamedTuple):
    buckets: dict[TaxCategory, TaxCategoryBucket]
    total_icbper: Decimal
    unclassified_codes: tuple


class FinalTotals(NamedTuple):
    buckets: dict[TaxCategory, TaxCategoryBucket]
    total_igv: Decimal
    total_icbper: Decimal
    total_price: Decimal


# ══════════════════════════════════════════════════════════
# 1. CLASIFICACIÓN
# ══════════════════════════════════════════════════════════

def classify(code) -> TaxCategory:
    """Código de afectación → categoría. Total: cualquier entrada tiene categoría."""
    return ONEROUS_CODES.get(parse_affectation_code(code), TaxCategory.FREE)


def _diagnostic_key(code):
    parsed = parse_affectation_code(code)
    if parsed is not None:
        return parsed
    return None if code is None else str(code)


# ══════════════════════════════════════════════════════════
# 2. AGREGACIÓN
# ══════════════════════════════════════════════════════════

def aggregate(items: Iterable[LineItem], config: TotalsConfig) -> Aggregation:
    buckets = new_buckets()
    total_icbper = ZERO
    unclassified: list = []

    for item in items:
        category = classify(item.tax_affectation_code)
        line_total = item.line_total
        igv = line_total * config.igv_rate if category in config.igv_categories else ZERO
        buckets[category].add(line_total, igv)

        if item.icbper:
            total_icbper += item.quantity * config.icbper_unit_rate

        if category is TaxCategory.FREE and not is_catalogued(item.tax_affectation_code):
            key = _diagnostic_key(item.tax_affectation_code)
            if key not in unclassified:
                unclassified.append(key)

    return Aggregation(buckets, total_icbper, tuple(unclassified))


# ══════════════════════════════════════════════════════════
# 3. TRUNCAMIENTO Y TOTALES
# ══════════════════════════════════════════════════════════

def truncate_tenth(value) -> Decimal:
    """floor(value * 10) / 10 — regla de redondeo de subtotales SUNAT."""
    return to_decimal(value).quantize(TENTH, rounding=ROUND_FLOOR)


def _check_magnitude(aggregation: Aggregation) -> None:
    gross = aggregation.total_icbper + sum(
        (b.sub_total + b.tax_amount for b in aggregation.buckets.values()), ZERO)
    if not gross.is_finite() or gross >= MAX_SUPPORTED_AMOUNT + 1:
        raise UnsupportedAmountError(
            f"Importe fuera de rango: {gross} (máximo {MAX_SUPPORTED_AMOUNT})",
            amount=gross,
        )


def finalize(aggregation: Aggregation, config: TotalsConfig) -> FinalTotals:
    """
    Raises:
        UnsupportedAmountError: la suma bruta excede MAX_SUPPORTED_AMOUNT.
    """
    _check_magnitude(aggregation)
    rounded = {}
    for category, bucket in aggregation.buckets.items():
        rounded[category] = TaxCategoryBucket(
            sub_total=config.money(truncate_tenth(bucket.sub_total)),
            tax_amount=config.money(bucket.tax_amount),
        )

    total_igv = config.money(sum(
        (aggregation.buckets[c].tax_amount for c in TaxCategory), ZERO))
    total_icbper = config.money(aggregation.total_icbper)
    total_price = config.money(
        sum((b.sub_total for b in rounded.values()), ZERO) + total_igv + total_icbper
    )
    return FinalTotals(rounded, total_igv, total_icbper, total_price)


# ══════════════════════════════════════════════════════════
# 5. ENSAMBLADO
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InvoiceTotals:
    total_taxable: Decimal
    total_exonerated: Decimal
    total_unaffected: Decimal
    total_export: Decimal
    total_free: Decimal
    total_igv: Decimal
    total_icbper: Decimal
    total_price: Decimal
    legend: str
    currency: str = "PEN"
    unclassified_codes: tuple = field(default_factory=tuple)

    @property
    def total_taxes(self) -> Decimal:
        return self.total_igv + self.total_icbper

    @property
    def onerous_value(self) -> Decimal:
        """Valor de venta: operaciones onerosas sin impuestos."""
        return (self.total_taxable + self.total_exonerated
                + self.total_unaffected + self.total_export)

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "total_taxable": str(self.total_taxable),
            "total_exonerated": str(self.total_exonerated),
            "total_unaffected": str(self.total_unaffected),
            "total_export": str(self.total_export),
            "total_free": str(self.total_free),
            "total_igv": str(self.total_igv),
            "total_icbper": str(self.total_icbper),
            "total_price": str(self.total_price),
            "legend": self.legend,
            "unclassified_codes": list(self.unclassified_codes),
        }

    def to_document_payload(self) -> dict:
        """Campos de totales que consume el constructor del XML."""
        return {
            "tipoMoneda": self.currency,
            "mtoOperGravadas": float(self.total_taxable),
            "mtoOperExoneradas": float(self.total_exonerated),
            "mtoOperInafectas": float(self.total_unaffected),
            "mtoOperExportacion": float(self.total_export),
            "mtoOperGratuitas": float(self.total_free),
            "mtoIGV": float(self.total_igv),
            "icbper": float(self.total_icbper),
            "totalImpuestos": float(self.total_taxes),
            "valorVenta": float(self.onerous_value),
            "subTotal": float(self.total_price),
            "mtoImpVenta": float(self.total_price),
            "legends": [{"code": LEYENDA_MONTO_EN_LETRAS, "value": self.legend}],
        }


def assemble_totals(final: FinalTotals, legend: str, currency: str,
                    unclassified_codes: tuple = ()) -> InvoiceTotals:
    b = final.buckets
    return InvoiceTotals(
        total_taxable=b[TaxCategory.TAXABLE].sub_total,
        total_exonerated=b[TaxCategory.EXONERATED].sub_total,
        total_unaffected=b[TaxCategory.UNAFFECTED].sub_total,
        total_export=b[TaxCategory.EXPORT].sub_total,
        total_free=b[TaxCategory.FREE].sub_total,
        total_igv=final.total_igv,
        total_icbper=final.total_icbper,
        total_price=final.total_price,
        legend=legend,
        currency=currency,
        unclassified_codes=tuple(unclassified_codes),
    )


def compute_totals(items: Iterable[LineItem],
                   config: TotalsConfig | None = None) -> InvoiceTotals:
    """
    Totales completos de un comprobante.

    Raises:
        UnsupportedAmountError: el total excede el rango de la leyenda en letras.
    """
    config = config or TotalsConfig()
    aggregation = aggregate(items, config)
    final = finalize(aggregation, config)
    legend = amount_in_words(final.total_price, config.currency)
    return assemble_totals(final, legend, config.currency.upper(),
                           aggregation.unclassified_codes)
