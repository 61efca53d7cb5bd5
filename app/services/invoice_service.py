"""
FACTURA-PE: Servicio de Comprobantes
====================================
Orquesta: validar cabecera → calcular totales → armar payload.
El payload resultante lo consume el constructor/firmador XML externo
(UBL 2.1) y el cliente de envío a SUNAT; este servicio no firma ni envía.
"""
import logging
from dataclasses import replace

from app.sunat.catalogs import TRIBUTO_POR_CATEGORIA, TaxCategory, parse_affectation_code
from app.sunat.totals import (
    ZERO,
    InvoiceTotals,
    LineItem,
    TotalsConfig,
    classify,
    compute_totals,
)
from app.utils.sunat_helpers import (
    current_pe_datetime,
    format_document_number,
    validate_ruc,
    validate_serie,
)

logger = logging.getLogger("factura-pe.invoice_service")

TIPO_OPERACION_VENTA_INTERNA = "0101"
TIPO_OPERACION_EXPORTACION = "0200"


class InvoiceServiceError(Exception):
    def __init__(self, message: str, code: str = "INVOICE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvoiceService:
    """Cálculo de totales y armado de comprobantes para el pipeline SUNAT."""

    def __init__(self, config: TotalsConfig):
        self.config = config

    def _config_for(self, currency: str | None) -> TotalsConfig:
        if not currency:
            return self.config
        return replace(self.config, currency=currency.upper())

    # ══════════════════════════════════════════════════════════
    # TOTALES
    # ══════════════════════════════════════════════════════════

    def calculate(self, items: list[dict], currency: str | None = None) -> InvoiceTotals:
        line_items = [LineItem.from_dict(item) for item in items]
        totals = compute_totals(line_items, self._config_for(currency))
        self._warn_unclassified(totals)
        return totals

    @staticmethod
    def _warn_unclassified(totals: InvoiceTotals) -> None:
        for code in totals.unclassified_codes:
            logger.warning(
                f"Código de afectación no catalogado {code!r}: se trató como operación gratuita"
            )

    # ══════════════════════════════════════════════════════════
    # COMPROBANTE
    # ══════════════════════════════════════════════════════════

    def build_document(self, header: dict, items: list[dict]) -> dict:
        tipo_doc = header.get("tipo_doc", "01")
        serie = header["serie"].upper()
        correlativo = header["correlativo"]

        if not validate_serie(tipo_doc, serie):
            raise InvoiceServiceError(
                f"Serie '{serie}' inválida para el tipo de comprobante {tipo_doc}", "INVALID_SERIE")

        company = header["company"]
        if not validate_ruc(company["num_doc"]):
            raise InvoiceServiceError(
                f"RUC del emisor inválido: '{company['num_doc']}'", "INVALID_COMPANY_RUC")

        client = header["client"]
        if tipo_doc == "01" and (client.get("tipo_doc", "6") != "6"
                                 or not validate_ruc(client["num_doc"])):
            raise InvoiceServiceError(
                "La factura requiere un cliente con RUC válido", "INVALID_CLIENT_RUC")

        config = self._config_for(header.get("currency"))
        line_items = [LineItem.from_dict(item) for item in items]
        totals = compute_totals(line_items, config)
        self._warn_unclassified(totals)

        fecha, hora = current_pe_datetime()
        numero = format_document_number(serie, correlativo)
        logger.info(f"Comprobante {tipo_doc} {numero} armado: total {totals.total_price} {totals.currency}")

        only_export = bool(line_items) and all(
            classify(i.tax_affectation_code) is TaxCategory.EXPORT for i in line_items)

        return {
            "ublVersion": "2.1",
            "tipoOperacion": TIPO_OPERACION_EXPORTACION if only_export else TIPO_OPERACION_VENTA_INTERNA,
            "tipoDoc": tipo_doc,
            "serie": serie,
            "correlativo": str(correlativo),
            "numero": numero,
            "fechaEmision": header.get("fecha_emision") or fecha,
            "horaEmision": hora,
            "formaPago": {"moneda": totals.currency, "tipo": "Contado"},
            "company": self._company(company),
            "client": self._client(client),
            "details": [self._detail(item, config) for item in line_items],
            **totals.to_document_payload(),
        }

    @staticmethod
    def _company(c: dict) -> dict:
        return {
            "ruc": c["num_doc"],
            "razonSocial": c["razon_social"],
            "nombreComercial": c.get("nombre_comercial"),
            "address": {"direccion": c.get("direccion"), "ubigueo": c.get("ubigeo")},
        }

    @staticmethod
    def _client(c: dict) -> dict:
        return {
            "tipoDoc": c.get("tipo_doc", "6"),
            "numDoc": c["num_doc"],
            "rznSocial": c["razon_social"],
            "address": {"direccion": c.get("direccion")},
        }

    def _detail(self, item: LineItem, config: TotalsConfig) -> dict:
        category = classify(item.tax_affectation_code)
        taxed = category in config.igv_categories
        free = category is TaxCategory.FREE

        valor_venta = config.money(item.line_total)
        igv = config.money(item.line_total * config.igv_rate) if taxed else ZERO
        icbper = config.money(item.quantity * config.icbper_unit_rate) if item.icbper else ZERO
        precio = item.unit_price * (1 + config.igv_rate) if taxed else item.unit_price

        detail = {
            "codProducto": item.code,
            "unidad": item.unit,
            "descripcion": item.description,
            "cantidad": float(item.quantity),
            "mtoValorUnitario": 0.0 if free else float(config.money(item.unit_price)),
            "mtoValorVenta": float(valor_venta),
            "mtoBaseIgv": float(valor_venta),
            "porcentajeIgv": float(config.igv_rate * 100) if taxed else 0.0,
            "igv": float(igv),
            "tipAfeIgv": parse_affectation_code(item.tax_affectation_code),
            "codTributo": TRIBUTO_POR_CATEGORIA[category],
            "totalImpuestos": float(igv + icbper),
            "mtoPrecioUnitario": 0.0 if free else float(config.money(precio)),
        }
        if free:
            detail["mtoValorGratuito"] = float(config.money(item.unit_price))
        if item.icbper:
            detail["factorIcbper"] = float(config.icbper_unit_rate)
            detail["icbper"] = float(icbper)
        return detail
