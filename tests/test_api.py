"""
FACTURA-PE: Test Suite — HTTP API
=================================
Endpoints de totales, comprobante, catálogos y health check
via FastAPI TestClient.

Run: python -m pytest tests/test_api.py -v
"""
import jwt
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from app.main import _get_rate_limit_key, app, limiter

COMPANY = {"tipo_doc": "6", "num_doc": "20100070970", "razon_social": "EMPRESA DEMO S.A.C."}
CLIENT = {"tipo_doc": "6", "num_doc": "20131312955", "razon_social": "CLIENTE S.A."}
SECRET = "factura-pe-test-secret-0123456789abcdef"


@pytest.fixture(scope="module")
def client():
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "ok"
        assert data["environment"] in ("beta", "production")
        assert data["sunat_bill_service_url"].startswith("https://")


class TestTotalsEndpoint:
    def test_example_invoice(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": [
            {"quantity": 1, "unit_price": "100.00", "tax_affectation_code": 10},
            {"quantity": 2, "unit_price": "50.00", "tax_affectation_code": 20},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["total_taxable"] == "100.00"
        assert data["total_exonerated"] == "100.00"
        assert data["total_igv"] == "18.00"
        assert data["total_price"] == "218.00"
        assert data["legend"] == "DOSCIENTOS DIECIOCHO CON 00/100 SOLES"
        assert data["currency"] == "PEN"

    def test_empty_items(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": []})
        assert r.status_code == 200
        assert r.json()["total_price"] == "0.00"
        assert r.json()["legend"] == "CERO CON 00/100 SOLES"

    def test_unknown_code_reported(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": [
            {"quantity": 1, "unit_price": 25.555, "tax_affectation_code": 99},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["total_free"] == "25.50"
        assert data["unclassified_codes"] == [99]

    def test_currency(self, client):
        r = client.post("/api/v1/invoices/totals", json={
            "items": [{"quantity": 3, "unit_price": 0, "icbper": True}], "currency": "USD"})
        assert r.status_code == 200
        assert r.json()["total_icbper"] == "1.50"
        assert r.json()["legend"] == "UNO CON 50/100 DOLARES AMERICANOS"

    @pytest.mark.parametrize("item", [
        {"quantity": 0, "unit_price": 1},
        {"quantity": -1, "unit_price": 1},
        {"quantity": 1, "unit_price": -5},
        {"unit_price": 1},
    ])
    def test_invalid_items(self, client, item):
        r = client.post("/api/v1/invoices/totals", json={"items": [item]})
        assert r.status_code == 422

    def test_amount_too_large(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": [
            {"quantity": 1, "unit_price": 1000000000000, "tax_affectation_code": 20},
        ]})
        assert r.status_code == 422
        assert r.json()["error"] == "AMOUNT_ERROR"
        assert r.json()["code"] == "UNSUPPORTED_AMOUNT"

    def test_huge_unit_price(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": [
            {"quantity": 1, "unit_price": "1e30", "tax_affectation_code": 20},
        ]})
        assert r.status_code == 422
        assert r.json()["code"] == "UNSUPPORTED_AMOUNT"

    def test_fractional_code_goes_to_free(self, client):
        r = client.post("/api/v1/invoices/totals", json={"items": [
            {"quantity": 1, "unit_price": 10, "tax_affectation_code": 10.5},
        ]})
        assert r.status_code == 200
        data = r.json()
        assert data["total_free"] == "10.00"
        assert data["total_igv"] == "0.00"
        assert data["unclassified_codes"] == ["10.5"]


class TestDocumentEndpoint:
    def body(self, **overrides):
        b = {"tipo_doc": "01", "serie": "F001", "correlativo": 7,
             "company": COMPANY, "client": CLIENT,
             "items": [{"description": "Servicio", "quantity": 1, "unit_price": "100.00"}]}
        b.update(overrides)
        return b

    def test_build_document(self, client):
        r = client.post("/api/v1/invoices/document", json=self.body())
        assert r.status_code == 200
        data = r.json()
        assert data["numero"] == "F001-00000007"
        assert data["mtoOperGravadas"] == 100.0
        assert data["mtoIGV"] == 18.0
        assert data["mtoImpVenta"] == 118.0
        assert data["details"][0]["tipAfeIgv"] == 10
        assert data["legends"] == [{"code": "1000", "value": "CIENTO DIECIOCHO CON 00/100 SOLES"}]

    def test_invalid_company_ruc(self, client):
        r = client.post("/api/v1/invoices/document",
                        json=self.body(company={**COMPANY, "num_doc": "20100070971"}))
        assert r.status_code == 422
        assert r.json()["error"] == "INVOICE_ERROR"
        assert r.json()["code"] == "INVALID_COMPANY_RUC"

    def test_items_required(self, client):
        r = client.post("/api/v1/invoices/document", json=self.body(items=[]))
        assert r.status_code == 422


class TestCatalogEndpoints:
    def test_tax_affectation(self, client):
        r = client.get("/api/v1/catalogs/tax-affectation")
        assert r.status_code == 200
        codes = [e["code"] for e in r.json()]
        assert {"10", "20", "30", "40"} <= set(codes)

    def test_currencies(self, client):
        r = client.get("/api/v1/catalogs/currencies")
        assert {"code": "PEN", "description": "SOLES"} in r.json()

    def test_document_types(self, client):
        r = client.get("/api/v1/catalogs/document-types")
        assert {"code": "01", "description": "FACTURA"} in r.json()


# ─────────────────────────────────────────────────────────────
# RATE LIMITING
# ─────────────────────────────────────────────────────────────

def make_request(authorization=None, host="10.0.0.7"):
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/health",
                    "headers": headers, "client": (host, 50000)})


class TestRateLimitKey:
    def test_bearer_token_uses_subject(self):
        token = jwt.encode({"sub": "user-42"}, SECRET, algorithm="HS256")
        assert _get_rate_limit_key(make_request(f"Bearer {token}")) == "user-42"

    def test_token_without_subject_uses_ip(self):
        token = jwt.encode({"role": "admin"}, SECRET, algorithm="HS256")
        assert _get_rate_limit_key(make_request(f"Bearer {token}")) == "10.0.0.7"

    def test_malformed_token_uses_ip(self):
        assert _get_rate_limit_key(make_request("Bearer not-a-jwt")) == "10.0.0.7"

    def test_no_header_uses_ip(self):
        assert _get_rate_limit_key(make_request()) == "10.0.0.7"

    def test_other_scheme_uses_ip(self):
        assert _get_rate_limit_key(make_request("Basic dXNlcjpwYXNz")) == "10.0.0.7"


class TestRateLimit:
    def test_61st_request_is_rejected(self, client):
        token = jwt.encode({"sub": "rate-limit-user"}, SECRET, algorithm="HS256")
        headers = {"Authorization": f"Bearer {token}"}
        limiter.enabled = True
        try:
            for _ in range(60):
                assert client.get("/health", headers=headers).status_code == 200
            assert client.get("/health", headers=headers).status_code == 429
            # otra clave conserva su propia cuota
            other = jwt.encode({"sub": "other-user"}, SECRET, algorithm="HS256")
            r = client.get("/health", headers={"Authorization": f"Bearer {other}"})
            assert r.status_code == 200
        finally:
            limiter.enabled = False
