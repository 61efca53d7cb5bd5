"""
FACTURA-PE Core Configuration
SUNAT endpoints, tax parameters and application settings.
"""

from decimal import Decimal
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class SunatEnvironment(str, Enum):
    BETA = "beta"
    PRODUCTION = "production"


class Settings(BaseSettings):
    app_name: str = "FACTURA-PE"
    app_version: str = "1.0.0"
    debug: bool = True
    sunat_environment: SunatEnvironment = SunatEnvironment.BETA
    host: str = "0.0.0.0"
    port: int = 8000

    # Parámetros tributarios (inyectados al motor de totales)
    default_currency: str = "PEN"
    igv_rate: Decimal = Decimal("0.18")
    icbper_unit_rate: Decimal = Decimal("0.50")  # S/ por bolsa desde 2023
    amount_precision: Decimal = Decimal("0.01")

    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()


# ─────────────────────────────────────────────────────────────
# SUNAT SOAP ENDPOINT REGISTRY
# Consumed by the external submission client; reported by /health.
# ─────────────────────────────────────────────────────────────

SUNAT_URLS = {
    SunatEnvironment.BETA: {
        "bill_service": "https://e-beta.sunat.gob.pe/ol-ti-itcpfegem-beta/billService",
    },
    SunatEnvironment.PRODUCTION: {
        "bill_service": "https://e-factura.sunat.gob.pe/ol-ti-itcpfegem/billService",
    },
}


def get_sunat_url(service: str, environment: SunatEnvironment | None = None) -> str:
    """Get the SUNAT URL for a service based on current environment."""
    env = environment or settings.sunat_environment
    urls = SUNAT_URLS.get(env)
    if not urls:
        raise ValueError(f"Unknown SUNAT environment: {env}")
    url = urls.get(service)
    if not url:
        raise ValueError(f"Unknown SUNAT service: {service}")
    return url
