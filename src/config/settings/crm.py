"""Settings da integração com o CRM da cooperativa.

O CRM recebe o cadastro completo (campos + documentos) via multipart.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

CRM_CREATE_PATH: str = "/api/GuestCooperativeUser/external-create"
MISSING_FIELD_SENTINEL: str = "nao coletado"
UNRESOLVED_MUNICIPALITY_CODE: str = "0000000"
IBGE_MUNICIPALITIES_URL: str = "https://servicodados.ibge.gov.br/api/v1/localidades/municipios"


@dataclass(frozen=True)
class CRMSettings:
    """Configurações do CRM.

    Attributes:
        base_url: URL base da API do CRM
        api_key: Chave enviada no header X-API-KEY
        request_timeout_seconds: Timeout do POST multipart
        download_timeout_seconds: Timeout do download de cada documento
        image_max_dimension: Maior lado permitido para imagens (px)
        image_jpeg_quality: Qualidade JPEG após recompressão
        batch_delay_seconds: Intervalo entre envios no sync em lote
        missing_field_value: Valor enviado para campos ausentes
        municipalities_url: API de localidades do IBGE (CityCode/BirthCityCode)
        refresh_municipalities_on_startup: Baixa a tabela completa do IBGE no startup
    """

    base_url: str = ""
    api_key: str = ""
    request_timeout_seconds: float = 120.0
    download_timeout_seconds: float = 30.0
    image_max_dimension: int = 1280
    image_jpeg_quality: int = 80
    batch_delay_seconds: float = 0.5
    missing_field_value: str = MISSING_FIELD_SENTINEL
    municipalities_url: str = IBGE_MUNICIPALITIES_URL
    refresh_municipalities_on_startup: bool = True

    @property
    def create_endpoint(self) -> str:
        """URL completa do endpoint de criação de cooperado."""
        return f"{self.base_url.rstrip('/')}{CRM_CREATE_PATH}"

    def validate(self) -> list[str]:
        """Valida configurações do CRM."""
        errors: list[str] = []
        if not self.base_url:
            errors.append("CRM_BASE_URL não configurado")
        if not self.api_key:
            errors.append("CRM_API_KEY não configurado")
        if not 1 <= self.image_jpeg_quality <= 95:
            errors.append("CRM_IMAGE_JPEG_QUALITY deve estar entre 1 e 95")
        if self.image_max_dimension <= 0:
            errors.append("CRM_IMAGE_MAX_DIMENSION deve ser positivo")
        return errors


def _load_crm_from_env() -> CRMSettings:
    """Carrega CRMSettings de variáveis de ambiente."""
    return CRMSettings(
        base_url=os.getenv("CRM_BASE_URL", ""),
        api_key=os.getenv("CRM_API_KEY", ""),
        request_timeout_seconds=float(os.getenv("CRM_TIMEOUT_SECONDS", "120")),
        download_timeout_seconds=float(os.getenv("CRM_DOWNLOAD_TIMEOUT_SECONDS", "30")),
        image_max_dimension=int(os.getenv("CRM_IMAGE_MAX_DIMENSION", "1280")),
        image_jpeg_quality=int(os.getenv("CRM_IMAGE_JPEG_QUALITY", "80")),
        batch_delay_seconds=float(os.getenv("CRM_BATCH_DELAY_MS", "500")) / 1000,
        municipalities_url=os.getenv("IBGE_MUNICIPALITIES_URL", IBGE_MUNICIPALITIES_URL),
        refresh_municipalities_on_startup=os.getenv("IBGE_REFRESH_ON_STARTUP", "true").lower()
        in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_crm_settings() -> CRMSettings:
    """Retorna instância cacheada de CRMSettings."""
    return _load_crm_from_env()
