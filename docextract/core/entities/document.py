"""
Entity: Document

Tipos de documento reconhecidos pelo pipeline e o resultado da
classificação/identificação de emissor.
Modelo puro, sem dependência de framework.
"""

from dataclasses import dataclass
from enum import Enum


class DocType(str, Enum):
    IDENTITY_CARD = "IDENTITY_CARD"      # RG / CIN
    DRIVER_LICENSE = "DRIVER_LICENSE"    # CNH
    INSURANCE_CARD = "INSURANCE_CARD"    # carteirinha de plano de saúde
    UNKNOWN = "UNKNOWN"


class IdentitySubtype(str, Enum):
    CIN = "CIN"                  # Carteira de Identidade Nacional (nova)
    RG_ANTIGO = "RG_ANTIGO"      # layout estadual antigo (SSP / Instituto)
    RG_GENERICO = "RG_GENERICO"


@dataclass(frozen=True)
class DocumentTypeResult:
    """Resultado da classificação, produzido uma vez por documento."""
    type: DocType
    confidence: float                  # 0.0 a 1.0, nunca 1.0
    subtype: str | None = None
    match_count: int = 0


@dataclass(frozen=True)
class IssuerIdentity:
    """
    Operadora identificada.

    Pode vir parcial: código ANS sem nome reconhecido, ou nome
    encontrado no texto sem código.
    """
    issuer_code: str | None = None     # código ANS bruto
    issuer_name: str | None = None     # nome canônico ("Unimed", "Amil"...)
    issuer_key: str | None = None      # chave do extrator ("UNIMED", "AMIL"...)
    method: str | None = None          # "ANS_CODE", "TEXT_PATTERN", "FUZZY_TEXT"

    @property
    def resolved(self) -> bool:
        return self.issuer_key is not None
