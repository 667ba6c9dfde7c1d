"""
Adapter: Document Type Classifier

Pontua o texto normalizado contra três conjuntos de palavras-chave
(carteirinha de plano, RG, CNH). O primeiro tipo, na ordem de
prioridade, que atingir o mínimo de correspondências é aceito.
"""

import logging
import re
from dataclasses import dataclass

from docextract.core.entities.document import DocType, DocumentTypeResult, IdentitySubtype

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeProfile:
    """Conjunto de padrões + parâmetros de confiança de um tipo."""
    doc_type: DocType
    patterns: tuple[re.Pattern, ...]
    min_matches: int
    base: float
    per_match: float
    cap: float

    def count(self, text: str) -> int:
        return sum(1 for p in self.patterns if p.search(text))

    def confidence(self, match_count: int) -> float:
        return round(min(self.cap, self.base + match_count * self.per_match), 4)


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p) for p in patterns)


INSURANCE_PATTERNS = _compile(
    r"CARTAO NACIONAL DE SAUDE",
    r"\bCNS\b",
    r"\b(?:UNIMED|BRADESCO SAUDE|AMIL|SUL ?AMERICA|PORTO SEGURO)\b",
    r"PLANO DE SAUDE",
    r"\bBENEFICIARIO\b",
    r"\bOPERADORA\b",
    r"\bANS\b\s*[-:]?\s*(?:N[º°O]?\s*)?\d{2}",
)

IDENTITY_PATTERNS = _compile(
    r"REPUBLICA FEDERATIVA DO BRASIL",
    r"CARTEIRA DE IDENTIDADE",
    r"REGISTRO GERAL",
    r"REGISTRO\s+\d+",
    r"SECRETARIA DA SEGURANCA PUBLICA",
    r"INSTITUTO DE IDENTIFICACAO",
    r"\b(?:SSP|DETRAN|IGP)\b",
    r"PROIBIDO PLASTIFICAR",
    r"VALIDA EM TODO O TERRITORIO NACIONAL",
    r"\bFILIACAO\b",
    r"\bNATURALIDADE\b",
    r"DOC\.?\s*ORIGEM",
    r"DATA\s+DE\s+NASCIMENTO",
    r"\bEXPEDICAO\b",
    r"\b\d{1,2}/[A-Z]{3}/\d{4}\b",
    r"\b\d{3}\.\d{3}\.\d{3}-\d{2}\b",
    r"ASSINATURA DO DIRETOR",
    r"\bLEI\s+N[º°ªO]?\s*\d+",
)

LICENSE_PATTERNS = _compile(
    r"CARTEIRA NACIONAL DE HABILITACAO",
    r"\bCNH\b",
    r"\bCATEGORIA\b",
    r"\bVALIDADE\b",
    r"PRIMEIRA HABILITACAO|1[ªA]? HABILITACAO",
    r"\bDETRAN\b",
    r"\bCONDUTOR\b",
)

CIN_MARKERS = _compile(
    r"CARTEIRA DE IDENTIDADE NACIONAL",
    r"\bCIN\b",
    r"REGISTRO NACIONAL",
)

RG_ANTIGO_MARKERS = _compile(
    r"CARTEIRA DE IDENTIDADE",
    r"REGISTRO GERAL",
    r"SECRETARIA DA SEGURANCA PUBLICA",
    r"INSTITUTO DE IDENTIFICACAO",
    r"\bSSP\s*/",
)

UNKNOWN_CONFIDENCE = 0.1


class DocumentClassifier:
    """
    Classificador por palavras-chave.

    Prioridade: carteirinha → identidade → habilitação. Empates não
    são re-pontuados: o primeiro tipo que atinge o mínimo vence.
    """

    def __init__(
        self,
        insurance_min_matches: int = 2,
        identity_min_matches: int = 2,
        license_min_matches: int = 2,
    ):
        self._profiles = (
            TypeProfile(DocType.INSURANCE_CARD, INSURANCE_PATTERNS,
                        insurance_min_matches, base=0.6, per_match=0.1, cap=0.90),
            TypeProfile(DocType.IDENTITY_CARD, IDENTITY_PATTERNS,
                        identity_min_matches, base=0.6, per_match=0.05, cap=0.95),
            TypeProfile(DocType.DRIVER_LICENSE, LICENSE_PATTERNS,
                        license_min_matches, base=0.6, per_match=0.1, cap=0.90),
        )

    @property
    def profiles(self) -> tuple[TypeProfile, ...]:
        return self._profiles

    def classify(self, normalized_text: str) -> DocumentTypeResult:
        """Classifica o texto; UNKNOWN com confiança 0.1 se nenhum tipo passar."""
        if not normalized_text:
            return DocumentTypeResult(type=DocType.UNKNOWN, confidence=UNKNOWN_CONFIDENCE)

        for profile in self._profiles:
            matches = profile.count(normalized_text)
            if matches >= profile.min_matches:
                subtype = None
                if profile.doc_type == DocType.IDENTITY_CARD:
                    subtype = self.detect_identity_subtype(normalized_text).value
                logger.debug("Documento classificado como %s (%d padrões)", profile.doc_type.value, matches)
                return DocumentTypeResult(
                    type=profile.doc_type,
                    confidence=profile.confidence(matches),
                    subtype=subtype,
                    match_count=matches,
                )

        return DocumentTypeResult(type=DocType.UNKNOWN, confidence=UNKNOWN_CONFIDENCE)

    @staticmethod
    def detect_identity_subtype(normalized_text: str) -> IdentitySubtype:
        """CIN (nova) antes de RG antigo; senão genérico."""
        if any(p.search(normalized_text) for p in CIN_MARKERS):
            return IdentitySubtype.CIN
        if any(p.search(normalized_text) for p in RG_ANTIGO_MARKERS):
            return IdentitySubtype.RG_ANTIGO
        return IdentitySubtype.RG_GENERICO
