"""
Adapter: Confidence Model

Confiança global = confiança do classificador (piso) + incremento
fixo por campo extraído, limitada a um teto por tipo que nunca
chega a 1.0. Também monta o rastro de estratégias por campo.
"""

from docextract.core.entities.document import DocType
from docextract.core.entities.extraction_result import ConfidenceReport, MethodTrace
from docextract.infrastructure.text.validators import is_valid_cpf_checksum

# Peso por campo: número da carteirinha e nome pesam mais
FIELD_WEIGHTS: dict[DocType, dict[str, float]] = {
    DocType.INSURANCE_CARD: {
        "card_number": 0.10,
        "holder_name": 0.05,
        "plan": 0.02,
        "birth_date": 0.02,
        "issuer_name": 0.02,
    },
    DocType.IDENTITY_CARD: {
        "holder_name": 0.06,
        "registry_number": 0.04,
        "cpf": 0.03,
        "birth_date": 0.03,
        "mother_name": 0.01,
        "father_name": 0.01,
        "birthplace": 0.01,
    },
    DocType.DRIVER_LICENSE: {
        "holder_name": 0.06,
        "license_number": 0.05,
        "cpf": 0.03,
        "birth_date": 0.02,
    },
}

CONFIDENCE_CAPS: dict[DocType, float] = {
    DocType.INSURANCE_CARD: 0.98,
    DocType.IDENTITY_CARD: 0.98,
    DocType.DRIVER_LICENSE: 0.97,
    DocType.UNKNOWN: 0.1,
}

PRIMARY_FIELDS: dict[DocType, str] = {
    DocType.INSURANCE_CARD: "card_number",
    DocType.IDENTITY_CARD: "holder_name",
    DocType.DRIVER_LICENSE: "holder_name",
}

# Confiança por campo para estratégias de último recurso
FALLBACK_STRATEGY_CONFIDENCE = {
    "name_structural": 0.5,
    "name_after_filiation": 0.7,
    "name_after_registry_number": 0.7,
    "holder_isolated_line": 0.6,
    "birth_oldest_date": 0.7,
    "generic_longest_run": 0.5,
    "license_number_bare": 0.7,
}
INVALID_CPF_CHECKSUM_CONFIDENCE = 0.6


class ConfidenceModel:
    """Agrega certeza do classificador e campos extraídos num ConfidenceReport."""

    def __init__(
        self,
        weights: dict[DocType, dict[str, float]] | None = None,
        caps: dict[DocType, float] | None = None,
    ):
        self._weights = weights or FIELD_WEIGHTS
        self._caps = caps or CONFIDENCE_CAPS

    def cap_for(self, doc_type: DocType) -> float:
        return self._caps.get(doc_type, self._caps[DocType.UNKNOWN])

    def score(
        self,
        doc_type: DocType,
        classifier_confidence: float,
        fields: dict[str, str],
        method: MethodTrace,
        cap: float | None = None,
    ) -> ConfidenceReport:
        """
        Monta o relatório; campos ausentes simplesmente não somam.

        Args:
            cap: Teto explícito (caminho legado); por padrão o teto do tipo.
        """
        weights = self._weights.get(doc_type, {})
        per_field = {
            name: self.field_confidence(name, value, method.field_strategies.get(name))
            for name, value in fields.items()
        }

        overall = classifier_confidence + sum(
            weight for name, weight in weights.items() if name in fields
        )
        ceiling = self.cap_for(doc_type) if cap is None else min(cap, self.cap_for(doc_type))
        overall = min(ceiling, overall)
        return ConfidenceReport(overall=round(overall, 4), per_field=per_field, method=method)

    @staticmethod
    def field_confidence(name: str, value: str, strategy_id: str | None) -> float:
        if name == "cpf" and not is_valid_cpf_checksum(value):
            return INVALID_CPF_CHECKSUM_CONFIDENCE
        return FALLBACK_STRATEGY_CONFIDENCE.get(strategy_id or "", 1.0)

    @staticmethod
    def is_success(doc_type: DocType, fields: dict[str, str]) -> bool:
        """Sucesso = tipo conhecido e campo primário presente."""
        primary = PRIMARY_FIELDS.get(doc_type)
        return primary is not None and bool(fields.get(primary))
