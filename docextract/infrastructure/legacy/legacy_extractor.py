"""
Adapter: Legacy Heuristic Extractor

Caminho antigo, sem conhecimento de operadora nem de layout:
regex amplos aplicados ao texto inteiro numa única passada.
Usado pelo orquestrador só quando o caminho por estratégias
produz confiança abaixo do mínimo utilizável.
"""

import logging
import re
from dataclasses import dataclass, field

from docextract.core.entities.document import DocType
from docextract.infrastructure.extractors.cards.base import remove_cns
from docextract.infrastructure.extractors.cards.generic import longest_digit_run
from docextract.infrastructure.issuers.ans_detector import is_valid_code
from docextract.infrastructure.text.normalizer import extract_lines
from docextract.infrastructure.text.patterns import DATE_ANY
from docextract.infrastructure.text.validators import (
    digits_only,
    is_valid_name,
    parse_br_date,
)

logger = logging.getLogger(__name__)

LEGACY_OPERATORS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Bradesco Saúde", ("BRADESCO",)),
    ("Unimed", ("UNIMED",)),
    ("Amil", ("AMIL",)),
    ("SulAmérica", ("SULAMERICA", "SUL AMERICA")),
    ("Hapvida", ("HAPVIDA",)),
    ("NotreDame Intermédica", ("NOTREDAME", "INTERMEDICA")),
    ("Golden Cross", ("GOLDEN CROSS",)),
    ("Porto Saúde", ("PORTO SAUDE", "PORTO SEGURO SAUDE")),
)

LEGACY_ANS = re.compile(
    r"\bANS\s*[-:]?\s*N?[º°O]?\.?\s*(?:(\d{2})\.(\d{3})-(\d)|(\d{6})(?!\d))"
)
LEGACY_HOLDER = re.compile(
    r"\b(?:NOME\s*DO\s*BENEFICIARIO|BENEFICIARIO|TITULAR|NOME|PACIENTE)\s*[:\-]?\s*([A-Z][A-Z ]{5,60})"
)
LEGACY_PLAN = (
    re.compile(r"\b((?:BRONZE|PRATA|OURO|DIAMANTE)\s+MAIS\s+RC)\b"),
    re.compile(r"\b(SAUDE\s+TOP)\b"),
    re.compile(r"(?:CORPORATIVO\s+)?\b(COMPACTO)\b"),
    re.compile(r"\b(?:PLANO|PRODUTO)\s*:\s*([A-Z][A-Z0-9 ]{2,30}[A-Z0-9])"),
)
LEGACY_CPF = re.compile(r"(?<![\d.])(\d{3}\.?\d{3}\.?\d{3}-?\d{2})(?!\d)")
LEGACY_RG = re.compile(r"\b(?:RG|REGISTRO|IDENTIDADE)\s*[:\-]?\s*(\d[\d.\-]{5,12}[\dX])")
LEGACY_GENDER = re.compile(r"\bSEXO\s*[:\-]?\s*(M|F|MASCULINO|FEMININO)\b|\b(MASCULINO|FEMININO)\b")
LEGACY_NAME_LABEL = re.compile(r"\bNOME\s*[:\-]?\s*\n?\s*([A-Z][A-Z ]{4,60})")
# Sem um rótulo de documento de identidade o caminho legado não adivinha tipo
LEGACY_IDENTITY_ANCHOR = re.compile(
    r"\b(?:NOME|CPF|RG|REGISTRO\s+GERAL|IDENTIDADE|FILIACAO|HABILITACAO)\b"
)


@dataclass
class LegacyExtraction:
    """Saída do caminho legado: tipo adivinhado + campos."""
    doc_type: DocType = DocType.UNKNOWN
    fields: dict[str, str] = field(default_factory=dict)
    field_strategies: dict[str, str] = field(default_factory=dict)


class LegacyExtractor:
    """Heurística ampla de passada única (sem operadora, sem layout)."""

    def extract(self, normalized_text: str) -> LegacyExtraction:
        result = LegacyExtraction()
        if not normalized_text:
            return result

        insurance = self._insurance_fields(normalized_text)
        if {"ans_code", "issuer_name", "cns"} & insurance.keys():
            result.doc_type = DocType.INSURANCE_CARD
            result.fields = insurance
        elif LEGACY_IDENTITY_ANCHOR.search(normalized_text):
            identity = self._identity_fields(normalized_text)
            if identity:
                result.fields = identity
                result.doc_type = (
                    DocType.DRIVER_LICENSE if "HABILITACAO" in normalized_text else DocType.IDENTITY_CARD
                )

        result.field_strategies = {name: f"legacy_{name}" for name in result.fields}
        logger.debug("Caminho legado: %s com %d campos", result.doc_type.value, len(result.fields))
        return result

    # ─── Carteirinha ─────────────────────────────────────────

    def _insurance_fields(self, text: str) -> dict[str, str]:
        fields: dict[str, str] = {}

        for ans in LEGACY_ANS.finditer(text):
            code = "".join(g for g in ans.groups() if g)
            if is_valid_code(code):
                fields["ans_code"] = code
                break

        for name, keys in LEGACY_OPERATORS:
            if any(re.search(rf"\b{key}\b", text) for key in keys):
                fields["issuer_name"] = name
                break

        for match in LEGACY_HOLDER.finditer(text):
            candidate = match.group(1).strip()
            if is_valid_name(candidate):
                fields["holder_name"] = candidate
                break

        stripped, cns = remove_cns(text)
        if cns:
            fields["cns"] = cns

        cpf = LEGACY_CPF.search(stripped)
        if cpf and "." in cpf.group(1):
            fields["cpf"] = cpf.group(1)

        birth = self._first_date(text)
        if birth:
            fields["birth_date"] = birth

        for pattern in LEGACY_PLAN:
            plan = pattern.search(text)
            if plan:
                fields["plan"] = " ".join(plan.group(1).split())
                break

        card = longest_digit_run(stripped)
        if card:
            fields["card_number"] = card
        return fields

    # ─── Identidade ──────────────────────────────────────────

    def _identity_fields(self, text: str) -> dict[str, str]:
        fields: dict[str, str] = {}

        name = LEGACY_NAME_LABEL.search(text)
        if name and is_valid_name(name.group(1).strip()):
            fields["holder_name"] = name.group(1).strip()
        else:
            for line in extract_lines(text):
                if len(line.split()) >= 3 and is_valid_name(line):
                    fields["holder_name"] = line
                    break

        cpf = LEGACY_CPF.search(text)
        if cpf and len(digits_only(cpf.group(1))) == 11:
            fields["cpf"] = cpf.group(1)

        rg = LEGACY_RG.search(text)
        if rg:
            fields["registry_number"] = rg.group(1)

        birth = self._first_date(text)
        if birth:
            fields["birth_date"] = birth

        gender = LEGACY_GENDER.search(text)
        if gender:
            fields["gender"] = (gender.group(1) or gender.group(2))[0]
        return fields

    @staticmethod
    def _first_date(text: str) -> str | None:
        for match in DATE_ANY.finditer(text):
            parsed = parse_br_date(match.group(0))
            if parsed:
                return parsed.isoformat()
        return None
