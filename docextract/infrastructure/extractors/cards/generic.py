"""
Adapter: Generic Card Extractor

Heurística sem conhecimento de operadora: a maior sequência
numérica plausível, desconsiderando espaços de agrupamento.
Usada quando a operadora não foi identificada ou não tem estratégia.
"""

import re

from docextract.core.interfaces.card_extractor import CardExtraction
from docextract.infrastructure.extractors.cards.base import BaseCardExtractor, remove_cns
from docextract.infrastructure.text.patterns import LONG_DIGIT_RUN, PatternRule, first_match
from docextract.infrastructure.text.validators import (
    digits_only,
    is_valid_cns,
    is_valid_cpf_checksum,
    parse_br_date,
)

MIN_CARD_DIGITS = 8
MAX_CARD_DIGITS = 20

_GROUPED_RUN = re.compile(r"(?<![\d.\-/])\d+(?: \d+)+(?![\d.\-/])")


def _is_date_like(digits: str) -> bool:
    """'15031985' → data sem separadores."""
    return len(digits) == 8 and parse_br_date(f"{digits[:2]}/{digits[2:4]}/{digits[4:]}") is not None


def longest_digit_run(text: str) -> str | None:
    """Maior candidato entre 8 e 20 dígitos que não seja CNS, CPF nem data."""
    candidates: list[str] = []
    for match in _GROUPED_RUN.finditer(text):
        candidates.append(digits_only(match.group(0)))
    candidates.extend(LONG_DIGIT_RUN.findall(text))

    best: str | None = None
    for digits in candidates:
        if not MIN_CARD_DIGITS <= len(digits) <= MAX_CARD_DIGITS:
            continue
        if is_valid_cns(digits) or is_valid_cpf_checksum(digits) or _is_date_like(digits):
            continue
        if best is None or len(digits) > len(best):
            best = digits
    return best


class GenericCardExtractor(BaseCardExtractor):
    """Estratégia genérica (fallback)."""

    issuer_key = "GENERIC"
    display_name = ""

    PLAN_RULES = (
        PatternRule("generic_plan_label", re.compile(r"\bPLANO\s*:\s*([A-Z][A-Z0-9 ]{2,30}[A-Z0-9])")),
        PatternRule("generic_product_label", re.compile(r"\bPRODUTO\s*:\s*([A-Z][A-Z0-9 ]{2,30}[A-Z0-9])")),
    )

    def extract(self, normalized_text: str) -> CardExtraction:
        result = CardExtraction()
        if not normalized_text:
            return result

        text, cns = remove_cns(normalized_text)
        if cns:
            result.supporting_fields["cns"] = cns
            result.field_strategies["cns"] = "cns_checksum"

        card = longest_digit_run(text)
        if card:
            result.card_number = card
            result.field_strategies["card_number"] = "generic_longest_run"

        plan = first_match(self.PLAN_RULES, text)
        if plan:
            result.supporting_fields["plan"] = plan[0].strip()
            result.supporting_fields["plan_name"] = self.map_plan_name(plan[0])
            result.field_strategies["plan"] = plan[1]

        self._extract_common(text, result)
        return result
