"""
Adapter: Bradesco Saúde Card Extractor

Carteirinha Bradesco: 15 dígitos em blocos 3-3-6-3
("954 390 098795 004"); algumas emissões trazem só os 12
primeiros (3-3-6).
"""

import re

from docextract.infrastructure.extractors.cards.base import BaseCardExtractor
from docextract.infrastructure.text.patterns import PatternRule, join_groups
from docextract.infrastructure.text.validators import is_valid_cns


class BradescoCardExtractor(BaseCardExtractor):
    """Estratégia Bradesco Saúde."""

    issuer_key = "BRADESCO"
    display_name = "Bradesco Saúde"

    CARD_RULES = (
        PatternRule("bradesco_grouped_15",
                    re.compile(r"(?<!\d)(\d{3})\s+(\d{3})\s+(\d{6})\s+(\d{3})(?!\d)"), join_groups),
        PatternRule("bradesco_grouped_12",
                    re.compile(r"(?<!\d)(\d{3})\s+(\d{3})\s+(\d{6})(?![ \t]*\d)"), join_groups),
        PatternRule("bradesco_plain_15", re.compile(r"(?<!\d)(\d{15})(?!\d)")),
    )

    PLAN_RULES = (
        PatternRule("bradesco_composed_plan",
                    re.compile(r"\bSAUDE\s+(TOP|PLUS|EFETIVO|IDEAL|PERFIL|PREFERENCIAL|NACIONAL)"
                               r"(?:\s+(NACIONAL|PLUS|FLEX|ESPECIAL|SUPERIOR))?\b"),
                    lambda m: " ".join(g for g in m.groups() if g)),
        PatternRule("bradesco_plan_line",
                    re.compile(r"\b(TOP NACIONAL|NACIONAL FLEX|NACIONAL PLUS|EFETIVO|IDEAL|PREFERENCIAL)\b")),
    )

    PLAN_NAMES = {
        "TOP": "Bradesco Saúde Top",
        "TOP NACIONAL": "Bradesco Saúde Top Nacional",
        "NACIONAL FLEX": "Bradesco Saúde Nacional Flex",
        "NACIONAL PLUS": "Bradesco Saúde Nacional Plus",
        "EFETIVO": "Bradesco Saúde Efetivo",
        "IDEAL": "Bradesco Saúde Ideal",
        "PREFERENCIAL": "Bradesco Saúde Preferencial",
    }

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        return len(value) in (12, 15) and not is_valid_cns(value)
