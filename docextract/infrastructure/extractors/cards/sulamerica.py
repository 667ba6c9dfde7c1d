"""
Adapter: SulAmérica Card Extractor

Carteirinha SulAmérica: 17 dígitos iniciando em "888"
("88888 4872 8768 0017").
"""

import re

from docextract.infrastructure.extractors.cards.base import BaseCardExtractor
from docextract.infrastructure.text.patterns import PatternRule, join_groups

CARD_LENGTH = 17
CARD_PREFIX = "888"


class SulAmericaCardExtractor(BaseCardExtractor):
    """Estratégia SulAmérica."""

    issuer_key = "SULAMERICA"
    display_name = "SulAmérica"

    CARD_RULES = (
        PatternRule("sulamerica_grouped",
                    re.compile(r"(?<!\d)(8{4,5})\s*(\d{4})\s*(\d{4})\s*(\d{4})(?!\d)"), join_groups),
        PatternRule("sulamerica_plain", re.compile(r"(?<!\d)(8{3,4}\d{13,14})(?!\d)")),
    )

    PLAN_RULES = (
        PatternRule("sulamerica_plan",
                    re.compile(r"\b(EXACT|TRADICIONAL|PREMIUM|EXECUTIVO|MASTER|ESPECIAL|PRESTIGE|CLASSICO|BASICO)"
                               r"(?:\s+(PLUS|MAX|II|III|\d{1,3})(?!\d))?\b"),
                    lambda m: " ".join(g for g in m.groups() if g)),
    )

    PLAN_NAMES = {
        "EXACT": "SulAmérica Exact",
        "TRADICIONAL": "SulAmérica Tradicional",
        "PREMIUM": "SulAmérica Premium",
        "EXECUTIVO": "SulAmérica Executivo",
        "MASTER": "SulAmérica Master",
        "ESPECIAL": "SulAmérica Especial",
        "PRESTIGE": "SulAmérica Prestige",
        "CLASSICO": "SulAmérica Clássico",
        "BASICO": "SulAmérica Básico",
    }

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        return len(value) == CARD_LENGTH and value.startswith(CARD_PREFIX)
